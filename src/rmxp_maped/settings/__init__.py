"""
Settings package for rmxp_maped.

Application-wide settings (logging, recent projects, save policy) stored
with Qt's QSettings for cross-platform storage. Per-project settings live in
rmxp_maped.project.config instead.

Usage:
    from rmxp_maped.settings import AppSettings

    settings = AppSettings()
    result = settings.validate()
"""

from .core import AppSettings
from .types import ConfigVersion, ConfigError, ValidationResult
from .logging import LoggingSettings
from .paths import PathSettings
from .store import StoreSettings

__all__ = [
    "AppSettings",
    "ConfigVersion",
    "ConfigError",
    "ValidationResult",
    "LoggingSettings",
    "PathSettings",
    "StoreSettings",
]
