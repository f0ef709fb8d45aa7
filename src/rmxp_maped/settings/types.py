"""
Settings type definitions for rmxp_maped.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ..exceptions import ConfigError


class ConfigVersion(Enum):
    """Settings layout version, used by the migrator."""
    V1_0 = "1.0"
    V1_1 = "1.1"
    CURRENT = V1_1


@dataclass
class ValidationResult:
    """Outcome of SettingsValidator.validate()."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


__all__ = ["ConfigError", "ConfigVersion", "ValidationResult"]
