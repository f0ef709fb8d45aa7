"""
Project lifecycle and per-project configuration.
"""

from .config import CONFIG_DIR, CONFIG_FILE, ProjectConfig, default_config
from .manager import ProjectManager

__all__ = [
    "CONFIG_DIR",
    "CONFIG_FILE",
    "ProjectConfig",
    "ProjectManager",
    "default_config",
]
