"""
Core settings management for rmxp_maped.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from PySide6.QtCore import QSettings

from .types import ConfigVersion, ValidationResult
from .migration import SettingsMigrator
from .validation import SettingsValidator
from .paths import PathSettings
from .logging import LoggingSettings
from .store import StoreSettings

logger = logging.getLogger(__name__)

ORGANIZATION = "rmxp_maped"
APPLICATION = "rmxp_maped"


class AppSettings:
    """
    Application settings stored with QSettings.

    Values live under one group per profile, so several profiles can share
    the same storage. Subsystems are reachable as `paths`, `logging` and
    `store`; the most used values are also delegated as properties.
    """

    def __init__(self, profile: str = "default", settings: Optional[QSettings] = None):
        """Open the settings storage for a profile.

        Args:
            profile: Settings profile name
            settings: QSettings to use instead of the platform default
                (tests pass an INI-backed instance)
        """
        self.settings = settings if settings is not None else QSettings(ORGANIZATION, APPLICATION)
        self.profile = profile
        self.settings.beginGroup(profile)

        self._migrator = SettingsMigrator(self.settings)
        self._validator = SettingsValidator(self)
        self._paths = PathSettings(self.settings)
        self._logging = LoggingSettings(self.settings)
        self._store = StoreSettings(self.settings)

        self._migrator.ensure_version()

        logger.debug(
            f"Settings initialized for profile '{profile}', stored at: {self.settings.fileName()}"
        )

    # === SUBSYSTEM ACCESS ===

    @property
    def paths(self) -> PathSettings:
        return self._paths

    @property
    def logging(self) -> LoggingSettings:
        return self._logging

    @property
    def store(self) -> StoreSettings:
        return self._store

    # === VERSION AND FIRST RUN ===

    @property
    def is_first_run(self) -> bool:
        return self._get_bool("app/first_run", True)

    def set_first_run_complete(self) -> None:
        self.settings.setValue("app/first_run", False)
        self.settings.sync()

    @property
    def version(self) -> str:
        return self._get_str("app/version", ConfigVersion.CURRENT.value)

    # === HELPER METHODS ===

    def _get_str(self, key: str, default: str = "") -> str:
        value = self.settings.value(key, default)
        return str(value) if value is not None else default

    def _get_bool(self, key: str, default: bool = False) -> bool:
        value = self.settings.value(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes")
        return bool(value) if value is not None else default

    # === PATH SETTINGS (DELEGATED) ===

    @property
    def last_project(self) -> Optional[Path]:
        return self._paths.last_project

    @last_project.setter
    def last_project(self, value: Optional[Path]) -> None:
        self._paths.last_project = value

    @property
    def recent_projects(self) -> List[str]:
        return self._paths.recent_projects

    def add_recent_project(self, project_path: Union[str, Path]) -> None:
        """Add a project directory to the recent list (max 10 items)."""
        self._paths.add_recent_project(project_path)

    def clear_recent_projects(self) -> None:
        self._paths.clear_recent_projects()

    # === LOGGING SETTINGS (DELEGATED) ===

    @property
    def console_logging(self) -> bool:
        return self._logging.console_logging

    @console_logging.setter
    def console_logging(self, value: bool) -> None:
        self._logging.console_logging = value

    @property
    def console_log_level(self) -> str:
        return self._logging.console_log_level

    @console_log_level.setter
    def console_log_level(self, value: str) -> None:
        self._logging.console_log_level = value

    @property
    def console_use_colors(self) -> bool:
        return self._logging.console_use_colors

    @console_use_colors.setter
    def console_use_colors(self, value: bool) -> None:
        self._logging.console_use_colors = value

    @property
    def file_logging(self) -> bool:
        return self._logging.file_logging

    @file_logging.setter
    def file_logging(self, value: bool) -> None:
        self._logging.file_logging = value

    @property
    def log_file_path(self) -> str:
        return self._logging.log_file_path

    # === STORE SETTINGS (DELEGATED) ===

    @property
    def rollback_on_save_failure(self) -> bool:
        return self._store.rollback_on_save_failure

    @rollback_on_save_failure.setter
    def rollback_on_save_failure(self, value: bool) -> None:
        self._store.rollback_on_save_failure = value

    @property
    def default_scripts_path(self) -> str:
        return self._store.default_scripts_path

    @default_scripts_path.setter
    def default_scripts_path(self, value: str) -> None:
        self._store.default_scripts_path = value

    # === VALIDATION ===

    def validate(self) -> ValidationResult:
        return self._validator.validate()

    # === UTILITY METHODS ===

    def get_settings_file_path(self) -> str:
        return self.settings.fileName()

    def sync(self) -> None:
        """Force synchronization of settings to storage."""
        self.settings.sync()
