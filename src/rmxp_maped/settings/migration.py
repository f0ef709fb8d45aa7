"""
Settings migration between layout versions.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from .types import ConfigVersion

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)


class SettingsMigrator:
    """Stamps the settings version and upgrades older layouts."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def ensure_version(self) -> None:
        current_version = str(self.settings.value("app/version", "") or "")

        if not current_version:
            self.settings.setValue("app/version", ConfigVersion.CURRENT.value)
            self.settings.setValue("app/first_run", True)
            self.settings.sync()
            logger.info("First run detected, initializing configuration")
        elif current_version != ConfigVersion.CURRENT.value:
            self._migrate_config(current_version, ConfigVersion.CURRENT.value)

    def _migrate_config(self, from_version: str, to_version: str) -> None:
        logger.info(f"Migrating configuration from {from_version} to {to_version}")

        if from_version == ConfigVersion.V1_0.value:
            self._migrate_1_0_to_1_1()
        else:
            logger.warning(f"No migration path from {from_version}, keeping values as-is")

        self.settings.setValue("app/version", to_version)
        self.settings.setValue("app/migrated_from", from_version)
        self.settings.sync()
        logger.info(f"Migration from {from_version} to {to_version} completed")

    def _migrate_1_0_to_1_1(self) -> None:
        """1.0 remembered the project file (Game.rxproj); 1.1 remembers its directory."""
        old_value = str(self.settings.value("paths/last_project_file", "") or "")
        if not old_value:
            return

        old_path = Path(old_value)
        project_dir = old_path.parent if old_path.suffix else old_path
        self.settings.setValue("paths/last_project", str(project_dir))
        self.settings.remove("paths/last_project_file")
        logger.info(f"Migrated last project: {old_path} -> {project_dir}")
