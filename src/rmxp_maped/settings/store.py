"""
Data store policy settings for rmxp_maped.
"""

import logging

from .section import SettingsSection

logger = logging.getLogger(__name__)

DEFAULT_SCRIPTS_PATH = "Scripts"


class StoreSettings(SettingsSection):
    """How projects are saved and created."""

    @property
    def rollback_on_save_failure(self) -> bool:
        """Restore already written files when a save fails part-way."""
        return self._get_bool("store/rollback_on_save_failure", False)

    @rollback_on_save_failure.setter
    def rollback_on_save_failure(self, value: bool) -> None:
        self._set("store/rollback_on_save_failure", value)

    @property
    def default_scripts_path(self) -> str:
        """Scripts bundle name (without extension) given to new projects."""
        return self._get_str("store/default_scripts_path", DEFAULT_SCRIPTS_PATH)

    @default_scripts_path.setter
    def default_scripts_path(self, value: str) -> None:
        value = value.strip()
        if not value:
            logger.warning(
                f"Empty scripts path rejected, keeping current: {self.default_scripts_path}"
            )
            return
        self._set("store/default_scripts_path", value)
