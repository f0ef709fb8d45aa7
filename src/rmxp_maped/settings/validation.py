"""
Settings validation for rmxp_maped.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, List

from .types import ValidationResult

if TYPE_CHECKING:
    from .core import AppSettings

logger = logging.getLogger(__name__)


class SettingsValidator:
    """Checks stored settings against the file system."""

    def __init__(self, settings: "AppSettings"):
        self.settings = settings

    def validate(self) -> ValidationResult:
        """Validate current settings.

        Recent projects that no longer exist are dropped from the list.
        """
        errors: List[str] = []
        warnings: List[str] = []

        last_project = self.settings.paths.last_project
        if last_project is not None and not last_project.is_dir():
            warnings.append(f"Last project no longer exists: {last_project}")

        if self.settings.console_log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"Unknown console log level: {self.settings.console_log_level}")

        if not self.settings.store.default_scripts_path:
            errors.append("Default scripts path is empty")

        recent = self.settings.paths.recent_projects
        existing: List[str] = []
        for project in recent:
            if Path(project).is_dir():
                existing.append(project)
            else:
                warnings.append(f"Recent project no longer exists: {project}")
        if len(existing) != len(recent):
            self.settings.paths.recent_projects = existing

        for warning in warnings:
            logger.warning(warning)
        for error in errors:
            logger.error(error)

        return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)
