"""
Project location settings for rmxp_maped.
"""

from pathlib import Path
from typing import List, Optional, Union

from .section import SettingsSection

MAX_RECENT_PROJECTS = 10


class PathSettings(SettingsSection):
    """Last opened project and the recent projects list."""

    @property
    def last_project(self) -> Optional[Path]:
        path_str = self._get_str("paths/last_project", "")
        return Path(path_str) if path_str else None

    @last_project.setter
    def last_project(self, value: Optional[Path]) -> None:
        self._set("paths/last_project", str(value) if value else "")

    @property
    def recent_projects(self) -> List[str]:
        """Recently opened project directories, most recent first."""
        return self._get_list("paths/recent_projects", [])

    @recent_projects.setter
    def recent_projects(self, value: List[str]) -> None:
        self._set("paths/recent_projects", list(value))

    def add_recent_project(self, project_path: Union[str, Path]) -> None:
        """Move `project_path` to the front of the recent list."""
        path_str = str(project_path)
        recent = [p for p in self.recent_projects if p != path_str]
        recent.insert(0, path_str)
        self.recent_projects = recent[:MAX_RECENT_PROJECTS]

    def clear_recent_projects(self) -> None:
        self.recent_projects = []
