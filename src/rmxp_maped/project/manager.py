"""
Project lifecycle: open, create, save and close RPG Maker XP projects.

The manager ties a DataStore to the file system and configuration of one
project directory and keeps the application's recent projects list current.
"""

import logging
import random
from pathlib import Path
from typing import Callable, Optional

from ..exceptions import NotLoadedError, UnsavedChangesError
from ..filesystem import DirectoryFileSystem, FileSystem
from ..settings import AppSettings
from ..store import DataStore
from .config import ProjectConfig, default_config

FileSystemFactory = Callable[[Path], FileSystem]


class ProjectManager:
    """Owns the currently open project, if any."""

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        filesystem_factory: FileSystemFactory = DirectoryFileSystem,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            settings: Application settings; recent projects and the save
                policy are ignored when omitted
            filesystem_factory: Builds the FileSystem for a project directory
            rng: Random source for magic numbers (tests pass a seeded one)
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.settings = settings
        self._filesystem_factory = filesystem_factory
        self._rng = rng

        self._store = DataStore(rng)
        self._config: Optional[ProjectConfig] = None
        self._filesystem: Optional[FileSystem] = None
        self._project_path: Optional[Path] = None

    # === STATE ===

    @property
    def store(self) -> DataStore:
        return self._store

    @property
    def config(self) -> Optional[ProjectConfig]:
        return self._config

    @property
    def filesystem(self) -> Optional[FileSystem]:
        return self._filesystem

    @property
    def project_path(self) -> Optional[Path]:
        return self._project_path

    @property
    def project_loaded(self) -> bool:
        return self._store.is_loaded and self._config is not None

    def _ensure_can_replace(self) -> None:
        if self.project_loaded and self._store.modified:
            raise UnsavedChangesError(
                f"Project '{self._config.project_name}' has unsaved changes"  # type: ignore[union-attr]
            )

    def _install(self, path: Path, filesystem: FileSystem, config: ProjectConfig, store: DataStore) -> None:
        self._project_path = path
        self._filesystem = filesystem
        self._config = config
        self._store = store
        if self.settings is not None:
            self.settings.add_recent_project(path)
            self.settings.last_project = path

    # === FILE MENU ===

    def open_project(self, path: str | Path) -> None:
        """Open the project in directory `path`.

        The currently open project stays open if loading fails.

        Raises:
            UnsavedChangesError: If the current project has unsaved changes
            LoadError: If a data file cannot be read
            ScriptsUnresolvedError: If no scripts bundle can be read
            ConfigError: If the project configuration is malformed
        """
        self._ensure_can_replace()
        path = Path(path)
        self.logger.info(f"Opening project: {path}")

        filesystem = self._filesystem_factory(path)
        config = ProjectConfig.load_or_default(filesystem, path.name)
        store = DataStore(self._rng)
        store.load(filesystem, config)

        self._install(path, filesystem, config, store)
        self.logger.info(f"Opened project '{config.project_name}'")

    def new_project(self, path: str | Path, name: Optional[str] = None) -> None:
        """Create a brand-new project in directory `path` and open it.

        Raises:
            UnsavedChangesError: If the current project has unsaved changes
            SaveError: If the new project files cannot be written
        """
        self._ensure_can_replace()
        path = Path(path)
        scripts_path = self.settings.default_scripts_path if self.settings is not None else None
        config = default_config(name or path.name, scripts_path)
        self.logger.info(f"Creating project '{config.project_name}' in {path}")

        filesystem = self._filesystem_factory(path)
        store = DataStore.from_defaults(self._rng)
        store.save(filesystem, config)
        config.save(filesystem)

        self._install(path, filesystem, config, store)

    def save_project(self) -> None:
        """Save the open project and its configuration.

        Raises:
            NotLoadedError: If no project is open
            SaveError: If a file cannot be written
        """
        if not self.project_loaded or self._filesystem is None or self._config is None:
            raise NotLoadedError("no project is open")
        rollback = self.settings.rollback_on_save_failure if self.settings is not None else False
        self._store.save(self._filesystem, self._config, rollback_on_failure=rollback)
        self._config.save(self._filesystem)
        self.logger.info(f"Saved project '{self._config.project_name}'")

    def close_project(self, force: bool = False) -> None:
        """Close the open project without saving.

        Raises:
            UnsavedChangesError: If there are unsaved changes and `force` is False
        """
        if not self.project_loaded:
            return
        if not force:
            self._ensure_can_replace()
        name = self._config.project_name if self._config is not None else ""
        self._store.unload()
        self._config = None
        self._filesystem = None
        self._project_path = None
        self.logger.info(f"Closed project '{name}'")
