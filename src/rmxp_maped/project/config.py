"""
Per-project configuration stored inside the project directory.
"""

import logging
import random
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Optional

import orjson

from .. import __version__
from ..exceptions import ConfigError
from ..filesystem import FileSystem

logger = logging.getLogger(__name__)

CONFIG_DIR = ".rmxp_maped"
CONFIG_FILE = "config.json"


def _new_persistence_id() -> int:
    return random.getrandbits(63)


@dataclass
class ProjectConfig:
    """Settings that belong to one project rather than to the application.

    Attributes:
        project_name: Display name of the project
        scripts_path: Scripts bundle name in Data/, without extension
        editor_version: Version of the editor that last wrote this file
        persistence_id: Random id hosts use to namespace per-project state
        playtest_exe: Executable used to playtest the project
    """
    project_name: str = ""
    scripts_path: str = "Scripts"
    editor_version: str = __version__
    persistence_id: int = field(default_factory=_new_persistence_id)
    playtest_exe: str = "game"

    @staticmethod
    def config_path(filesystem: FileSystem) -> str:
        return filesystem.join(CONFIG_DIR, CONFIG_FILE)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectConfig":
        """Build a config from decoded JSON; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def load(cls, filesystem: FileSystem) -> "ProjectConfig":
        """Read the configuration of the project behind `filesystem`.

        Raises:
            MissingFileError: If the project has no configuration file
            ConfigError: If the file is not a JSON object
        """
        path = cls.config_path(filesystem)
        raw = filesystem.read(path)
        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            raise ConfigError(f"Invalid project configuration {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Invalid project configuration {path}: expected an object")
        try:
            config = cls.from_dict(data)
        except TypeError as e:
            raise ConfigError(f"Invalid project configuration {path}: {e}") from e
        logger.debug(f"Loaded project configuration from {path}")
        return config

    @classmethod
    def load_or_default(cls, filesystem: FileSystem, project_name: str = "") -> "ProjectConfig":
        """Like load(), but a project without a configuration gets a fresh one."""
        if not filesystem.exists(cls.config_path(filesystem)):
            logger.info(f"No project configuration found, using defaults for '{project_name}'")
            return cls(project_name=project_name)
        return cls.load(filesystem)

    def save(self, filesystem: FileSystem) -> None:
        path = self.config_path(filesystem)
        self.editor_version = __version__
        filesystem.write(path, orjson.dumps(self.to_dict(), option=orjson.OPT_INDENT_2))
        logger.debug(f"Saved project configuration to {path}")


def default_config(project_name: str, scripts_path: Optional[str] = None) -> ProjectConfig:
    config = ProjectConfig(project_name=project_name)
    if scripts_path:
        config.scripts_path = scripts_path
    return config
