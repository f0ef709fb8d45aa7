"""Shared fixtures for rmxp_maped tests."""

import random
from typing import Dict, List, Optional, Set

import pytest
from PySide6.QtCore import QSettings

from rmxp_maped.data import dump_record
from rmxp_maped.exceptions import MissingFileError
from rmxp_maped.project import ProjectConfig
from rmxp_maped.rpg import Map, Script
from rmxp_maped.settings import AppSettings
from rmxp_maped.store import Collection, DataStore


class MemoryFileSystem:
    """In-memory FileSystem that records every read and write."""

    def __init__(self, files: Optional[Dict[str, bytes]] = None):
        self.files: Dict[str, bytes] = dict(files or {})
        self.reads: List[str] = []
        self.writes: List[str] = []
        self.fail_on_write: Set[str] = set()
        self.fail_once = False

    def read(self, path: str) -> bytes:
        self.reads.append(path)
        if path not in self.files:
            raise MissingFileError(path)
        return self.files[path]

    def write(self, path: str, data: bytes) -> None:
        if path in self.fail_on_write:
            if self.fail_once:
                self.fail_on_write.discard(path)
            raise OSError(f"disk full while writing {path}")
        self.writes.append(path)
        self.files[path] = bytes(data)

    def exists(self, path: str) -> bool:
        return path in self.files

    def remove(self, path: str) -> None:
        self.files.pop(path, None)

    def join(self, *parts: str) -> str:
        return "/".join(part.strip("/") for part in parts if part)

    def reset_log(self) -> None:
        self.reads.clear()
        self.writes.clear()

    def __repr__(self) -> str:
        return f"MemoryFileSystem({len(self.files)} files)"


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source so magic numbers are reproducible."""
    return random.Random(20241018)


@pytest.fixture
def memory_fs() -> MemoryFileSystem:
    return MemoryFileSystem()


@pytest.fixture
def project_config() -> ProjectConfig:
    return ProjectConfig(project_name="Test Project", scripts_path="Scripts", persistence_id=1)


@pytest.fixture
def populated_fs(rng: random.Random, project_config: ProjectConfig) -> MemoryFileSystem:
    """A complete project on a MemoryFileSystem.

    Three actors, maps 1 and 2 on disk, and the scripts bundle stored as
    Data/Scripts.rxdata. The read/write logs are empty on return.
    """
    fs = MemoryFileSystem()
    store = DataStore.from_defaults(rng)

    with store.borrow(Collection.ACTORS) as actors:
        for actor_id, name in ((2, "Basil"), (3, "Cyrus")):
            actor = Collection.ACTORS.new_record()
            actor.id = actor_id
            actor.name = name
            actors.value.append(actor)
        actors.value[0].name = "Aluxes"

    with store.borrow(Collection.MAP_INFOS) as infos:
        infos.value[1].name = "Town"
        infos.value[2] = Collection.MAP_INFOS.record_type(name="Forest", order=2)

    with store.borrow(Collection.SCRIPTS) as scripts:
        scripts.value.append(Script(1, "Main", "begin\n  $scene = Scene_Title.new\nend\n"))

    store.save(fs, project_config)
    fs.files["Data/Map002.rxdata"] = dump_record(Map(tileset_id=2, width=10, height=8))
    fs.reset_log()
    return fs


@pytest.fixture
def qsettings(tmp_path) -> QSettings:
    """INI-backed QSettings so tests never touch the user's real settings."""
    return QSettings(str(tmp_path / "settings.ini"), QSettings.Format.IniFormat)


@pytest.fixture
def app_settings(qsettings: QSettings) -> AppSettings:
    return AppSettings(settings=qsettings)
