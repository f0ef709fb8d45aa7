"""
In-memory store of a project's data files.

The store is either unloaded or holds every top-level collection plus a
lazily filled map cache. Loading is all-or-nothing: a failing file leaves
whatever state the store had before untouched. Saving encodes every file
before writing any of them, so encoding problems never leave a half-saved
project behind.
"""

import logging
import random
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple

from ..codec.writer import FIXNUM_MAX
from ..data import data_path, dump_record, load_record, read_data
from ..exceptions import (
    BorrowViolationError,
    DecodeError,
    EncodeError,
    LoadError,
    MapNotCachedError,
    MissingFileError,
    NotLoadedError,
    RmxpMapedError,
    SaveError,
    ScriptsUnresolvedError,
)
from ..filesystem import FileSystem
from ..rpg import Map, Script, System
from .cells import Borrow, BorrowCell
from .collection import Collection, map_filename, scripts_filename
from .map_cache import MapCache

if TYPE_CHECKING:
    from ..project.config import ProjectConfig

# Tried after the configured scripts path, in this order
SCRIPTS_FALLBACKS = ("xScripts", "Scripts")


@dataclass
class LoadedData:
    """Everything a loaded project holds in memory."""
    cells: Dict[Collection, BorrowCell[Any]]
    maps: MapCache


class DataStore:
    """Project data store: load, access, and save a project's data files."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._rng = rng if rng is not None else random.Random()
        self._state: Optional[LoadedData] = None
        self._modified = False
        self._last_magic_number: Optional[int] = None

    # === STATE ===

    @property
    def is_loaded(self) -> bool:
        return self._state is not None

    @property
    def modified(self) -> bool:
        """True when changes were made since the last load or save."""
        return self._modified

    def mark_modified(self) -> None:
        self._require_state()
        self._modified = True

    def _on_modified(self) -> None:
        self._modified = True

    def _require_state(self) -> LoadedData:
        if self._state is None:
            raise NotLoadedError("no project is loaded")
        return self._state

    def _install(self, values: Dict[Collection, Any], maps: Dict[int, Map]) -> None:
        cells = {
            collection: BorrowCell(values[collection], collection.label, self._on_modified)
            for collection in Collection
        }
        cache = MapCache(self._on_modified)
        for map_id, map_data in maps.items():
            cache.insert(map_id, map_data)
        self._state = LoadedData(cells, cache)
        self._modified = False

    def _stamp_magic_number(self, system: System) -> None:
        """Give `system` a random magic number unlike its own and the last one issued."""
        previous = (system.magic_number, self._last_magic_number)
        candidate = self._rng.randint(0, FIXNUM_MAX)
        while candidate in previous:
            candidate = self._rng.randint(0, FIXNUM_MAX)
        system.magic_number = candidate
        self._last_magic_number = candidate

    # === LOADING ===

    @classmethod
    def from_defaults(cls, rng: Optional[random.Random] = None) -> "DataStore":
        """Create a loaded store holding the contents of a brand-new project.

        Nothing is read or written.
        """
        store = cls(rng)
        values = {collection: collection.default_value() for collection in Collection}
        store._stamp_magic_number(values[Collection.SYSTEM])
        store._install(values, {1: Map()})
        store.logger.info("Created project data from defaults")
        return store

    def load(self, filesystem: FileSystem, config: "ProjectConfig") -> None:
        """Read every top-level collection from `filesystem`.

        On success the configuration's scripts path is set to the bundle that
        was actually read.

        Raises:
            LoadError: If a collection cannot be read or decoded
            ScriptsUnresolvedError: If no scripts candidate can be loaded
        """
        self.logger.info(f"Loading project data from {filesystem!r}")
        values: Dict[Collection, Any] = {}
        for collection in Collection.nil_padded() + [Collection.MAP_INFOS, Collection.SYSTEM]:
            values[collection] = self._read_collection(filesystem, collection)

        self._stamp_magic_number(values[Collection.SYSTEM])

        scripts, scripts_path = self._load_scripts(filesystem, config.scripts_path)
        values[Collection.SCRIPTS] = scripts

        self._install(values, {})
        if config.scripts_path != scripts_path:
            self.logger.info(f"Scripts path changed from {config.scripts_path!r} to {scripts_path!r}")
        config.scripts_path = scripts_path
        self.logger.info(f"Loaded project data ({len(scripts)} scripts from {scripts_path})")

    def _read_collection(self, filesystem: FileSystem, collection: Collection) -> Any:
        filename = collection.filename
        try:
            value = read_data(filesystem, filename, collection.decode)
        except (DecodeError, MissingFileError) as e:
            self.logger.error(f"Failed to load {collection.label}: {e}")
            raise LoadError(collection.label, data_path(filesystem, filename), str(e)) from e
        self.logger.debug(f"Loaded {collection.label} from {filename}")
        return value

    def _load_scripts(self, filesystem: FileSystem, configured: str) -> Tuple[List[Script], str]:
        candidates: List[str] = []
        for name in (configured, *SCRIPTS_FALLBACKS):
            if name and name not in candidates:
                candidates.append(name)

        causes: List[Exception] = []
        for name in candidates:
            filename = scripts_filename(name)
            try:
                scripts = read_data(filesystem, filename, Collection.SCRIPTS.decode)
            except (DecodeError, MissingFileError) as e:
                self.logger.warning(f"Unable to load scripts from {filename}: {e}")
                causes.append(e)
                continue
            return scripts, name

        self.logger.error(f"No scripts found (tried {', '.join(candidates)})")
        raise ScriptsUnresolvedError(candidates, causes)

    def unload(self) -> None:
        """Drop all loaded data without writing anything."""
        self._state = None
        self._modified = False
        self.logger.info("Unloaded project data")

    # === ACCESS ===

    def borrow(self, collection: Collection) -> Borrow[Any]:
        """Take exclusive access to one top-level collection.

        Raises:
            NotLoadedError: If no project is loaded
            BorrowViolationError: If the collection is already borrowed
        """
        return self._require_state().cells[collection].borrow()

    def get_or_load_map(self, map_id: int, filesystem: FileSystem) -> Borrow[Map]:
        """Borrow a map, reading `Data/MapNNN.rxdata` on first access.

        Raises:
            LoadError: If the map file cannot be read or decoded; nothing
                is cached in that case
        """
        state = self._require_state()
        cell = state.maps.cell(map_id)
        if cell is None:
            filename = map_filename(map_id)
            with state.maps.loading(map_id):
                try:
                    map_data = read_data(filesystem, filename, partial(load_record, record_type=Map))
                except (DecodeError, MissingFileError) as e:
                    self.logger.error(f"Failed to load map {map_id:03d}: {e}")
                    raise LoadError(f"map {map_id:03d}", data_path(filesystem, filename), str(e)) from e
            cell = state.maps.insert(map_id, map_data)
        return cell.borrow()

    def get_map(self, map_id: int) -> Borrow[Map]:
        """Borrow a map that is already cached.

        Raises:
            MapNotCachedError: If the map has not been loaded
        """
        cell = self._require_state().maps.cell(map_id)
        if cell is None:
            raise MapNotCachedError(map_id)
        return cell.borrow()

    def cached_map_ids(self) -> List[int]:
        return self._require_state().maps.ids()

    # === SAVING ===

    def save(
        self,
        filesystem: FileSystem,
        config: "ProjectConfig",
        rollback_on_failure: bool = False,
    ) -> None:
        """Write every collection and every cached map.

        All files are encoded before the first write. When a write fails the
        remaining files are skipped; files already written stay on disk
        unless `rollback_on_failure` is set, in which case their previous
        contents are restored.

        Raises:
            NotLoadedError: If no project is loaded
            BorrowViolationError: If any collection or map is borrowed
            SaveError: If a file cannot be encoded or written
        """
        state = self._require_state()
        borrowed = [cell.label for cell in state.cells.values() if cell.borrowed]
        if borrowed or state.maps.any_borrowed():
            raise BorrowViolationError(
                f"cannot save while data is borrowed ({', '.join(borrowed) or 'maps'})"
            )

        system = state.cells[Collection.SYSTEM].get_mut()
        stamped = (system.magic_number, self._last_magic_number)
        self._stamp_magic_number(system)

        self.logger.info(f"Saving project data to {filesystem!r}")
        try:
            files = self._encode_all(state, filesystem, config)
        except SaveError:
            # Nothing was written; keep the previous number
            system.magic_number, self._last_magic_number = stamped
            raise
        self._write_all(filesystem, files, rollback_on_failure)
        self._modified = False
        self.logger.info(f"Saved {len(files)} files")

    def _encode_all(
        self, state: LoadedData, filesystem: FileSystem, config: "ProjectConfig"
    ) -> List[Tuple[str, bytes]]:
        pending: List[Tuple[str, Callable[[Any], bytes], Any]] = []
        for collection in Collection:
            filename = collection.filename
            if collection is Collection.SCRIPTS:
                filename = scripts_filename(config.scripts_path)
            pending.append((filename, collection.encode, state.cells[collection].get_mut()))
        for map_id, cell in state.maps.cells():
            pending.append((map_filename(map_id), dump_record, cell.get_mut()))

        files: List[Tuple[str, bytes]] = []
        for filename, encode, value in pending:
            path = data_path(filesystem, filename)
            try:
                files.append((path, encode(value)))
            except EncodeError as e:
                self.logger.error(f"Failed to encode {path}: {e}")
                raise SaveError(path, str(e)) from e
        return files

    def _write_all(
        self, filesystem: FileSystem, files: List[Tuple[str, bytes]], rollback_on_failure: bool
    ) -> None:
        written: List[str] = []
        backups: Dict[str, Optional[bytes]] = {}
        for path, payload in files:
            if rollback_on_failure:
                backups[path] = self._snapshot(filesystem, path)
            try:
                filesystem.write(path, payload)
            except (OSError, RmxpMapedError) as e:
                self.logger.error(f"Failed to write {path}: {e}")
                rolled_back = False
                if rollback_on_failure:
                    rolled_back = self._roll_back(filesystem, [*written, path], backups)
                raise SaveError(path, str(e), written, rolled_back) from e
            written.append(path)
            self.logger.debug(f"Saved {path}")

    def _snapshot(self, filesystem: FileSystem, path: str) -> Optional[bytes]:
        if not filesystem.exists(path):
            return None
        try:
            return filesystem.read(path)
        except MissingFileError:
            return None

    def _roll_back(
        self, filesystem: FileSystem, paths: List[str], backups: Dict[str, Optional[bytes]]
    ) -> bool:
        """Restore `paths` to their snapshotted contents. Returns False if any restore failed."""
        restored = True
        for path in reversed(paths):
            previous = backups.get(path)
            try:
                if previous is None:
                    filesystem.remove(path)
                else:
                    filesystem.write(path, previous)
            except (OSError, RmxpMapedError) as e:
                self.logger.error(f"Failed to roll back {path}: {e}")
                restored = False
        if restored:
            self.logger.info(f"Rolled back {len(paths)} files")
        return restored
