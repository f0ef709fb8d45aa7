"""Tests for the project data store."""

import random

import pytest

from rmxp_maped.data import decode_map_infos, dump_record, encode_scripts, load_record, nil_padded
from rmxp_maped.exceptions import (
    BorrowViolationError,
    DecodeError,
    LoadError,
    MapNotCachedError,
    MissingFileError,
    NotLoadedError,
    SaveError,
    ScriptsUnresolvedError,
)
from rmxp_maped.project import ProjectConfig
from rmxp_maped.codec.reader import MAX_DEPTH
from rmxp_maped.rpg import Actor, Map, MapInfo, Script, System
from rmxp_maped.store import Collection, DataStore, Layout

DATABASE_FILES = [
    "Data/Actors.rxdata",
    "Data/Animations.rxdata",
    "Data/Armors.rxdata",
    "Data/Classes.rxdata",
    "Data/CommonEvents.rxdata",
    "Data/Enemies.rxdata",
    "Data/Items.rxdata",
    "Data/Skills.rxdata",
    "Data/States.rxdata",
    "Data/Tilesets.rxdata",
    "Data/Troops.rxdata",
    "Data/Weapons.rxdata",
]
TOP_LEVEL_FILES = DATABASE_FILES + ["Data/MapInfos.rxdata", "Data/System.rxdata", "Data/Scripts.rxdata"]


def stored_magic_number(fs) -> int:
    return load_record(fs.files["Data/System.rxdata"], System).magic_number


@pytest.fixture
def loaded_store(populated_fs, project_config, rng) -> DataStore:
    store = DataStore(rng)
    store.load(populated_fs, project_config)
    populated_fs.reset_log()
    return store


class TestLoad:
    """Test loading a project."""

    def test_load_reads_collections_in_order(self, populated_fs, project_config, rng) -> None:
        """Test every top-level file is read once, in the documented order."""
        store = DataStore(rng)
        store.load(populated_fs, project_config)
        assert populated_fs.reads == TOP_LEVEL_FILES
        assert store.is_loaded
        assert not store.modified

    def test_loaded_values(self, loaded_store) -> None:
        """Test typed records are available through borrows."""
        with loaded_store.borrow(Collection.ACTORS) as actors:
            assert [a.name for a in actors.value] == ["Aluxes", "Basil", "Cyrus"]
            assert all(isinstance(a, Actor) for a in actors.value)
        with loaded_store.borrow(Collection.MAP_INFOS) as infos:
            assert sorted(infos.value) == [1, 2]
            assert infos.value[2].name == "Forest"
        with loaded_store.borrow(Collection.SCRIPTS) as scripts:
            assert [s.name for s in scripts.value] == ["Main"]

    def test_maps_are_not_loaded_eagerly(self, loaded_store, populated_fs) -> None:
        """Test the map cache starts empty."""
        assert loaded_store.cached_map_ids() == []

    def test_load_failure_keeps_unloaded_state(self, populated_fs, project_config, rng) -> None:
        """Test a failed load never installs partial data."""
        populated_fs.files["Data/Items.rxdata"] = b"\x04\x08garbage"
        store = DataStore(rng)
        with pytest.raises(LoadError) as excinfo:
            store.load(populated_fs, project_config)
        assert excinfo.value.collection == "item data"
        assert excinfo.value.filename == "Data/Items.rxdata"
        assert isinstance(excinfo.value.__cause__, DecodeError)
        assert not store.is_loaded

    def test_deeply_nested_file_is_a_load_error(self, populated_fs, project_config, rng) -> None:
        """Test a file nested past the decoder limit fails like any other corrupt file."""
        populated_fs.files["Data/Items.rxdata"] = b"\x04\x08" + b"[\x06" * (MAX_DEPTH * 50) + b"0"
        store = DataStore(rng)
        with pytest.raises(LoadError) as excinfo:
            store.load(populated_fs, project_config)
        assert excinfo.value.collection == "item data"
        assert isinstance(excinfo.value.__cause__, DecodeError)
        assert not store.is_loaded

    def test_load_failure_keeps_previous_project(self, loaded_store, populated_fs, project_config) -> None:
        """Test a failed reload leaves the loaded data in place."""
        del populated_fs.files["Data/Weapons.rxdata"]
        with pytest.raises(LoadError, match="weapon data") as excinfo:
            loaded_store.load(populated_fs, project_config)
        assert isinstance(excinfo.value.__cause__, MissingFileError)
        with loaded_store.borrow(Collection.ACTORS) as actors:
            assert len(actors.value) == 3

    def test_wrong_layout_is_a_decode_error(self, populated_fs, project_config, rng) -> None:
        """Test a System file holding something else is rejected."""
        populated_fs.files["Data/System.rxdata"] = dump_record([None])
        with pytest.raises(LoadError, match="system"):
            DataStore(rng).load(populated_fs, project_config)


class TestScriptsFallback:
    """Test resolution of the scripts bundle name."""

    def test_configured_name_wins(self, populated_fs, project_config, rng) -> None:
        """Test the configured bundle is used when present."""
        DataStore(rng).load(populated_fs, project_config)
        assert project_config.scripts_path == "Scripts"
        assert populated_fs.reads[-1] == "Data/Scripts.rxdata"

    def test_falls_back_to_xscripts(self, populated_fs, rng) -> None:
        """Test a missing configured bundle falls back to xScripts, then updates config."""
        populated_fs.files["Data/xScripts.rxdata"] = encode_scripts([Script(5, "Extended", "")])
        config = ProjectConfig(project_name="p", scripts_path="A")
        store = DataStore(rng)
        store.load(populated_fs, config)
        assert config.scripts_path == "xScripts"
        with store.borrow(Collection.SCRIPTS) as scripts:
            assert scripts.value[0].name == "Extended"
        assert populated_fs.reads[-2:] == ["Data/A.rxdata", "Data/xScripts.rxdata"]

    def test_falls_back_past_corrupt_bundle(self, populated_fs, rng) -> None:
        """Test a configured bundle that does not decode is skipped."""
        populated_fs.files["Data/Broken.rxdata"] = b"\x04\x08[\x06i\x06"
        config = ProjectConfig(project_name="p", scripts_path="Broken")
        DataStore(rng).load(populated_fs, config)
        assert config.scripts_path == "Scripts"

    def test_empty_configured_name_is_skipped(self, populated_fs, rng) -> None:
        """Test an empty configured name is never tried."""
        config = ProjectConfig(project_name="p", scripts_path="")
        DataStore(rng).load(populated_fs, config)
        assert "Data/.rxdata" not in populated_fs.reads
        assert config.scripts_path == "Scripts"

    def test_all_candidates_missing(self, populated_fs, rng) -> None:
        """Test the error names all three candidates and nothing changes."""
        del populated_fs.files["Data/Scripts.rxdata"]
        config = ProjectConfig(project_name="p", scripts_path="A")
        store = DataStore(rng)
        with pytest.raises(ScriptsUnresolvedError) as excinfo:
            store.load(populated_fs, config)
        assert excinfo.value.attempted == ["A", "xScripts", "Scripts"]
        assert len(excinfo.value.causes) == 3
        assert "A, xScripts, Scripts" in str(excinfo.value)
        assert config.scripts_path == "A"
        assert not store.is_loaded


class TestMaps:
    """Test lazy map loading."""

    def test_map_is_read_once(self, loaded_store, populated_fs) -> None:
        """Test the first access reads the file and later ones use the cache."""
        with loaded_store.get_or_load_map(2, populated_fs) as borrowed:
            assert borrowed.value.width == 10
        with loaded_store.get_or_load_map(2, populated_fs) as borrowed:
            assert borrowed.value.tileset_id == 2
        assert populated_fs.reads == ["Data/Map002.rxdata"]
        assert loaded_store.cached_map_ids() == [2]

    def test_get_map_after_load(self, loaded_store, populated_fs) -> None:
        """Test get_map returns a cached map."""
        loaded_store.get_or_load_map(1, populated_fs).release()
        with loaded_store.get_map(1) as borrowed:
            assert isinstance(borrowed.value, Map)

    def test_get_map_uncached(self, loaded_store) -> None:
        """Test get_map refuses maps that were never loaded."""
        with pytest.raises(MapNotCachedError, match="map 006"):
            loaded_store.get_map(6)
        with pytest.raises(NotLoadedError):
            loaded_store.get_map(6)

    def test_missing_map_is_not_cached(self, loaded_store, populated_fs) -> None:
        """Test a failed map load caches nothing."""
        with pytest.raises(LoadError) as excinfo:
            loaded_store.get_or_load_map(9, populated_fs)
        assert excinfo.value.collection == "map 009"
        assert excinfo.value.filename == "Data/Map009.rxdata"
        assert loaded_store.cached_map_ids() == []

    def test_map_borrow_is_exclusive(self, loaded_store, populated_fs) -> None:
        """Test one map cannot be borrowed twice but two maps can be held at once."""
        first = loaded_store.get_or_load_map(1, populated_fs)
        with pytest.raises(BorrowViolationError):
            loaded_store.get_map(1)
        with loaded_store.get_or_load_map(2, populated_fs):
            pass
        first.release()


class TestBorrowing:
    """Test the generic accessor."""

    def test_borrow_is_exclusive_per_collection(self, loaded_store) -> None:
        """Test one collection cannot be borrowed twice; others stay free."""
        actors = loaded_store.borrow(Collection.ACTORS)
        with pytest.raises(BorrowViolationError):
            loaded_store.borrow(Collection.ACTORS)
        with loaded_store.borrow(Collection.ITEMS):
            pass
        actors.release()
        loaded_store.borrow(Collection.ACTORS).release()

    def test_unloaded_store(self) -> None:
        """Test every accessor refuses an unloaded store."""
        store = DataStore()
        assert not store.is_loaded
        with pytest.raises(NotLoadedError):
            store.borrow(Collection.SYSTEM)
        with pytest.raises(NotLoadedError):
            store.cached_map_ids()
        with pytest.raises(NotLoadedError):
            store.mark_modified()

    def test_modified_flag(self, loaded_store) -> None:
        """Test borrows can flag unsaved changes."""
        assert not loaded_store.modified
        with loaded_store.borrow(Collection.SYSTEM) as system:
            system.value.title_name = "Title"
            system.mark_modified()
        assert loaded_store.modified

    def test_unload(self, loaded_store) -> None:
        """Test unload drops everything."""
        loaded_store.mark_modified()
        loaded_store.unload()
        assert not loaded_store.is_loaded
        assert not loaded_store.modified


class TestMagicNumber:
    """Test magic number freshness."""

    def test_differs_between_loads(self, populated_fs, project_config, rng) -> None:
        """Test two loads of the same file give different magic numbers."""
        on_disk = stored_magic_number(populated_fs)
        store = DataStore(rng)
        store.load(populated_fs, project_config)
        with store.borrow(Collection.SYSTEM) as system:
            first = system.value.magic_number
        store.load(populated_fs, project_config)
        with store.borrow(Collection.SYSTEM) as system:
            second = system.value.magic_number
        assert on_disk != first
        assert first != second

    def test_save_refreshes_again(self, loaded_store, populated_fs, project_config) -> None:
        """Test the saved magic number differs from the loaded one."""
        with loaded_store.borrow(Collection.SYSTEM) as system:
            loaded = system.value.magic_number
        loaded_store.save(populated_fs, project_config)
        saved = stored_magic_number(populated_fs)
        assert saved != loaded
        with loaded_store.borrow(Collection.SYSTEM) as system:
            assert system.value.magic_number == saved

    def test_stays_a_fixnum(self, loaded_store) -> None:
        """Test magic numbers never need a bignum."""
        with loaded_store.borrow(Collection.SYSTEM) as system:
            assert 0 <= system.value.magic_number < 2 ** 30


class TestFromDefaults:
    """Test creating a project from scratch."""

    def test_contents(self, rng) -> None:
        """Test one default record per collection and one map."""
        store = DataStore.from_defaults(rng)
        assert store.is_loaded
        for collection in Collection.nil_padded():
            with store.borrow(collection) as records:
                assert len(records.value) == 1
                assert records.value[0].id == 1
        with store.borrow(Collection.MAP_INFOS) as infos:
            assert list(infos.value) == [1]
        with store.borrow(Collection.SCRIPTS) as scripts:
            assert scripts.value == []
        assert store.cached_map_ids() == [1]

    def test_save_writes_sixteen_files(self, rng, memory_fs, project_config) -> None:
        """Test saving a new project writes every file once, in order."""
        store = DataStore.from_defaults(rng)
        store.save(memory_fs, project_config)
        assert memory_fs.writes == TOP_LEVEL_FILES + ["Data/Map001.rxdata"]
        assert memory_fs.reads == []

    def test_saved_project_loads(self, rng, memory_fs, project_config) -> None:
        """Test a saved new project can be read back."""
        DataStore.from_defaults(rng).save(memory_fs, project_config)
        store = DataStore(rng)
        store.load(memory_fs, project_config)
        with store.borrow(Collection.TROOPS) as troops:
            assert troops.value[0].id == 1
        assert decode_map_infos(memory_fs.files["Data/MapInfos.rxdata"]) == {1: Collection.MAP_INFOS.record_type()}


def several_values(collection: Collection):
    """A value with more than one entry, in the collection's own layout."""
    if collection.layout is Layout.NIL_PADDED:
        records = []
        nil_padded.change_maximum(records, 3, collection.new_record)
        records[2].name = "Third"
        return records
    if collection.layout is Layout.MAP_INFOS:
        return {1: MapInfo(name="Town"), 2: MapInfo(name="Forest", parent_id=1), 5: MapInfo(name="Cave")}
    if collection.layout is Layout.SCRIPTS:
        return [Script(1, "Main", "main"), Script(2, "Scene", "scene"), Script(3, "", "")]
    system = collection.default_value()
    system.title_name = "Quest"
    system.party_members = [1, 2, 3]
    return system


EMPTY_VALUES = {Layout.NIL_PADDED: [], Layout.MAP_INFOS: {}, Layout.SCRIPTS: []}


class TestCollectionRoundTrip:
    """Test every collection decodes what it encodes."""

    @pytest.mark.parametrize("collection", list(Collection), ids=lambda c: c.name)
    def test_default_value(self, collection: Collection) -> None:
        """Test the value a new project starts with."""
        value = collection.default_value()
        assert collection.decode(collection.encode(value)) == value

    @pytest.mark.parametrize("collection", list(Collection), ids=lambda c: c.name)
    def test_empty_value(self, collection: Collection) -> None:
        """Test a collection with no entries, or a bare default System."""
        value = EMPTY_VALUES.get(collection.layout, collection.new_record())
        assert collection.decode(collection.encode(value)) == value

    @pytest.mark.parametrize("collection", list(Collection), ids=lambda c: c.name)
    def test_several_entries(self, collection: Collection) -> None:
        """Test a collection holding several entries."""
        value = several_values(collection)
        decoded = collection.decode(collection.encode(value))
        assert decoded == value
        if collection.layout is Layout.NIL_PADDED:
            assert [r.id for r in decoded] == [1, 2, 3]


class TestSave:
    """Test saving a project."""

    def test_save_unloaded(self, memory_fs, project_config) -> None:
        """Test saving needs a loaded project."""
        with pytest.raises(NotLoadedError):
            DataStore().save(memory_fs, project_config)

    def test_save_while_collection_borrowed(self, loaded_store, populated_fs, project_config) -> None:
        """Test saving needs exclusive access to every collection."""
        with loaded_store.borrow(Collection.ENEMIES):
            with pytest.raises(BorrowViolationError, match="enemy data"):
                loaded_store.save(populated_fs, project_config)
        assert populated_fs.writes == []

    def test_save_while_map_borrowed(self, loaded_store, populated_fs, project_config) -> None:
        """Test a borrowed map also blocks saving."""
        with loaded_store.get_or_load_map(1, populated_fs):
            with pytest.raises(BorrowViolationError):
                loaded_store.save(populated_fs, project_config)

    def test_cached_maps_are_saved_in_id_order(self, loaded_store, populated_fs, project_config) -> None:
        """Test maps follow the top-level files, ascending by id."""
        loaded_store.get_or_load_map(2, populated_fs).release()
        loaded_store.get_or_load_map(1, populated_fs).release()
        populated_fs.reset_log()
        loaded_store.save(populated_fs, project_config)
        assert populated_fs.writes == TOP_LEVEL_FILES + ["Data/Map001.rxdata", "Data/Map002.rxdata"]

    def test_save_uses_resolved_scripts_name(self, populated_fs, rng) -> None:
        """Test the bundle is written under the name load resolved."""
        populated_fs.files["Data/xScripts.rxdata"] = encode_scripts([])
        config = ProjectConfig(project_name="p", scripts_path="A")
        store = DataStore(rng)
        store.load(populated_fs, config)
        populated_fs.reset_log()
        store.save(populated_fs, config)
        assert "Data/xScripts.rxdata" in populated_fs.writes
        assert "Data/A.rxdata" not in populated_fs.writes

    def test_save_clears_modified(self, loaded_store, populated_fs, project_config) -> None:
        """Test a successful save clears the unsaved flag."""
        with loaded_store.borrow(Collection.ACTORS) as actors:
            actors.value[1].name = "Basil the Brave"
            actors.mark_modified()
        loaded_store.save(populated_fs, project_config)
        assert not loaded_store.modified
        saved = nil_padded.deserialize(populated_fs.files["Data/Actors.rxdata"], Actor)
        assert saved[1].name == "Basil the Brave"

    def test_encoding_failure_writes_nothing(self, loaded_store, populated_fs, project_config) -> None:
        """Test an unencodable value aborts before the first write."""
        with loaded_store.borrow(Collection.ACTORS) as actors:
            actors.value[0].parameters.data.append(0)
        with pytest.raises(SaveError) as excinfo:
            loaded_store.save(populated_fs, project_config)
        assert excinfo.value.filename == "Data/Actors.rxdata"
        assert excinfo.value.written == []
        assert populated_fs.writes == []

    def test_encoding_failure_keeps_magic_number(self, loaded_store, populated_fs, project_config) -> None:
        """Test a save that writes nothing leaves the magic number as it was."""
        with loaded_store.borrow(Collection.SYSTEM) as system:
            before = system.value.magic_number
        with loaded_store.borrow(Collection.ACTORS) as actors:
            actors.value[0].parameters.data.append(0)
        with pytest.raises(SaveError):
            loaded_store.save(populated_fs, project_config)
        with loaded_store.borrow(Collection.SYSTEM) as system:
            assert system.value.magic_number == before

        with loaded_store.borrow(Collection.ACTORS) as actors:
            actors.value[0].parameters.data.pop()
        loaded_store.save(populated_fs, project_config)
        assert stored_magic_number(populated_fs) != before

    def test_write_failure_keeps_written_files(self, loaded_store, populated_fs, project_config) -> None:
        """Test a failed write stops the save and leaves earlier files as written."""
        before = dict(populated_fs.files)
        populated_fs.fail_on_write.add("Data/System.rxdata")
        with pytest.raises(SaveError, match="some files may not have been saved") as excinfo:
            loaded_store.save(populated_fs, project_config)
        error = excinfo.value
        assert error.filename == "Data/System.rxdata"
        assert error.written == DATABASE_FILES + ["Data/MapInfos.rxdata"]
        assert not error.rolled_back
        assert populated_fs.writes == error.written
        assert populated_fs.files["Data/Scripts.rxdata"] == before["Data/Scripts.rxdata"]

    def test_write_failure_with_rollback(self, loaded_store, populated_fs, project_config) -> None:
        """Test rollback restores every file touched by the failed save."""
        with loaded_store.borrow(Collection.ACTORS) as actors:
            actors.value[0].name = "Changed"
        before = dict(populated_fs.files)
        populated_fs.fail_on_write.add("Data/Scripts.rxdata")
        populated_fs.fail_once = True
        with pytest.raises(SaveError) as excinfo:
            loaded_store.save(populated_fs, project_config, rollback_on_failure=True)
        assert excinfo.value.rolled_back
        assert "some files may not have been saved" not in str(excinfo.value)
        assert populated_fs.files == before

    def test_rollback_removes_new_files(self, rng, memory_fs, project_config) -> None:
        """Test files that did not exist before are removed again."""
        memory_fs.fail_on_write.add("Data/Map001.rxdata")
        with pytest.raises(SaveError) as excinfo:
            DataStore.from_defaults(rng).save(memory_fs, project_config, rollback_on_failure=True)
        assert excinfo.value.rolled_back
        assert memory_fs.files == {}


class TestInjectedRandomness:
    """Test the random source is injectable."""

    def test_same_seed_same_magic(self) -> None:
        """Test seeded stores produce the same magic number."""
        first = DataStore.from_defaults(random.Random(7))
        second = DataStore.from_defaults(random.Random(7))
        with first.borrow(Collection.SYSTEM) as a, second.borrow(Collection.SYSTEM) as b:
            assert a.value.magic_number == b.value.magic_number
