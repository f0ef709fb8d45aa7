"""Tests for checked borrows, the map cache and collection identity."""

import pytest

from rmxp_maped.exceptions import BorrowViolationError
from rmxp_maped.rpg import Actor, Map, MapInfo, Script, System
from rmxp_maped.store import BorrowCell, Collection, Layout, MapCache, map_filename, scripts_filename


class TestBorrowCell:
    """Test exclusive access to one value."""

    def test_second_borrow_is_refused(self) -> None:
        """Test overlapping borrows raise."""
        cell = BorrowCell([1, 2], "numbers")
        first = cell.borrow()
        with pytest.raises(BorrowViolationError, match="numbers"):
            cell.borrow()
        first.release()
        assert cell.borrow().value == [1, 2]

    def test_context_manager_releases(self) -> None:
        """Test leaving the with block releases, even on error."""
        cell = BorrowCell(0)
        with pytest.raises(RuntimeError):
            with cell.borrow():
                raise RuntimeError("boom")
        assert not cell.borrowed

    def test_release_twice_is_harmless(self) -> None:
        """Test a second release does nothing."""
        cell = BorrowCell(0)
        borrow = cell.borrow()
        borrow.release()
        borrow.release()
        assert borrow.released
        assert not cell.borrowed

    def test_released_borrow_cannot_be_used(self) -> None:
        """Test stale handles cannot reach the value."""
        cell = BorrowCell("x")
        borrow = cell.borrow()
        borrow.release()
        with pytest.raises(BorrowViolationError):
            _ = borrow.value

    def test_stale_release_does_not_free_new_borrow(self) -> None:
        """Test releasing an old handle leaves a newer borrow in place."""
        cell = BorrowCell(0)
        old = cell.borrow()
        old.release()
        new = cell.borrow()
        old.release()
        assert cell.borrowed
        new.release()

    def test_get_mut_requires_no_borrow(self) -> None:
        """Test direct access is only allowed while unborrowed."""
        cell = BorrowCell([1])
        assert cell.get_mut() == [1]
        with cell.borrow():
            with pytest.raises(BorrowViolationError):
                cell.get_mut()

    def test_modification_callback(self) -> None:
        """Test mark_modified and assignment notify the owner."""
        calls = []
        cell = BorrowCell(1, on_modified=lambda: calls.append(True))
        with cell.borrow() as borrow:
            borrow.mark_modified()
            borrow.value = 2
        assert len(calls) == 2
        assert cell.get_mut() == 2

    def test_independent_cells(self) -> None:
        """Test borrowing one cell does not affect another."""
        a, b = BorrowCell(1), BorrowCell(2)
        with a.borrow(), b.borrow() as borrowed_b:
            assert borrowed_b.value == 2


class TestMapCache:
    """Test the per-map cells."""

    def test_insert_and_ids(self) -> None:
        """Test ids come back sorted."""
        cache = MapCache()
        cache.insert(5, Map())
        cache.insert(2, Map())
        assert cache.ids() == [2, 5]
        assert 5 in cache
        assert 3 not in cache
        assert [map_id for map_id, _ in cache.cells()] == [2, 5]

    def test_loading_guard_is_not_reentrant(self) -> None:
        """Test loading the same map twice at once raises."""
        cache = MapCache()
        with cache.loading(3):
            assert cache.any_borrowed()
            with pytest.raises(BorrowViolationError):
                with cache.loading(3):
                    pass
            with cache.loading(4):
                pass
        assert not cache.any_borrowed()

    def test_borrowed_map_is_reported(self) -> None:
        """Test any_borrowed sees a borrowed map."""
        cache = MapCache()
        cell = cache.insert(1, Map())
        with cell.borrow():
            assert cache.any_borrowed()
        assert not cache.any_borrowed()


class TestCollection:
    """Test collection identity."""

    def test_nil_padded_order(self) -> None:
        """Test the twelve database collections come first, in load order."""
        stems = [c.stem for c in Collection.nil_padded()]
        assert stems == [
            "Actors", "Animations", "Armors", "Classes", "CommonEvents", "Enemies",
            "Items", "Skills", "States", "Tilesets", "Troops", "Weapons",
        ]
        assert list(Collection)[12:] == [Collection.MAP_INFOS, Collection.SYSTEM, Collection.SCRIPTS]

    def test_members_describe_their_files(self) -> None:
        """Test file names, record types and labels."""
        assert Collection.ACTORS.filename == "Actors.rxdata"
        assert Collection.ACTORS.record_type is Actor
        assert Collection.ACTORS.label == "actor data"
        assert Collection.MAP_INFOS.layout is Layout.MAP_INFOS
        assert Collection.SYSTEM.record_type is System
        assert Collection.SCRIPTS.record_type is Script

    def test_default_values(self) -> None:
        """Test a new project's contents."""
        actors = Collection.ACTORS.default_value()
        assert len(actors) == 1 and actors[0].id == 1
        assert Collection.MAP_INFOS.default_value() == {1: MapInfo()}
        assert isinstance(Collection.SYSTEM.default_value(), System)
        assert Collection.SCRIPTS.default_value() == []

    def test_file_name_helpers(self) -> None:
        """Test map and script file names."""
        assert map_filename(1) == "Map001.rxdata"
        assert map_filename(123) == "Map123.rxdata"
        assert map_filename(1000) == "Map1000.rxdata"
        assert scripts_filename("xScripts") == "xScripts.rxdata"
