"""
Lazily populated cache of loaded maps.

Maps are read on first access and kept for the rest of the session. Each
map has its own BorrowCell, so borrowing one map never blocks another.
"""

import logging
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional, Set, Tuple

from ..exceptions import BorrowViolationError
from ..rpg import Map
from .cells import BorrowCell


class MapCache:
    """Map id -> BorrowCell[Map], plus a guard against re-entrant loads."""

    def __init__(self, on_modified: Optional[Callable[[], None]] = None):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._cells: Dict[int, BorrowCell[Map]] = {}
        self._loading: Set[int] = set()
        self._on_modified = on_modified

    def __contains__(self, map_id: int) -> bool:
        return map_id in self._cells

    def cell(self, map_id: int) -> Optional[BorrowCell[Map]]:
        return self._cells.get(map_id)

    def insert(self, map_id: int, map_data: Map) -> BorrowCell[Map]:
        cell = BorrowCell(map_data, f"map {map_id:03d}", self._on_modified)
        self._cells[map_id] = cell
        self.logger.debug(f"Cached map {map_id:03d}")
        return cell

    @contextmanager
    def loading(self, map_id: int) -> Iterator[None]:
        """Hold the cache-level guard while `map_id` is being read."""
        if map_id in self._loading:
            raise BorrowViolationError(f"map {map_id:03d} is already being loaded")
        self._loading.add(map_id)
        try:
            yield
        finally:
            self._loading.discard(map_id)

    def ids(self) -> List[int]:
        return sorted(self._cells)

    def cells(self) -> List[Tuple[int, BorrowCell[Map]]]:
        """All cached cells in ascending id order."""
        return [(map_id, self._cells[map_id]) for map_id in self.ids()]

    def any_borrowed(self) -> bool:
        return bool(self._loading) or any(c.borrowed for c in self._cells.values())
