"""
Run-time checked exclusive access to a single value.

A `BorrowCell` hands out at most one `Borrow` at a time. Asking for a
second one while the first is outstanding is a caller bug and raises
BorrowViolationError instead of silently aliasing the data.

Typical use::

    with store.borrow(Collection.ACTORS) as actors:
        actors.value[0].name = "Aluxes"
        actors.mark_modified()
"""

from typing import Callable, Generic, Optional, TypeVar

from ..exceptions import BorrowViolationError

T = TypeVar("T")


class BorrowCell(Generic[T]):
    """Owner of a value that may be borrowed by one holder at a time."""

    def __init__(
        self,
        value: T,
        label: str = "value",
        on_modified: Optional[Callable[[], None]] = None,
    ):
        self._value = value
        self._borrow: Optional["Borrow[T]"] = None
        self.label = label
        self._on_modified = on_modified

    @property
    def borrowed(self) -> bool:
        return self._borrow is not None

    def borrow(self) -> "Borrow[T]":
        """Take exclusive access.

        Raises:
            BorrowViolationError: If a borrow is already outstanding
        """
        if self._borrow is not None:
            raise BorrowViolationError(f"{self.label} is already borrowed")
        self._borrow = Borrow(self)
        return self._borrow

    def get_mut(self) -> T:
        """Return the value directly, only while nobody holds a borrow."""
        if self._borrow is not None:
            raise BorrowViolationError(f"{self.label} is borrowed")
        return self._value

    def _release(self, borrow: "Borrow[T]") -> None:
        if self._borrow is borrow:
            self._borrow = None

    def _notify_modified(self) -> None:
        if self._on_modified is not None:
            self._on_modified()

    def __repr__(self) -> str:
        state = "borrowed" if self.borrowed else "free"
        return f"BorrowCell({self.label!r}, {state})"


class Borrow(Generic[T]):
    """Exclusive handle on a BorrowCell's value; release it when done."""

    def __init__(self, cell: BorrowCell[T]):
        self._cell: Optional[BorrowCell[T]] = cell

    def _live_cell(self) -> BorrowCell[T]:
        if self._cell is None:
            raise BorrowViolationError("borrow has already been released")
        return self._cell

    @property
    def value(self) -> T:
        return self._live_cell()._value

    @value.setter
    def value(self, new_value: T) -> None:
        cell = self._live_cell()
        cell._value = new_value
        cell._notify_modified()

    @property
    def released(self) -> bool:
        return self._cell is None

    def mark_modified(self) -> None:
        self._live_cell()._notify_modified()

    def release(self) -> None:
        if self._cell is not None:
            self._cell._release(self)
            self._cell = None

    def __enter__(self) -> "Borrow[T]":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()
