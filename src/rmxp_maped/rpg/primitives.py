"""
RGSS built-in value classes: Table, Color, Tone, plus RPG::AudioFile.

Table, Color and Tone are written by RGSS through `_dump`, so their payloads
are fixed little-endian binary layouts rather than instance variables.
"""

import struct
from dataclasses import dataclass, field
from typing import List, Optional

from ..exceptions import DecodeError, EncodeError
from .base import Record, UserDefRecord, register

_TABLE_HEADER = struct.Struct("<5i")
_FOUR_DOUBLES = struct.Struct("<4d")


@register("Table")
@dataclass
class Table(UserDefRecord):
    """Up to three-dimensional array of signed 16-bit integers.

    Payload: int32 dims, xsize, ysize, zsize, element count, then the
    elements as int16, x varying fastest.
    """
    dims: int = 1
    xsize: int = 0
    ysize: int = 1
    zsize: int = 1
    data: List[int] = field(default_factory=list)

    @classmethod
    def new(cls, xsize: int, ysize: Optional[int] = None, zsize: Optional[int] = None) -> "Table":
        """Create a zero-filled table the way `Table.new(x, y, z)` does."""
        dims = 1 + (ysize is not None) + (zsize is not None)
        ysize = 1 if ysize is None else ysize
        zsize = 1 if zsize is None else zsize
        return cls(dims, xsize, ysize, zsize, [0] * (xsize * ysize * zsize))

    @classmethod
    def load(cls, data: bytes) -> "Table":
        if len(data) < _TABLE_HEADER.size:
            raise DecodeError(f"Table payload too short ({len(data)} bytes)")
        dims, xsize, ysize, zsize, size = _TABLE_HEADER.unpack_from(data)
        if size != xsize * ysize * zsize:
            raise DecodeError(
                f"Table size {size} does not match {xsize}x{ysize}x{zsize}"
            )
        expected = _TABLE_HEADER.size + size * 2
        if len(data) != expected:
            raise DecodeError(
                f"Table payload is {len(data)} bytes, expected {expected}"
            )
        values = list(struct.unpack_from(f"<{size}h", data, _TABLE_HEADER.size))
        return cls(dims, xsize, ysize, zsize, values)

    def dump(self) -> bytes:
        size = self.xsize * self.ysize * self.zsize
        if len(self.data) != size:
            raise EncodeError(
                f"Table holds {len(self.data)} values, expected {size}"
            )
        header = _TABLE_HEADER.pack(self.dims, self.xsize, self.ysize, self.zsize, size)
        try:
            return header + struct.pack(f"<{size}h", *self.data)
        except struct.error as e:
            raise EncodeError(f"Table value out of int16 range: {e}") from e

    def _index(self, x: int, y: int, z: int) -> int:
        if not (0 <= x < self.xsize and 0 <= y < self.ysize and 0 <= z < self.zsize):
            raise IndexError(f"({x}, {y}, {z}) outside {self.xsize}x{self.ysize}x{self.zsize}")
        return x + self.xsize * (y + self.ysize * z)

    def get(self, x: int, y: int = 0, z: int = 0) -> int:
        return self.data[self._index(x, y, z)]

    def set(self, value: int, x: int, y: int = 0, z: int = 0) -> None:
        if not -32768 <= value <= 32767:
            raise ValueError(f"{value} does not fit in a Table cell")
        self.data[self._index(x, y, z)] = value

    def resize(self, xsize: int, ysize: Optional[int] = None, zsize: Optional[int] = None) -> None:
        """Resize in place, keeping overlapping values (like Table#resize)."""
        ysize = self.ysize if ysize is None else ysize
        zsize = self.zsize if zsize is None else zsize
        data = [0] * (xsize * ysize * zsize)
        for z in range(min(zsize, self.zsize)):
            for y in range(min(ysize, self.ysize)):
                for x in range(min(xsize, self.xsize)):
                    data[x + xsize * (y + ysize * z)] = self.get(x, y, z)
        self.xsize, self.ysize, self.zsize, self.data = xsize, ysize, zsize, data


@register("Color")
@dataclass
class Color(UserDefRecord):
    red: float = 0.0
    green: float = 0.0
    blue: float = 0.0
    alpha: float = 255.0

    @classmethod
    def load(cls, data: bytes) -> "Color":
        if len(data) != _FOUR_DOUBLES.size:
            raise DecodeError(f"Color payload is {len(data)} bytes, expected 32")
        return cls(*_FOUR_DOUBLES.unpack(data))

    def dump(self) -> bytes:
        return _FOUR_DOUBLES.pack(self.red, self.green, self.blue, self.alpha)


@register("Tone")
@dataclass
class Tone(UserDefRecord):
    red: float = 0.0
    green: float = 0.0
    blue: float = 0.0
    gray: float = 0.0

    @classmethod
    def load(cls, data: bytes) -> "Tone":
        if len(data) != _FOUR_DOUBLES.size:
            raise DecodeError(f"Tone payload is {len(data)} bytes, expected 32")
        return cls(*_FOUR_DOUBLES.unpack(data))

    def dump(self) -> bytes:
        return _FOUR_DOUBLES.pack(self.red, self.green, self.blue, self.gray)


@register("RPG::AudioFile")
@dataclass
class AudioFile(Record):
    name: str = ""
    volume: int = 100
    pitch: int = 100


def sound_effect(name: str = "", volume: int = 80) -> AudioFile:
    """Sound effects default to volume 80 in RGSS."""
    return AudioFile(name, volume)
