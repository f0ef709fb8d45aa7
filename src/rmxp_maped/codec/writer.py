"""
Ruby Marshal 4.8 writer.

Inverse of codec.reader. Mutable containers and objects that appear more than
once are written once and referenced with '@' links afterwards; repeated
symbols use ';' links. Object-table numbering mirrors Ruby's so the output can
be read back by RGSS itself.
"""

import math
from typing import Any, Dict, List

from ..exceptions import EncodeError
from .reader import MARSHAL_MAJOR, MARSHAL_MINOR
from .types import (
    RubyClassRef,
    RubyExtended,
    RubyHash,
    RubyModuleRef,
    RubyObject,
    RubyRegexp,
    RubyString,
    RubyStruct,
    RubySymbol,
    RubyUserClass,
    RubyUserDef,
    RubyUserMarshal,
)

FIXNUM_MIN = -(2 ** 30)
FIXNUM_MAX = 2 ** 30 - 1


class MarshalWriter:
    """Single-use encoder producing one Marshal byte stream."""

    def __init__(self):
        self.out = bytearray()
        self.symbols: Dict[str, int] = {}
        self.object_count = 0
        # id(obj) -> (index, obj); holding obj keeps the id stable while dumping
        self.links: Dict[int, "tuple[int, Any]"] = {}

    # === PRIMITIVES ===

    def write_byte(self, value: int) -> None:
        self.out.append(value & 0xFF)

    def write_long(self, value: int) -> None:
        """Write a Marshal packed integer (w_long)."""
        if not -(2 ** 31) <= value < 2 ** 31:
            raise EncodeError(f"integer {value} does not fit a packed long")
        if value == 0:
            self.write_byte(0)
        elif 0 < value < 123:
            self.write_byte(value + 5)
        elif -124 < value < 0:
            self.write_byte(value - 5)
        else:
            buf: List[int] = []
            header = 0
            for size in range(1, 5):
                buf.append(value & 0xFF)
                value >>= 8
                if value == 0:
                    header = size
                    break
                if value == -1:
                    header = -size
                    break
            self.write_byte(header)
            self.out.extend(buf)

    def write_bytes(self, data: bytes) -> None:
        self.write_long(len(data))
        self.out.extend(data)

    def write_symbol(self, name: str) -> None:
        index = self.symbols.get(name)
        if index is not None:
            self.write_byte(ord(";"))
            self.write_long(index)
            return
        self.symbols[name] = len(self.symbols)
        self.write_byte(ord(":"))
        self.write_bytes(name.encode("utf-8", "surrogateescape"))

    def _register(self) -> None:
        self.object_count += 1

    def _link_or_register(self, value: Any) -> bool:
        """Emit an '@' link for an already written object.

        Returns True if a link was written. Otherwise registers the object
        and returns False so the caller writes it in full.
        """
        entry = self.links.get(id(value))
        if entry is not None:
            self.write_byte(ord("@"))
            self.write_long(entry[0])
            return True
        self.links[id(value)] = (self.object_count, value)
        self._register()
        return False

    # === ENTRY POINT ===

    def dump(self, value: Any) -> bytes:
        self.write_byte(MARSHAL_MAJOR)
        self.write_byte(MARSHAL_MINOR)
        self.write_value(value)
        return bytes(self.out)

    def write_value(self, value: Any) -> None:
        if value is None:
            self.write_byte(ord("0"))
        elif value is True:
            self.write_byte(ord("T"))
        elif value is False:
            self.write_byte(ord("F"))
        elif isinstance(value, int):
            self._write_int(value)
        elif isinstance(value, float):
            self._write_float(value)
        elif isinstance(value, RubySymbol):
            self.write_symbol(value)
        elif isinstance(value, (str, bytes)):
            self._register()
            self.write_byte(ord('"'))
            self.write_bytes(value.encode("utf-8") if isinstance(value, str) else value)
        elif isinstance(value, RubyString):
            self._write_ivar_string(value)
        elif isinstance(value, list):
            self._write_array(value)
        elif isinstance(value, dict):
            self._write_hash(value)
        elif isinstance(value, RubyObject):
            self._write_object(value)
        elif isinstance(value, RubyUserDef):
            self.write_byte(ord("u"))
            self.write_symbol(value.class_name)
            self.write_bytes(value.data)
            self._register()
        elif isinstance(value, RubyUserMarshal):
            if self._link_or_register(value):
                return
            self.write_byte(ord("U"))
            self.write_symbol(value.class_name)
            self.write_value(value.value)
        elif isinstance(value, RubyStruct):
            self._write_struct(value)
        elif isinstance(value, RubyClassRef):
            self._register()
            self.write_byte(ord("c"))
            self.write_bytes(value.name.encode("utf-8"))
        elif isinstance(value, RubyModuleRef):
            self._register()
            self.write_byte(ord("m"))
            self.write_bytes(value.name.encode("utf-8"))
        elif isinstance(value, RubyRegexp):
            self._register()
            self.write_byte(ord("/"))
            self.write_bytes(value.source)
            self.write_byte(value.options)
        elif isinstance(value, RubyExtended):
            for module in value.modules:
                self.write_byte(ord("e"))
                self.write_symbol(module)
            self.write_value(value.value)
        elif isinstance(value, RubyUserClass):
            self.write_byte(ord("C"))
            self.write_symbol(value.class_name)
            self.write_value(value.value)
        else:
            raise EncodeError(f"cannot marshal value of type {type(value).__name__}")

    # === SCALARS ===

    def _write_int(self, value: int) -> None:
        if FIXNUM_MIN <= value <= FIXNUM_MAX:
            self.write_byte(ord("i"))
            self.write_long(value)
            return
        self._register()
        self.write_byte(ord("l"))
        self.write_byte(ord("-") if value < 0 else ord("+"))
        magnitude = abs(value)
        size = (magnitude.bit_length() + 7) // 8
        size += size % 2
        self.write_long(size // 2)
        self.out.extend(magnitude.to_bytes(size, "little"))

    def _write_float(self, value: float) -> None:
        self._register()
        if math.isnan(value):
            text = "nan"
        elif math.isinf(value):
            text = "inf" if value > 0 else "-inf"
        elif value == 0.0:
            text = "-0" if math.copysign(1.0, value) < 0 else "0"
        else:
            text = repr(value)
        self.write_byte(ord("f"))
        self.write_bytes(text.encode("ascii"))

    def _write_ivar_string(self, value: RubyString) -> None:
        self.write_byte(ord("I"))
        self._register()
        self.write_byte(ord('"'))
        self.write_bytes(value.data)
        self.write_long(len(value.attributes))
        for name, attr in value.attributes.items():
            self.write_symbol(f"@{name}")
            self.write_value(attr)

    # === CONTAINERS ===

    def _write_array(self, value: List[Any]) -> None:
        if self._link_or_register(value):
            return
        self.write_byte(ord("["))
        self.write_long(len(value))
        for item in value:
            self.write_value(item)

    def _write_hash(self, value: Dict[Any, Any]) -> None:
        if self._link_or_register(value):
            return
        has_default = isinstance(value, RubyHash) and value.default is not None
        self.write_byte(ord("}") if has_default else ord("{"))
        self.write_long(len(value))
        for key, item in value.items():
            self.write_value(key)
            self.write_value(item)
        if has_default:
            self.write_value(value.default)  # type: ignore[attr-defined]

    # === OBJECTS ===

    def _write_object(self, value: RubyObject) -> None:
        if self._link_or_register(value):
            return
        self.write_byte(ord("o"))
        self.write_symbol(value.class_name)
        self.write_long(len(value.attributes))
        for name, attr in value.attributes.items():
            self.write_symbol(f"@{name}")
            self.write_value(attr)

    def _write_struct(self, value: RubyStruct) -> None:
        if self._link_or_register(value):
            return
        self.write_byte(ord("S"))
        self.write_symbol(value.class_name)
        self.write_long(len(value.members))
        for name, member in value.members.items():
            self.write_symbol(name)
            self.write_value(member)


def dumps(value: Any) -> bytes:
    """Encode one value as Marshal bytes.

    Raises:
        EncodeError: If the value (or something nested in it) has no
            Marshal representation
    """
    return MarshalWriter().dump(value)
