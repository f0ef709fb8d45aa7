"""
Ruby Marshal 4.8 reader.

Decodes the binary object-graph format used by RGSS `.rxdata` files into the
Python values described in codec.types. Object links ('@') and symbol links
(';') are resolved against tables numbered the same way Ruby numbers them.
"""

import struct
from typing import Any, Callable, Dict, List

from ..exceptions import DecodeError
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

MARSHAL_MAJOR = 4
MARSHAL_MINOR = 8

# Instance variables that only describe a string's encoding
ENCODING_IVARS = ("E", "encoding")

# Deepest container nesting accepted; RGSS data stays far below this
MAX_DEPTH = 100


def _decode_text(data: bytes) -> "str | bytes":
    """Return text when the bytes are valid UTF-8, the raw bytes otherwise."""
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data


class MarshalReader:
    """Single-use decoder for one Marshal byte stream."""

    def __init__(self, data: bytes):
        self.data = bytes(data)
        self.pos = 0
        self.symbols: List[RubySymbol] = []
        self.objects: List[Any] = []
        self.depth = 0
        self._dispatch: Dict[int, Callable[[], Any]] = {
            ord("0"): lambda: None,
            ord("T"): lambda: True,
            ord("F"): lambda: False,
            ord("i"): self.read_long,
            ord("l"): self._read_bignum,
            ord("f"): self._read_float,
            ord('"'): self._read_string,
            ord("I"): self._read_ivar,
            ord("["): self._read_array,
            ord("{"): lambda: self._read_hash(with_default=False),
            ord("}"): lambda: self._read_hash(with_default=True),
            ord(":"): self._read_symbol_body,
            ord(";"): self._read_symlink,
            ord("@"): self._read_link,
            ord("o"): self._read_object,
            ord("u"): self._read_userdef,
            ord("U"): self._read_usermarshal,
            ord("S"): self._read_struct,
            ord("c"): lambda: self._register(RubyClassRef(self._read_name())),
            ord("m"): lambda: self._register(RubyModuleRef(self._read_name())),
            ord("M"): lambda: self._register(RubyModuleRef(self._read_name())),
            ord("e"): self._read_extended,
            ord("C"): self._read_user_class,
            ord("/"): self._read_regexp,
        }

    # === PRIMITIVES ===

    def _take(self, count: int) -> bytes:
        if count < 0:
            raise DecodeError(f"negative length {count}", self.pos)
        end = self.pos + count
        if end > len(self.data):
            raise DecodeError(
                f"unexpected end of data (wanted {count} bytes)", self.pos
            )
        chunk = self.data[self.pos:end]
        self.pos = end
        return chunk

    def read_byte(self) -> int:
        return self._take(1)[0]

    def read_long(self) -> int:
        """Read a Marshal packed integer (w_long)."""
        c = struct.unpack("b", self._take(1))[0]
        if c == 0:
            return 0
        if c > 0:
            if c > 4:
                return c - 5
            return int.from_bytes(self._take(c), "little")
        if c < -4:
            return c + 5
        size = -c
        return int.from_bytes(self._take(size), "little") - (1 << (8 * size))

    def read_bytes(self) -> bytes:
        return self._take(self.read_long())

    def _register(self, value: Any) -> Any:
        self.objects.append(value)
        return value

    def _reserve(self) -> int:
        self.objects.append(None)
        return len(self.objects) - 1

    # === ENTRY POINT ===

    def read(self) -> Any:
        header = self._take(2)
        if header[0] != MARSHAL_MAJOR or header[1] > MARSHAL_MINOR:
            raise DecodeError(
                f"unsupported marshal version {header[0]}.{header[1]}", 0
            )
        value = self.read_value()
        if self.pos != len(self.data):
            raise DecodeError(
                f"{len(self.data) - self.pos} trailing bytes after value", self.pos
            )
        return value

    def read_value(self) -> Any:
        offset = self.pos
        type_byte = self.read_byte()
        handler = self._dispatch.get(type_byte)
        if handler is None:
            raise DecodeError(f"unsupported type byte {chr(type_byte)!r}", offset)
        self._descend(offset)
        try:
            return handler()
        finally:
            self.depth -= 1

    def _descend(self, offset: int) -> None:
        self.depth += 1
        if self.depth > MAX_DEPTH:
            raise DecodeError(f"values nested deeper than {MAX_DEPTH} levels", offset)

    # === SYMBOLS ===

    def read_symbol(self) -> RubySymbol:
        """Read a value that must be a symbol (class names, ivar names)."""
        offset = self.pos
        type_byte = self.read_byte()
        if type_byte == ord(":"):
            return self._read_symbol_body()
        if type_byte == ord(";"):
            return self._read_symlink()
        if type_byte == ord("I"):
            self._descend(offset)
            try:
                symbol = self.read_symbol()
                self._skip_ivars()
            finally:
                self.depth -= 1
            return symbol
        raise DecodeError(f"expected symbol, got {chr(type_byte)!r}", offset)

    def _read_name(self) -> str:
        return self.read_bytes().decode("utf-8", "surrogateescape")

    def _read_symbol_body(self) -> RubySymbol:
        symbol = RubySymbol(self._read_name())
        self.symbols.append(symbol)
        return symbol

    def _read_symlink(self) -> RubySymbol:
        offset = self.pos
        index = self.read_long()
        if not 0 <= index < len(self.symbols):
            raise DecodeError(f"bad symbol link {index}", offset)
        return self.symbols[index]

    def _skip_ivars(self) -> None:
        for _ in range(self.read_long()):
            self.read_symbol()
            self.read_value()

    def _read_ivars(self) -> Dict[str, Any]:
        ivars: Dict[str, Any] = {}
        for _ in range(self.read_long()):
            name = self.read_symbol()
            ivars[name[1:] if name.startswith("@") else str(name)] = self.read_value()
        return ivars

    # === SCALARS ===

    def _read_bignum(self) -> int:
        offset = self.pos
        sign = self.read_byte()
        if sign not in (ord("+"), ord("-")):
            raise DecodeError(f"bad bignum sign {chr(sign)!r}", offset)
        shorts = self.read_long()
        value = int.from_bytes(self._take(shorts * 2), "little")
        return self._register(-value if sign == ord("-") else value)

    def _read_float(self) -> float:
        offset = self.pos
        raw = self.read_bytes()
        # Ruby 1.8 appends mantissa bytes after a NUL
        text = raw.split(b"\0", 1)[0].decode("ascii", "replace")
        if text == "inf":
            value = float("inf")
        elif text == "-inf":
            value = float("-inf")
        elif text == "nan":
            value = float("nan")
        else:
            try:
                value = float(text)
            except ValueError as e:
                raise DecodeError(f"bad float literal {text!r}", offset) from e
        return self._register(value)

    def _read_string(self) -> "str | bytes":
        index = self._reserve()
        data = self.read_bytes()
        value = _decode_text(data)
        self.objects[index] = value
        return value

    def _read_regexp(self) -> RubyRegexp:
        source = self.read_bytes()
        options = self.read_byte()
        return self._register(RubyRegexp(source, options))

    def _read_ivar(self) -> Any:
        offset = self.pos
        inner_type = self.data[self.pos] if self.pos < len(self.data) else None
        start_index = len(self.objects)
        value = self.read_value()
        ivars = self._read_ivars()
        extra = {k: v for k, v in ivars.items() if k not in ENCODING_IVARS}

        if inner_type == ord('"'):
            if not extra:
                return value
            data = value if isinstance(value, bytes) else value.encode("utf-8")
            wrapped = RubyString(data, extra)
            self.objects[start_index] = wrapped
            return wrapped
        if extra:
            raise DecodeError(
                f"unsupported instance variables {sorted(extra)} on "
                f"{type(value).__name__}",
                offset,
            )
        return value

    # === CONTAINERS ===

    def _read_array(self) -> List[Any]:
        items: List[Any] = []
        self._register(items)
        for _ in range(self.read_long()):
            items.append(self.read_value())
        return items

    def _read_hash(self, with_default: bool) -> Dict[Any, Any]:
        result: Dict[Any, Any] = RubyHash() if with_default else {}
        self._register(result)
        for _ in range(self.read_long()):
            offset = self.pos
            key = self.read_value()
            try:
                result[key] = self.read_value()
            except TypeError as e:
                raise DecodeError(
                    f"unhashable hash key of type {type(key).__name__}", offset
                ) from e
        if with_default:
            result.default = self.read_value()  # type: ignore[attr-defined]
        return result

    def _read_link(self) -> Any:
        offset = self.pos
        index = self.read_long()
        if not 0 <= index < len(self.objects):
            raise DecodeError(f"bad object link {index}", offset)
        return self.objects[index]

    # === OBJECTS ===

    def _read_object(self) -> RubyObject:
        class_name = str(self.read_symbol())
        obj = RubyObject(class_name)
        self._register(obj)
        obj.attributes.update(self._read_ivars())
        return obj

    def _read_userdef(self) -> RubyUserDef:
        class_name = str(self.read_symbol())
        return self._register(RubyUserDef(class_name, self.read_bytes()))

    def _read_usermarshal(self) -> RubyUserMarshal:
        class_name = str(self.read_symbol())
        obj = RubyUserMarshal(class_name, None)
        self._register(obj)
        obj.value = self.read_value()
        return obj

    def _read_struct(self) -> RubyStruct:
        class_name = str(self.read_symbol())
        obj = RubyStruct(class_name)
        self._register(obj)
        for _ in range(self.read_long()):
            name = self.read_symbol()
            obj.members[str(name)] = self.read_value()
        return obj

    def _read_extended(self) -> RubyExtended:
        modules = [str(self.read_symbol())]
        while self.pos < len(self.data) and self.data[self.pos] == ord("e"):
            self.pos += 1
            modules.append(str(self.read_symbol()))
        return RubyExtended(modules, self.read_value())

    def _read_user_class(self) -> RubyUserClass:
        class_name = str(self.read_symbol())
        return RubyUserClass(class_name, self.read_value())


def loads(data: bytes) -> Any:
    """Decode one Marshal value from bytes.

    Raises:
        DecodeError: On a bad header, unsupported type byte, bad link,
            truncated input or trailing garbage
    """
    return MarshalReader(data).read()

