"""
Python representations of Ruby Marshal values.

Immediate values map onto builtins (None, bool, int, float, str, bytes, list,
dict). Everything that has no builtin counterpart gets a small dataclass
here. These classes carry no codec logic.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


class RubySymbol(str):
    """A Ruby Symbol. Compares equal to the plain string of the same name."""

    def __repr__(self) -> str:
        return f":{str.__str__(self)}"


class RubyHash(dict):  # type: ignore[type-arg]
    """A Ruby Hash that was created with a default value."""

    def __init__(self, *args: Any, default: Any = None, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.default = default

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RubyHash):
            return dict.__eq__(self, other) and self.default == other.default
        return dict.__eq__(self, other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"RubyHash({dict.__repr__(self)}, default={self.default!r})"


@dataclass
class RubyString:
    """A string that carried instance variables other than its encoding."""
    data: bytes
    attributes: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RubyObject:
    """A plain Ruby object of a class that has no registered record type.

    Attribute names are stored without the leading '@'.
    """
    class_name: str
    attributes: Dict[str, Any] = field(default_factory=dict)

    def __getitem__(self, key: str) -> Any:
        return self.attributes[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)


@dataclass
class RubyUserDef:
    """An object serialized through Ruby's _dump/_load (type byte 'u')."""
    class_name: str
    data: bytes


@dataclass
class RubyUserMarshal:
    """An object serialized through marshal_dump/marshal_load ('U')."""
    class_name: str
    value: Any


@dataclass
class RubyStruct:
    """A Ruby Struct instance ('S'). Member names keep their order."""
    class_name: str
    members: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RubyClassRef:
    name: str


@dataclass(frozen=True)
class RubyModuleRef:
    name: str


@dataclass
class RubyRegexp:
    source: bytes
    options: int = 0


@dataclass
class RubyExtended:
    """An object extended with modules ('e')."""
    modules: List[str]
    value: Any


@dataclass
class RubyUserClass:
    """A String/Array/Hash/Regexp subclass instance ('C')."""
    class_name: str
    value: Any
