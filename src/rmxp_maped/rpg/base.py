"""
Typed record base and Ruby <-> record conversion.

Every RGSS class the editor understands is a dataclass registered under its
Ruby class name. Decoded object graphs are converted into those dataclasses
by `from_ruby`; `to_ruby` is the inverse. Classes that are not registered
pass through untouched as RubyObject, so unknown data survives a load/save
cycle.
"""

from abc import ABC, abstractmethod
from dataclasses import MISSING, dataclass, field, fields
from typing import Any, Callable, ClassVar, Dict, Optional, Type, TypeVar

from ..codec.types import RubyHash, RubyObject, RubyUserDef
from ..exceptions import DecodeError

RecordT = TypeVar("RecordT", bound="Record")

# Ruby class name -> record class
RECORD_TYPES: Dict[str, Type["Record"]] = {}
USERDEF_TYPES: Dict[str, Type["UserDefRecord"]] = {}

RUBY_NAME = "ruby_name"


def ruby_field(name: str, default: Any = MISSING, default_factory: Any = MISSING) -> Any:
    """Declare a record field whose Ruby ivar name is not a usable Python name."""
    if default_factory is not MISSING:
        return field(default_factory=default_factory, metadata={RUBY_NAME: name})
    return field(default=default, metadata={RUBY_NAME: name})


def register(ruby_class: str) -> Callable[[Type[RecordT]], Type[RecordT]]:
    """Class decorator binding a record dataclass to a Ruby class name."""

    def decorator(cls: Type[RecordT]) -> Type[RecordT]:
        cls.RUBY_CLASS = ruby_class
        if issubclass(cls, UserDefRecord):
            USERDEF_TYPES[ruby_class] = cls
        else:
            RECORD_TYPES[ruby_class] = cls
        return cls

    return decorator


@dataclass
class Record:
    """A decoded RGSS object with a fixed set of mandatory instance variables.

    Instance variables that are not declared as fields are kept in `extra`
    and written back unchanged.
    """

    RUBY_CLASS: ClassVar[str] = ""

    extra: Dict[str, Any] = field(default_factory=dict, repr=False, kw_only=True)

    @classmethod
    def record_fields(cls):
        return [f for f in fields(cls) if f.name != "extra"]

    @staticmethod
    def ruby_name(f: Any) -> str:
        return f.metadata.get(RUBY_NAME, f.name)

    @classmethod
    def from_ruby_object(cls: Type[RecordT], obj: RubyObject, memo: Dict[int, Any]) -> RecordT:
        attributes = dict(obj.attributes)
        for f in cls.record_fields():
            name = cls.ruby_name(f)
            if name not in attributes:
                raise DecodeError(f"{cls.RUBY_CLASS} is missing field @{name}")

        # Registered before its fields are converted so self-references resolve
        record = cls.__new__(cls)
        memo[id(obj)] = (obj, record)
        for f in cls.record_fields():
            setattr(record, f.name, from_ruby(attributes.pop(cls.ruby_name(f)), memo))
        record.extra = {k: from_ruby(v, memo) for k, v in attributes.items()}
        return record

    def to_ruby_object(self, memo: Dict[int, Any]) -> RubyObject:
        obj = RubyObject(self.RUBY_CLASS)
        memo[id(self)] = obj
        for f in self.record_fields():
            obj.attributes[self.ruby_name(f)] = to_ruby(getattr(self, f.name), memo)
        for name, value in self.extra.items():
            obj.attributes[name] = to_ruby(value, memo)
        return obj


@dataclass
class UserDefRecord(Record, ABC):
    """A record that RGSS serializes with a custom binary `_dump`."""

    @classmethod
    @abstractmethod
    def load(cls: Type[RecordT], data: bytes) -> RecordT:
        """Build the record from its `_dump` payload."""

    @abstractmethod
    def dump(self) -> bytes:
        """Return the `_dump` payload."""


def from_ruby(value: Any, memo: Optional[Dict[int, Any]] = None) -> Any:
    """Convert a decoded Marshal value into typed records, recursively.

    Shared references in the input stay shared in the output.

    Raises:
        DecodeError: If a registered class is missing a declared field or a
            custom binary payload is malformed
    """
    if memo is None:
        memo = {}
    if isinstance(value, (list, dict, RubyObject, RubyUserDef)):
        cached = memo.get(id(value))
        if cached is not None:
            return cached[1]

    if isinstance(value, list):
        result: Any = []
        memo[id(value)] = (value, result)
        result.extend(from_ruby(item, memo) for item in value)
        return result
    if isinstance(value, dict):
        result = RubyHash(default=value.default) if isinstance(value, RubyHash) else {}
        memo[id(value)] = (value, result)
        for key, item in value.items():
            result[from_ruby(key, memo)] = from_ruby(item, memo)
        if isinstance(value, RubyHash):
            result.default = from_ruby(value.default, memo)
        return result
    if isinstance(value, RubyObject):
        record_cls = RECORD_TYPES.get(value.class_name)
        if record_cls is None:
            result = RubyObject(value.class_name)
            memo[id(value)] = (value, result)
            result.attributes = {k: from_ruby(v, memo) for k, v in value.attributes.items()}
            return result
        return record_cls.from_ruby_object(value, memo)
    if isinstance(value, RubyUserDef):
        userdef_cls = USERDEF_TYPES.get(value.class_name)
        if userdef_cls is None:
            return value
        result = userdef_cls.load(value.data)
        memo[id(value)] = (value, result)
        return result
    return value


def to_ruby(value: Any, memo: Optional[Dict[int, Any]] = None) -> Any:
    """Convert typed records back into plain Marshal values, recursively."""
    if memo is None:
        memo = {}
    if isinstance(value, (list, dict, Record, RubyObject)):
        cached = memo.get(id(value))
        if cached is not None:
            return cached

    if isinstance(value, UserDefRecord):
        result: Any = RubyUserDef(value.RUBY_CLASS, value.dump())
        memo[id(value)] = result
        return result
    if isinstance(value, Record):
        return value.to_ruby_object(memo)
    if isinstance(value, list):
        result = []
        memo[id(value)] = result
        result.extend(to_ruby(item, memo) for item in value)
        return result
    if isinstance(value, dict):
        result = RubyHash() if isinstance(value, RubyHash) else {}
        memo[id(value)] = result
        for key, item in value.items():
            result[to_ruby(key, memo)] = to_ruby(item, memo)
        if isinstance(value, RubyHash):
            result.default = to_ruby(value.default, memo)
        return result
    if isinstance(value, RubyObject):
        result = RubyObject(value.class_name)
        memo[id(value)] = result
        result.attributes = {k: to_ruby(v, memo) for k, v in value.attributes.items()}
        return result
    return value
