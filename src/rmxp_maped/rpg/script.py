"""
Script bundle entries.

The bundle is a plain Array of `[id, name, deflated_source]` triples, not
RPG objects, so scripts convert through their own helpers instead of the
record registry.
"""

import zlib
from dataclasses import dataclass
from typing import Any, List

from ..exceptions import DecodeError


def _as_bytes(value: "str | bytes") -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


@dataclass
class Script:
    """One script section of the bundle (uncompressed source)."""
    id: int = 0
    name: "str | bytes" = ""
    text: str = ""

    @classmethod
    def from_ruby(cls, entry: Any) -> "Script":
        if not isinstance(entry, list) or len(entry) != 3:
            raise DecodeError(f"script entry must be a 3-element array, got {entry!r:.60}")
        script_id, name, data = entry
        if not isinstance(script_id, int) or not isinstance(name, (str, bytes)):
            raise DecodeError(f"malformed script entry header {script_id!r}, {name!r}")
        if not isinstance(data, (str, bytes)):
            raise DecodeError(f"script {name!r} has no source string")
        try:
            source = zlib.decompress(_as_bytes(data))
        except zlib.error as e:
            raise DecodeError(f"script {name!r} is not valid deflate data: {e}") from e
        return cls(script_id, name, source.decode("utf-8", "surrogateescape"))

    def to_ruby(self) -> List[Any]:
        data = zlib.compress(self.text.encode("utf-8", "surrogateescape"))
        return [self.id, self.name, data]


def scripts_from_ruby(value: Any) -> List[Script]:
    if not isinstance(value, list):
        raise DecodeError(f"script bundle must be an array, got {type(value).__name__}")
    return [Script.from_ruby(entry) for entry in value]


def scripts_to_ruby(scripts: List[Script]) -> List[List[Any]]:
    return [script.to_ruby() for script in scripts]
