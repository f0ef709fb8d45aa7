"""
Ruby Marshal codec.

Pure, stateless conversion between Marshal 4.8 bytes and Python values. No
file I/O happens here; record typing lives in rmxp_maped.rpg.
"""

from .reader import MarshalReader, loads
from .writer import MarshalWriter, dumps
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

__all__ = [
    # Entry points
    "loads",
    "dumps",
    "MarshalReader",
    "MarshalWriter",
    # Value types
    "RubyClassRef",
    "RubyExtended",
    "RubyHash",
    "RubyModuleRef",
    "RubyObject",
    "RubyRegexp",
    "RubyString",
    "RubyStruct",
    "RubySymbol",
    "RubyUserClass",
    "RubyUserDef",
    "RubyUserMarshal",
]
