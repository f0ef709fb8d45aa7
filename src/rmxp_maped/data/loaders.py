"""
Decoders and encoders for individual `.rxdata` files.

Every file in a project's `Data/` directory holds one Marshal value. These
helpers turn file bytes into typed records (and back) and check that the
value has the shape its file name promises.
"""

import logging
from typing import Any, Callable, Dict, List, Type, TypeVar

from .. import codec
from ..exceptions import DecodeError
from ..filesystem import FileSystem
from ..rpg import MapInfo, Record, Script, from_ruby, scripts_from_ruby, scripts_to_ruby, to_ruby

logger = logging.getLogger(__name__)

DATA_DIR = "Data"

T = TypeVar("T")
RecordT = TypeVar("RecordT", bound=Record)


def decode_value(data: bytes) -> Any:
    """Decode Marshal bytes into typed records without any shape checks."""
    return from_ruby(codec.loads(data))


def dump_record(value: Any) -> bytes:
    """Encode typed records (or plain values) as Marshal bytes."""
    return codec.dumps(to_ruby(value))


def load_record(data: bytes, record_type: Type[RecordT]) -> RecordT:
    """Decode a file that holds exactly one record of `record_type`."""
    value = decode_value(data)
    if not isinstance(value, record_type):
        raise DecodeError(
            f"expected {record_type.RUBY_CLASS}, found {_describe(value)}"
        )
    return value


def decode_map_infos(data: bytes) -> Dict[int, MapInfo]:
    """Decode `MapInfos.rxdata`: a Hash of map id -> RPG::MapInfo."""
    value = decode_value(data)
    if not isinstance(value, dict):
        raise DecodeError(f"expected a Hash of map infos, found {_describe(value)}")
    for map_id, info in value.items():
        if not isinstance(map_id, int) or not isinstance(info, MapInfo):
            raise DecodeError(
                f"bad map info entry {map_id!r} => {_describe(info)}"
            )
    return value


def decode_scripts(data: bytes) -> List[Script]:
    return scripts_from_ruby(codec.loads(data))


def encode_scripts(scripts: List[Script]) -> bytes:
    return codec.dumps(scripts_to_ruby(scripts))


def data_path(filesystem: FileSystem, filename: str) -> str:
    return filesystem.join(DATA_DIR, filename)


def read_data(filesystem: FileSystem, filename: str, decoder: Callable[[bytes], T]) -> T:
    """Read `Data/<filename>` and decode it.

    Raises:
        MissingFileError: If the file system cannot read the file
        DecodeError: If the bytes do not decode to the expected shape
    """
    path = data_path(filesystem, filename)
    data = filesystem.read(path)
    logger.debug(f"Read {len(data)} bytes from {path}")
    return decoder(data)


def _describe(value: Any) -> str:
    ruby_class = getattr(value, "RUBY_CLASS", None) or getattr(value, "class_name", None)
    return ruby_class or type(value).__name__
