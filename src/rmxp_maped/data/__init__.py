"""
Reading and writing the files of a project's `Data/` directory.
"""

from . import nil_padded
from .loaders import (
    DATA_DIR,
    data_path,
    decode_map_infos,
    decode_scripts,
    decode_value,
    dump_record,
    encode_scripts,
    load_record,
    read_data,
)

__all__ = [
    "nil_padded",
    "DATA_DIR",
    "data_path",
    "decode_map_infos",
    "decode_scripts",
    "decode_value",
    "dump_record",
    "encode_scripts",
    "load_record",
    "read_data",
]
