"""
Nil-padding adapter for database collections.

On disk a database collection is an Array whose element 0 is nil, so that
record N sits at index N. In memory the sentinel is dropped: position i
holds the record with id i + 1.

An empty on-disk Array (no sentinel at all) reads as zero records. Zero
records are written as a sentinel-only Array `[nil]`, which reads back as
zero records too.
"""

import logging
from typing import Any, Callable, Dict, List, Type, TypeVar

from .. import codec
from ..exceptions import DecodeError
from ..rpg import Record, from_ruby, to_ruby

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=Record)


def deserialize(data: bytes, record_type: Type[RecordT]) -> List[RecordT]:
    """Decode a nil-padded Array into a dense list of records.

    Raises:
        DecodeError: If the value is not an Array, element 0 is not nil, or
            any other element is not a `record_type`
    """
    value = codec.loads(data)
    if not isinstance(value, list):
        raise DecodeError(
            f"expected an Array of {record_type.RUBY_CLASS}, found {type(value).__name__}"
        )
    if not value:
        return []
    if value[0] is not None:
        raise DecodeError(
            f"element 0 of {record_type.RUBY_CLASS} array must be nil"
        )

    records: List[RecordT] = []
    memo: Dict[int, Any] = {}
    for position, raw in enumerate(value[1:]):
        record = from_ruby(raw, memo)
        if not isinstance(record, record_type):
            raise DecodeError(
                f"{record_type.RUBY_CLASS} #{position + 1} is "
                f"{getattr(raw, 'class_name', type(raw).__name__)}"
            )
        record_id = getattr(record, "id", position + 1)
        if record_id != position + 1:
            logger.warning(
                f"{record_type.RUBY_CLASS} at position {position + 1} has id {record_id}"
            )
        records.append(record)
    return records


def serialize(records: List[Any]) -> bytes:
    """Encode records as a nil-padded Array (`[nil, *records]`)."""
    padded: List[Any] = [None]
    padded.extend(records)
    return codec.dumps(to_ruby(padded))


def change_maximum(
    records: List[RecordT], maximum: int, factory: Callable[[], RecordT]
) -> None:
    """Truncate or extend a collection in place to exactly `maximum` records.

    New records come from `factory` and get `id = position + 1`.
    """
    if maximum < 0:
        raise ValueError(f"maximum must not be negative, got {maximum}")
    if maximum <= len(records):
        del records[maximum:]
        return
    while len(records) < maximum:
        record = factory()
        if hasattr(record, "id"):
            record.id = len(records) + 1  # type: ignore[attr-defined]
        records.append(record)
