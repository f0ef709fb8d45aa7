"""
Exception hierarchy for rmxp_maped.

Data errors (decode, missing files, unresolved scripts) are recoverable and
carry enough context to show the offending file to the user. Contract errors
(borrow violations, access while unloaded) indicate a bug in the caller and
are never caught inside the library.
"""

from typing import List, Optional, Sequence, Tuple


class RmxpMapedError(Exception):
    """Base class for all rmxp_maped errors."""
    pass


class ConfigError(RmxpMapedError):
    """Raised when a project configuration is invalid or cannot be read."""
    pass


# === DATA ERRORS ===


class DecodeError(RmxpMapedError):
    """Malformed or truncated object-graph bytes, or a record that does not
    match its declared shape."""

    def __init__(self, message: str, offset: Optional[int] = None):
        if offset is not None:
            message = f"{message} (at byte {offset})"
        super().__init__(message)
        self.offset = offset


class EncodeError(RmxpMapedError):
    """Raised when a value cannot be represented in the object-graph format."""
    pass


class MissingFileError(RmxpMapedError):
    """Raised by a file system when a file cannot be read."""

    def __init__(self, path: str, reason: str = "file not found"):
        super().__init__(f"Unable to read {path}: {reason}")
        self.path = path
        self.reason = reason


class ScriptsUnresolvedError(RmxpMapedError):
    """None of the candidate script bundle names could be loaded."""

    def __init__(self, attempted: Sequence[str], causes: Sequence[Exception] = ()):
        self.attempted: List[str] = list(attempted)
        self.causes: Tuple[Exception, ...] = tuple(causes)
        tried = ", ".join(self.attempted) if self.attempted else "nothing"
        super().__init__(f"Unable to load scripts (tried {tried})")


class LoadError(RmxpMapedError):
    """Loading a project (or a single map) was aborted.

    The underlying DecodeError / MissingFileError is chained as __cause__.
    """

    def __init__(self, collection: str, filename: str, reason: str):
        super().__init__(f"while reading {collection} ({filename}): {reason}")
        self.collection = collection
        self.filename = filename


class SaveError(RmxpMapedError):
    """Saving a project was aborted part-way.

    Attributes:
        filename: File that could not be encoded or written
        written: Files that were already written before the failure
        rolled_back: True if the written files were restored afterwards
    """

    def __init__(
        self,
        filename: str,
        reason: str,
        written: Sequence[str] = (),
        rolled_back: bool = False,
    ):
        message = f"while saving {filename}: {reason}"
        if written and not rolled_back:
            message += " (some files may not have been saved)"
        super().__init__(message)
        self.filename = filename
        self.written: List[str] = list(written)
        self.rolled_back = rolled_back


class UnsavedChangesError(RmxpMapedError):
    """Raised when closing a project that has unsaved changes."""
    pass


# === CONTRACT ERRORS ===


class BorrowViolationError(RmxpMapedError):
    """Overlapping exclusive access to the same collection or map."""
    pass


class NotLoadedError(RmxpMapedError):
    """The data store was accessed while no project is loaded."""
    pass


class MapNotCachedError(NotLoadedError):
    """get_map() was called for a map that has not been loaded yet."""

    def __init__(self, map_id: int):
        super().__init__(f"map {map_id:03d} is not loaded")
        self.map_id = map_id
