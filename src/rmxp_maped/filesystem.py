"""
File-system access for project files.

The store never touches the disk directly; it goes through a `FileSystem`
so hosts can swap in archives, overlays or in-memory trees. Paths are
POSIX-style strings relative to the project root.
"""

import logging
from pathlib import Path, PurePosixPath
from typing import Protocol, runtime_checkable

from .exceptions import MissingFileError

logger = logging.getLogger(__name__)


@runtime_checkable
class FileSystem(Protocol):
    def read(self, path: str) -> bytes:
        """Read a whole file. Raises MissingFileError when it cannot be read."""
        ...

    def write(self, path: str, data: bytes) -> None:
        ...

    def exists(self, path: str) -> bool:
        ...

    def remove(self, path: str) -> None:
        ...

    def join(self, *parts: str) -> str:
        ...


class DirectoryFileSystem:
    """FileSystem rooted at a project directory on disk."""

    def __init__(self, root: str | Path):
        self.root = Path(root)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _resolve(self, path: str) -> Path:
        return self.root.joinpath(*PurePosixPath(path).parts)

    def read(self, path: str) -> bytes:
        try:
            return self._resolve(path).read_bytes()
        except FileNotFoundError as e:
            raise MissingFileError(path) from e
        except OSError as e:
            raise MissingFileError(path, e.strerror or str(e)) from e

    def write(self, path: str, data: bytes) -> None:
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def remove(self, path: str) -> None:
        target = self._resolve(path)
        if target.exists():
            target.unlink()
            self.logger.debug(f"Removed {target}")

    def join(self, *parts: str) -> str:
        return str(PurePosixPath(*parts))

    def __repr__(self) -> str:
        return f"DirectoryFileSystem({str(self.root)!r})"
