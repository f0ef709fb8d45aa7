"""
rmxp_maped: project data store for RPG Maker XP projects

Reads and writes the Ruby Marshal `.rxdata` files of an RPG Maker XP project
as typed Python records, with checked exclusive access to each collection.
"""

__version__ = "0.1.0"
__author__ = "rmxp_maped Contributors"

# Errors
from .exceptions import (
    RmxpMapedError,
    DecodeError,
    EncodeError,
    MissingFileError,
    ScriptsUnresolvedError,
    LoadError,
    SaveError,
    BorrowViolationError,
    NotLoadedError,
    MapNotCachedError,
    ConfigError,
    UnsavedChangesError,
)

# Core services
from .filesystem import FileSystem, DirectoryFileSystem
from .store import DataStore, Collection, Borrow
from .project import ProjectConfig, ProjectManager
from .utils.logging_config import setup_logging

__all__ = [
    # Services
    "DataStore",
    "Collection",
    "Borrow",
    "ProjectConfig",
    "ProjectManager",
    "FileSystem",
    "DirectoryFileSystem",

    # Logging
    "setup_logging",

    # Errors
    "RmxpMapedError",
    "DecodeError",
    "EncodeError",
    "MissingFileError",
    "ScriptsUnresolvedError",
    "LoadError",
    "SaveError",
    "BorrowViolationError",
    "NotLoadedError",
    "MapNotCachedError",
    "ConfigError",
    "UnsavedChangesError",
]
