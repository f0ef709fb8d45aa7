"""
Project data store: every top-level collection of an open project, with
checked exclusive access and lazily loaded maps.
"""

from .cells import Borrow, BorrowCell
from .collection import RXDATA_EXT, Collection, Layout, map_filename, scripts_filename
from .data_cache import SCRIPTS_FALLBACKS, DataStore, LoadedData
from .map_cache import MapCache

__all__ = [
    # Store
    "DataStore",
    "LoadedData",
    "SCRIPTS_FALLBACKS",
    # Collections
    "Collection",
    "Layout",
    "RXDATA_EXT",
    "map_filename",
    "scripts_filename",
    # Access
    "Borrow",
    "BorrowCell",
    "MapCache",
]
