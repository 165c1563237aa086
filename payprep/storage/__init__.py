"""
Persistence layer.
"""

from .backends import JsonFileStore, KeyValueStore, MemoryStore
from .prep_storage import KEYS, PREFIX, PrepStorage

__all__ = [
    "KEYS",
    "PREFIX",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "PrepStorage",
]
