"""Persistence backends and bookmarks."""

from .bookmarks import BookmarkSet
from .kv import (
    BOOKMARKS_KEY,
    PROFILE_KEY,
    PROGRESS_KEY,
    KeyValueStore,
    MemoryKeyValueStore,
    SQLiteKeyValueStore,
    storage_key,
)

__all__ = [
    "BOOKMARKS_KEY",
    "BookmarkSet",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "PROFILE_KEY",
    "PROGRESS_KEY",
    "SQLiteKeyValueStore",
    "storage_key",
]
