"""Bookmarked fact snapshots."""

import json
import logging

from ..facts import Fact
from .kv import BOOKMARKS_KEY, KeyValueStore

logger = logging.getLogger(__name__)


class BookmarkSet:
    """Set of saved facts, stored as full snapshots.

    Bookmarks are independent of progress: a fact can be bookmarked
    without being viewed, and removing one leaves progress untouched.
    """

    def __init__(self, kv: KeyValueStore, key: str = BOOKMARKS_KEY) -> None:
        self.kv = kv
        self.key = key
        self._facts: dict[str, Fact] = self._load()

    def _load(self) -> dict[str, Fact]:
        blob = self.kv.get(self.key)
        if blob is None:
            return {}

        try:
            data = json.loads(blob)
            if not isinstance(data, list):
                raise ValueError("bookmarks blob is not a list")
            facts = [Fact.from_dict(item) for item in data]
        except (json.JSONDecodeError, KeyError, ValueError, TypeError) as e:
            logger.warning("Discarding corrupt bookmarks under %s: %s", self.key, e)
            return {}

        return {fact.id: fact for fact in facts}

    def _save(self) -> None:
        blob = json.dumps([f.to_dict() for f in self._facts.values()], sort_keys=True)
        self.kv.set(self.key, blob)

    def add(self, fact: Fact) -> bool:
        """Bookmark a fact.

        Returns:
            True if added, False if it was already bookmarked.
        """
        if fact.id in self._facts:
            return False
        self._facts[fact.id] = fact
        self._save()
        return True

    def remove(self, fact_id: str) -> bool:
        """Remove a bookmark.

        Returns:
            True if a bookmark was removed, False otherwise.
        """
        if fact_id not in self._facts:
            return False
        del self._facts[fact_id]
        self._save()
        return True

    def is_bookmarked(self, fact_id: str) -> bool:
        return fact_id in self._facts

    def all(self) -> list[Fact]:
        """Bookmarked facts in the order they were added."""
        return list(self._facts.values())

    def __len__(self) -> int:
        return len(self._facts)
