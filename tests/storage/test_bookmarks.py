"""Tests for BookmarkSet."""

import json

import pytest

from curio.facts import Fact, Quiz
from curio.storage import BookmarkSet, MemoryKeyValueStore


def make_fact(fact_id: str, topic: str = "science") -> Fact:
    return Fact(
        id=fact_id,
        title=f"Fact {fact_id}",
        blurb="blurb",
        body="body",
        topic=topic,
        quiz=Quiz(question="q", options=("a", "b"), correct_answer=0),
    )


@pytest.fixture
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


class TestBookmarkSet:
    def test_starts_empty(self, kv: MemoryKeyValueStore):
        assert BookmarkSet(kv).all() == []

    def test_add_and_query(self, kv: MemoryKeyValueStore):
        bookmarks = BookmarkSet(kv)
        assert bookmarks.add(make_fact("1")) is True
        assert bookmarks.is_bookmarked("1")
        assert not bookmarks.is_bookmarked("2")

    def test_add_duplicate_is_ignored(self, kv: MemoryKeyValueStore):
        bookmarks = BookmarkSet(kv)
        bookmarks.add(make_fact("1"))
        assert bookmarks.add(make_fact("1")) is False
        assert len(bookmarks) == 1

    def test_remove(self, kv: MemoryKeyValueStore):
        bookmarks = BookmarkSet(kv)
        bookmarks.add(make_fact("1"))
        assert bookmarks.remove("1") is True
        assert bookmarks.remove("1") is False
        assert bookmarks.all() == []

    def test_persists_full_snapshots(self, kv: MemoryKeyValueStore):
        fact = make_fact("space-abc", topic="space")
        BookmarkSet(kv).add(fact)

        reloaded = BookmarkSet(kv).all()
        assert reloaded == [fact]
        assert reloaded[0].quiz == fact.quiz

    def test_keeps_insertion_order(self, kv: MemoryKeyValueStore):
        bookmarks = BookmarkSet(kv)
        for fact_id in ("3", "1", "2"):
            bookmarks.add(make_fact(fact_id))
        assert [f.id for f in BookmarkSet(kv).all()] == ["3", "1", "2"]

    def test_corrupt_blob_loads_empty(self, kv: MemoryKeyValueStore):
        kv.set("bookmarks", "{{{")
        assert BookmarkSet(kv).all() == []

    def test_wrong_shape_loads_empty(self, kv: MemoryKeyValueStore):
        kv.set("bookmarks", '{"id": 1}')
        assert BookmarkSet(kv).all() == []

    def test_non_object_items_load_empty(self, kv: MemoryKeyValueStore):
        kv.set("bookmarks", json.dumps([1, "x"]))
        assert BookmarkSet(kv).all() == []
