"""Tests for GeneratedFactCache."""

import pytest

from curio.content import GeneratedFactCache
from curio.facts import Fact


def make_fact(fact_id: str, topic: str) -> Fact:
    return Fact(id=fact_id, title=fact_id, blurb="b", body="b", topic=topic, is_generated=True)


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> GeneratedFactCache:
    return GeneratedFactCache(ttl_seconds=60, clock=clock)


class TestGeneratedFactCache:
    def test_unknown_topic_is_empty_and_stale(self, cache: GeneratedFactCache):
        assert cache.get("space") == []
        assert not cache.is_fresh("space")

    def test_add_makes_topic_fresh(self, cache: GeneratedFactCache):
        cache.add("space", [make_fact("s1", "space")])
        assert cache.is_fresh("space")
        assert [f.id for f in cache.get("space")] == ["s1"]

    def test_expires_after_ttl_but_keeps_facts(self, cache: GeneratedFactCache, clock: FakeClock):
        cache.add("space", [make_fact("s1", "space")])
        clock.now += 61
        assert not cache.is_fresh("space")
        assert len(cache.get("space")) == 1

    def test_add_appends_and_refreshes(self, cache: GeneratedFactCache, clock: FakeClock):
        cache.add("space", [make_fact("s1", "space")])
        clock.now += 61
        cache.add("space", [make_fact("s2", "space")])
        assert cache.is_fresh("space")
        assert [f.id for f in cache.get("space")] == ["s1", "s2"]

    def test_all_facts_counts_and_topics(self, cache: GeneratedFactCache):
        cache.add("space", [make_fact("s1", "space"), make_fact("s2", "space")])
        cache.add("art", [make_fact("a1", "art")])
        assert len(cache.all_facts()) == 3
        assert cache.counts() == {"space": 2, "art": 1}
        assert cache.topics() == ["space", "art"]

    def test_clear(self, cache: GeneratedFactCache):
        cache.add("space", [make_fact("s1", "space")])
        cache.clear()
        assert cache.all_facts() == []
        assert not cache.is_fresh("space")

    def test_negative_ttl_rejected(self):
        with pytest.raises(ValueError):
            GeneratedFactCache(ttl_seconds=-1)
