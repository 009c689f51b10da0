"""In-memory cache of generated facts, keyed by topic."""

import time
from collections.abc import Callable

from ..facts import Fact


class GeneratedFactCache:
    """Holds generated facts per topic with a freshness window.

    Entries never expire out of the cache. Once the TTL has passed a
    topic is no longer fresh, which only means a new generation call
    is allowed; the old facts keep being served.
    """

    def __init__(
        self,
        ttl_seconds: float = 1800,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds cannot be negative")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._facts: dict[str, list[Fact]] = {}
        self._generated_at: dict[str, float] = {}

    def add(self, topic: str, facts: list[Fact]) -> None:
        """Append facts for a topic and mark it freshly generated."""
        self._facts.setdefault(topic, []).extend(facts)
        self._generated_at[topic] = self._clock()

    def get(self, topic: str) -> list[Fact]:
        return list(self._facts.get(topic, []))

    def is_fresh(self, topic: str) -> bool:
        """True if the topic was generated within the TTL."""
        generated_at = self._generated_at.get(topic)
        if generated_at is None:
            return False
        return (self._clock() - generated_at) < self.ttl_seconds

    def topics(self) -> list[str]:
        return list(self._facts)

    def all_facts(self) -> list[Fact]:
        return [fact for facts in self._facts.values() for fact in facts]

    def counts(self) -> dict[str, int]:
        return {topic: len(facts) for topic, facts in self._facts.items()}

    def clear(self) -> None:
        self._facts.clear()
        self._generated_at.clear()
