"""Content source: the static pool plus on-demand generated facts."""

import asyncio
import logging
import math
import uuid
from collections.abc import Iterable
from datetime import date

from ..facts import Difficulty, Fact, Source, normalize_topic
from .cache import GeneratedFactCache
from .generator import FactGenerator, GenerationError, RawFact

logger = logging.getLogger(__name__)

DEFAULT_TOPICS = [
    "science", "history", "nature", "technology", "space", "animals",
    "culture", "geography", "psychology", "health", "sports", "art",
    "music", "literature", "mathematics", "physics", "chemistry",
    "biology", "archaeology", "astronomy", "philosophy", "economics",
    "politics", "sociology", "anthropology", "linguistics", "medicine",
]

GENERATED_IMAGE = (
    "https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d"
    "?auto=format&fit=crop&w=800&q=80"
)
GENERATED_XP = 15


class ContentSource:
    """Supplies candidate facts, generating more when the pool runs low.

    Generated facts live in a GeneratedFactCache shared for the process
    lifetime. Generation failures are logged and recorded in
    ``last_failures``; callers always get whatever facts are available.
    """

    def __init__(
        self,
        seed_facts: list[Fact],
        generator: FactGenerator | None = None,
        cache: GeneratedFactCache | None = None,
        min_pool_size: int = 10,
        generation_count: int = 20,
        batch_size: int = 5,
        batch_delay: float = 1.0,
        request_timeout: float | None = 30.0,
        default_topics: list[str] | None = None,
    ) -> None:
        """Initialize the content source.

        Args:
            seed_facts: Static pool, loaded once.
            generator: Produces new facts. None disables generation.
            cache: Cache for generated facts.
            min_pool_size: Below this many matching facts, generate more.
            generation_count: Facts to request per top-up, split across topics.
            batch_size: Topics generated concurrently per batch.
            batch_delay: Seconds to pause between batches.
            request_timeout: Per-request bound in seconds; None for no bound.
            default_topics: Topics to generate for when none are preferred.
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.seed_facts = list(seed_facts)
        self.generator = generator
        self.cache = cache or GeneratedFactCache()
        self.min_pool_size = min_pool_size
        self.generation_count = generation_count
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self.request_timeout = request_timeout
        self.default_topics = list(default_topics or DEFAULT_TOPICS)
        self.last_failures: list[str] = []
        self._inflight: dict[str, asyncio.Task[list[Fact]]] = {}

    def get_all_facts(self) -> list[Fact]:
        """Static and generated facts, without duplicate ids."""
        seen: set[str] = set()
        facts: list[Fact] = []
        for fact in [*self.seed_facts, *self.cache.all_facts()]:
            if fact.id not in seen:
                seen.add(fact.id)
                facts.append(fact)
        return facts

    async def get_facts_by_topics(
        self,
        preferred_topics: Iterable[str],
        exclude_ids: Iterable[str] = (),
    ) -> list[Fact]:
        """Facts in the given topics (all topics if none), minus exclusions.

        If fewer than min_pool_size facts match, more are generated for
        the under-supplied topics before returning.
        """
        topics = _unique_topics(preferred_topics)
        excluded = set(exclude_ids)
        self.last_failures = []

        available = self._matching(topics, excluded)
        if len(available) >= self.min_pool_size or self.generator is None:
            return available

        targets = topics or self._least_supplied_topics(available)
        stale = [t for t in targets if not self.cache.is_fresh(t)]
        if not stale:
            logger.debug("Pool is short but all target topics are fresh: %s", targets)
            return available

        per_topic = max(1, math.ceil(self.generation_count / len(stale)))
        logger.info(
            "Only %d facts available, generating %d per topic for %s",
            len(available),
            per_topic,
            stale,
        )
        await self._generate_batched({t: per_topic for t in stale})

        return self._matching(topics, excluded)

    async def generate_more_for_topic(self, topic: str, count: int = 10) -> list[Fact]:
        """Generate facts for one topic regardless of cache freshness."""
        self.last_failures = []
        return await self._generate_topic(normalize_topic(topic), count)

    async def warm_up(self, topics: list[str] | None = None, per_topic: int = 20) -> int:
        """Fill the cache so every topic has at least per_topic generated facts.

        Returns:
            Number of facts generated.
        """
        self.last_failures = []
        counts = self.cache.counts()
        needed = {
            t: per_topic - counts.get(t, 0)
            for t in _unique_topics(topics or self.default_topics)
            if counts.get(t, 0) < per_topic
        }
        return await self._generate_batched(needed)

    def available_topics(self) -> list[str]:
        """Default topics followed by any other topic present in the pool."""
        topics = list(self.default_topics)
        for fact in self.get_all_facts():
            if fact.topic not in topics:
                topics.append(fact.topic)
        return topics

    def fact_count_by_topic(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for fact in self.get_all_facts():
            counts[fact.topic] = counts.get(fact.topic, 0) + 1
        return counts

    def clear_cache(self) -> None:
        self.cache.clear()

    def _matching(self, topics: list[str], excluded: set[str]) -> list[Fact]:
        return [
            fact
            for fact in self.get_all_facts()
            if fact.id not in excluded and (not topics or fact.topic in topics)
        ]

    def _least_supplied_topics(self, available: list[Fact]) -> list[str]:
        counts: dict[str, int] = {}
        for fact in available:
            counts[fact.topic] = counts.get(fact.topic, 0) + 1
        ranked = sorted(self.default_topics, key=lambda t: counts.get(t, 0))
        return ranked[: self.batch_size]

    def _batches(self, topics: list[str]) -> list[list[str]]:
        return [
            topics[i : i + self.batch_size]
            for i in range(0, len(topics), self.batch_size)
        ]

    async def _generate_batched(self, counts: dict[str, int]) -> int:
        """Generate counts[topic] facts per topic, batch_size topics at a time."""
        batches = self._batches(list(counts))
        total = 0
        for index, batch in enumerate(batches):
            results = await asyncio.gather(
                *(self._generate_topic(t, counts[t]) for t in batch)
            )
            total += sum(len(r) for r in results)
            if index < len(batches) - 1 and self.batch_delay > 0:
                await asyncio.sleep(self.batch_delay)
        return total

    async def _generate_topic(self, topic: str, count: int) -> list[Fact]:
        """Generate for one topic, sharing any request already in flight.

        The request runs as its own task and is shielded, so a caller
        that gets cancelled does not stop it from filling the cache.
        """
        task = self._inflight.get(topic)
        if task is None:
            task = asyncio.create_task(self._run_generation(topic, count))
            self._inflight[topic] = task
            task.add_done_callback(lambda done, topic=topic: self._forget(topic, done))

        return await asyncio.shield(task)

    def _forget(self, topic: str, task: asyncio.Task[list[Fact]]) -> None:
        if self._inflight.get(topic) is task:
            del self._inflight[topic]

    async def _run_generation(self, topic: str, count: int) -> list[Fact]:
        if self.generator is None:
            logger.debug("No generator configured, skipping topic %s", topic)
            return []
        try:
            coro = self.generator.generate(topic, count)
            if self.request_timeout is not None:
                raw = await asyncio.wait_for(coro, timeout=self.request_timeout)
            else:
                raw = await coro
        except asyncio.TimeoutError:
            logger.warning("Generation for topic %s timed out", topic)
            self.last_failures.append(topic)
            return []
        except GenerationError as e:
            logger.warning("Generation for topic %s failed: %s", topic, e)
            self.last_failures.append(topic)
            return []
        except Exception as e:
            logger.warning("Unexpected error generating topic %s: %s", topic, e)
            self.last_failures.append(topic)
            return []

        facts = [self._to_fact(item, topic) for item in raw]
        self.cache.add(topic, facts)
        logger.info(
            "Generated %d facts for %s, total cached: %d",
            len(facts),
            topic,
            len(self.cache.get(topic)),
        )
        return facts

    def _to_fact(self, raw: RawFact, topic: str) -> Fact:
        provider = getattr(self.generator, "name", "generator")
        return Fact(
            id=f"{topic}-{uuid.uuid4().hex[:12]}",
            title=raw.title,
            blurb=raw.blurb,
            body=raw.blurb,
            topic=topic,
            image=GENERATED_IMAGE,
            sources=(
                Source(
                    title="AI Generated Fact",
                    publication=provider,
                    type="article",
                    year=date.today().year,
                ),
            ),
            xp_value=GENERATED_XP,
            difficulty=Difficulty.MEDIUM,
            quiz=raw.quiz,
            tags=(topic,),
            date_added=date.today().isoformat(),
            verification_level="verified",
            is_generated=True,
        )


def _unique_topics(topics: Iterable[str]) -> list[str]:
    result: list[str] = []
    for topic in topics:
        normalized = normalize_topic(topic)
        if normalized and normalized not in result:
            result.append(normalized)
    return result
