"""Daily fact selection balancing topic preference and variety."""

import logging
import random
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta
from enum import Enum
from typing import TypeVar

from ..facts import Fact, normalize_topic
from ..progress import FactStatus, UserFactProgress, utc_now

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TARGET_COUNT = 3
MAX_PREFERRED_PICKS = 2
DEFAULT_COOLDOWN = timedelta(days=30)


class ExclusionPolicy(str, Enum):
    """Rule for which previously seen facts may be shown again."""

    COOLDOWN = "cooldown"  # eligible again once the cooldown has passed
    PERMANENT = "permanent"  # never shown again once seen


class FactSelector:
    """Picks the daily set of facts.

    All randomness goes through the injected ``random.Random`` so that a
    seeded instance gives reproducible selections.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        cooldown: timedelta = DEFAULT_COOLDOWN,
        policy: ExclusionPolicy = ExclusionPolicy.COOLDOWN,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.rng = rng or random.Random()
        self.cooldown = cooldown
        self.policy = policy
        self._clock = clock

    def is_eligible(
        self,
        fact_id: str,
        progress_by_id: dict[str, UserFactProgress],
        now: datetime,
    ) -> bool:
        """Check whether a fact may be selected.

        Mastered facts never are. Any other fact with progress is held
        back while its last interaction is within the cooldown.
        """
        record = progress_by_id.get(fact_id)
        if record is None:
            return True
        if record.status == FactStatus.MASTERED:
            return False
        if self.policy == ExclusionPolicy.PERMANENT:
            return False
        return now - record.last_viewed >= self.cooldown

    def ineligible_ids(self, progress: Iterable[UserFactProgress]) -> set[str]:
        """Ids of every fact that cannot be selected right now."""
        now = self._clock()
        by_id = {r.fact_id: r for r in progress}
        return {fid for fid in by_id if not self.is_eligible(fid, by_id, now)}

    def select_daily_facts(
        self,
        pool: Iterable[Fact],
        progress: Iterable[UserFactProgress],
        preferred_topics: Iterable[str] = (),
        target_count: int = DEFAULT_TARGET_COUNT,
    ) -> list[Fact]:
        """Select up to target_count facts to show.

        Preferred topics get up to two picks, one per topic in order.
        Remaining slots go round-robin across all topics in shuffled
        order, then to whatever is left. The result is shuffled.

        Returns:
            Distinct facts. Fewer than target_count only when the
            eligible pool is smaller than that.
        """
        if target_count <= 0:
            return []

        now = self._clock()
        progress_by_id = {r.fact_id: r for r in progress}
        eligible = [
            f for f in _dedupe(pool) if self.is_eligible(f.id, progress_by_id, now)
        ]
        if not eligible:
            logger.debug("No eligible facts left to select")
            return []

        buckets = _bucket_by_topic(eligible)
        selected: list[Fact] = []

        preferred = [t for t in dict.fromkeys(normalize_topic(t) for t in preferred_topics) if t]
        cap = min(MAX_PREFERRED_PICKS, target_count)
        for topic in preferred:
            if len(selected) >= cap:
                break
            if buckets.get(topic):
                selected.append(self._take_random(buckets[topic]))

        rotation = [topic for topic, facts in buckets.items() if facts]
        self._shuffle_in_place(rotation)
        while len(selected) < target_count and rotation:
            for topic in list(rotation):
                if len(selected) >= target_count:
                    break
                selected.append(self._take_random(buckets[topic]))
                if not buckets[topic]:
                    rotation.remove(topic)

        if len(selected) < target_count:
            leftovers = [fact for facts in buckets.values() for fact in facts]
            self._shuffle_in_place(leftovers)
            selected.extend(leftovers[: target_count - len(selected)])

        self._shuffle_in_place(selected)
        logger.debug(
            "Selected %s from %d eligible facts",
            [f"{f.topic}:{f.id}" for f in selected],
            len(eligible),
        )
        return selected

    def _take_random(self, bucket: list[Fact]) -> Fact:
        return bucket.pop(self.rng.randrange(len(bucket)))

    def _shuffle_in_place(self, items: list[T]) -> None:
        # random.Random.shuffle is a Fisher-Yates shuffle over our rng
        self.rng.shuffle(items)


def select_daily_facts(
    pool: Iterable[Fact],
    progress: Iterable[UserFactProgress],
    preferred_topics: Iterable[str] = (),
    target_count: int = DEFAULT_TARGET_COUNT,
    rng: random.Random | None = None,
) -> list[Fact]:
    """Select daily facts with a one-off FactSelector."""
    return FactSelector(rng=rng).select_daily_facts(
        pool, progress, preferred_topics, target_count
    )


def _dedupe(pool: Iterable[Fact]) -> list[Fact]:
    seen: set[str] = set()
    facts: list[Fact] = []
    for fact in pool:
        if fact.id not in seen:
            seen.add(fact.id)
            facts.append(fact)
    return facts


def _bucket_by_topic(facts: list[Fact]) -> dict[str, list[Fact]]:
    buckets: dict[str, list[Fact]] = {}
    for fact in facts:
        buckets.setdefault(fact.topic, []).append(fact)
    return buckets
