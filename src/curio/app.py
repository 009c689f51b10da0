"""Application facade: the API the presentation layer calls."""

from __future__ import annotations

import logging
import os
import random
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import timedelta

from groq import AsyncGroq

from .config import CurioConfig
from .content import (
    ContentSource,
    DeepseekFactGenerator,
    FactGenerator,
    GeneratedFactCache,
    GroqFactGenerator,
)
from .facts import Fact, load_seed_facts
from .gamification import GamificationLedger, ProfileStore, QuizReward, XPProgress
from .logging import JSONLLogger, get_logger
from .progress import FactStatistics, ProgressStore, ProgressTracker, UserFactProgress
from .selection import FactSelector
from .storage import (
    BOOKMARKS_KEY,
    PROFILE_KEY,
    PROGRESS_KEY,
    BookmarkSet,
    KeyValueStore,
    SQLiteKeyValueStore,
    storage_key,
)

logger = logging.getLogger(__name__)

REFRESH_FAILED_NOTICE = "Could not refresh facts, showing what's available."
EXHAUSTED_NOTICE = "You've seen every fact available right now. Check back later!"
SHARE_FOOTER = "Discover more facts at CurioDaily!"


@dataclass
class DeckResult:
    """Facts to show plus anything the UI should tell the user.

    Attributes:
        facts: Selected facts, possibly fewer than requested.
        notice: Soft message to display, if any.
        exhausted: True when fewer facts than requested were available.
    """

    facts: list[Fact] = field(default_factory=list)
    notice: str | None = None
    exhausted: bool = False


@dataclass(frozen=True)
class QuizOutcome:
    """Result of answering a fact's quiz."""

    is_correct: bool
    xp_gained: int
    progress: UserFactProgress
    explanation: str = ""


def build_generator(config: CurioConfig) -> FactGenerator | None:
    """Create the configured fact generator, or None if unavailable."""
    if config.provider == "groq":
        api_key = os.getenv("GROQ_API_KEY")
        if not api_key:
            logger.warning("GROQ_API_KEY not set, fact generation disabled")
            return None
        return GroqFactGenerator(AsyncGroq(api_key=api_key), model=config.model)

    if config.provider == "deepseek":
        api_key = os.getenv("DEEPSEEK_API_KEY")
        if not api_key:
            logger.warning("DEEPSEEK_API_KEY not set, fact generation disabled")
            return None
        return DeepseekFactGenerator(
            api_key, url=config.deepseek_url, timeout=config.request_timeout
        )

    return None


class CurioApp:
    """Wires content, selection, progress, XP and bookmarks together."""

    def __init__(
        self,
        config: CurioConfig | None = None,
        kv: KeyValueStore | None = None,
        content: ContentSource | None = None,
        generator: FactGenerator | None = None,
        rng: random.Random | None = None,
        event_log: JSONLLogger | None = None,
    ) -> None:
        """Initialize the app.

        Args:
            config: Settings. Defaults to CurioConfig().
            kv: Persistence backend. Defaults to SQLite at config.db_path.
            content: Content source. Built from the seed pool if None.
            generator: Used when building the content source.
            rng: Randomness for selection.
            event_log: Structured event log. Defaults to the global logger.
        """
        self.config = config or CurioConfig()
        if kv is None:
            if self.config.db_path is None:
                raise ValueError("config.db_path must be set to use the default store")
            sqlite_store = SQLiteKeyValueStore(self.config.db_path)
            sqlite_store.init_db()
            kv = sqlite_store
        self.kv = kv

        profile_id = self.config.profile_id
        self.tracker = ProgressTracker(
            ProgressStore(kv, storage_key(profile_id, PROGRESS_KEY)),
            policy=self.config.mastery_policy,
        )
        self.ledger = GamificationLedger(
            ProfileStore(kv, storage_key(profile_id, PROFILE_KEY))
        )
        self.bookmark_set = BookmarkSet(kv, storage_key(profile_id, BOOKMARKS_KEY))

        if content is None:
            content = ContentSource(
                load_seed_facts(),
                generator=generator,
                cache=GeneratedFactCache(ttl_seconds=self.config.cache_ttl_seconds),
                min_pool_size=self.config.min_pool_size,
                generation_count=self.config.generation_count,
                batch_size=self.config.batch_size,
                batch_delay=self.config.batch_delay,
                request_timeout=self.config.request_timeout,
            )
        self.content = content

        self.selector = FactSelector(
            rng=rng,
            cooldown=timedelta(days=self.config.cooldown_days),
            policy=self.config.exclusion_policy,
        )
        self.event_log = event_log or get_logger()
        self.event_log.set_profile_id(profile_id)

        self.deck: list[Fact] = []
        self._deck_version = 0
        self._pending = 0

    @property
    def refreshing(self) -> bool:
        """True while a deck request is in flight."""
        return self._pending > 0

    @property
    def preferred_topics(self) -> list[str]:
        return list(self.ledger.profile.preferred_topics)

    async def get_facts_to_show(self) -> DeckResult:
        """Select today's facts.

        A newer call supersedes an older one: only the latest result is
        stored in ``deck``, though every caller gets its own result.
        """
        self._deck_version += 1
        version = self._deck_version
        self._pending += 1
        started = time.monotonic()

        try:
            excluded = self.selector.ineligible_ids(self.tracker.records())
            # only tops up the preferred topics, selection draws on all of them
            await self.content.get_facts_by_topics(
                self.preferred_topics, exclude_ids=excluded
            )
            candidates = [
                f for f in self.content.get_all_facts() if f.id not in excluded
            ]
            failures = list(self.content.last_failures)
            facts = self.selector.select_daily_facts(
                candidates,
                self.tracker.records(),
                self.preferred_topics,
                target_count=self.config.daily_count,
            )
        finally:
            self._pending -= 1

        result = DeckResult(facts=facts)
        if failures:
            self.event_log.log_generation_failure(failures)
            result.notice = REFRESH_FAILED_NOTICE
        if len(facts) < self.config.daily_count:
            result.exhausted = True
            result.notice = result.notice or EXHAUSTED_NOTICE

        if version == self._deck_version:
            self.deck = facts
        else:
            logger.debug("Discarding superseded deck request %d", version)

        self.event_log.log_deck(
            [f.id for f in facts],
            duration_ms=(time.monotonic() - started) * 1000,
            notice=result.notice,
        )
        return result

    def find_fact(self, fact_id: str) -> Fact | None:
        """Look a fact up in the deck, the pool, then bookmarks."""
        for fact in [*self.deck, *self.content.get_all_facts(), *self.bookmark_set.all()]:
            if fact.id == fact_id:
                return fact
        return None

    def mark_viewed(self, fact_id: str) -> UserFactProgress:
        record = self.tracker.mark_viewed(fact_id)
        self.event_log.log("fact_viewed", fact_id=fact_id, view_count=record.view_count)
        return record

    def mark_quiz_attempt(self, fact_id: str, is_correct: bool) -> UserFactProgress:
        return self.tracker.mark_quiz_attempt(fact_id, is_correct)

    def complete_quiz(self, fact: Fact, is_correct: bool) -> QuizReward:
        return self.ledger.complete_quiz(fact, is_correct)

    def answer_quiz(self, fact: Fact, choice: int) -> QuizOutcome:
        """Grade an answer, record the attempt and award XP.

        Raises:
            ValueError: If the fact has no quiz.
        """
        if fact.quiz is None:
            raise ValueError(f"Fact {fact.id} has no quiz")

        is_correct = fact.quiz.is_correct(choice)
        progress = self.mark_quiz_attempt(fact.id, is_correct)
        reward = self.complete_quiz(fact, is_correct)
        self.event_log.log_quiz(fact.id, is_correct, reward.xp_gained)

        return QuizOutcome(
            is_correct=is_correct,
            xp_gained=reward.xp_gained,
            progress=progress,
            explanation=fact.quiz.explanation,
        )

    def statistics(self) -> FactStatistics:
        return self.tracker.statistics()

    def xp_progress(self) -> XPProgress:
        return self.ledger.xp_progress()

    def set_preferred_topics(self, topics: Iterable[str]) -> list[str]:
        return self.ledger.set_preferred_topics(topics)

    def add_bookmark(self, fact: Fact) -> bool:
        added = self.bookmark_set.add(fact)
        if added:
            self.event_log.log("bookmark_added", fact_id=fact.id)
        return added

    def remove_bookmark(self, fact_id: str) -> bool:
        removed = self.bookmark_set.remove(fact_id)
        if removed:
            self.event_log.log("bookmark_removed", fact_id=fact_id)
        return removed

    def is_bookmarked(self, fact_id: str) -> bool:
        return self.bookmark_set.is_bookmarked(fact_id)

    def bookmarks(self) -> list[Fact]:
        return self.bookmark_set.all()

    def share_text(self, fact: Fact) -> str:
        """Plain-text message for sharing a fact."""
        return f"{fact.title}\n\n{fact.blurb}\n\n{SHARE_FOOTER}"

    def close(self) -> None:
        """Close the persistence backend. Writes are already committed."""
        self.kv.close()

    async def aclose(self) -> None:
        """Close the generator's HTTP client, if any, then the backend."""
        aclose = getattr(self.content.generator, "aclose", None)
        if aclose is not None:
            await aclose()
        self.close()
