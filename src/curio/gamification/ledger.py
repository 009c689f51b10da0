"""XP awards and level progress."""

from collections.abc import Iterable

from ..facts import Fact, normalize_topic
from .models import QuizReward, UserProfile, XPProgress
from .store import ProfileStore


class GamificationLedger:
    """Converts quiz outcomes into XP and keeps the profile persisted.

    Each fact can earn XP once. A wrong answer still earns half the
    fact's value, rounded down.
    """

    def __init__(self, store: ProfileStore) -> None:
        self.store = store
        self._profile = store.load()

    @property
    def profile(self) -> UserProfile:
        return self._profile

    def is_fact_completed(self, fact_id: str) -> bool:
        return fact_id in self._profile.completed_facts

    def complete_quiz(self, fact: Fact, is_correct: bool) -> QuizReward:
        """Award XP for a quiz answer.

        Returns:
            The reward. Zero XP if the fact was already completed.
        """
        if self.is_fact_completed(fact.id):
            return QuizReward(xp_gained=0, is_correct=is_correct)

        xp_gained = fact.xp_value if is_correct else fact.xp_value // 2
        self._profile.completed_facts.append(fact.id)
        self._profile.total_xp += xp_gained
        self.store.save(self._profile)

        return QuizReward(xp_gained=xp_gained, is_correct=is_correct)

    def xp_progress(self) -> XPProgress:
        return XPProgress.from_total(self._profile.total_xp)

    def set_preferred_topics(self, topics: Iterable[str]) -> list[str]:
        """Replace the preferred topics, keeping order and dropping repeats."""
        normalized = [t for t in dict.fromkeys(normalize_topic(t) for t in topics) if t]
        self._profile.preferred_topics = normalized
        self.store.save(self._profile)
        return list(normalized)

    def update_profile(
        self,
        display_name: str | None = None,
        avatar: str | None = None,
    ) -> UserProfile:
        if display_name is not None:
            self._profile.display_name = display_name
        if avatar is not None:
            self._profile.avatar = avatar
        self.store.save(self._profile)
        return self._profile
