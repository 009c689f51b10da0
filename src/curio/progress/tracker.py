"""Business rules for per-fact progress."""

from collections.abc import Callable
from datetime import datetime

from .models import (
    FactStatistics,
    FactStatus,
    MasteryPolicy,
    UserFactProgress,
    utc_now,
)
from .store import ProgressStore


class ProgressTracker:
    """Tracks views and quiz attempts, one record per fact.

    Records are loaded once from the store and kept in memory. Every
    mutation is written back before the method returns, so a read
    straight after a mutation always sees the new state.
    """

    def __init__(
        self,
        store: ProgressStore,
        policy: MasteryPolicy = MasteryPolicy.FIRST_ATTEMPT,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the tracker and load existing records.

        Args:
            store: Where records are persisted.
            policy: Rule for promoting a fact to mastered.
            clock: Returns the current time (timezone-aware).
        """
        self.store = store
        self.policy = policy
        self._clock = clock
        self._records: dict[str, UserFactProgress] = {
            r.fact_id: r for r in store.load()
        }

    def get(self, fact_id: str) -> UserFactProgress | None:
        """Get the progress record for a fact, if any."""
        return self._records.get(fact_id)

    def records(self) -> list[UserFactProgress]:
        """All progress records, in creation order."""
        return list(self._records.values())

    def history(self) -> list[UserFactProgress]:
        """Records ordered by most recent interaction first."""
        return sorted(self._records.values(), key=lambda r: r.last_viewed, reverse=True)

    def viewed_fact_ids(self) -> set[str]:
        """Ids of every fact the user has interacted with."""
        return set(self._records)

    def mark_viewed(self, fact_id: str) -> UserFactProgress:
        """Record that a fact was displayed.

        Viewing never changes the status of an existing record.

        Returns:
            The updated record.
        """
        now = self._clock()
        record = self._records.get(fact_id)

        if record is None:
            record = UserFactProgress(
                fact_id=fact_id,
                status=FactStatus.VIEWED,
                view_count=1,
                first_viewed=now,
                last_viewed=now,
            )
            self._records[fact_id] = record
        else:
            record.view_count += 1
            record.last_viewed = now

        self._save()
        return record

    def mark_quiz_attempt(self, fact_id: str, is_correct: bool) -> UserFactProgress:
        """Record an answer to a fact's quiz.

        With the first-attempt policy, the first attempt decides the
        status for good: correct means mastered, wrong means quizzed.

        Returns:
            The updated record.
        """
        now = self._clock()
        record = self._records.get(fact_id)

        if record is None:
            # answering a quiz implies the fact was on screen
            record = UserFactProgress(
                fact_id=fact_id,
                status=FactStatus.VIEWED,
                view_count=1,
                first_viewed=now,
                last_viewed=now,
            )
            self._records[fact_id] = record

        first_attempt = record.quiz_attempts == 0
        record.quiz_attempts += 1
        if is_correct:
            record.correct_answers += 1
        record.last_viewed = now
        record.status = self._next_status(record, first_attempt, is_correct)

        self._save()
        return record

    def statistics(self) -> FactStatistics:
        """Aggregate counts and overall quiz accuracy (percent)."""
        records = self._records.values()
        total_attempts = sum(r.quiz_attempts for r in records)
        total_correct = sum(r.correct_answers for r in records)

        return FactStatistics(
            total_viewed=len(self._records),
            total_quizzed=sum(1 for r in records if r.quiz_attempts > 0),
            total_mastered=sum(1 for r in records if r.status == FactStatus.MASTERED),
            accuracy=(total_correct / total_attempts) * 100 if total_attempts else 0.0,
        )

    def _next_status(
        self, record: UserFactProgress, first_attempt: bool, is_correct: bool
    ) -> FactStatus:
        if self.policy == MasteryPolicy.TWO_CORRECT:
            if record.correct_answers >= 2:
                return FactStatus.MASTERED
            if first_attempt:
                return FactStatus.QUIZZED
            return record.status

        if first_attempt:
            return FactStatus.MASTERED if is_correct else FactStatus.QUIZZED
        return record.status

    def _save(self) -> None:
        self.store.save(list(self._records.values()))
