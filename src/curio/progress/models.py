"""Data models for per-fact progress."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from ..facts.models import normalize_fact_id


class FactStatus(str, Enum):
    """How far the user has got with a fact."""

    VIEWED = "viewed"
    QUIZZED = "quizzed"
    MASTERED = "mastered"


class MasteryPolicy(str, Enum):
    """Rule deciding when a fact becomes mastered."""

    FIRST_ATTEMPT = "first_attempt"  # correct on the very first attempt
    TWO_CORRECT = "two_correct"  # two correct answers over any number of attempts


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value: Any) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"Invalid timestamp: {value!r}")
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class UserFactProgress:
    """Progress on a single fact.

    Attributes:
        fact_id: Id of the fact this record tracks.
        status: Current status.
        view_count: Number of times the fact was displayed.
        quiz_attempts: Number of quiz answers submitted.
        correct_answers: Number of those that were correct.
        first_viewed: When the record was created. Never changes.
        last_viewed: Last view or quiz attempt.
    """

    fact_id: str
    status: FactStatus
    first_viewed: datetime
    last_viewed: datetime
    view_count: int = 0
    quiz_attempts: int = 0
    correct_answers: int = 0

    def __post_init__(self) -> None:
        if self.view_count < 0 or self.quiz_attempts < 0 or self.correct_answers < 0:
            raise ValueError("Progress counters cannot be negative")
        if self.correct_answers > self.quiz_attempts:
            raise ValueError(
                f"correct_answers ({self.correct_answers}) exceeds "
                f"quiz_attempts ({self.quiz_attempts}) for fact {self.fact_id}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        return {
            "fact_id": self.fact_id,
            "status": self.status.value,
            "view_count": self.view_count,
            "quiz_attempts": self.quiz_attempts,
            "correct_answers": self.correct_answers,
            "first_viewed": self.first_viewed.isoformat(),
            "last_viewed": self.last_viewed.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserFactProgress:
        """Create from a dict produced by to_dict.

        Raises:
            KeyError, ValueError, TypeError: On malformed data.
        """
        return cls(
            fact_id=normalize_fact_id(data["fact_id"]),
            status=FactStatus(data["status"]),
            view_count=int(data.get("view_count", 0)),
            quiz_attempts=int(data.get("quiz_attempts", 0)),
            correct_answers=int(data.get("correct_answers", 0)),
            first_viewed=_parse_timestamp(data["first_viewed"]),
            last_viewed=_parse_timestamp(data["last_viewed"]),
        )


@dataclass(frozen=True)
class FactStatistics:
    """Aggregate numbers over all progress records."""

    total_viewed: int
    total_quizzed: int
    total_mastered: int
    accuracy: float
