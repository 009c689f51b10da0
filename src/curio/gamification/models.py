"""Data models for the user profile and XP."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..facts import normalize_fact_id, normalize_topic

XP_PER_LEVEL = 100


@dataclass
class UserProfile:
    """The local user's profile.

    Attributes:
        id: Profile identifier.
        display_name: Name shown in the UI.
        avatar: Emoji or image reference.
        total_xp: Accumulated XP. Never decreases.
        completed_facts: Fact ids that already earned XP, in award order.
        preferred_topics: Topics the user picked, in order.
    """

    id: str = "user-1"
    display_name: str = "CurioExplorer"
    avatar: str = "🧠"
    total_xp: int = 0
    completed_facts: list[str] = field(default_factory=list)
    preferred_topics: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.total_xp < 0:
            raise ValueError("total_xp cannot be negative")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "avatar": self.avatar,
            "total_xp": self.total_xp,
            "completed_facts": list(self.completed_facts),
            "preferred_topics": list(self.preferred_topics),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserProfile:
        """Create from a dict, normalizing ids and topics.

        Raises:
            KeyError, ValueError, TypeError: On malformed data.
        """
        completed = [normalize_fact_id(v) for v in data.get("completed_facts", [])]
        topics = [normalize_topic(str(t)) for t in data.get("preferred_topics", [])]
        return cls(
            id=str(data["id"]),
            display_name=str(data.get("display_name", "CurioExplorer")),
            avatar=str(data.get("avatar", "🧠")),
            total_xp=int(data.get("total_xp", 0)),
            completed_facts=list(dict.fromkeys(completed)),
            preferred_topics=[t for t in dict.fromkeys(topics) if t],
        )


@dataclass(frozen=True)
class QuizReward:
    """Outcome of completing a quiz."""

    xp_gained: int
    is_correct: bool


@dataclass(frozen=True)
class XPProgress:
    """Level progress derived from total XP."""

    current_level: int
    xp_in_current_level: int
    xp_for_next_level: int
    progress_percentage: float

    @classmethod
    def from_total(cls, total_xp: int) -> XPProgress:
        xp_in_level = total_xp % XP_PER_LEVEL
        return cls(
            current_level=total_xp // XP_PER_LEVEL + 1,
            xp_in_current_level=xp_in_level,
            xp_for_next_level=XP_PER_LEVEL,
            progress_percentage=xp_in_level / XP_PER_LEVEL * 100,
        )
