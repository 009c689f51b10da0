"""XP, levels and the user profile."""

from .ledger import GamificationLedger
from .models import XP_PER_LEVEL, QuizReward, UserProfile, XPProgress
from .store import ProfileStore

__all__ = [
    "GamificationLedger",
    "ProfileStore",
    "QuizReward",
    "UserProfile",
    "XPProgress",
    "XP_PER_LEVEL",
]
