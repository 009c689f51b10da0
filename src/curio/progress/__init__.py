"""Per-fact progress tracking."""

from .models import FactStatistics, FactStatus, MasteryPolicy, UserFactProgress, utc_now
from .store import ProgressStore
from .tracker import ProgressTracker

__all__ = [
    "FactStatistics",
    "FactStatus",
    "MasteryPolicy",
    "ProgressStore",
    "ProgressTracker",
    "UserFactProgress",
    "utc_now",
]
