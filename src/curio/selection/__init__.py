"""Daily fact selection."""

from .selector import (
    DEFAULT_COOLDOWN,
    DEFAULT_TARGET_COUNT,
    ExclusionPolicy,
    FactSelector,
    select_daily_facts,
)

__all__ = [
    "DEFAULT_COOLDOWN",
    "DEFAULT_TARGET_COUNT",
    "ExclusionPolicy",
    "FactSelector",
    "select_daily_facts",
]
