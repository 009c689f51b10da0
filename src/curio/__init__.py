"""Curio: a daily deck of surprising facts with quizzes and XP."""

from .app import CurioApp, DeckResult, QuizOutcome
from .config import CurioConfig, load_config

__all__ = [
    "CurioApp",
    "CurioConfig",
    "DeckResult",
    "QuizOutcome",
    "load_config",
]

__version__ = "0.1.0"
