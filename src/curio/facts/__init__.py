"""Fact content models and the static seed pool."""

from .models import Difficulty, Fact, Quiz, Source, normalize_fact_id, normalize_topic
from .seed import load_seed_facts

__all__ = [
    "Difficulty",
    "Fact",
    "Quiz",
    "Source",
    "load_seed_facts",
    "normalize_fact_id",
    "normalize_topic",
]
