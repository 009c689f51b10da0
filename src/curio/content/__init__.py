"""Candidate fact supply: static pool, generators and cache."""

from .cache import GeneratedFactCache
from .generator import (
    DeepseekFactGenerator,
    FactGenerator,
    GenerationError,
    GroqFactGenerator,
    RawFact,
    parse_generated_facts,
)
from .source import DEFAULT_TOPICS, ContentSource

__all__ = [
    "ContentSource",
    "DEFAULT_TOPICS",
    "DeepseekFactGenerator",
    "FactGenerator",
    "GeneratedFactCache",
    "GenerationError",
    "GroqFactGenerator",
    "RawFact",
    "parse_generated_facts",
]
