"""Data models for facts."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Difficulty(str, Enum):
    """How hard a fact's quiz is considered to be."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


def normalize_fact_id(value: Any) -> str:
    """Convert a fact id from any source into the internal string form.

    Seed data uses integers, generated facts use strings. Both become
    opaque strings so they compare consistently.

    Raises:
        ValueError: If the value is empty, a bool, or not a str/int.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid fact id: {value!r}")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    raise ValueError(f"Invalid fact id: {value!r}")


def normalize_topic(topic: str) -> str:
    """Topics are compared lowercase and without surrounding whitespace."""
    return topic.strip().lower()


@dataclass(frozen=True)
class Source:
    """A citation backing a fact."""

    title: str
    publication: str
    type: str = "article"
    author: str | None = None
    year: int | None = None
    url: str | None = None
    doi: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "title": self.title,
            "publication": self.publication,
            "type": self.type,
        }
        for key in ("author", "year", "url", "doi"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Source:
        if not isinstance(data, dict):
            raise TypeError(f"Source must be an object, got {type(data).__name__}")
        return cls(
            title=str(data["title"]),
            publication=str(data.get("publication", "")),
            type=str(data.get("type", "article")),
            author=data.get("author"),
            year=data.get("year"),
            url=data.get("url"),
            doi=data.get("doi"),
        )


@dataclass(frozen=True)
class Quiz:
    """A single multiple-choice question attached to a fact.

    Attributes:
        question: The prompt shown to the user.
        options: Ordered answer options.
        correct_answer: Index into options of the right answer.
        explanation: Why the right answer is right.
    """

    question: str
    options: tuple[str, ...]
    correct_answer: int
    explanation: str = ""

    def __post_init__(self) -> None:
        if len(self.options) < 2:
            raise ValueError("A quiz needs at least two options")
        if not 0 <= self.correct_answer < len(self.options):
            raise ValueError(
                f"correct_answer {self.correct_answer} out of range "
                f"for {len(self.options)} options"
            )

    def is_correct(self, choice: int) -> bool:
        """Check whether the chosen option index is the right answer."""
        return choice == self.correct_answer

    def to_dict(self) -> dict[str, Any]:
        return {
            "question": self.question,
            "options": list(self.options),
            "correct_answer": self.correct_answer,
            "explanation": self.explanation,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Quiz:
        if not isinstance(data, dict):
            raise TypeError(f"Quiz must be an object, got {type(data).__name__}")
        options = data["options"]
        if not isinstance(options, list):
            raise ValueError("Quiz options must be a list")
        correct = data.get("correct_answer", data.get("correctAnswer"))
        if isinstance(correct, bool) or not isinstance(correct, int):
            raise ValueError(f"Invalid correct answer index: {correct!r}")
        return cls(
            question=str(data["question"]),
            options=tuple(str(o) for o in options),
            correct_answer=correct,
            explanation=str(data.get("explanation", "")),
        )


@dataclass(frozen=True)
class Fact:
    """An immutable unit of content shown to the user.

    Attributes:
        id: Opaque string identifier, unique across the whole pool.
        title: Headline of the fact.
        blurb: Short teaser shown on the card.
        body: Full text.
        topic: Lowercase topic tag. Topics are open-ended.
        image: Image URI.
        sources: Ordered citations.
        xp_value: XP awarded for a correct quiz answer. Always positive.
        difficulty: easy, medium or hard.
        quiz: Optional multiple-choice question.
        tags: Free-form tags.
        date_added: ISO date the fact entered the pool.
        verification_level: How the fact was verified.
        is_generated: True for facts produced by a generator.
    """

    id: str
    title: str
    blurb: str
    body: str
    topic: str
    image: str = ""
    sources: tuple[Source, ...] = ()
    xp_value: int = 15
    difficulty: Difficulty = Difficulty.MEDIUM
    quiz: Quiz | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)
    date_added: str | None = None
    verification_level: str | None = None
    is_generated: bool = False

    def __post_init__(self) -> None:
        if self.xp_value <= 0:
            raise ValueError(f"xp_value must be positive, got {self.xp_value}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "blurb": self.blurb,
            "body": self.body,
            "topic": self.topic,
            "image": self.image,
            "sources": [s.to_dict() for s in self.sources],
            "xp_value": self.xp_value,
            "difficulty": self.difficulty.value,
            "tags": list(self.tags),
            "is_generated": self.is_generated,
        }
        if self.quiz is not None:
            data["quiz"] = self.quiz.to_dict()
        if self.date_added is not None:
            data["date_added"] = self.date_added
        if self.verification_level is not None:
            data["verification_level"] = self.verification_level
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Fact:
        """Create from a dict, normalizing the id and topic.

        Raises:
            KeyError: If a required field is missing.
            ValueError: If a field has an invalid value.
            TypeError: If data or a nested field is not an object.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Fact must be an object, got {type(data).__name__}")
        quiz_data = data.get("quiz")
        return cls(
            id=normalize_fact_id(data["id"]),
            title=str(data["title"]),
            blurb=str(data["blurb"]),
            body=str(data.get("body") or data["blurb"]),
            topic=normalize_topic(str(data["topic"])),
            image=str(data.get("image", "")),
            sources=tuple(Source.from_dict(s) for s in data.get("sources", [])),
            xp_value=int(data.get("xp_value", data.get("xpValue", 15))),
            difficulty=Difficulty(data.get("difficulty", "medium")),
            quiz=Quiz.from_dict(quiz_data) if quiz_data else None,
            tags=tuple(str(t) for t in data.get("tags", [])),
            date_added=data.get("date_added"),
            verification_level=data.get("verification_level"),
            is_generated=bool(data.get("is_generated", False)),
        )
