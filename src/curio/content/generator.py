"""Fact generation backed by an LLM."""

import json
import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx
from groq import AsyncGroq

from ..facts import Quiz, normalize_topic

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a fact generator that creates interesting, educational and accurate "
    "facts with quizzes. Always respond with valid JSON only, no additional text. "
    "Focus on lesser-known but verifiable facts."
)

GENERATION_PROMPT = """Generate {count} lesser-known, verifiable facts about {topic}.

Return ONLY a JSON array:
[
  {{
    "title": "<headline, max 80 characters>",
    "blurb": "<explanation, 150-250 words>",
    "topic": "{topic}",
    "quiz": {{
      "question": "<multiple choice question about the fact>",
      "options": ["<A>", "<B>", "<C>", "<D>"],
      "correct_answer": <index of the right option>,
      "explanation": "<why the answer is right>"
    }}
  }}
]

Rules:
- Each fact must be different from the others
- The quiz must be answerable from the blurb
"""


class GenerationError(Exception):
    """Raised when the content source cannot produce facts."""


@dataclass(frozen=True)
class RawFact:
    """A fact as produced by a generator, before it joins the pool."""

    title: str
    blurb: str
    topic: str
    quiz: Quiz | None = None


class FactGenerator(Protocol):
    """Something that can produce new facts for a topic."""

    name: str

    async def generate(self, topic: str, count: int) -> list[RawFact]:
        """Generate up to count facts about topic.

        Raises:
            GenerationError: On network or response errors.
        """
        ...


def build_prompt(topic: str, count: int) -> str:
    return GENERATION_PROMPT.format(topic=topic, count=count)


def _strip_code_fence(content: str) -> str:
    text = content.strip()
    if not text.startswith("```"):
        return text
    lines = [line for line in text.split("\n") if not line.startswith("```")]
    return "\n".join(lines)


def _parse_quiz(data: Any) -> Quiz | None:
    if not data:
        return None
    try:
        return Quiz.from_dict(data)
    except (KeyError, ValueError, TypeError, AttributeError) as e:
        logger.warning("Dropping invalid quiz: %s", e)
        return None


def parse_generated_facts(content: str, topic: str) -> list[RawFact]:
    """Parse an LLM response into raw facts.

    The response may be a bare JSON array or an object with a "facts"
    key, optionally wrapped in a markdown code block. Invalid items are
    skipped; an invalid quiz is dropped but the fact is kept.

    Args:
        content: The raw LLM response.
        topic: Topic requested, used when an item has none.

    Returns:
        Parsed facts.

    Raises:
        GenerationError: If the response is not JSON of a usable shape.
    """
    try:
        data = json.loads(_strip_code_fence(content))
    except json.JSONDecodeError as e:
        raise GenerationError(f"Response is not valid JSON: {e}") from e

    if isinstance(data, dict):
        data = data.get("facts")
    if not isinstance(data, list):
        raise GenerationError("Response does not contain a list of facts")

    facts: list[RawFact] = []
    for item in data:
        if not isinstance(item, dict):
            logger.warning("Skipping invalid fact item: %s", item)
            continue
        title = str(item.get("title") or "").strip()
        blurb = str(item.get("blurb") or "").strip()
        if not title or not blurb:
            logger.warning("Skipping fact item without title or blurb: %s", item)
            continue
        facts.append(
            RawFact(
                title=title,
                blurb=blurb,
                topic=normalize_topic(str(item.get("topic") or topic)),
                quiz=_parse_quiz(item.get("quiz")),
            )
        )

    return facts


class GroqFactGenerator:
    """Generates facts through a Groq chat completion."""

    name = "groq"

    def __init__(
        self,
        client: AsyncGroq,
        model: str = "llama-3.1-70b-versatile",
        temperature: float = 0.8,
    ) -> None:
        """Initialize the generator.

        Args:
            client: The Groq client for LLM calls.
            model: The model to use for generation.
            temperature: Sampling temperature; higher gives more varied facts.
        """
        self.client = client
        self.model = model
        self.temperature = temperature

    async def generate(self, topic: str, count: int) -> list[RawFact]:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_prompt(topic, count)},
                ],
                temperature=self.temperature,
            )
        except Exception as e:
            raise GenerationError(f"Groq request failed: {e}") from e

        content = response.choices[0].message.content or ""
        return parse_generated_facts(content, topic)[:count]


class DeepseekFactGenerator:
    """Generates facts through the DeepSeek chat completions HTTP API."""

    name = "deepseek"

    def __init__(
        self,
        api_key: str,
        url: str = "https://api.deepseek.com/v1/chat/completions",
        model: str = "deepseek-chat",
        temperature: float = 0.8,
        max_tokens: int = 2000,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self.url = url
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def generate(self, topic: str, count: int) -> list[RawFact]:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(topic, count)},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        try:
            response = await self._client.post(self.url, json=payload, headers=headers)
            response.raise_for_status()
            content = response.json()["choices"][0]["message"]["content"] or ""
        except httpx.HTTPStatusError as e:
            raise GenerationError(f"DeepSeek API error: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise GenerationError(f"DeepSeek request failed: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise GenerationError(f"Unexpected DeepSeek response: {e}") from e

        return parse_generated_facts(content, topic)[:count]

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
