"""Loader for the bundled static fact pool."""

import json
import logging
from pathlib import Path

from .models import Fact

logger = logging.getLogger(__name__)

SEED_PATH = Path(__file__).parent / "seed_facts.json"


def load_seed_facts(path: Path | None = None) -> list[Fact]:
    """Load the static seed pool.

    Invalid entries are skipped with a warning. A missing or unreadable
    file yields an empty pool.

    Args:
        path: JSON file to read. Uses the bundled seed file if None.

    Returns:
        List of seed facts, in file order, without duplicate ids.
    """
    path = path or SEED_PATH

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.warning("Invalid JSON in seed file %s: %s", path, e)
        return []
    except OSError as e:
        logger.warning("Cannot read seed file %s: %s", path, e)
        return []

    if not isinstance(data, list):
        logger.warning("Seed file %s does not contain a list", path)
        return []

    facts: list[Fact] = []
    seen: set[str] = set()
    for item in data:
        try:
            fact = Fact.from_dict(item)
        except (KeyError, ValueError, TypeError) as e:
            logger.warning("Skipping invalid seed fact: %s", e)
            continue
        if fact.id in seen:
            logger.warning("Skipping duplicate seed fact id: %s", fact.id)
            continue
        seen.add(fact.id)
        facts.append(fact)

    return facts
