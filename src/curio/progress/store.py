"""Durable storage for fact progress records."""

import json
import logging

from ..storage.kv import PROGRESS_KEY, KeyValueStore
from .models import UserFactProgress

logger = logging.getLogger(__name__)


class ProgressStore:
    """Loads and saves the full list of progress records as one JSON blob.

    Corrupt or missing data never raises: it is logged and treated as
    an empty history.
    """

    def __init__(self, kv: KeyValueStore, key: str = PROGRESS_KEY) -> None:
        """Initialize the store.

        Args:
            kv: Backend holding the serialized blob.
            key: Key under which the blob is stored.
        """
        self.kv = kv
        self.key = key

    def load(self) -> list[UserFactProgress]:
        """Load all progress records.

        Returns:
            Records in stored order, one per fact id. Empty on missing
            or corrupt data.
        """
        blob = self.kv.get(self.key)
        if blob is None:
            return []

        try:
            data = json.loads(blob)
            if not isinstance(data, list):
                raise ValueError("progress blob is not a list")
            records = [UserFactProgress.from_dict(item) for item in data]
        except (json.JSONDecodeError, KeyError, ValueError, TypeError) as e:
            logger.warning("Discarding corrupt fact progress under %s: %s", self.key, e)
            return []

        return self._dedupe(records)

    def save(self, records: list[UserFactProgress]) -> None:
        """Replace the stored records.

        Output is deterministic, so saving the same list twice leaves the
        same blob.
        """
        blob = json.dumps([r.to_dict() for r in records], sort_keys=True)
        self.kv.set(self.key, blob)

    def _dedupe(self, records: list[UserFactProgress]) -> list[UserFactProgress]:
        """Collapse duplicate fact ids, keeping the most recently viewed."""
        by_id: dict[str, UserFactProgress] = {}
        for record in records:
            existing = by_id.get(record.fact_id)
            if existing is None:
                by_id[record.fact_id] = record
                continue
            logger.warning("Duplicate progress record for fact %s", record.fact_id)
            if record.last_viewed > existing.last_viewed:
                by_id[record.fact_id] = record
        return list(by_id.values())
