"""Durable storage for the user profile."""

import json
import logging

from ..storage.kv import PROFILE_KEY, KeyValueStore
from .models import UserProfile

logger = logging.getLogger(__name__)


class ProfileStore:
    """Loads and saves the profile as one JSON blob."""

    def __init__(
        self,
        kv: KeyValueStore,
        key: str = PROFILE_KEY,
        default_id: str = "user-1",
    ) -> None:
        self.kv = kv
        self.key = key
        self.default_id = default_id

    def load(self) -> UserProfile:
        """Load the profile, or a fresh default one if missing or corrupt."""
        blob = self.kv.get(self.key)
        if blob is None:
            return UserProfile(id=self.default_id)

        try:
            data = json.loads(blob)
            if not isinstance(data, dict):
                raise ValueError("profile blob is not an object")
            return UserProfile.from_dict(data)
        except (json.JSONDecodeError, KeyError, ValueError, TypeError) as e:
            logger.warning("Discarding corrupt profile under %s: %s", self.key, e)
            return UserProfile(id=self.default_id)

    def save(self, profile: UserProfile) -> None:
        self.kv.set(self.key, json.dumps(profile.to_dict(), sort_keys=True))
