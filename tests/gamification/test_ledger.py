"""Tests for the gamification ledger and profile store."""

import json

import pytest

from curio.facts import Fact
from curio.gamification import (
    GamificationLedger,
    ProfileStore,
    UserProfile,
    XPProgress,
)
from curio.storage import MemoryKeyValueStore


def make_fact(fact_id: str = "1", xp_value: int = 25) -> Fact:
    return Fact(id=fact_id, title="t", blurb="b", body="b", topic="science", xp_value=xp_value)


@pytest.fixture
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def ledger(kv: MemoryKeyValueStore) -> GamificationLedger:
    return GamificationLedger(ProfileStore(kv))


class TestCompleteQuiz:
    def test_correct_awards_full_xp(self, ledger: GamificationLedger):
        reward = ledger.complete_quiz(make_fact(xp_value=25), True)
        assert reward.xp_gained == 25
        assert reward.is_correct
        assert ledger.profile.total_xp == 25
        assert ledger.is_fact_completed("1")

    def test_wrong_awards_half_rounded_down(self, ledger: GamificationLedger):
        reward = ledger.complete_quiz(make_fact(xp_value=25), False)
        assert reward.xp_gained == 12
        assert not reward.is_correct

    def test_second_completion_awards_nothing(self, ledger: GamificationLedger):
        ledger.complete_quiz(make_fact(), True)
        reward = ledger.complete_quiz(make_fact(), True)
        assert reward.xp_gained == 0
        assert ledger.profile.total_xp == 25
        assert ledger.profile.completed_facts == ["1"]

    def test_completion_survives_reload(self, kv: MemoryKeyValueStore, ledger: GamificationLedger):
        ledger.complete_quiz(make_fact(), True)
        reloaded = GamificationLedger(ProfileStore(kv))
        assert reloaded.profile.total_xp == 25
        assert reloaded.complete_quiz(make_fact(), True).xp_gained == 0


class TestXPProgress:
    @pytest.mark.parametrize(
        "total,level,in_level,percent",
        [(0, 1, 0, 0.0), (99, 1, 99, 99.0), (100, 2, 0, 0.0), (250, 3, 50, 50.0)],
    )
    def test_from_total(self, total: int, level: int, in_level: int, percent: float):
        progress = XPProgress.from_total(total)
        assert progress.current_level == level
        assert progress.xp_in_current_level == in_level
        assert progress.xp_for_next_level == 100
        assert progress.progress_percentage == pytest.approx(percent)

    def test_ledger_progress(self, ledger: GamificationLedger):
        for i in range(5):
            ledger.complete_quiz(make_fact(str(i), xp_value=30), True)
        progress = ledger.xp_progress()
        assert progress.current_level == 2
        assert progress.xp_in_current_level == 50


class TestProfile:
    def test_set_preferred_topics(self, kv: MemoryKeyValueStore, ledger: GamificationLedger):
        topics = ledger.set_preferred_topics(["Space", "space", " Art ", ""])
        assert topics == ["space", "art"]
        assert GamificationLedger(ProfileStore(kv)).profile.preferred_topics == ["space", "art"]

    def test_update_profile(self, ledger: GamificationLedger):
        profile = ledger.update_profile(display_name="Ada")
        assert profile.display_name == "Ada"
        assert profile.avatar == "🧠"

    def test_negative_xp_rejected(self):
        with pytest.raises(ValueError):
            UserProfile(total_xp=-1)


class TestProfileStore:
    def test_missing_gives_default(self, kv: MemoryKeyValueStore):
        profile = ProfileStore(kv, default_id="me").load()
        assert profile.id == "me"
        assert profile.total_xp == 0

    def test_corrupt_gives_default(self, kv: MemoryKeyValueStore):
        kv.set("user-profile", "{not json")
        assert ProfileStore(kv).load() == UserProfile()

    def test_wrong_shape_gives_default(self, kv: MemoryKeyValueStore):
        kv.set("user-profile", json.dumps(["a", "list"]))
        assert ProfileStore(kv).load() == UserProfile()

    def test_numeric_ids_normalized(self, kv: MemoryKeyValueStore):
        kv.set("user-profile", json.dumps({"id": "u", "completed_facts": [1, "1", 2]}))
        assert ProfileStore(kv).load().completed_facts == ["1", "2"]
