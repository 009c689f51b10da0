"""Tests for fact models and the seed pool."""

import json
from pathlib import Path

import pytest

from curio.facts import (
    Difficulty,
    Fact,
    Quiz,
    Source,
    load_seed_facts,
    normalize_fact_id,
)


def make_fact_dict(**overrides) -> dict:
    data = {
        "id": 1,
        "title": "Honey Never Spoils",
        "blurb": "Edible after 3,000 years.",
        "body": "Long body.",
        "topic": "Science",
        "xp_value": 15,
        "difficulty": "medium",
        "quiz": {
            "question": "How long does honey last?",
            "options": ["1 year", "Indefinitely"],
            "correct_answer": 1,
            "explanation": "Low moisture.",
        },
    }
    data.update(overrides)
    return data


class TestNormalizeFactId:
    def test_int_becomes_string(self):
        assert normalize_fact_id(7) == "7"

    def test_string_is_stripped(self):
        assert normalize_fact_id("  space-abc ") == "space-abc"

    def test_int_and_string_forms_compare_equal(self):
        assert normalize_fact_id(7) == normalize_fact_id("7")

    @pytest.mark.parametrize("value", [True, None, "", "   ", 1.5, []])
    def test_invalid_ids_rejected(self, value):
        with pytest.raises(ValueError):
            normalize_fact_id(value)


class TestQuiz:
    def test_is_correct(self):
        quiz = Quiz(question="q", options=("a", "b", "c"), correct_answer=2)
        assert quiz.is_correct(2)
        assert not quiz.is_correct(0)

    def test_index_out_of_range_rejected(self):
        with pytest.raises(ValueError):
            Quiz(question="q", options=("a", "b"), correct_answer=2)

    def test_single_option_rejected(self):
        with pytest.raises(ValueError):
            Quiz(question="q", options=("a",), correct_answer=0)

    def test_from_dict_accepts_camel_case_index(self):
        quiz = Quiz.from_dict(
            {"question": "q", "options": ["a", "b"], "correctAnswer": 1}
        )
        assert quiz.correct_answer == 1

    def test_from_dict_rejects_bool_index(self):
        with pytest.raises(ValueError):
            Quiz.from_dict({"question": "q", "options": ["a", "b"], "correct_answer": True})


class TestFact:
    def test_from_dict_normalizes_id_and_topic(self):
        fact = Fact.from_dict(make_fact_dict())
        assert fact.id == "1"
        assert fact.topic == "science"
        assert fact.difficulty == Difficulty.MEDIUM
        assert fact.quiz is not None
        assert fact.is_generated is False

    def test_body_defaults_to_blurb(self):
        data = make_fact_dict()
        del data["body"]
        fact = Fact.from_dict(data)
        assert fact.body == fact.blurb

    def test_non_positive_xp_rejected(self):
        with pytest.raises(ValueError):
            Fact(id="1", title="t", blurb="b", body="b", topic="science", xp_value=0)

    def test_missing_title_raises_key_error(self):
        data = make_fact_dict()
        del data["title"]
        with pytest.raises(KeyError):
            Fact.from_dict(data)

    def test_to_dict_from_dict_preserves_snapshot(self):
        fact = Fact.from_dict(
            make_fact_dict(
                sources=[{"title": "Paper", "publication": "Journal", "year": 2019, "type": "journal"}],
                tags=["chemistry"],
            )
        )
        restored = Fact.from_dict(json.loads(json.dumps(fact.to_dict())))
        assert restored == fact
        assert restored.sources == (
            Source(title="Paper", publication="Journal", type="journal", year=2019),
        )

    @pytest.mark.parametrize("data", [1, "x", None, ["a"]])
    def test_from_dict_rejects_non_objects(self, data):
        with pytest.raises(TypeError):
            Fact.from_dict(data)

    def test_from_dict_rejects_non_object_quiz_and_source(self):
        with pytest.raises(TypeError):
            Fact.from_dict(make_fact_dict(quiz="yes"))
        with pytest.raises(TypeError):
            Fact.from_dict(make_fact_dict(sources=["Paper"]))

    def test_facts_are_frozen(self):
        fact = Fact.from_dict(make_fact_dict())
        with pytest.raises(AttributeError):
            fact.title = "changed"


class TestLoadSeedFacts:
    def test_bundled_seed_pool(self):
        facts = load_seed_facts()
        assert len(facts) == 10
        assert len({f.id for f in facts}) == 10
        assert all(f.quiz is not None for f in facts)
        assert {"science", "history", "space"} <= {f.topic for f in facts}

    def test_missing_file_returns_empty(self, tmp_path: Path):
        assert load_seed_facts(tmp_path / "nope.json") == []

    def test_invalid_json_returns_empty(self, tmp_path: Path):
        path = tmp_path / "seed.json"
        path.write_text("{not json")
        assert load_seed_facts(path) == []

    def test_skips_invalid_and_duplicate_entries(self, tmp_path: Path):
        path = tmp_path / "seed.json"
        path.write_text(
            json.dumps(
                [
                    make_fact_dict(id=1),
                    make_fact_dict(id="1"),
                    {"id": 2, "title": "no blurb"},
                    7,
                    "not a fact",
                    make_fact_dict(id=3, topic="history"),
                ]
            )
        )
        facts = load_seed_facts(path)
        assert [f.id for f in facts] == ["1", "3"]
