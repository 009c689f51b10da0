"""Tests for CLI."""

import random
from pathlib import Path

import pytest

from curio.app import CurioApp
from curio.cli import CLI
from curio.config import CurioConfig
from curio.content import ContentSource
from curio.facts import Fact, Quiz
from curio.logging import JSONLLogger
from curio.storage import MemoryKeyValueStore


def make_fact(fact_id: str, topic: str) -> Fact:
    quiz = Quiz(question=f"Question {fact_id}?", options=("yes", "no"), correct_answer=0)
    return Fact(id=fact_id, title=f"Title {fact_id}", blurb="blurb", body=f"Body {fact_id}", topic=topic, quiz=quiz)


@pytest.fixture
def cli(tmp_path: Path) -> CLI:
    pool = [make_fact("1", "science"), make_fact("2", "history"), make_fact("3", "art")]
    app = CurioApp(
        config=CurioConfig(data_dir=tmp_path),
        kv=MemoryKeyValueStore(),
        content=ContentSource(pool),
        rng=random.Random(0),
        event_log=JSONLLogger(log_dir=tmp_path / "logs"),
    )
    return CLI(app)


@pytest.mark.asyncio
async def test_handle_command_exit(cli: CLI) -> None:
    """Test exit commands return False."""
    assert await cli._handle_command("/exit") is False
    assert await cli._handle_command("/quit") is False


@pytest.mark.asyncio
async def test_handle_command_help(cli: CLI) -> None:
    """Test help command returns True."""
    assert await cli._handle_command("/help") is True


@pytest.mark.asyncio
async def test_unknown_command_continues(cli: CLI) -> None:
    assert await cli._handle_command("/dance") is True


@pytest.mark.asyncio
async def test_today_fills_deck(cli: CLI, capsys) -> None:
    await cli._handle_command("/today")

    output = capsys.readouterr().out
    assert len(cli.app.deck) == 3
    for fact in cli.app.deck:
        assert fact.title in output


@pytest.mark.asyncio
async def test_read_marks_viewed(cli: CLI, capsys) -> None:
    await cli._handle_command("/today")
    fact = cli.app.deck[0]

    await cli._handle_command("/read 1")

    assert f"Body {fact.id}" in capsys.readouterr().out
    assert cli.app.tracker.get(fact.id).view_count == 1


@pytest.mark.asyncio
async def test_read_without_deck(cli: CLI, capsys) -> None:
    await cli._handle_command("/read 1")
    assert "No such fact" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_read_bad_number(cli: CLI, capsys) -> None:
    await cli._handle_command("/read one")
    assert "Expected a fact number" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_quiz_correct(cli: CLI, capsys, monkeypatch) -> None:
    await cli._handle_command("/today")
    monkeypatch.setattr("builtins.input", lambda prompt="": "1")

    await cli._handle_command("/quiz 2")

    assert "Correct! +15 XP" in capsys.readouterr().out
    assert cli.app.ledger.profile.total_xp == 15


@pytest.mark.asyncio
async def test_quiz_wrong(cli: CLI, capsys, monkeypatch) -> None:
    await cli._handle_command("/today")
    monkeypatch.setattr("builtins.input", lambda prompt="": "2")

    await cli._handle_command("/quiz 1")

    assert "Not quite. +7 XP" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_bookmark_toggles(cli: CLI) -> None:
    await cli._handle_command("/today")
    fact = cli.app.deck[0]

    await cli._handle_command("/bookmark 1")
    assert cli.app.is_bookmarked(fact.id)

    await cli._handle_command("/bookmark 1")
    assert not cli.app.is_bookmarked(fact.id)


@pytest.mark.asyncio
async def test_share(cli: CLI, capsys) -> None:
    await cli._handle_command("/today")
    await cli._handle_command("/share 3")
    assert "CurioDaily" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_topics_set(cli: CLI) -> None:
    await cli._handle_command("/topics Space, art")
    assert cli.app.preferred_topics == ["space", "art"]


@pytest.mark.asyncio
async def test_stats(cli: CLI, capsys) -> None:
    await cli._handle_command("/stats")
    assert "Level 1" in capsys.readouterr().out
