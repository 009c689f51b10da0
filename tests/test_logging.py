"""Tests for JSONL logging."""

import json
import tempfile
from pathlib import Path

import pytest

from curio.logging import JSONLLogger, LogEntry


@pytest.fixture
def temp_log_dir():
    """Create a temporary directory for logs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def logger(temp_log_dir: Path) -> JSONLLogger:
    return JSONLLogger(log_dir=temp_log_dir)


def read_entries(logger: JSONLLogger) -> list[dict]:
    with open(logger.log_path) as f:
        return [json.loads(line) for line in f]


def test_log_entry_to_dict():
    """Test LogEntry excludes None values."""
    entry = LogEntry(timestamp="2024-01-01T00:00:00Z", event="test")
    data = entry.to_dict()

    assert "timestamp" in data
    assert "event" in data
    assert "profile_id" not in data  # None excluded
    assert "extra" not in data  # Empty dict excluded


def test_log_creates_file(logger: JSONLLogger):
    """Test that logging creates the log file."""
    logger.log("test_event")

    assert logger.log_path.exists()


def test_log_writes_jsonl(logger: JSONLLogger):
    """Test that logs are written in JSONL format."""
    logger.log("fact_viewed", fact_id="1")
    logger.log("fact_viewed", fact_id="2", topic="space")

    entries = read_entries(logger)

    assert len(entries) == 2
    assert entries[0]["event"] == "fact_viewed"
    assert entries[0]["fact_id"] == "1"
    assert entries[1]["topic"] == "space"


def test_log_deck(logger: JSONLLogger):
    """Test logging a selected deck."""
    logger.log_deck(["1", "2", "3"], duration_ms=12.5)

    entry = read_entries(logger)[0]

    assert entry["event"] == "deck_selected"
    assert entry["duration_ms"] == 12.5
    assert entry["extra"]["fact_ids"] == ["1", "2", "3"]
    assert entry["extra"]["count"] == 3


def test_log_quiz(logger: JSONLLogger):
    """Test logging a quiz answer."""
    logger.log_quiz("7", is_correct=False, xp_gained=7)

    entry = read_entries(logger)[0]

    assert entry["event"] == "quiz_attempt"
    assert entry["fact_id"] == "7"
    assert entry["xp_gained"] == 7
    assert entry["extra"]["is_correct"] is False


def test_log_generation_failure(logger: JSONLLogger):
    """Test one entry per failed topic."""
    logger.log_generation_failure(["space", "art"])

    entries = read_entries(logger)

    assert [e["topic"] for e in entries] == ["space", "art"]
    assert all(e["event"] == "generation_failed" for e in entries)


def test_set_profile_id(logger: JSONLLogger):
    """Test that set_profile_id applies to subsequent logs."""
    logger.set_profile_id("kid")
    logger.log("event1")
    logger.log("event2", profile_id="guest")

    entries = read_entries(logger)

    assert entries[0]["profile_id"] == "kid"
    assert entries[1]["profile_id"] == "guest"


def test_rotation(temp_log_dir: Path):
    """Test log rotation when max size is exceeded."""
    logger = JSONLLogger(log_dir=temp_log_dir, max_size_mb=0.001)  # ~1KB

    # Write enough to trigger rotation
    for i in range(100):
        logger.log(f"event_{i}", data="x" * 100)

    log_files = list(temp_log_dir.glob("events*.jsonl"))
    assert len(log_files) >= 2
