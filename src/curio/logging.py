"""JSONL event log for user activity and content generation."""

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


@dataclass
class LogEntry:
    """A single log entry."""

    timestamp: str
    event: str
    profile_id: str | None = None
    fact_id: str | None = None
    topic: str | None = None
    xp_gained: int | None = None
    duration_ms: float | None = None
    error: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict, excluding None values."""
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None and v != {} and v != []}


class JSONLLogger:
    """Logger that writes structured events in JSONL format."""

    def __init__(
        self,
        log_dir: str | Path | None = None,
        filename: str = "events.jsonl",
        max_size_mb: float = 10.0,
    ) -> None:
        if log_dir is None:
            log_dir = Path.home() / ".curio" / "logs"
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.filename = filename
        self.max_size_bytes = int(max_size_mb * 1024 * 1024)
        self._current_profile_id: str | None = None

    @property
    def log_path(self) -> Path:
        """Current log file path."""
        return self.log_dir / self.filename

    def set_profile_id(self, profile_id: str | None) -> None:
        """Set the profile_id attached to all subsequent events."""
        self._current_profile_id = profile_id

    def _rotate_if_needed(self) -> None:
        """Rotate log file if it exceeds max size."""
        if not self.log_path.exists():
            return

        if self.log_path.stat().st_size >= self.max_size_bytes:
            timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
            rotated_name = f"{self.log_path.stem}_{timestamp}.jsonl"
            self.log_path.rename(self.log_dir / rotated_name)

    def _write(self, entry: LogEntry) -> None:
        """Write a log entry to the file."""
        self._rotate_if_needed()

        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry.to_dict(), ensure_ascii=False) + "\n")

    def log(
        self,
        event: str,
        *,
        profile_id: str | None = None,
        fact_id: str | None = None,
        topic: str | None = None,
        xp_gained: int | None = None,
        duration_ms: float | None = None,
        error: str | None = None,
        **extra: Any,
    ) -> None:
        """Log an event."""
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            event=event,
            profile_id=profile_id or self._current_profile_id,
            fact_id=fact_id,
            topic=topic,
            xp_gained=xp_gained,
            duration_ms=duration_ms,
            error=error,
            extra=extra if extra else {},
        )
        self._write(entry)

    def log_deck(
        self,
        fact_ids: list[str],
        *,
        duration_ms: float | None = None,
        notice: str | None = None,
    ) -> None:
        """Log a selected daily deck."""
        self.log(
            "deck_selected",
            duration_ms=duration_ms,
            fact_ids=fact_ids,
            count=len(fact_ids),
            notice=notice,
        )

    def log_quiz(self, fact_id: str, is_correct: bool, xp_gained: int) -> None:
        """Log a quiz answer and the XP it earned."""
        self.log("quiz_attempt", fact_id=fact_id, xp_gained=xp_gained, is_correct=is_correct)

    def log_generation_failure(self, topics: list[str]) -> None:
        """Log topics whose generation failed."""
        for topic in topics:
            self.log("generation_failed", topic=topic)


# Global logger instance
_logger: JSONLLogger | None = None


def get_logger() -> JSONLLogger:
    """Get the global logger instance."""
    global _logger
    if _logger is None:
        _logger = JSONLLogger()
    return _logger


def configure_logger(log_dir: str | Path | None = None, max_size_mb: float = 10.0) -> JSONLLogger:
    """Configure and return the global logger."""
    global _logger
    _logger = JSONLLogger(log_dir=log_dir, max_size_mb=max_size_mb)
    return _logger
