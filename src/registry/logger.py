"""JSONL event logger - append-only record of registry activity"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..config import get


class EventLogger:
    """Append-only JSONL event log.

    Every event carries a monotonic 'sequence' field so lines can be
    ordered independently of timestamps. The file is truncated when the
    logger is created unless append=True.
    """

    output_path: Path
    _sequence: int

    def __init__(self, output_file: str | Path | None = None, append: bool = False) -> None:
        """Initialize the event logger.

        Args:
            output_file: Path of the JSONL file (default: logging.output_file)
            append: Keep existing lines instead of starting a fresh log
        """
        resolved_file = output_file or get("logging.output_file") or "registry_events.jsonl"
        self.output_path = Path(resolved_file)
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._sequence = 0
        if append and self.output_path.exists():
            self._sequence = len(self._read_lines())
        else:
            self.output_path.write_text("")

    def log(self, event_type: str, data: dict[str, Any]) -> None:
        """Log an event to the JSONL file."""
        self._sequence += 1
        event: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "sequence": self._sequence,
            "event_type": event_type,
            **data,
        }
        with open(self.output_path, "a") as f:
            f.write(json.dumps(event) + "\n")

    def log_rejection(
        self,
        operation: str,
        invoker_id: str | None,
        error: dict[str, object],
        content_id: Any = None,
    ) -> None:
        """Log an operation that failed validation or authorization."""
        data: dict[str, Any] = {
            "operation": operation,
            "invoker_id": invoker_id,
            "code": error.get("code"),
        }
        if content_id is not None:
            data["content_id"] = content_id
        self.log("operation_rejected", data)

    def _read_lines(self) -> list[str]:
        return [line for line in self.output_path.read_text().split("\n") if line]

    def read_recent(self, n: int | None = None) -> list[dict[str, Any]]:
        """Read the last N events from the log.

        N defaults to logging.default_recent from config.
        """
        if n is None:
            default_recent = get("logging.default_recent")
            n = default_recent if isinstance(default_recent, int) else 50
        if n <= 0 or not self.output_path.exists():
            return []
        lines = self._read_lines()
        recent = lines[-n:] if len(lines) > n else lines
        return [json.loads(line) for line in recent]

    @property
    def sequence(self) -> int:
        """Number of events written so far."""
        return self._sequence
