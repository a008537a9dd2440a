"""
Mirror Event Log — Append-only NDJSON ledger of mirror pushes.

Each line is one JSON object (newline-delimited JSON).
Events are never edited, only appended. Lines of transfer output that
carry a FATAL marker are the only output recorded here; everything else
goes to the debug trace.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional
from uuid import uuid4

logger = logging.getLogger(__name__)


class MirrorEventLog:
    """
    Append-only NDJSON mirror event writer.

    Usage:
        events = MirrorEventLog(Path("logs/mirror.ndjson"))
        events.emit("mirror_push_started", repo="foo", slave="backup1", session_id="0")
    """

    def __init__(self, path: Path):
        """Initialize the event log writer."""
        self.path = path
        self._ensure_exists()

    def _ensure_exists(self) -> None:
        """Ensure the log file and directory exist."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self.path.touch()

    def emit(
        self,
        event_type: str,
        repo: str,
        slave: str,
        session_id: str,
        level: str = "info",
        details: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Emit a mirror event.

        Args:
            event_type: Type of event (mirror_push_started, mirror_fatal, ...)
            repo: Repository being mirrored
            slave: Target host
            session_id: Transfer session id of this invocation
            level: Log level (info, warning, error)
            details: Additional event details

        Returns:
            Generated event_id
        """
        event_id = f"E-{uuid4().hex[:8].upper()}"
        now = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

        entry: Dict[str, Any] = {
            "ts_iso": now,
            "event_id": event_id,
            "type": event_type,
            "level": level,
            "repo": repo,
            "slave": slave,
            "session_id": session_id,
        }
        if details is not None:
            entry["details"] = details

        # Best effort: a full or unwritable ledger never stops a push
        try:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(entry) + "\n")
        except OSError as e:
            logger.warning(f"Event log write failed ({event_type} {event_id}): {e}")

        return event_id

    def emit_push_started(self, repo: str, slave: str, session_id: str, master: str) -> str:
        """Emit a mirror_push_started event."""
        return self.emit(
            "mirror_push_started",
            repo=repo,
            slave=slave,
            session_id=session_id,
            details={"master": master},
        )

    def emit_fatal(self, repo: str, slave: str, session_id: str, line: str) -> str:
        """Emit a mirror_fatal problem entry for one line of output."""
        return self.emit(
            "mirror_fatal",
            repo=repo,
            slave=slave,
            session_id=session_id,
            level="error",
            details={"line": line},
        )

    def emit_push_finished(
        self,
        repo: str,
        slave: str,
        session_id: str,
        exit_status: int,
        errors: bool,
        status_saved: bool,
    ) -> str:
        """Emit a mirror_push_finished event."""
        return self.emit(
            "mirror_push_finished",
            repo=repo,
            slave=slave,
            session_id=session_id,
            level="warning" if errors else "info",
            details={
                "exit_status": exit_status,
                "errors": errors,
                "status_saved": status_saved,
            },
        )
