"""
Tests for the mirror event log — NDJSON append-only ledger.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from mirrorgate.persistence.event_log import MirrorEventLog


def _entries(path: Path) -> list:
    return [json.loads(line) for line in path.read_text().splitlines()]


class TestMirrorEventLog:
    """Tests for MirrorEventLog."""

    def test_creates_file_and_directory(self, tmp_path):
        path = tmp_path / "logs" / "mirror.ndjson"
        MirrorEventLog(path)
        assert path.exists()
        assert path.read_text() == ""

    def test_emit_fields(self, tmp_path):
        events = MirrorEventLog(tmp_path / "mirror.ndjson")
        event_id = events.emit("mirror_push_started", repo="foo", slave="backup1", session_id="4")

        assert re.match(r"^E-[0-9A-F]{8}$", event_id)
        entry = _entries(events.path)[0]
        assert entry["event_id"] == event_id
        assert entry["type"] == "mirror_push_started"
        assert entry["level"] == "info"
        assert entry["repo"] == "foo"
        assert entry["slave"] == "backup1"
        assert entry["session_id"] == "4"
        assert entry["ts_iso"].endswith("Z")
        assert "details" not in entry

    def test_appends(self, tmp_path):
        path = tmp_path / "mirror.ndjson"
        MirrorEventLog(path).emit_push_started("foo", "backup1", "0", master="gw1")
        MirrorEventLog(path).emit_fatal("foo", "backup1", "0", "FATAL: denied")

        entries = _entries(path)
        assert [e["type"] for e in entries] == ["mirror_push_started", "mirror_fatal"]
        assert entries[1]["level"] == "error"

    def test_write_failure_is_logged_not_raised(self, tmp_path, caplog):
        events = MirrorEventLog(tmp_path / "mirror.ndjson")
        events.path.unlink()
        events.path.mkdir()

        with caplog.at_level(logging.WARNING, logger="mirrorgate.persistence.event_log"):
            event_id = events.emit_fatal("foo", "backup1", "0", "FATAL: denied")

        assert event_id.startswith("E-")
        assert "Event log write failed" in caplog.text

    def test_finished_level_follows_errors(self, tmp_path):
        events = MirrorEventLog(tmp_path / "mirror.ndjson")
        events.emit_push_finished("foo", "backup1", "0", exit_status=0, errors=False, status_saved=False)
        events.emit_push_finished("foo", "backup1", "0", exit_status=128, errors=True, status_saved=True)

        clean, failed = _entries(events.path)
        assert clean["level"] == "info"
        assert failed["level"] == "warning"
        assert failed["details"] == {"exit_status": 128, "errors": True, "status_saved": True}
