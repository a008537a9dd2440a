"""
Status Models — Pydantic schemas for persisted mirror push failures.

A status record file holds one line per captured line of transfer
output, each prefixed with a timestamp and the transfer session id:

    2026-10-17.14:02:11 0 fatal: unable to access 'backup1:foo/'

The session id is always a single token (see ExecutionContext.from_env).
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class StatusLine(BaseModel):
    """One captured line of transfer output."""

    timestamp: Optional[str] = None
    session_id: Optional[str] = None
    text: str

    @classmethod
    def parse(cls, raw: str) -> "StatusLine":
        """Split a persisted line back into its prefix and original text."""
        parts = raw.split(" ", 2)
        if len(parts) < 2:
            return cls(text=raw)
        return cls(
            timestamp=parts[0],
            session_id=parts[1],
            text=parts[2] if len(parts) == 3 else "",
        )


class StatusRecord(BaseModel):
    """Last known failed mirror push for one (repo, slave) pair."""

    repo: str
    slave: str
    path: str
    lines: List[StatusLine] = Field(default_factory=list)

    @classmethod
    def from_content(cls, repo: str, slave: str, path: str, content: str) -> "StatusRecord":
        return cls(
            repo=repo,
            slave=slave,
            path=path,
            lines=[StatusLine.parse(raw) for raw in content.splitlines()],
        )

    @property
    def output(self) -> List[str]:
        """The captured transfer output with prefixes removed."""
        return [line.text for line in self.lines]
