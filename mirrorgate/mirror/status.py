"""
Mirror Status — Persist the outcome of the last push to each slave.

A status record is a file inside the repository directory:

    <repo_base>/<repo>.git/gl-slave-<host>.status

It exists only while the last push to that host ended fatally. Its
content is the captured transfer output, each line prefixed with a
timestamp and the transfer session id.

There is no locking. Two concurrent pushes of the same repo to the same
slave race on the file and the last writer wins; callers schedule pushes
so that this does not happen. Writes go through a temp file and a rename
so a reader sees a whole record or none.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

STATUS_PREFIX = "gl-slave-"
STATUS_SUFFIX = ".status"
WILDCARD = "*"
TIMESTAMP_FORMAT = "%Y-%m-%d.%H:%M:%S"


def status_file_name(host: str) -> str:
    return f"{STATUS_PREFIX}{host}{STATUS_SUFFIX}"


def host_from_file_name(name: str) -> Optional[str]:
    """Recover the slave host from a status file name."""
    if not (name.startswith(STATUS_PREFIX) and name.endswith(STATUS_SUFFIX)):
        return None
    host = name[len(STATUS_PREFIX):-len(STATUS_SUFFIX)]
    return host or None


def is_fatal(lines: Sequence[str]) -> bool:
    """True if the captured output mentions 'fatal' in any case."""
    return "fatal" in "\n".join(lines).lower()


def prefix_lines(lines: Sequence[str], session_id: str, now: Optional[datetime] = None) -> str:
    """Prefix every line with a timestamp and the session id."""
    ts = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    return "".join(f"{ts} {session_id} {line}\n" for line in lines)


class StatusStore:
    """Status record files for all repositories under one storage root."""

    def __init__(self, repo_base: Path):
        self.repo_base = repo_base

    def repo_dir(self, repo: str) -> Path:
        return self.repo_base / f"{repo}.git"

    def path_for(self, repo: str, host: str) -> Path:
        return self.repo_dir(repo) / status_file_name(host)

    def record(
        self,
        repo: str,
        host: str,
        lines: Sequence[str],
        session_id: str = "0",
        now: Optional[datetime] = None,
    ) -> bool:
        """
        Persist or clear the status of (repo, host) after one push attempt.

        Returns True if a status record was written.
        """
        path = self.path_for(repo, host)

        if is_fatal(lines):
            self._write(path, prefix_lines(lines, session_id, now))
            logger.warning(f"[mirror-status] {repo} → {host}: push failed, status saved")
            return True

        self.clear(repo, host)
        return False

    def clear(self, repo: str, host: str) -> None:
        """Remove the status record of (repo, host); absence is fine."""
        path = self.path_for(repo, host)
        try:
            path.unlink()
            logger.info(f"[mirror-status] {repo} → {host}: cleared previous failure")
        except FileNotFoundError:
            pass

    def read(self, repo: str, host: str) -> Optional[str]:
        """Content of the status record, or None if there is none."""
        try:
            return self.path_for(repo, host).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def hosts(self, repo: str, pattern: str = WILDCARD) -> List[str]:
        """
        Slaves of `repo` with a status record, in file name order.

        `pattern` is either WILDCARD or an exact host name.
        """
        if pattern != WILDCARD:
            return [pattern] if self.path_for(repo, pattern).is_file() else []

        names = sorted(
            p.name for p in self.repo_dir(repo).glob(status_file_name(WILDCARD)) if p.is_file()
        )
        return [h for h in (host_from_file_name(n) for n in names) if h]

    def failed_repos(self) -> List[str]:
        """Every repository owning at least one status record."""
        if not self.repo_base.is_dir():
            return []

        repos = set()
        for path in self.repo_base.rglob(status_file_name(WILDCARD)):
            repo_dir = path.parent
            if not path.is_file() or not repo_dir.name.endswith(".git"):
                continue
            rel = repo_dir.relative_to(self.repo_base).as_posix()
            repos.add(rel[: -len(".git")])
        return sorted(repos)

    def _write(self, path: Path, content: str) -> None:
        # Per-process temp name so concurrent writers never share one
        temp_path = path.with_name(f"{path.name}.{os.getpid()}.tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as f:
                f.write(content)
            temp_path.replace(path)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise
