"""
Mirror Report — Render persisted push failures for an operator.

For one repository the report shows each failed slave's saved output
between separator lines. The global sweep only names the repositories
that have any failure, one per line, for other tooling to post-process.
"""

from __future__ import annotations

from typing import Iterator, List

from ..models.status import StatusRecord
from .status import WILDCARD, StatusStore

SEPARATOR = "----------"
ALL = "all"


def host_pattern(slave: str) -> str:
    """Map the `all` argument onto the wildcard pattern."""
    return WILDCARD if slave == ALL else slave


def render_block(repo: str, host: str, content: str) -> str:
    """One report block for a failed (repo, host) pair."""
    if content and not content.endswith("\n"):
        content += "\n"
    return (
        f"{SEPARATOR}\n"
        f"WARNING: previous mirror push of repo '{repo}' to host '{host}' failed, status is:\n"
        f"{content}"
        f"{SEPARATOR}\n"
    )


class StatusReporter:
    """Read side of the status records."""

    def __init__(self, store: StatusStore):
        self.store = store

    def report(self, repo: str, pattern: str = WILDCARD) -> Iterator[str]:
        """Yield a rendered block per failed slave, in host order."""
        for host in self.store.hosts(repo, pattern):
            content = self.store.read(repo, host)
            # Record vanished since it was listed
            if content is None:
                continue
            yield render_block(repo, host, content)

    def records(self, repo: str, pattern: str = WILDCARD) -> List[StatusRecord]:
        """Parsed status records of `repo`, in host order."""
        records = []
        for host in self.store.hosts(repo, pattern):
            content = self.store.read(repo, host)
            if content is None:
                continue
            records.append(
                StatusRecord.from_content(
                    repo=repo,
                    slave=host,
                    path=str(self.store.path_for(repo, host)),
                    content=content,
                )
            )
        return records

    def report_global(self) -> List[str]:
        """Names of all repositories with at least one failed slave."""
        return self.store.failed_repos()
