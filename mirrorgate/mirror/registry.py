"""
Slave Registry — Derive a repository's master and slaves from its config.

    mirror.master = gw1              # at most one value
    mirror.slaves = backup1 backup2  # whitespace separated
    mirror.slaves.dr = dr1           # every mirror.slaves* key is unioned

Nothing here touches the network; the only I/O is the config read.
"""

from __future__ import annotations

import logging
from typing import Set

from ..config.repo_config import RepoConfig
from ..models.context import ExecutionContext
from ..validation import AuthorizationError, ConfigurationError, validate_repo_name

logger = logging.getLogger(__name__)

MASTER_KEY = r"^mirror\.master$"
SLAVES_KEY = r"^mirror\.slaves"


class SlaveRegistry:
    """Read-only view of the mirror topology of each repository."""

    def __init__(self, config: RepoConfig):
        self.config = config

    def slaves(self, repo: str) -> Set[str]:
        """All hosts configured to receive mirror pushes for `repo`."""
        hosts: Set[str] = set()
        for values in self.config.get(repo, SLAVES_KEY).values():
            for value in values:
                hosts.update(value.split())
        return hosts

    def master(self, repo: str) -> str:
        """
        The master host of `repo`, or "" if none is configured.

        Raises:
            ConfigurationError: If more than one master is configured
        """
        values = [
            value.strip()
            for entries in self.config.get(repo, MASTER_KEY).values()
            for value in entries
            if value.strip()
        ]
        if len(values) > 1:
            raise ConfigurationError(f"{repo}: more than one master ({', '.join(values)})")
        return values[0] if values else ""

    def authorize(self, host: str, repo: str) -> None:
        """
        Ensure `host` is a valid slave of `repo`.

        Raises:
            AuthorizationError: If the repo name is unsafe or the host
                is not among the repo's slaves
        """
        validate_repo_name(repo)
        if host not in self.slaves(repo):
            raise AuthorizationError(f"'{host}' not a valid slave for '{repo}'")

    def check_access(self, context: ExecutionContext, host: str, repo: str) -> None:
        """Authorize remote callers; local callers are trusted."""
        if context.is_local:
            return
        logger.debug(f"[mirror] Authorizing {context.describe()} for {host}:{repo}")
        self.authorize(host, repo)
