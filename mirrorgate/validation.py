"""
Validation — Error taxonomy and input validation for mirror operations.

Provides consistent validation patterns for repository names, slave host
names and the trailing `.git` suffix that callers may pass.

## Usage

    from mirrorgate.validation import AuthorizationError, validate_repo_name

    try:
        validate_repo_name(repo)
    except AuthorizationError as e:
        print(f"Refused: {e}")
"""

from __future__ import annotations

import re
from typing import Dict, Optional

REPONAME_PATT = re.compile(r"^@?[0-9a-zA-Z][-0-9a-zA-Z._@/+]*$")
HOSTNAME_PATT = re.compile(r"^[0-9a-zA-Z][-0-9a-zA-Z._@]*$")


class MirrorError(Exception):
    """Base class for errors that abort a mirror invocation."""


class ValidationError(MirrorError):
    """Raised when validation fails."""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict] = None):
        self.message = message
        self.field = field
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message


class ConfigurationError(MirrorError):
    """Raised when configuration is missing or invalid."""
    pass


class AuthorizationError(MirrorError):
    """Raised when a remote caller may not mirror a repo to a host."""
    pass


class RepositoryNotFoundError(MirrorError):
    """Raised when the repository does not exist under the storage root."""
    pass


class TransferError(MirrorError):
    """Raised when the transfer tool could not be run at all."""
    pass


class UsageError(MirrorError):
    """Raised when a command is not allowed in the caller's context."""
    pass


def strip_git_suffix(repo: str) -> str:
    """Strip one trailing `.git` from a repository argument."""
    if repo.endswith(".git"):
        return repo[: -len(".git")]
    return repo


def is_valid_repo_name(repo: str) -> bool:
    """Check a repo name against the safe-identifier pattern."""
    if not REPONAME_PATT.match(repo):
        return False
    # No path traversal, no empty components
    parts = repo.split("/")
    return all(p and p not in (".", "..") for p in parts)


def validate_repo_name(repo: str) -> None:
    """
    Validate a repository name.

    Raises:
        AuthorizationError: If the name is not a safe identifier
    """
    if not is_valid_repo_name(repo):
        raise AuthorizationError(f"invalid repo '{repo}'")


def validate_host_name(host: str) -> None:
    """
    Validate a slave host name.

    Host names end up in status file names, so anything that could
    escape the repository directory is rejected.

    Raises:
        ValidationError: If the host name is unusable
    """
    if not HOSTNAME_PATT.match(host) or ".." in host:
        raise ValidationError(f"invalid host name '{host}'", field="host")
