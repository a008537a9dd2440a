"""
Gateway Settings — Parse GL_* and MIRROR_* environment variables.

Minimal required config:
    GL_HOSTNAME=gw1

Everything else has a default:
    GL_REPO_BASE=~/repositories      # bare repos live at <base>/<name>.git
    GL_LOGFILE=/var/log/gl/mirror.ndjson   # event ledger (optional)
    MIRROR_REPO_CONFIG=/etc/gl/repos.yaml  # YAML repo options (optional)
    MIRROR_GIT=git
    MIRROR_SSH=ssh

When MIRROR_REPO_CONFIG is unset, per-repo mirror options are read from
each repository's own git config.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from ..validation import ConfigurationError
from .repo_config import GitRepoConfig, RepoConfig, YamlRepoConfig

logger = logging.getLogger(__name__)


@dataclass
class GatewaySettings:
    """Host-wide settings for mirror operations."""

    hostname: str
    repo_base: Path
    git_bin: str = "git"
    ssh_bin: str = "ssh"
    event_log: Optional[Path] = None
    repo_config_file: Optional[Path] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GatewaySettings":
        """Parse settings from environment variables."""
        env = os.environ if environ is None else environ

        hostname = env.get("GL_HOSTNAME", "").strip()
        if not hostname:
            raise ConfigurationError("GL_HOSTNAME not set; mirroring needs this host's name")

        repo_base = Path(env.get("GL_REPO_BASE") or "~/repositories").expanduser()

        event_log = env.get("GL_LOGFILE")
        repo_config_file = env.get("MIRROR_REPO_CONFIG")

        settings = cls(
            hostname=hostname,
            repo_base=repo_base,
            git_bin=env.get("MIRROR_GIT") or "git",
            ssh_bin=env.get("MIRROR_SSH") or "ssh",
            event_log=Path(event_log).expanduser() if event_log else None,
            repo_config_file=Path(repo_config_file).expanduser() if repo_config_file else None,
        )
        logger.debug(f"Loaded gateway settings: host={hostname}, base={repo_base}")
        return settings

    def repo_dir(self, repo: str) -> Path:
        """Storage directory of a bare repository."""
        return self.repo_base / f"{repo}.git"

    def repo_config(self) -> RepoConfig:
        """Build the configured repository option source."""
        if self.repo_config_file is not None:
            return YamlRepoConfig(self.repo_config_file)
        return GitRepoConfig(self.repo_base, git_bin=self.git_bin)
