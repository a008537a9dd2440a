"""
Repo Config — Read per-repository mirror options.

Mirror options are owned by the gateway's configuration, not by this
package. They are consumed through one narrow call:

    config.get(repo, r"^mirror\\.slaves") -> {"mirror.slaves": ["a b", "c"]}

Two sources are provided:

- GitRepoConfig reads the bare repository's own git config
  (`git config --file <repo>.git/config --get-regexp <pattern>`).
- YamlRepoConfig reads a single YAML file:

      repos:
        foo:
          mirror.master: gw1
          mirror.slaves: backup1 backup2
          mirror.slaves.dr: [dr1]
"""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..validation import ConfigurationError

logger = logging.getLogger(__name__)


class RepoConfig:
    """Interface for repository-scoped key/value configuration."""

    def get(self, repo: str, key_pattern: str) -> Dict[str, List[str]]:
        """Return every value of every key matching `key_pattern`."""
        raise NotImplementedError


class GitRepoConfig(RepoConfig):
    """Options stored in each bare repository's git config file."""

    def __init__(self, repo_base: Path, git_bin: str = "git"):
        self.repo_base = repo_base
        self.git_bin = git_bin

    def get(self, repo: str, key_pattern: str) -> Dict[str, List[str]]:
        config_file = self.repo_base / f"{repo}.git" / "config"
        if not config_file.exists():
            return {}

        try:
            result = subprocess.run(
                [self.git_bin, "config", "--file", str(config_file), "--get-regexp", key_pattern],
                capture_output=True,
                text=True,
                timeout=10,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise ConfigurationError(f"{repo}: cannot read git config: {e}") from e

        # Exit 1 means no key matched
        if result.returncode == 1:
            return {}
        if result.returncode != 0:
            raise ConfigurationError(
                f"{repo}: git config failed: {result.stderr.strip() or result.returncode}"
            )

        values: Dict[str, List[str]] = {}
        for line in result.stdout.splitlines():
            if not line.strip():
                continue
            key, _, value = line.partition(" ")
            values.setdefault(key, []).append(value)
        return values


class YamlRepoConfig(RepoConfig):
    """Options for all repositories in one YAML file."""

    def __init__(self, path: Path):
        self.path = path
        self._repos: Optional[Dict[str, Dict[str, Any]]] = None

    def _load(self) -> Dict[str, Dict[str, Any]]:
        if self._repos is None:
            try:
                with self.path.open("r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigurationError(f"cannot load repo config {self.path}: {e}") from e

            repos = data.get("repos") if isinstance(data, dict) else None
            if repos is None:
                repos = {}
            if not isinstance(repos, dict):
                raise ConfigurationError(f"{self.path}: 'repos' must be a mapping")
            self._repos = repos
            logger.debug(f"Loaded repo config for {len(repos)} repo(s) from {self.path}")
        return self._repos

    def get(self, repo: str, key_pattern: str) -> Dict[str, List[str]]:
        options = self._load().get(repo) or {}
        pattern = re.compile(key_pattern, re.IGNORECASE)

        values: Dict[str, List[str]] = {}
        for key, value in options.items():
            if not pattern.search(str(key)):
                continue
            if isinstance(value, (list, tuple)):
                values[str(key)] = [str(v) for v in value]
            elif value is None:
                values[str(key)] = []
            else:
                values[str(key)] = [str(value)]
        return values
