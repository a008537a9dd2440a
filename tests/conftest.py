"""
Shared fixtures for mirror tests.

Provides a temporary storage root with a few bare-repo directories, a
YAML repo config naming their masters and slaves, and a fake `git push`
process so transfers run without a network or a real slave.
"""

from __future__ import annotations

import io
import subprocess
from pathlib import Path
from typing import Callable, List

import pytest

from mirrorgate.config.settings import GatewaySettings
from mirrorgate.mirror.manager import MirrorManager

REPO_CONFIG = """\
repos:
  foo:
    mirror.master: gw1
    mirror.slaves: backup1 backup2
    mirror.slaves.dr: [dr1]
  bar:
    mirror.slaves: backup1
  twomasters:
    mirror.master: [gw1, gw2]
"""

REPOS = ("foo", "bar", "baz", "qux", "team/nested")


class FakeProc:
    """Stand-in for the Popen object of `git push --mirror`."""

    def __init__(self, lines: List[str], returncode: int = 0):
        self.stdout = io.StringIO("".join(f"{line}\n" for line in lines))
        self.returncode = returncode

    def wait(self) -> int:
        return self.returncode


@pytest.fixture
def repo_base(tmp_path: Path) -> Path:
    """Storage root with empty bare-repo directories."""
    base = tmp_path / "repositories"
    for name in REPOS:
        (base / f"{name}.git").mkdir(parents=True)
    return base


@pytest.fixture
def repo_config_file(tmp_path: Path) -> Path:
    path = tmp_path / "repos.yaml"
    path.write_text(REPO_CONFIG, encoding="utf-8")
    return path


@pytest.fixture
def settings(repo_base: Path, repo_config_file: Path) -> GatewaySettings:
    return GatewaySettings(
        hostname="gw1",
        repo_base=repo_base,
        repo_config_file=repo_config_file,
    )


@pytest.fixture
def manager(settings: GatewaySettings) -> MirrorManager:
    return MirrorManager(settings)


@pytest.fixture
def cli_env(repo_base: Path, repo_config_file: Path) -> dict:
    """Environment for a local CLI invocation against the temp root."""
    return {
        "GL_HOSTNAME": "gw1",
        "GL_REPO_BASE": str(repo_base),
        "MIRROR_REPO_CONFIG": str(repo_config_file),
        "GL_USER": None,
        "GL_TID": None,
        "GL_LOGFILE": None,
    }


@pytest.fixture
def fake_push(monkeypatch) -> Callable:
    """
    Replace `subprocess.Popen` with a fake `git push`.

    Call it with the output lines and exit status the push should
    produce; it returns the list that records every (cmd, kwargs) call.
    """

    def install(lines: List[str], returncode: int = 0) -> list:
        calls = []

        def popen(cmd, **kwargs):
            calls.append((cmd, kwargs))
            return FakeProc(lines, returncode)

        monkeypatch.setattr(subprocess, "Popen", popen)
        return calls

    return install


@pytest.fixture
def plant_status(repo_base: Path) -> Callable:
    """Write a status record for (repo, host) directly."""

    def plant(repo: str, host: str, content: str = "2026-01-01.00:00:00 0 fatal: x\n") -> Path:
        path = repo_base / f"{repo}.git" / f"gl-slave-{host}.status"
        path.write_text(content, encoding="utf-8")
        return path

    return plant
