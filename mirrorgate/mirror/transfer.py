"""
Transfer — Full-mirror push of one repository to one slave.

Runs `git push --mirror <host>:<repo>` from inside the bare repository,
reading the combined stdout/stderr line by line until the push ends.
Output is decoded as UTF-8; undecodable bytes become U+FFFD.
There is no timeout here; a hung push is killed by whoever supervises
the invocation.

Wild repos (created ad hoc, marked by a `gl-creator` file) also get
their creator and permission rules forwarded to the slave over ssh.
That side channel is best effort and never affects the push result.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from ..config.settings import GatewaySettings
from ..persistence.event_log import MirrorEventLog
from ..validation import RepositoryNotFoundError, TransferError

logger = logging.getLogger(__name__)

CREATOR_FILE = "gl-creator"
PERMS_FILE = "gl-perms"
FATAL_MARKER = "FATAL"


@dataclass
class TransferResult:
    """Outcome of one push attempt."""

    exit_status: int
    lines: List[str] = field(default_factory=list)
    errors: bool = False

    @property
    def output(self) -> str:
        return "".join(f"{line}\n" for line in self.lines)


class MirrorPusher:
    """Executes mirror pushes from the local storage root."""

    def __init__(self, settings: GatewaySettings, events: Optional[MirrorEventLog] = None):
        self.settings = settings
        self.events = events

    def push(
        self,
        host: str,
        repo: str,
        session_id: str = "0",
        echo: Optional[Callable[[str], None]] = None,
    ) -> TransferResult:
        """
        Push all refs and objects of `repo` to `host`.

        Args:
            host: Slave host name
            repo: Repository name (no .git suffix)
            session_id: Transfer session id used to tag log entries
            echo: Called with every output line as it arrives, for a
                  human watching the push

        Raises:
            RepositoryNotFoundError: If the repository does not exist
            TransferError: If git could not be started
        """
        repo_dir = self.settings.repo_dir(repo)
        if not repo_dir.is_dir():
            raise RepositoryNotFoundError(f"repo '{repo}' not found under {self.settings.repo_base}")

        extra = {"repo": repo, "slave": host, "session_id": session_id}
        logger.info(f"[mirror-push] TID={session_id} host={host} repo={repo}: push started", extra=extra)

        self.propagate_creator(host, repo, repo_dir)

        cmd = [self.settings.git_bin, "push", "--mirror", f"{host}:{repo}"]
        try:
            proc = subprocess.Popen(
                cmd,
                cwd=str(repo_dir),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                # Remote hooks may print arbitrary bytes
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise TransferError(f"cannot run {cmd[0]}: {e}") from e

        lines: List[str] = []
        errors = False
        try:
            for raw in proc.stdout:
                line = raw.rstrip("\n")
                lines.append(line)
                if echo is not None:
                    echo(line)
                if FATAL_MARKER in line:
                    errors = True
                    logger.error(f"[mirror-push] {line}", extra=extra)
                    if self.events is not None:
                        self.events.emit_fatal(repo, host, session_id, line)
                else:
                    logger.debug(f"mirror: {line}", extra=extra)
        finally:
            proc.stdout.close()
            exit_status = proc.wait()

        if exit_status != 0:
            errors = True
            logger.warning(
                f"[mirror-push] git push to {host} exited with status {exit_status}", extra=extra
            )

        return TransferResult(exit_status=exit_status, lines=lines, errors=errors)

    def propagate_creator(self, host: str, repo: str, repo_dir: Path) -> bool:
        """
        Forward a wild repo's creator and permission rules to `host`.

        Returns True if the slave accepted them. Never raises.
        """
        creator_file = repo_dir / CREATOR_FILE
        if not creator_file.is_file():
            return False

        try:
            creator = creator_file.read_text(encoding="utf-8").strip()
            perms_file = repo_dir / PERMS_FILE
            perms = perms_file.read_text(encoding="utf-8") if perms_file.is_file() else ""

            result = subprocess.run(
                [
                    self.settings.ssh_bin,
                    host,
                    f"CREATOR={shlex.quote(creator)}",
                    "perms",
                    "-c",
                    shlex.quote(repo),
                ],
                input=perms,
                capture_output=True,
                text=True,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug(f"[mirror-push] creator propagation to {host} failed: {e}")
            return False

        if result.returncode != 0:
            logger.debug(
                f"[mirror-push] creator propagation to {host} exited {result.returncode}: "
                f"{result.stderr.strip()}"
            )
            return False

        logger.debug(f"[mirror-push] propagated creator '{creator}' of {repo} to {host}")
        return True
