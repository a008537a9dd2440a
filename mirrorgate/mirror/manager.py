"""
Mirror Manager — Entry point for every mirror operation.

Each call handles exactly one explicit request: one push of one repo to
one slave, or one read-only query. Remote callers are authorized against
the repo's slave list first; local callers are trusted.

## Usage from other modules:

    from mirrorgate.mirror.manager import MirrorManager
    from mirrorgate.models.context import ExecutionContext

    manager = MirrorManager.from_env()
    outcome = manager.push(ExecutionContext.from_env(), "backup1", "foo")
    raise SystemExit(outcome.exit_code)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

from ..config.settings import GatewaySettings
from ..models.context import ExecutionContext
from ..models.status import StatusRecord
from ..persistence.event_log import MirrorEventLog
from ..validation import RepositoryNotFoundError, UsageError, validate_host_name
from .registry import SlaveRegistry
from .report import ALL, StatusReporter, host_pattern
from .status import StatusStore
from .transfer import MirrorPusher, TransferResult

logger = logging.getLogger(__name__)


@dataclass
class PushOutcome:
    """Result of one push invocation."""

    result: TransferResult
    status_saved: bool

    @property
    def exit_code(self) -> int:
        return 1 if self.result.errors or self.status_saved else 0


class MirrorManager:
    """
    Coordinates registry, transfer, status store and reporter.

    No locking anywhere: concurrent pushes of the same repo to the same
    slave race on the status record and the last writer wins.
    """

    def __init__(
        self,
        settings: GatewaySettings,
        registry: Optional[SlaveRegistry] = None,
        events: Optional[MirrorEventLog] = None,
    ):
        self.settings = settings
        self.registry = registry or SlaveRegistry(settings.repo_config())
        self.events = events
        self.store = StatusStore(settings.repo_base)
        self.reporter = StatusReporter(self.store)
        self.pusher = MirrorPusher(settings, events=events)

    @classmethod
    def from_env(cls) -> "MirrorManager":
        """Create manager from environment variables."""
        settings = GatewaySettings.from_env()
        events = MirrorEventLog(settings.event_log) if settings.event_log else None
        return cls(settings, events=events)

    # ─── Push ───────────────────────────────────────────────

    def push(
        self,
        context: ExecutionContext,
        host: str,
        repo: str,
        echo: Optional[Callable[[str], None]] = None,
    ) -> PushOutcome:
        """Authorize, push once, then save or clear the slave's status."""
        self.registry.check_access(context, host, repo)
        validate_host_name(host)

        sid = context.session_id
        if self.events is not None:
            self.events.emit_push_started(repo, host, sid, master=self.settings.hostname)

        result = self.pusher.push(host, repo, session_id=sid, echo=echo)
        saved = self.store.record(repo, host, result.lines, session_id=sid)

        outcome = PushOutcome(result=result, status_saved=saved)
        if self.events is not None:
            self.events.emit_push_finished(
                repo, host, sid,
                exit_status=result.exit_status,
                errors=result.errors,
                status_saved=saved,
            )

        logger.info(
            f"[mirror] {self.settings.hostname} → {host}:{repo} "
            f"{'failed' if outcome.exit_code else 'ok'} ({len(result.lines)} line(s) of output)",
            extra={"repo": repo, "slave": host, "session_id": sid},
        )
        return outcome

    # ─── Status ─────────────────────────────────────────────

    def status(self, context: ExecutionContext, slave: str, repo: str) -> Iterator[str]:
        """Rendered failure reports of `repo`; `slave` may be `all`."""
        self._check_status_access(context, slave, repo)
        return self.reporter.report(repo, host_pattern(slave))

    def status_records(self, context: ExecutionContext, slave: str, repo: str) -> List[StatusRecord]:
        """Parsed failure records of `repo`; `slave` may be `all`."""
        self._check_status_access(context, slave, repo)
        return self.reporter.records(repo, host_pattern(slave))

    def failed_repos(self, context: ExecutionContext) -> List[str]:
        """Every repository with a failed slave. Local callers only."""
        self._require_local(context, "status all all")
        return self.reporter.report_global()

    # ─── Discovery ──────────────────────────────────────────

    def list_master(self, context: ExecutionContext, repo: str) -> str:
        self._require_local(context, "list master")
        return self.registry.master(repo)

    def list_slaves(self, context: ExecutionContext, repo: str) -> str:
        self._require_local(context, "list slaves")
        return " ".join(sorted(self.registry.slaves(repo)))

    # ─── Helpers ────────────────────────────────────────────

    def _check_status_access(self, context: ExecutionContext, slave: str, repo: str) -> None:
        # Checked before `all` is expanded, so remote callers must name a slave
        self.registry.check_access(context, slave, repo)
        if slave != ALL:
            validate_host_name(slave)
        if not self.settings.repo_dir(repo).is_dir():
            raise RepositoryNotFoundError(f"repo '{repo}' not found under {self.settings.repo_base}")

    @staticmethod
    def _require_local(context: ExecutionContext, command: str) -> None:
        if context.is_remote:
            raise UsageError(f"'{command}' is only available on the server")
