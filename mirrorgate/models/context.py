"""
Execution Context — Who is invoking a mirror operation.

A local (server-side) invocation carries no remote identity and is
trusted: it bypasses slave authorization and may run the administrative
queries. A remote invocation carries the authenticated user name and
must pass authorization before any transfer or read.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional


class Trust(str, Enum):
    """Trust level of the caller."""

    LOCAL = "local"
    REMOTE_USER = "remote_user"


@dataclass(frozen=True)
class ExecutionContext:
    """Explicit caller context passed into every mirror operation."""

    trust: Trust = Trust.LOCAL
    user: Optional[str] = None
    session_id: str = "0"  # GL_TID of the triggering push, or "0"

    @classmethod
    def local(cls, session_id: str = "0") -> "ExecutionContext":
        return cls(trust=Trust.LOCAL, session_id=session_id)

    @classmethod
    def remote(cls, user: str, session_id: str = "0") -> "ExecutionContext":
        return cls(trust=Trust.REMOTE_USER, user=user, session_id=session_id)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ExecutionContext":
        """
        Build the context from the gateway-provided environment.

        GL_USER being present at all (even empty) marks a remote caller.
        GL_TID is folded into a single token, since status lines are
        split on spaces when read back.
        """
        env = os.environ if environ is None else environ
        session_id = "_".join((env.get("GL_TID") or "").split()) or "0"
        if "GL_USER" in env:
            return cls.remote(env["GL_USER"], session_id=session_id)
        return cls.local(session_id=session_id)

    @property
    def is_remote(self) -> bool:
        return self.trust == Trust.REMOTE_USER

    @property
    def is_local(self) -> bool:
        return self.trust == Trust.LOCAL

    def describe(self) -> str:
        if self.is_remote:
            return f"remote user '{self.user}'"
        return "local"
