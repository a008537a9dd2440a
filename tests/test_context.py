"""
Tests for the execution context — local vs remote callers.
"""

from mirrorgate.models.context import ExecutionContext, Trust


class TestFromEnv:

    def test_no_user_is_local(self):
        ctx = ExecutionContext.from_env({})
        assert ctx.is_local
        assert ctx.trust == Trust.LOCAL
        assert ctx.user is None
        assert ctx.session_id == "0"

    def test_user_is_remote(self):
        ctx = ExecutionContext.from_env({"GL_USER": "alice"})
        assert ctx.is_remote
        assert ctx.user == "alice"

    def test_empty_user_is_still_remote(self):
        """Presence of GL_USER, not its value, marks a remote caller."""
        ctx = ExecutionContext.from_env({"GL_USER": ""})
        assert ctx.is_remote

    def test_session_id_inherited(self):
        ctx = ExecutionContext.from_env({"GL_TID": "4242"})
        assert ctx.session_id == "4242"

    def test_empty_session_id_defaults_to_zero(self):
        ctx = ExecutionContext.from_env({"GL_TID": ""})
        assert ctx.session_id == "0"

    def test_blank_session_id_defaults_to_zero(self):
        ctx = ExecutionContext.from_env({"GL_TID": "   "})
        assert ctx.session_id == "0"

    def test_session_id_folded_to_one_token(self):
        """Status lines are split on spaces, so the id must not contain any."""
        ctx = ExecutionContext.from_env({"GL_TID": " 42 a\tb "})
        assert ctx.session_id == "42_a_b"

    def test_folded_session_id_reads_back(self):
        from mirrorgate.mirror.status import prefix_lines
        from mirrorgate.models.status import StatusLine

        ctx = ExecutionContext.from_env({"GL_TID": "42 a"})
        line = StatusLine.parse(prefix_lines(["fatal: x"], ctx.session_id).splitlines()[0])
        assert line.session_id == "42_a"
        assert line.text == "fatal: x"


class TestConstructors:

    def test_local(self):
        ctx = ExecutionContext.local("7")
        assert ctx.is_local and not ctx.is_remote
        assert ctx.describe() == "local"

    def test_remote(self):
        ctx = ExecutionContext.remote("bob")
        assert ctx.is_remote
        assert ctx.describe() == "remote user 'bob'"
