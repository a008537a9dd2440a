"""
Tests for validation module.
"""

import pytest

from mirrorgate.validation import (
    AuthorizationError,
    MirrorError,
    ValidationError,
    is_valid_repo_name,
    strip_git_suffix,
    validate_host_name,
    validate_repo_name,
)


class TestValidationError:
    """Tests for ValidationError exception."""

    def test_basic_message(self):
        """Error with just a message."""
        err = ValidationError("Something went wrong")
        assert str(err) == "Something went wrong"

    def test_message_with_field(self):
        """Error with field and message."""
        err = ValidationError("is required", field="host")
        assert str(err) == "host: is required"

    def test_message_with_details(self):
        """Error with extra details."""
        err = ValidationError("failed", details={"code": 123})
        assert err.details == {"code": 123}

    def test_is_mirror_error(self):
        assert isinstance(ValidationError("x"), MirrorError)


class TestStripGitSuffix:

    def test_strips_suffix(self):
        assert strip_git_suffix("foo.git") == "foo"

    def test_strips_only_once(self):
        assert strip_git_suffix("foo.git.git") == "foo.git"

    def test_leaves_plain_name(self):
        assert strip_git_suffix("foo") == "foo"

    def test_nested_name(self):
        assert strip_git_suffix("team/foo.git") == "team/foo"


class TestRepoName:
    """Tests for the safe-identifier repo name check."""

    @pytest.mark.parametrize("name", ["foo", "team/foo", "@admin", "a.b-c_d+e", "x1"])
    def test_valid_names(self, name):
        assert is_valid_repo_name(name)
        validate_repo_name(name)

    @pytest.mark.parametrize("name", ["", "-foo", "../etc", "team/../x", "a//b", "foo bar", "foo;rm"])
    def test_invalid_names(self, name):
        assert not is_valid_repo_name(name)
        with pytest.raises(AuthorizationError) as exc_info:
            validate_repo_name(name)
        assert "invalid repo" in str(exc_info.value)


class TestHostName:

    @pytest.mark.parametrize("host", ["backup1", "dr.example.com", "git@mirror"])
    def test_valid_hosts(self, host):
        validate_host_name(host)

    @pytest.mark.parametrize("host", ["", "../x", "a/b", "-x", "a..b"])
    def test_invalid_hosts(self, host):
        with pytest.raises(ValidationError) as exc_info:
            validate_host_name(host)
        assert exc_info.value.field == "host"
