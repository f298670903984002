"""Tests for errors.py -- exception hierarchy and attributes."""

from autolist.errors import (
    AlreadyRunningError,
    AutoListError,
    ConfigError,
    InvalidTransitionError,
    MalformedRowError,
    MalformedSelectionError,
    RemoteCallError,
    SemanticError,
)


class TestExceptionHierarchy:
    def test_all_inherit_from_autolist_error(self):
        for cls in (
            AlreadyRunningError,
            ConfigError,
            InvalidTransitionError,
            MalformedRowError,
            MalformedSelectionError,
            RemoteCallError,
            SemanticError,
        ):
            assert issubclass(cls, AutoListError)

    def test_autolist_error_is_exception(self):
        assert issubclass(AutoListError, Exception)


class TestAttributes:
    def test_already_running(self):
        err = AlreadyRunningError("abc123")
        assert err.run_id == "abc123"
        assert "abc123" in str(err)

    def test_malformed_row(self):
        err = MalformedRowError("bogus", line=4)
        assert err.text == "bogus"
        assert err.line == 4
        assert "bogus" in str(err)

    def test_semantic_error_with_info(self):
        err = SemanticError("no-external-page", "Page missing")
        assert err.code == "no-external-page"
        assert err.info == "Page missing"
        assert str(err) == "no-external-page: Page missing"

    def test_semantic_error_without_info(self):
        assert str(SemanticError("failed-save")) == "failed-save"
