"""Tests for levels, entries, identity and append results."""

import os
from datetime import datetime

import pytest

from dualsink.models import AppendResult, AppendStatus, Identity, Level, LogEntry


class TestLevel:
    @pytest.mark.parametrize("text,expected", [
        ("Error", Level.ERROR),
        ("warning", Level.WARNING),
        ("INFORMATIONAL", Level.INFORMATIONAL),
        ("Verbose", Level.VERBOSE),
        (" debug ", Level.DEBUG),
    ])
    def test_parse(self, text, expected):
        assert Level.parse(text) is expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            Level.parse("TRACE")

    def test_five_levels(self):
        assert len(Level) == 5


class TestLogEntry:
    def test_defaults(self):
        entry = LogEntry()
        assert entry.lines == []
        assert entry.level is Level.INFORMATIONAL
        assert entry.indent == 0
        assert entry.is_empty

    def test_exception_only_not_empty(self):
        assert not LogEntry(exception_text="boom").is_empty

    def test_exception_is_last_line(self):
        entry = LogEntry(lines=["a", "b"], exception_text="boom")
        assert entry.message_lines() == ["a", "b", "boom"]

    def test_body_joins_with_linesep(self):
        entry = LogEntry(lines=["first", "second"])
        assert entry.body() == f"first{os.linesep}second"


class TestIdentity:
    def test_from_environment(self):
        identity = Identity.from_environment()
        assert identity.current_pid() == os.getpid()
        assert identity.current_user()
        assert isinstance(identity.clock(), datetime)
        assert identity.clock().tzinfo is not None

    def test_environment_identity_resolved_per_call(self, monkeypatch):
        identity = Identity.from_environment()
        monkeypatch.setattr("os.getpid", lambda: 31337)
        monkeypatch.setattr("getpass.getuser", lambda: "worker")
        assert identity.current_pid() == 31337
        assert identity.current_user() == "worker"

    def test_injected_values_fixed(self, monkeypatch):
        identity = Identity(user="alice", pid=4242)
        monkeypatch.setattr("os.getpid", lambda: 31337)
        assert identity.current_pid() == 4242
        assert identity.current_user() == "alice"

    def test_unknown_user(self, monkeypatch):
        def no_user():
            raise OSError("No username set in the environment")

        monkeypatch.setattr("getpass.getuser", no_user)
        assert Identity.from_environment().current_user() == "unknown"


class TestAppendResult:
    @pytest.mark.parametrize("status,ok", [
        (AppendStatus.WRITTEN, True),
        (AppendStatus.SKIPPED, True),
        (AppendStatus.DROPPED, True),
        (AppendStatus.FATAL, False),
    ])
    def test_ok(self, status, ok):
        assert AppendResult(status).ok is ok
