"""Data types shared by the writer and the invocation logger."""

from __future__ import annotations

import getpass
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable

MAX_INDENT = 30


class Level(Enum):
    ERROR = "Error"
    WARNING = "Warning"
    INFORMATIONAL = "Informational"
    VERBOSE = "Verbose"
    DEBUG = "Debug"

    @classmethod
    def parse(cls, text: str) -> Level:
        """Look up a level by name, case-insensitively."""
        normalized = text.strip().upper()
        try:
            return cls[normalized]
        except KeyError:
            valid = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown log level {text!r} (expected one of: {valid})") from None


@dataclass
class LogEntry:
    lines: list[str] = field(default_factory=list)
    exception_text: str | None = None
    level: Level = Level.INFORMATIONAL
    indent: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.lines and self.exception_text is None

    def message_lines(self) -> list[str]:
        if self.exception_text is None:
            return list(self.lines)
        return [*self.lines, self.exception_text]

    def body(self) -> str:
        return os.linesep.join(self.message_lines())


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        # No passwd entry and no LOGNAME/USER variables (e.g. bare containers)
        return "unknown"


@dataclass(frozen=True)
class Identity:
    """Who is logging, and the clock used to stamp records.

    ``user`` and ``pid`` left as ``None`` are looked up on every call, so a
    forked worker stamps its own pid rather than its parent's.
    """

    user: str | None = None
    pid: int | None = None
    clock: Callable[[], datetime] = _utc_now

    @classmethod
    def from_environment(cls) -> Identity:
        return cls()

    def current_user(self) -> str:
        return self.user if self.user is not None else _current_user()

    def current_pid(self) -> int:
        return self.pid if self.pid is not None else os.getpid()


class AppendStatus(Enum):
    WRITTEN = "written"
    SKIPPED = "skipped"
    DROPPED = "dropped"
    FATAL = "fatal"


@dataclass(frozen=True)
class AppendResult:
    status: AppendStatus
    path: str = ""
    cause: OSError | None = None

    @property
    def ok(self) -> bool:
        return self.status is not AppendStatus.FATAL
