"""Dual-sink log writer — one severity-channel write plus a guarded append to the log file."""

import logging
import os
import traceback
from typing import Callable, Iterable, Optional, Union

from dualsink.channels import Channels, logging_channels
from dualsink.config import Config, load_config
from dualsink.errors import UnwritableLogPathError
from dualsink.formatter import format_console, format_record
from dualsink.models import MAX_INDENT, AppendResult, AppendStatus, Identity, Level, LogEntry

logger = logging.getLogger(__name__)

Messages = Union[str, Iterable[str], None]

MISSING_PATH_WARNING = (
    "Logging is enabled but no log path is configured. "
    "Set LOG_PATH (or log_path in the config file), or disable logging."
)


def collect_messages(messages: Messages) -> list[str]:
    """Assemble the full message list before anything is stamped or written."""
    if messages is None:
        return []
    if isinstance(messages, str):
        return [messages]
    return [str(m) for m in messages if m is not None]


def render_exception(exception) -> Optional[str]:
    """Render *exception* as its message, or as its type name when the message is empty."""
    if exception is None:
        return None
    text = str(exception)
    if not text and isinstance(exception, BaseException):
        return traceback.format_exception_only(type(exception), exception)[-1].strip()
    return text


class LogWriter:
    """Formats one entry per call, routes it to a severity channel and appends it to disk.

    Configuration is fetched from *config_provider* on every call so that
    option changes take effect immediately.
    """

    def __init__(self, config_provider: Callable[[], Config] = load_config,
                 channels: Optional[Channels] = None,
                 identity: Optional[Identity] = None):
        self._config_provider = config_provider
        self._channels = channels or logging_channels()
        self._identity = identity or Identity.from_environment()

    @property
    def channels(self) -> Channels:
        return self._channels

    def build_entry(self, messages: Messages = None, level: Level = Level.INFORMATIONAL,
                    indent: int = 0, exception=None) -> LogEntry:
        return LogEntry(
            lines=collect_messages(messages),
            exception_text=render_exception(exception),
            level=level,
            indent=indent,
        )

    def render(self, entry: LogEntry, config: Config, now) -> str:
        return format_record(
            entry,
            user=self._identity.current_user(),
            pid=self._identity.current_pid(),
            now=now,
            utc=config.log_time_as_utc,
            include_pid=config.log_process_id,
        )

    def log(self, messages: Messages = None, level: Level = Level.INFORMATIONAL,
            indent: int = 0, exception=None, path: Optional[str] = None) -> AppendResult:
        """Log one entry. Raises UnwritableLogPathError if the log file can never be written."""
        result = self.try_log(messages, level, indent, exception, path)
        if result.status is AppendStatus.FATAL:
            raise UnwritableLogPathError(result.path, str(result.cause)) from result.cause
        return result

    def try_log(self, messages: Messages = None, level: Level = Level.INFORMATIONAL,
                indent: int = 0, exception=None, path: Optional[str] = None) -> AppendResult:
        """Like log(), but report an unwritable destination as a FATAL result instead of raising."""
        entry = self.build_entry(messages, level, indent, exception)
        if entry.is_empty:
            return AppendResult(AppendStatus.SKIPPED)

        config = self._config_provider()
        # One timestamp for the whole entry, however many lines it carries
        now = self._identity.clock()
        record = self.render(entry, config, now)

        self._channels.dispatch(entry.level, format_console(entry))
        return self._append(record, config, path)

    def _append(self, record: str, config: Config, path: Optional[str]) -> AppendResult:
        if config.disable_logging:
            logger.debug("File logging disabled, record not persisted")
            return AppendResult(AppendStatus.SKIPPED)

        target = path or config.log_path
        if not target:
            self._channels.warning(MISSING_PATH_WARNING)
            return AppendResult(AppendStatus.SKIPPED)
        target = os.path.expanduser(target)

        try:
            with open(target, "a", encoding="utf-8", errors="backslashreplace",
                      newline="") as f:
                f.write(record + os.linesep)
        except OSError as exc:
            # An existing file that refuses the append is treated as held by
            # another writer; a missing one means the location is unusable.
            if os.path.isfile(target):
                self._channels.warning(
                    f"Unable to write to log file {target}: {exc}{os.linesep}"
                    f"Dropped message: {record}"
                )
                return AppendResult(AppendStatus.DROPPED, target, exc)
            logger.debug("Log file %s is not writable: %s", target, exc)
            return AppendResult(AppendStatus.FATAL, target, exc)

        return AppendResult(AppendStatus.WRITTEN, target)


_default_writer: Optional[LogWriter] = None


def get_default_writer() -> LogWriter:
    """Return the process-wide writer, creating it with live environment identity."""
    global _default_writer
    if _default_writer is None:
        _default_writer = LogWriter()
    return _default_writer


def validate_indent(indent: int) -> int:
    if isinstance(indent, bool) or not isinstance(indent, int):
        raise ValueError(f"indent must be an integer, got {indent!r}")
    if not 0 <= indent <= MAX_INDENT:
        raise ValueError(f"indent must be between 0 and {MAX_INDENT}, got {indent}")
    return indent


def log(messages: Messages = None, level: Union[Level, str] = Level.INFORMATIONAL,
        indent: int = 0, exception=None, path: Optional[str] = None,
        writer: Optional[LogWriter] = None) -> AppendResult:
    """Validate caller input and log one entry through *writer* (or the default writer)."""
    if isinstance(level, str):
        level = Level.parse(level)
    validate_indent(indent)
    return (writer or get_default_writer()).log(messages, level, indent, exception, path)
