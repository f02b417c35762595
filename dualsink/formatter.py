"""Console and file renderings of a log entry — pure functions, no I/O."""

from datetime import datetime, timezone

from dualsink.models import LogEntry

FIELD_SEPARATOR = " : "
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
# "[" + 10 digits + "]"
PID_FIELD_WIDTH = 12


def format_timestamp(now: datetime, utc: bool = False) -> str:
    """Render *now* at seconds precision, in UTC with a trailing Z or in local time."""
    if utc:
        return now.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT) + "Z"
    return now.astimezone().strftime(TIMESTAMP_FORMAT)


def format_pid_field(pid: int) -> str:
    return f"[{pid}]".ljust(PID_FIELD_WIDTH)


def format_console(entry: LogEntry) -> str:
    return " " * entry.indent + entry.body()


def format_record(entry: LogEntry, user: str, pid: int, now: datetime,
                  utc: bool = False, include_pid: bool = False) -> str:
    """Build the single-line file record for *entry*.

    Fields: timestamp, optional pid, user, upper-cased level, message. The
    indent is applied in front of the whole record, and line breaks inside
    the message are kept as-is.
    """
    fields = [format_timestamp(now, utc)]
    if include_pid:
        fields.append(format_pid_field(pid))
    fields.append(user)
    fields.append(entry.level.name.upper())
    fields.append(entry.body())
    return " " * entry.indent + FIELD_SEPARATOR.join(fields)
