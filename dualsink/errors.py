"""Exceptions raised by the logging subsystem."""


class LoggingError(Exception):
    """Base class for failures the logging subsystem escalates to its caller."""


class UnwritableLogPathError(LoggingError):
    """Raised when the log file cannot be created at the configured path.

    The original ``OSError`` is chained as ``__cause__``.
    """

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        message = f"Unable to write to log file {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
