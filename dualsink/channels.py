"""Severity channels — where the console rendering of an entry goes."""

import logging
import sys
from dataclasses import dataclass
from typing import Callable, Optional, TextIO

from dualsink.models import Level

VERBOSE = 15
logging.addLevelName(VERBOSE, "VERBOSE")

CHANNEL_LOGGER = "dualsink.channels"

Writer = Callable[[str], None]


def interactive_console_writer(stream: Optional[TextIO] = None) -> Writer:
    """Return a writer that prints only when attached to an interactive terminal.

    Output is discarded silently when the stream is not a TTY (pipes, services,
    CI runners). The stream is resolved at write time so redirection after
    construction is honoured.
    """

    def write(text: str):
        out = stream if stream is not None else sys.stdout
        isatty = getattr(out, "isatty", None)
        if isatty is None or not isatty():
            return
        out.write(text + "\n")
        out.flush()

    return write


@dataclass(frozen=True)
class Channels:
    error: Writer
    warning: Writer
    verbose: Writer
    debug: Writer
    information: Optional[Writer] = None

    def select(self, level: Level) -> Writer:
        if level is Level.ERROR:
            return self.error
        if level is Level.WARNING:
            return self.warning
        if level is Level.VERBOSE:
            return self.verbose
        if level is Level.DEBUG:
            return self.debug
        if self.information is not None:
            return self.information
        return interactive_console_writer()

    def dispatch(self, level: Level, text: str):
        self.select(level)(text)


def logging_channels(name: str = CHANNEL_LOGGER, information: bool = True) -> Channels:
    """Build channels backed by a stdlib logger.

    Errors are reported through ``Logger.error``, which never raises into the
    caller. With ``information=False`` informational output uses the
    interactive console fallback instead of the logger.
    """
    log = logging.getLogger(name)
    return Channels(
        error=log.error,
        warning=log.warning,
        verbose=lambda text: log.log(VERBOSE, text),
        debug=log.debug,
        information=log.info if information else None,
    )
