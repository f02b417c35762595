#!/usr/bin/env python3
"""dualsink-log — write one entry to the console channel and the log file."""

import argparse
import logging
import sys
from dataclasses import replace

from dualsink.channels import CHANNEL_LOGGER, logging_channels
from dualsink.config import load_config
from dualsink.errors import UnwritableLogPathError
from dualsink.models import MAX_INDENT, Level
from dualsink.writer import LogWriter, log


def _indent(value: str) -> int:
    try:
        indent = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid indent: {value!r}") from None
    if not 0 <= indent <= MAX_INDENT:
        raise argparse.ArgumentTypeError(f"indent must be between 0 and {MAX_INDENT}")
    return indent


def _level(value: str) -> Level:
    try:
        return Level.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dualsink-log",
        description="Log a message to its severity channel and append it to the log file.",
    )
    parser.add_argument(
        "messages", nargs="*",
        help="Message lines (default: read lines from stdin)",
    )
    parser.add_argument(
        "--level", type=_level, default=Level.INFORMATIONAL,
        help="Error, Warning, Informational, Verbose or Debug (default: Informational)",
    )
    parser.add_argument(
        "--indent", type=_indent, default=0,
        help=f"Leading spaces, 0-{MAX_INDENT} (default: 0)",
    )
    parser.add_argument(
        "--config", default=None,
        help="Path to YAML config file (default: $DUALSINK_CONFIG)",
    )
    parser.add_argument(
        "--log-path", default=None,
        help="Log file path, overrides the configured one",
    )
    return parser


def main(argv=None, stdin=None) -> int:
    parser = build_cli_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        stream=sys.stderr,
    )
    # Verbose and Debug entries pass; the library's own loggers stay at INFO
    logging.getLogger(CHANNEL_LOGGER).setLevel(logging.DEBUG)

    messages = args.messages
    if not messages:
        # Collect the whole batch first so it shares one timestamp
        stream = stdin if stdin is not None else sys.stdin
        messages = [line.rstrip("\r\n") for line in stream]

    def config_provider():
        config = load_config(args.config)
        if args.log_path:
            config = replace(config, log_path=args.log_path)
        return config

    writer = LogWriter(config_provider=config_provider, channels=logging_channels())
    try:
        log(messages, level=args.level, indent=args.indent, writer=writer)
    except UnwritableLogPathError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
