"""Shared pytest fixtures: fixed identity, recording channels, writer factory."""

from datetime import datetime, timezone

import pytest

from dualsink.channels import Channels
from dualsink.config import Config
from dualsink.models import Identity
from dualsink.writer import LogWriter

FIXED_NOW = datetime(2024, 1, 15, 10, 30, 45, 123456, tzinfo=timezone.utc)


class RecordingChannels:
    """Collects (channel, text) pairs instead of printing them."""

    def __init__(self, information: bool = True):
        self.calls: list[tuple[str, str]] = []
        self.channels = Channels(
            error=self._recorder("error"),
            warning=self._recorder("warning"),
            verbose=self._recorder("verbose"),
            debug=self._recorder("debug"),
            information=self._recorder("information") if information else None,
        )

    def _recorder(self, name):
        def record(text):
            self.calls.append((name, text))
        return record

    def on(self, name: str) -> list[str]:
        return [text for channel, text in self.calls if channel == name]


@pytest.fixture()
def identity() -> Identity:
    return Identity(user="alice", pid=4242, clock=lambda: FIXED_NOW)


@pytest.fixture()
def recorder() -> RecordingChannels:
    return RecordingChannels()


@pytest.fixture()
def log_file(tmp_path):
    return tmp_path / "app.log"


@pytest.fixture()
def make_writer(identity, recorder, log_file):
    """Build a LogWriter whose config is fixed, UTC timestamps unless overridden."""

    def factory(**overrides):
        options = dict(log_path=str(log_file), log_time_as_utc=True)
        options.update(overrides)
        config = Config(**options)
        return LogWriter(config_provider=lambda: config,
                         channels=recorder.channels, identity=identity)

    return factory
