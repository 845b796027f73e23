"""Shared test fixtures for pulsor."""

from __future__ import annotations

import pytest

from pulsor.core.registry import Registry
from pulsor.observability.collector import PulseCollector
from pulsor.observability.log import EventLog


class RecordingLogger:
    """Recorder that keeps every record for assertions."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str]] = []

    def record(self, level: str, message: str) -> None:
        self.records.append((level, message))

    def messages(self, level: str) -> list[str]:
        return [message for lvl, message in self.records if lvl == level]


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def event_log() -> EventLog:
    return EventLog()


@pytest.fixture
def registry(logger: RecordingLogger, event_log: EventLog) -> Registry:
    """A fresh registry per test with a recording logger and collector."""
    return Registry(logger=logger, collector=PulseCollector(event_log))
