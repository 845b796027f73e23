"""Tests for pulsor.observability — event log and collector."""

import threading

from pulsor.observability.collector import PulseCollector
from pulsor.observability.events import (
    CallbackBound,
    CallbackFailed,
    CallbackUnbound,
    LogRecorded,
    PulseCompleted,
    PulserCreated,
    PulserDestroyed,
    now_ns,
)
from pulsor.observability.log import EventLog


def _created(alias: str) -> PulserCreated:
    return PulserCreated(
        alias=alias, execution_mode="sync", overridden=False,
        function_name="fn", timestamp_ns=now_ns(),
    )


# ---------------------------------------------------------------------------
# EventLog
# ---------------------------------------------------------------------------


class TestEventLog:
    """Tests for the event log store."""

    def test_append_and_len(self) -> None:
        log = EventLog()
        assert len(log) == 0
        log.append(_created("a"))
        assert len(log) == 1

    def test_max_events_enforced(self) -> None:
        log = EventLog(max_events=5)
        for i in range(10):
            log.append(_created(f"p{i}"))
        assert len(log) == 5

    def test_recent(self) -> None:
        log = EventLog()
        for i in range(5):
            log.append(_created(f"p{i}"))
        recent = log.recent(3)
        assert len(recent) == 3
        assert recent[-1].alias == "p4"

    def test_query_by_type(self) -> None:
        log = EventLog()
        log.append(_created("a"))
        log.append(PulserDestroyed(alias="a", callbacks_cleared=0, timestamp_ns=now_ns()))
        log.append(_created("b"))

        results = log.query(event_type=PulserCreated)
        assert [r.alias for r in results] == ["b", "a"]

    def test_query_by_alias(self) -> None:
        log = EventLog()
        log.append(_created("math"))
        log.append(_created("math:extra"))
        log.append(LogRecorded(level="log", message="math", timestamp_ns=now_ns()))

        results = log.query(alias="math")
        assert len(results) == 1
        assert results[0].alias == "math"

    def test_query_since_and_limit(self) -> None:
        log = EventLog()
        log.append(PulserDestroyed(alias="old", callbacks_cleared=0, timestamp_ns=100))
        cutoff = 200
        for i in range(5):
            log.append(
                PulserDestroyed(alias=f"new{i}", callbacks_cleared=0, timestamp_ns=cutoff + i)
            )

        assert len(log.query(since_ns=cutoff)) == 5
        assert len(log.query(since_ns=cutoff, limit=2)) == 2

    def test_clear(self) -> None:
        log = EventLog()
        for i in range(3):
            log.append(_created(f"p{i}"))
        assert log.clear() == 3
        assert len(log) == 0

    def test_stats(self) -> None:
        log = EventLog(max_events=100)
        log.append(_created("a"))
        log.append(CallbackBound(alias="a", callback_name="cb", timestamp_ns=now_ns()))

        stats = log.stats()
        assert stats["total"] == 2
        assert stats["max_events"] == 100
        assert stats["by_type"]["PulserCreated"] == 1
        assert stats["by_type"]["CallbackBound"] == 1

    def test_thread_safety(self) -> None:
        """Concurrent appends should not lose events."""
        log = EventLog(max_events=50_000)
        errors: list[Exception] = []

        def worker(start: int) -> None:
            try:
                for i in range(1000):
                    log.append(_created(f"{start}_{i}"))
            except Exception as exc:
                errors.append(exc)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        assert len(log) == 10_000


# ---------------------------------------------------------------------------
# PulseCollector
# ---------------------------------------------------------------------------


class TestPulseCollector:
    """Typed record_* helpers."""

    def test_default_log(self) -> None:
        collector = PulseCollector()
        assert isinstance(collector.log, EventLog)

    def test_record_helpers(self) -> None:
        log = EventLog()
        collector = PulseCollector(log)
        collector.record_created("a", "async", overridden=True, function_name="load")
        collector.record_bound("a", "cb")
        collector.record_unbound("a", "*", removed=3)
        collector.record_pulse("a", "async", callbacks_dispatched=2, callbacks_failed=1)
        collector.record_callback_failure("a", "cb", "RuntimeError('x')")
        collector.record_destroyed("a", callbacks_cleared=0)

        kinds = [type(e) for e in log.recent(10)]
        assert kinds == [
            PulserCreated,
            CallbackBound,
            CallbackUnbound,
            PulseCompleted,
            CallbackFailed,
            PulserDestroyed,
        ]
        created = log.query(event_type=PulserCreated)[0]
        assert created.overridden is True
        assert created.function_name == "load"
        unbound = log.query(event_type=CallbackUnbound)[0]
        assert unbound.removed == 3
