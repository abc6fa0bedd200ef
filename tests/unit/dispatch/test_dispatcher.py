"""Unit tests for AuditDispatcher failure isolation, no-op mode and retries.

Run with: pytest tests/unit/test_dispatcher.py -v
"""
from __future__ import annotations

import asyncio
from typing import Any

import pytest
import tenacity
from structlog.testing import capture_logs

from mp_audit.config import AuditConfigError
from mp_audit.dispatch import AuditDispatcher, AuditSink, RetryingSink
from mp_audit.record import AuditAction, AuditRecord
from mp_audit.testing import FailingAuditSink, InMemoryAuditSink


def _run(coro: Any) -> Any:
    return asyncio.run(coro)


def _record(entity_id: str = "42") -> AuditRecord:
    return AuditRecord(
        entity_name="Account",
        entity_id=entity_id,
        action=AuditAction.UPDATE,
        service_name="kyc-service",
        compliance_tag="KYC",
    )


class _SlowSink(AuditSink):
    kind = "slow"

    def __init__(self) -> None:
        self.written: list[str] = []

    async def write(self, record: AuditRecord) -> None:
        await asyncio.sleep(0.01)
        self.written.append(record.id)


# ---------------------------------------------------------------------------
# Delivery
# ---------------------------------------------------------------------------


class TestDispatcherDelivery:
    def test_record_reaches_every_sink(self) -> None:
        first, second = InMemoryAuditSink(), InMemoryAuditSink()
        dispatcher = AuditDispatcher([first, second])
        record = _record()

        _run(dispatcher.dispatch(record))

        assert first.records == [record]
        assert second.records == [record]

    def test_dispatch_returns_none(self) -> None:
        dispatcher = AuditDispatcher([InMemoryAuditSink()])
        assert _run(dispatcher.dispatch(_record())) is None

    def test_same_record_twice_is_one_document(self) -> None:
        sink = InMemoryAuditSink()
        dispatcher = AuditDispatcher([sink])
        record = _record()

        async def run() -> None:
            await dispatcher.dispatch(record)
            await dispatcher.dispatch(record)

        _run(run())

        assert len(sink.writes) == 2
        assert sink.records == [record]


# ---------------------------------------------------------------------------
# Failure isolation
# ---------------------------------------------------------------------------


class TestDispatcherFailures:
    def test_sink_failure_is_logged_not_raised(self) -> None:
        dispatcher = AuditDispatcher([FailingAuditSink()])
        record = _record()

        with capture_logs() as logs:
            _run(dispatcher.dispatch(record))

        failures = [e for e in logs if e["event"] == "audit.dispatch_failed"]
        assert len(failures) == 1
        assert failures[0]["record_id"] == record.id
        assert failures[0]["sink"] == "failing"
        assert "connection refused" in failures[0]["error"]
        assert failures[0]["error_code"] == "sink_write_error"
        assert failures[0]["log_level"] == "error"

    def test_unexpected_exception_is_contained(self) -> None:
        dispatcher = AuditDispatcher([FailingAuditSink(error=RuntimeError("disk full"))])

        with capture_logs() as logs:
            _run(dispatcher.dispatch(_record()))

        assert "disk full" in logs[0]["error"]

    def test_failing_sink_does_not_block_the_next_one(self) -> None:
        healthy = InMemoryAuditSink()
        dispatcher = AuditDispatcher([FailingAuditSink(), healthy])
        record = _record()

        with capture_logs():
            _run(dispatcher.dispatch(record))

        assert healthy.records == [record]


# ---------------------------------------------------------------------------
# Disabled / misconfigured
# ---------------------------------------------------------------------------


class TestDispatcherDisabled:
    def test_disabled_dispatch_contacts_no_sink(self) -> None:
        sink = FailingAuditSink()
        dispatcher = AuditDispatcher([sink], enabled=False)

        _run(dispatcher.dispatch(_record()))

        assert sink.calls == 0

    def test_disabled_factory_has_no_sinks(self) -> None:
        dispatcher = AuditDispatcher.disabled()

        assert dispatcher.enabled is False
        assert dispatcher.sinks == ()
        assert _run(dispatcher.dispatch(_record())) is None

    def test_enabled_without_sinks_fails_fast(self) -> None:
        with pytest.raises(AuditConfigError):
            AuditDispatcher([])


# ---------------------------------------------------------------------------
# Fire-and-forget
# ---------------------------------------------------------------------------


class TestDispatchNowait:
    def test_nowait_returns_before_write_and_drain_waits(self) -> None:
        sink = _SlowSink()
        dispatcher = AuditDispatcher([sink])
        record = _record()

        async def run() -> tuple[list[str], list[str]]:
            task = dispatcher.dispatch_nowait(record)
            assert task is not None
            before = list(sink.written)
            await dispatcher.drain()
            return before, list(sink.written)

        before, after = _run(run())
        assert before == []
        assert after == [record.id]

    def test_nowait_on_disabled_dispatcher_schedules_nothing(self) -> None:
        async def run() -> Any:
            return AuditDispatcher.disabled().dispatch_nowait(_record())

        assert _run(run()) is None

    def test_aclose_drains_and_closes_sinks(self) -> None:
        sink = InMemoryAuditSink()
        dispatcher = AuditDispatcher([sink])

        async def run() -> None:
            dispatcher.dispatch_nowait(_record())
            await dispatcher.aclose()

        _run(run())
        assert len(sink.records) == 1
        assert sink.closed is True


# ---------------------------------------------------------------------------
# RetryingSink
# ---------------------------------------------------------------------------


class TestRetryingSink:
    def test_retries_until_success(self) -> None:
        inner = FailingAuditSink(failures=2)
        sink = RetryingSink(inner, max_attempts=3, wait=tenacity.wait_none())
        record = _record()

        with capture_logs() as logs:
            _run(AuditDispatcher([sink]).dispatch(record))

        assert inner.calls == 3
        assert inner.stored == [record]
        assert [e["event"] for e in logs].count("audit.sink_retry") == 2
        assert not [e for e in logs if e["event"] == "audit.dispatch_failed"]

    def test_gives_up_and_dispatcher_logs(self) -> None:
        inner = FailingAuditSink()
        sink = RetryingSink(inner, max_attempts=2, wait=tenacity.wait_none())

        with capture_logs() as logs:
            _run(AuditDispatcher([sink]).dispatch(_record()))

        assert inner.calls == 2
        failed = [e for e in logs if e["event"] == "audit.dispatch_failed"]
        assert failed[0]["sink"] == "retrying:failing"
