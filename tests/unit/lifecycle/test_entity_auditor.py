"""Unit tests for EntityAuditor lifecycle hooks.

Run with: pytest tests/unit/test_entity_auditor.py -v
"""
from __future__ import annotations

import asyncio
from typing import Any

import pytest
from structlog.testing import capture_logs

from mp_audit.context import RequestContext
from mp_audit.dispatch import AuditDispatcher
from mp_audit.lifecycle import EntityAuditor
from mp_audit.record import AuditAction, RecordBuilder
from mp_audit.testing import FailingAuditSink, FakeClock, InMemoryAuditSink


def _run(coro: Any) -> Any:
    return asyncio.run(coro)


class Account:
    __audit_id__ = "id"

    def __init__(self, id: str, balance: int = 0) -> None:  # noqa: A002
        self.id = id
        self.balance = balance


@pytest.fixture()
def sink() -> InMemoryAuditSink:
    return InMemoryAuditSink()


@pytest.fixture()
def auditor(sink: InMemoryAuditSink) -> EntityAuditor:
    return EntityAuditor(RecordBuilder("kyc-service", "KYC", clock=FakeClock()), AuditDispatcher([sink]))


class TestEntityAuditorHooks:
    def test_each_hook_tags_its_own_action(self, auditor: EntityAuditor, sink: InMemoryAuditSink) -> None:
        account = Account("42")

        async def run() -> None:
            await auditor.before_create(account)
            await auditor.before_update(account, old_value='{"balance": 1}')
            await auditor.before_remove(account)

        _run(run())

        assert [r.action for r in sink.writes] == [AuditAction.CREATE, AuditAction.UPDATE, AuditAction.DELETE]
        assert sink.writes[1].old_value == '{"balance": 1}'
        assert {r.entity_id for r in sink.writes} == {"42"}

    def test_hook_reads_request_context_of_its_task(self, auditor: EntityAuditor, sink: InMemoryAuditSink) -> None:
        async def handle(user: str) -> None:
            with RequestContext.scope(user, "10.0.0.5", f"/accounts/{user}"):
                await asyncio.sleep(0)
                await auditor.before_update(Account(user))

        async def run() -> None:
            await asyncio.gather(handle("alice"), handle("bob"))

        _run(run())

        by_entity = {r.entity_id: r for r in sink.records}
        assert by_entity["alice"].changed_by == "alice"
        assert by_entity["bob"].changed_by == "bob"
        assert by_entity["bob"].request_uri == "/accounts/bob"

    def test_hook_returns_the_record(self, auditor: EntityAuditor, sink: InMemoryAuditSink) -> None:
        record = _run(auditor.record(Account("1"), "UPDATE", metadata={"batch": "b1"}))

        assert record is not None
        assert sink.get(record.id) == record
        assert record.metadata == {"batch": "b1"}

    def test_sink_failure_never_reaches_the_caller(self) -> None:
        auditor = EntityAuditor(RecordBuilder("svc", "GENERAL"), AuditDispatcher([FailingAuditSink()]))

        with capture_logs() as logs:
            record = _run(auditor.before_update(Account("1")))

        assert record is not None
        assert any(e["event"] == "audit.dispatch_failed" for e in logs)

    def test_skipped_build_dispatches_nothing(self, auditor: EntityAuditor, sink: InMemoryAuditSink) -> None:
        with capture_logs():
            assert _run(auditor.record(Account("1"), "RENAME")) is None
        assert sink.writes == []
