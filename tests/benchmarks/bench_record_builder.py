"""Benchmark: cost of building one audit record.

Compares:
- a plain object resolved through ``__audit_id__``
- a dataclass resolved through ``audit_id_field()``
- the same object with a nested payload that has to be redacted

Goal: keep record building well below the latency of the mutation it audits.
"""

from __future__ import annotations

import dataclasses

from mp_audit.record import AuditAction, RecordBuilder, audit_id_field
from mp_audit.testing import FakeClock


class Account:
    __audit_id__ = "id"

    def __init__(self, id: str) -> None:  # noqa: A002
        self.id = id
        self.status = "ACTIVE"
        self.balance = 1250
        self.owner = {"name": "Ada", "iban": "DE89370400440532013000"}


@dataclasses.dataclass
class Customer:
    customer_no: str = audit_id_field()
    email: str = "ada@example.com"
    tags: list[str] = dataclasses.field(default_factory=lambda: ["kyc", "vip"])


def _builder() -> RecordBuilder:
    return RecordBuilder("kyc-service", "KYC", clock=FakeClock())


def test_build_plain_object(benchmark, request_context):
    builder = _builder()
    account = Account("42")

    record = benchmark(builder.build, account, AuditAction.UPDATE)
    assert record is not None
    assert record.changed_by == "alice"


def test_build_dataclass(benchmark, request_context):
    builder = _builder()
    customer = Customer("C-9")

    record = benchmark(builder.build, customer, "CREATE")
    assert record.entity_id == "C-9"


def test_build_with_explicit_context(benchmark, request_context):
    """Passing a captured snapshot skips the ContextVar lookup."""
    builder = _builder()
    account = Account("42")

    record = benchmark(builder.build, account, AuditAction.DELETE, context=request_context)
    assert record.request_uri == "/accounts/42"


def test_snapshot_only(benchmark):
    builder = _builder()
    account = Account("42")

    snapshot = benchmark(builder.snapshot, account)
    assert "[REDACTED]" in snapshot
