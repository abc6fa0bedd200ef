"""Dispatch – AuditSink port."""
from __future__ import annotations

import abc

from mp_audit.record import AuditRecord


class AuditSink(abc.ABC):
    """Port: durable backend that accepts dispatched audit records.

    Implementations live in ``adapters/``: e.g.
    :class:`~mp_audit.adapters.elasticsearch.ElasticsearchAuditSink` or
    :class:`~mp_audit.adapters.kafka.KafkaAuditSink`.  Use
    :class:`~mp_audit.testing.InMemoryAuditSink` in unit tests.

    Sinks do not retry; wrap them in
    :class:`~mp_audit.dispatch.retry.RetryingSink` for backoff.
    """

    kind: str = "sink"

    @abc.abstractmethod
    async def write(self, record: AuditRecord) -> None:
        """Durably accept *record*; raise on failure."""

    async def start(self) -> None:
        """Open connections eagerly; the default does nothing."""

    async def close(self) -> None:
        """Release resources owned by the sink.  Shared clients are left open."""


__all__ = ["AuditSink"]
