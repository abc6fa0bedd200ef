"""Kafka adapter – AuditTopicConsumer.

Reads records published by :class:`~mp_audit.adapters.kafka.sink.KafkaAuditSink`
and writes them to a direct store sink (the asynchronous indexing side of
the queued policy).
"""
from __future__ import annotations

from typing import Any

from mp_audit.adapters.kafka.producer import _require_aiokafka
from mp_audit.adapters.kafka.serializer import AuditRecordSerializer
from mp_audit.dispatch import AuditSink
from mp_audit.kernel.errors import SnapshotSerializationError
from mp_audit.observability.logging import get_logger

logger = get_logger(__name__)


class AuditTopicConsumer:
    """aiokafka-backed consumer that forwards audit records to a sink."""

    def __init__(
        self,
        bootstrap_servers: str | None = None,
        group_id: str = "audit-indexer",
        topic: str = "audit-logs",
        serializer: AuditRecordSerializer | None = None,
        *,
        consumer: Any = None,
        **kwargs: Any,
    ) -> None:
        if consumer is None:
            aiokafka = _require_aiokafka()
            consumer = aiokafka.AIOKafkaConsumer(
                topic,
                bootstrap_servers=bootstrap_servers,
                group_id=group_id,
                **kwargs,
            )
        self._consumer = consumer
        self._serializer = serializer or AuditRecordSerializer()

    async def start(self) -> None:
        await self._consumer.start()

    async def stop(self) -> None:
        await self._consumer.stop()

    async def __aenter__(self) -> "AuditTopicConsumer":
        await self.start()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.stop()

    async def forward(self, sink: AuditSink, max_records: int | None = None) -> int:
        """Write consumed records to *sink*; return how many were stored.

        Malformed payloads are logged and skipped.  Sink failures propagate to
        the caller, which decides whether to restart from the last commit.
        """
        stored = 0
        seen = 0
        async for msg in self._consumer:
            seen += 1
            try:
                record = self._serializer.deserialize(msg.value)
            except SnapshotSerializationError as exc:
                logger.error(
                    "audit.consume_malformed",
                    topic=getattr(msg, "topic", None),
                    offset=getattr(msg, "offset", None),
                    error=repr(exc),
                )
            else:
                await sink.write(record)
                stored += 1
            if max_records is not None and seen >= max_records:
                break
        return stored


__all__ = ["AuditTopicConsumer"]
