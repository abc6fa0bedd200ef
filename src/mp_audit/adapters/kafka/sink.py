"""Kafka adapter – KafkaAuditSink."""
from __future__ import annotations

from mp_audit.adapters.kafka.producer import AuditRecordProducer
from mp_audit.dispatch import AuditSink
from mp_audit.kernel.errors import SinkWriteError
from mp_audit.record import AuditRecord


class KafkaAuditSink(AuditSink):
    """Queued sink: publish records to a topic, partitioned by record id.

    Indexing happens downstream (see
    :class:`~mp_audit.adapters.kafka.consumer.AuditTopicConsumer`); the
    mutation path only pays for the enqueue.
    """

    kind = "kafka"

    def __init__(
        self,
        producer: AuditRecordProducer,
        topic: str = "audit-logs",
        *,
        wait_for_ack: bool = False,
        owns_producer: bool = False,
    ) -> None:
        self._producer = producer
        self._topic = topic
        self._wait_for_ack = wait_for_ack
        self._owns_producer = owns_producer

    @property
    def topic(self) -> str:
        return self._topic

    async def write(self, record: AuditRecord) -> None:
        try:
            await self._producer.publish(self._topic, record, wait_for_ack=self._wait_for_ack)
        except Exception as exc:
            raise SinkWriteError(
                self.kind, record.id, f"Publish to topic '{self._topic}' failed: {exc!r}"
            ) from exc

    async def start(self) -> None:
        await self._producer.start()

    async def close(self) -> None:
        if self._owns_producer:
            await self._producer.stop()


__all__ = ["KafkaAuditSink"]
