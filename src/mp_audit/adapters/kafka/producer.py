"""Kafka adapter – AuditRecordProducer."""
from __future__ import annotations

import asyncio
from typing import Any, Callable

from mp_audit.adapters.kafka.serializer import AuditRecordSerializer
from mp_audit.observability.logging import get_logger
from mp_audit.record import AuditRecord

logger = get_logger(__name__)


def _require_aiokafka() -> Any:
    try:
        import aiokafka  # type: ignore[import-untyped]
        return aiokafka
    except ImportError as exc:
        raise ImportError("Install 'mp-audit[kafka]' to use the Kafka adapter") from exc


def _delivery_callback(topic: str, record: AuditRecord) -> Callable[[asyncio.Future[Any]], None]:
    """Log a broker-side failure of a record that was only buffered."""

    def _done(fut: asyncio.Future[Any]) -> None:
        if fut.cancelled():
            logger.error(
                "audit.dispatch_failed", record_id=record.id, sink="kafka", topic=topic, error="delivery cancelled"
            )
            return
        exc = fut.exception()
        if exc is not None:
            logger.error("audit.dispatch_failed", record_id=record.id, sink="kafka", topic=topic, error=repr(exc))

    return _done


class AuditRecordProducer:
    """Long-lived aiokafka producer shared by every dispatch call.

    Parameters
    ----------
    bootstrap_servers:
        Kafka bootstrap servers (``"host:9092"``).
    producer:
        Pre-built ``AIOKafkaProducer``-compatible object; overrides
        *bootstrap_servers* (useful for tests).
    """

    def __init__(
        self,
        bootstrap_servers: str | None = None,
        serializer: AuditRecordSerializer | None = None,
        *,
        producer: Any = None,
        **producer_kwargs: Any,
    ) -> None:
        if producer is None:
            aiokafka = _require_aiokafka()
            producer = aiokafka.AIOKafkaProducer(bootstrap_servers=bootstrap_servers, **producer_kwargs)
        self._producer = producer
        self._serializer = serializer or AuditRecordSerializer()
        self._started = False

    async def start(self) -> None:
        if self._started:
            return
        await self._producer.start()
        self._started = True

    async def stop(self) -> None:
        if self._started:
            await self._producer.stop()
        self._started = False

    async def __aenter__(self) -> "AuditRecordProducer":
        await self.start()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.stop()

    async def publish(self, topic: str, record: AuditRecord, *, wait_for_ack: bool = False) -> None:
        """Publish *record* keyed by its id.

        Without *wait_for_ack* this returns once the record is buffered by
        the client; a later delivery failure is logged as
        ``audit.dispatch_failed``.
        """
        if not self._started:
            await self.start()
        value = self._serializer.serialize(record)
        key = self._serializer.key(record)
        headers = [
            ("entity-name", record.entity_name.encode()),
            ("action", record.action.value.encode()),
        ]
        if wait_for_ack:
            await self._producer.send_and_wait(topic, value=value, key=key, headers=headers)
        else:
            delivery = await self._producer.send(topic, value=value, key=key, headers=headers)
            delivery.add_done_callback(_delivery_callback(topic, record))
        logger.debug("kafka.published", topic=topic, record_id=record.id)


__all__ = ["AuditRecordProducer"]
