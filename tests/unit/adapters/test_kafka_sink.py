"""Unit tests for the Kafka adapter (mocked, no aiokafka broker required).

Run with: pytest tests/unit/adapters/test_kafka_sink.py -v
"""
from __future__ import annotations

import asyncio
import json
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from structlog.testing import capture_logs

from mp_audit.adapters.kafka import (
    AuditRecordProducer,
    AuditRecordSerializer,
    AuditTopicConsumer,
    KafkaAuditSink,
)
from mp_audit.dispatch import AuditDispatcher
from mp_audit.kernel.errors import SinkWriteError, SnapshotSerializationError
from mp_audit.record import AuditAction, AuditRecord
from mp_audit.testing import InMemoryAuditSink


def _run(coro: Any) -> Any:
    return asyncio.run(coro)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _mock_aiokafka_producer() -> MagicMock:
    mock_prod = MagicMock()
    mock_prod.start = AsyncMock()
    mock_prod.stop = AsyncMock()
    mock_prod.send = AsyncMock()
    mock_prod.send_and_wait = AsyncMock()
    return mock_prod


class _FakeConsumer:
    def __init__(self, payloads: list[bytes]) -> None:
        self._messages = [SimpleNamespace(value=p, topic="audit-logs", offset=i) for i, p in enumerate(payloads)]
        self.started = False
        self.stopped = False

    async def start(self) -> None:
        self.started = True

    async def stop(self) -> None:
        self.stopped = True

    def __aiter__(self) -> "_FakeConsumer":
        self._it = iter(self._messages)
        return self

    async def __anext__(self) -> SimpleNamespace:
        try:
            return next(self._it)
        except StopIteration:
            raise StopAsyncIteration from None


def _record(entity_id: str = "42") -> AuditRecord:
    return AuditRecord(
        entity_name="Account",
        entity_id=entity_id,
        action=AuditAction.DELETE,
        service_name="kyc-service",
        compliance_tag="KYC",
    )


# ---------------------------------------------------------------------------
# AuditRecordSerializer
# ---------------------------------------------------------------------------


class TestAuditRecordSerializer:
    def test_value_is_wire_json(self) -> None:
        record = _record()
        payload = json.loads(AuditRecordSerializer().serialize(record))
        assert payload == record.to_dict()

    def test_key_is_record_id(self) -> None:
        record = _record()
        assert AuditRecordSerializer().key(record) == record.id.encode()

    def test_deserialize_rejects_garbage(self) -> None:
        with pytest.raises(SnapshotSerializationError):
            AuditRecordSerializer().deserialize(b"not json")

    def test_deserialize_rejects_missing_fields(self) -> None:
        with pytest.raises(SnapshotSerializationError):
            AuditRecordSerializer().deserialize(b'{"id": "x"}')


# ---------------------------------------------------------------------------
# AuditRecordProducer
# ---------------------------------------------------------------------------


class TestAuditRecordProducer:
    def test_builds_aiokafka_producer_from_bootstrap_servers(self) -> None:
        mock_ak = MagicMock()
        with patch("mp_audit.adapters.kafka.producer._require_aiokafka", return_value=mock_ak):
            AuditRecordProducer("kafka:9092", linger_ms=5)
        mock_ak.AIOKafkaProducer.assert_called_once_with(bootstrap_servers="kafka:9092", linger_ms=5)

    def test_start_is_idempotent(self) -> None:
        mock_prod = _mock_aiokafka_producer()
        producer = AuditRecordProducer(producer=mock_prod)

        async def run() -> None:
            await producer.start()
            await producer.start()

        _run(run())
        mock_prod.start.assert_awaited_once()

    def test_publish_is_keyed_by_record_id(self) -> None:
        mock_prod = _mock_aiokafka_producer()
        record = _record()

        _run(AuditRecordProducer(producer=mock_prod).publish("audit-logs", record))

        mock_prod.start.assert_awaited_once()
        kwargs = mock_prod.send.await_args.kwargs
        assert mock_prod.send.await_args.args == ("audit-logs",)
        assert kwargs["key"] == record.id.encode()
        assert ("action", b"DELETE") in kwargs["headers"]
        mock_prod.send_and_wait.assert_not_called()

    def test_publish_waits_for_ack_when_asked(self) -> None:
        mock_prod = _mock_aiokafka_producer()

        _run(AuditRecordProducer(producer=mock_prod).publish("t", _record(), wait_for_ack=True))

        mock_prod.send_and_wait.assert_awaited_once()
        mock_prod.send.assert_not_called()

    def test_context_manager_stops_producer(self) -> None:
        mock_prod = _mock_aiokafka_producer()

        async def run() -> None:
            async with AuditRecordProducer(producer=mock_prod):
                pass

        _run(run())
        mock_prod.stop.assert_awaited_once()


# ---------------------------------------------------------------------------
# KafkaAuditSink
# ---------------------------------------------------------------------------


class TestKafkaAuditSink:
    def test_write_publishes_to_topic(self) -> None:
        mock_prod = _mock_aiokafka_producer()
        sink = KafkaAuditSink(AuditRecordProducer(producer=mock_prod), "compliance-audit")

        _run(sink.write(_record()))

        assert mock_prod.send.await_args.args == ("compliance-audit",)

    def test_late_delivery_failure_is_logged(self) -> None:
        mock_prod = _mock_aiokafka_producer()
        record = _record()

        async def run() -> None:
            delivery = asyncio.get_running_loop().create_future()
            mock_prod.send.return_value = delivery
            dispatcher = AuditDispatcher([KafkaAuditSink(AuditRecordProducer(producer=mock_prod))])
            await dispatcher.dispatch(record)
            delivery.set_exception(RuntimeError("broker unavailable"))
            await asyncio.sleep(0)

        with capture_logs() as logs:
            _run(run())

        failures = [e for e in logs if e["event"] == "audit.dispatch_failed"]
        assert len(failures) == 1
        assert failures[0]["record_id"] == record.id
        assert failures[0]["sink"] == "kafka"
        assert "broker unavailable" in failures[0]["error"]

    def test_successful_delivery_logs_no_failure(self) -> None:
        mock_prod = _mock_aiokafka_producer()

        async def run() -> None:
            delivery = asyncio.get_running_loop().create_future()
            mock_prod.send.return_value = delivery
            await KafkaAuditSink(AuditRecordProducer(producer=mock_prod)).write(_record())
            delivery.set_result(SimpleNamespace(partition=0, offset=7))
            await asyncio.sleep(0)

        with capture_logs() as logs:
            _run(run())

        assert not [e for e in logs if e["event"] == "audit.dispatch_failed"]

    def test_publish_failure_becomes_sink_write_error(self) -> None:
        mock_prod = _mock_aiokafka_producer()
        mock_prod.send.side_effect = RuntimeError("broker down")
        sink = KafkaAuditSink(AuditRecordProducer(producer=mock_prod))
        record = _record()

        with pytest.raises(SinkWriteError) as exc_info:
            _run(sink.write(record))

        assert exc_info.value.sink == "kafka"
        assert exc_info.value.record_id == record.id

    def test_close_stops_only_owned_producer(self) -> None:
        shared_prod, owned_prod = _mock_aiokafka_producer(), _mock_aiokafka_producer()
        shared = KafkaAuditSink(AuditRecordProducer(producer=shared_prod))
        owned = KafkaAuditSink(AuditRecordProducer(producer=owned_prod), owns_producer=True)

        async def run() -> None:
            for sink in (shared, owned):
                await sink.start()
                await sink.close()

        _run(run())
        shared_prod.stop.assert_not_called()
        owned_prod.stop.assert_awaited_once()


# ---------------------------------------------------------------------------
# AuditTopicConsumer
# ---------------------------------------------------------------------------


class TestAuditTopicConsumer:
    def test_forward_stores_records_in_sink(self) -> None:
        first, second = _record("1"), _record("2")
        serializer = AuditRecordSerializer()
        consumer = AuditTopicConsumer(
            consumer=_FakeConsumer([serializer.serialize(first), serializer.serialize(second)])
        )
        sink = InMemoryAuditSink()

        assert _run(consumer.forward(sink)) == 2
        assert sink.get(first.id) == first
        assert sink.get(second.id) == second

    def test_malformed_payload_is_logged_and_skipped(self) -> None:
        good = _record()
        consumer = AuditTopicConsumer(
            consumer=_FakeConsumer([b"{broken", AuditRecordSerializer().serialize(good)])
        )
        sink = InMemoryAuditSink()

        with capture_logs() as logs:
            stored = _run(consumer.forward(sink))

        assert stored == 1
        assert sink.records == [good]
        malformed = [e for e in logs if e["event"] == "audit.consume_malformed"]
        assert malformed[0]["offset"] == 0

    def test_max_records_stops_early(self) -> None:
        serializer = AuditRecordSerializer()
        consumer = AuditTopicConsumer(
            consumer=_FakeConsumer([serializer.serialize(_record(str(i))) for i in range(5)])
        )
        assert _run(consumer.forward(InMemoryAuditSink(), max_records=2)) == 2

    def test_context_manager_starts_and_stops(self) -> None:
        fake = _FakeConsumer([])

        async def run() -> None:
            async with AuditTopicConsumer(consumer=fake):
                assert fake.started

        _run(run())
        assert fake.stopped
