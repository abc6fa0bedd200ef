"""Kafka adapter – queued sink, shared producer and indexing consumer.

Requires the ``kafka`` extra::

    pip install "mp-audit[kafka]"
"""
from mp_audit.adapters.kafka.consumer import AuditTopicConsumer
from mp_audit.adapters.kafka.producer import AuditRecordProducer
from mp_audit.adapters.kafka.serializer import AuditRecordSerializer
from mp_audit.adapters.kafka.sink import KafkaAuditSink

__all__ = ["AuditRecordProducer", "AuditRecordSerializer", "AuditTopicConsumer", "KafkaAuditSink"]
