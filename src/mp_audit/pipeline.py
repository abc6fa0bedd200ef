"""Pipeline – construct the builder, sinks and dispatcher from AuditSettings.

Call once at process start and inject the result wherever records are
emitted::

    settings = AuditSettings.load()          # fails fast on misconfiguration
    pipeline = AuditPipeline.from_settings(settings)
    await pipeline.start()
    ...
    await pipeline.auditor.before_update(account)
    ...
    await pipeline.aclose()
"""
from __future__ import annotations

import dataclasses
from typing import Any

from mp_audit.config import AuditSettings
from mp_audit.dispatch import AuditDispatcher, AuditSink, RetryingSink
from mp_audit.kernel.security import DEFAULT_SENSITIVE_FIELDS
from mp_audit.kernel.time import Clock
from mp_audit.lifecycle import EntityAuditor
from mp_audit.observability.logging import get_logger
from mp_audit.record import RecordBuilder, SnapshotSerializer

logger = get_logger(__name__)


def build_builder(settings: AuditSettings, *, clock: Clock | None = None) -> RecordBuilder:
    """Return a :class:`RecordBuilder` stamped with the deployment labels."""
    serializer = SnapshotSerializer(DEFAULT_SENSITIVE_FIELDS | set(settings.redact_fields))
    return RecordBuilder(
        settings.service_name,
        settings.compliance_tag,
        clock=clock,
        serializer=serializer,
    )


def build_sink(
    settings: AuditSettings,
    *,
    http_client: Any = None,
    mongo_client: Any = None,
    producer: Any = None,
) -> AuditSink:
    """Construct the configured sink, sharing any client passed in.

    Clients created here are owned by the returned sink and released by
    :meth:`AuditSink.close`.
    """
    sink: AuditSink
    if settings.sink_kind == "queued":
        from mp_audit.adapters.kafka import AuditRecordProducer, KafkaAuditSink

        owns = producer is None
        if producer is None:
            producer = AuditRecordProducer(settings.sink_bootstrap_servers)
        sink = KafkaAuditSink(
            producer,
            settings.sink_topic,
            wait_for_ack=settings.sink_wait_for_ack,
            owns_producer=owns,
        )
    elif settings.sink_store == "mongodb":
        from mp_audit.adapters.mongodb import MongoAuditSink

        if mongo_client is None:
            import motor.motor_asyncio as motor_async  # type: ignore[import-untyped]

            mongo_client = motor_async.AsyncIOMotorClient(settings.sink_url)
        sink = MongoAuditSink(mongo_client[settings.sink_database][settings.sink_index])
    else:
        from mp_audit.adapters.elasticsearch import ElasticsearchAuditSink

        if http_client is None:
            sink = ElasticsearchAuditSink.from_url(settings.sink_url or "", settings.sink_index)
        else:
            sink = ElasticsearchAuditSink(http_client, settings.sink_index)

    if settings.retry_attempts > 1:
        sink = RetryingSink(sink, max_attempts=settings.retry_attempts)
    return sink


def build_dispatcher(settings: AuditSettings, **clients: Any) -> AuditDispatcher:
    """Return the dispatcher for *settings*.

    ``enabled=False`` or ``sink_kind="none"`` yields an explicit no-op
    dispatcher; nothing is contacted.
    """
    if not settings.is_active:
        logger.info(
            "audit.disabled",
            enabled=settings.enabled,
            sink_kind=settings.sink_kind,
            service_name=settings.service_name,
        )
        return AuditDispatcher.disabled()
    sink = build_sink(settings, **clients)
    logger.info(
        "audit.configured",
        sink=sink.kind,
        service_name=settings.service_name,
        compliance_tag=settings.compliance_tag,
    )
    return AuditDispatcher([sink])


@dataclasses.dataclass
class AuditPipeline:
    """Builder, dispatcher and lifecycle auditor for one process."""

    settings: AuditSettings
    builder: RecordBuilder
    dispatcher: AuditDispatcher
    auditor: EntityAuditor

    @classmethod
    def from_settings(
        cls,
        settings: AuditSettings,
        *,
        clock: Clock | None = None,
        dispatcher: AuditDispatcher | None = None,
        **clients: Any,
    ) -> "AuditPipeline":
        builder = build_builder(settings, clock=clock)
        dispatcher = dispatcher or build_dispatcher(settings, **clients)
        return cls(settings, builder, dispatcher, EntityAuditor(builder, dispatcher))

    async def start(self) -> None:
        """Open long-lived sink connections up front."""
        await self.dispatcher.start()

    async def aclose(self) -> None:
        await self.dispatcher.aclose()


__all__ = ["AuditPipeline", "build_builder", "build_dispatcher", "build_sink"]
