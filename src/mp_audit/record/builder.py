"""Record – RecordBuilder.

Assembles an :class:`~mp_audit.record.models.AuditRecord` from a mutated
entity, the action kind reported by the lifecycle hook, the caller identity
and the static service labels.  Building never raises into the caller's
mutation path: snapshot failures degrade ``newValue`` to ``None`` and any
other failure skips emission.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping

from mp_audit.context import RequestContext, RequestContextSnapshot
from mp_audit.kernel.time import Clock, SystemClock
from mp_audit.observability.logging import get_logger
from mp_audit.record.identity import (
    DEFAULT_ID_RESOLVERS,
    IdResolver,
    resolve_entity_id,
    resolve_entity_name,
)
from mp_audit.record.models import AuditAction, AuditRecord, new_record_id
from mp_audit.record.snapshot import SnapshotSerializer

logger = get_logger(__name__)


class RecordBuilder:
    """Build audit records for one deployment.

    Parameters
    ----------
    service_name:
        Logical service name stamped on every record.
    compliance_tag:
        Regulatory label stamped on every record (``"KYC"``, ``"GDPR"``).
    clock:
        Source of the detection timestamp.  Defaults to UTC wall clock.
    serializer:
        Entity snapshot serializer.
    id_resolvers:
        Ordered identifier resolvers; the first non-``None`` value wins.
    """

    def __init__(
        self,
        service_name: str,
        compliance_tag: str,
        *,
        clock: Clock | None = None,
        serializer: SnapshotSerializer | None = None,
        id_resolvers: Iterable[IdResolver] = DEFAULT_ID_RESOLVERS,
    ) -> None:
        self._service_name = service_name
        self._compliance_tag = compliance_tag
        self._clock = clock or SystemClock()
        self._serializer = serializer or SnapshotSerializer()
        self._id_resolvers = tuple(id_resolvers)

    @property
    def service_name(self) -> str:
        return self._service_name

    @property
    def compliance_tag(self) -> str:
        return self._compliance_tag

    @property
    def serializer(self) -> SnapshotSerializer:
        return self._serializer

    def with_id_resolver(self, resolver: IdResolver) -> "RecordBuilder":
        """Return a copy of this builder that also tries *resolver* last."""
        return RecordBuilder(
            self._service_name,
            self._compliance_tag,
            clock=self._clock,
            serializer=self._serializer,
            id_resolvers=(*self._id_resolvers, resolver),
        )

    def build(
        self,
        entity: Any,
        action: AuditAction | str,
        *,
        context: RequestContextSnapshot | None = None,
        old_value: str | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> AuditRecord | None:
        """Return a fully populated record, or ``None`` when emission is skipped.

        *context* defaults to the current :class:`RequestContext`; its
        values are copied into the record.
        """
        try:
            timestamp = self._clock.now()
            action = AuditAction.parse(action)
            ctx = context if context is not None else RequestContext.snapshot()
            entity_name = resolve_entity_name(entity)
            return AuditRecord(
                id=new_record_id(),
                entity_name=entity_name,
                entity_id=resolve_entity_id(entity, self._id_resolvers),
                action=action,
                changed_by=ctx.acting_user,
                source_ip=ctx.source_address,
                request_uri=ctx.request_path,
                old_value=old_value,
                new_value=self._snapshot(entity, entity_name),
                service_name=self._service_name,
                compliance_tag=self._compliance_tag,
                timestamp=timestamp,
                metadata=metadata or {},
            )
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "audit.build_failed",
                entity_type=type(entity).__name__,
                action=str(action),
                error=repr(exc),
            )
            return None

    def snapshot(self, entity: Any) -> str | None:
        """Serialize *entity*, or return ``None`` (logged) on failure."""
        return self._snapshot(entity, resolve_entity_name(entity))

    def _snapshot(self, entity: Any, entity_name: str) -> str | None:
        try:
            return self._serializer.serialize(entity)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "audit.snapshot_failed",
                entity_name=entity_name,
                error=repr(exc),
            )
            return None


__all__ = ["RecordBuilder"]
