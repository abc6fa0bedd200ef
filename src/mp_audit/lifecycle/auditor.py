"""Lifecycle – EntityAuditor.

The persistence layer calls one hook per mutation, naming the action
explicitly; the auditor builds the record and dispatches it.  Hooks never
raise, so an audit problem cannot alter the outcome of the business
transaction.
"""
from __future__ import annotations

from typing import Any, Mapping

from mp_audit.context import RequestContextSnapshot
from mp_audit.dispatch import AuditDispatcher
from mp_audit.observability.logging import get_logger
from mp_audit.record import AuditAction, AuditRecord, RecordBuilder

logger = get_logger(__name__)


class EntityAuditor:
    """Build-and-dispatch facade used by lifecycle collaborators."""

    def __init__(self, builder: RecordBuilder, dispatcher: AuditDispatcher) -> None:
        self._builder = builder
        self._dispatcher = dispatcher

    @property
    def builder(self) -> RecordBuilder:
        return self._builder

    @property
    def dispatcher(self) -> AuditDispatcher:
        return self._dispatcher

    async def record(
        self,
        entity: Any,
        action: AuditAction | str,
        *,
        context: RequestContextSnapshot | None = None,
        old_value: str | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> AuditRecord | None:
        """Build a record for *entity* and dispatch it; return the record."""
        record = self._builder.build(
            entity, action, context=context, old_value=old_value, metadata=metadata
        )
        if record is None:
            return None
        try:
            await self._dispatcher.dispatch(record)
        except Exception as exc:  # noqa: BLE001
            logger.error("audit.dispatch_failed", record_id=record.id, sink="dispatcher", error=repr(exc))
        return record

    async def before_create(self, entity: Any, **kwargs: Any) -> AuditRecord | None:
        return await self.record(entity, AuditAction.CREATE, **kwargs)

    async def before_update(self, entity: Any, **kwargs: Any) -> AuditRecord | None:
        return await self.record(entity, AuditAction.UPDATE, **kwargs)

    async def before_remove(self, entity: Any, **kwargs: Any) -> AuditRecord | None:
        return await self.record(entity, AuditAction.DELETE, **kwargs)


__all__ = ["EntityAuditor"]
