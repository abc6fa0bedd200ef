"""SQLAlchemy adapter – SqlAlchemyAuditUnitOfWork."""
from __future__ import annotations

from typing import Any, Iterable

from sqlalchemy import event

from mp_audit.adapters.sqlalchemy.identity import column_values, sqlalchemy_primary_key
from mp_audit.context import RequestContext, RequestContextSnapshot
from mp_audit.lifecycle import EntityAuditor
from mp_audit.observability.logging import get_logger
from mp_audit.record import AuditAction, AuditRecord, resolve_entity_name

logger = get_logger(__name__)


class SqlAlchemyAuditUnitOfWork:
    """SQLAlchemy async unit of work that audits every flushed entity.

    On each flush, new objects yield ``CREATE``, modified objects yield
    ``UPDATE`` (with ``oldValue`` taken from attribute history) and deleted
    objects yield ``DELETE``.  Records are built at flush time, held until
    the transaction commits and then dispatched; a rollback discards them.

    The request context is captured when the unit of work is entered, so
    records carry the caller identity of the request that opened it.

    Parameters
    ----------
    session_factory:
        Callable returning an ``AsyncSession``.
    auditor:
        The :class:`~mp_audit.lifecycle.EntityAuditor` providing the builder
        and dispatcher.
    audited:
        Restrict auditing to instances of these classes.  ``None`` audits
        every mapped object in the session.
    """

    def __init__(
        self,
        session_factory: Any,
        auditor: EntityAuditor,
        *,
        audited: Iterable[type] | None = None,
    ) -> None:
        self._factory = session_factory
        self._auditor = auditor
        self._builder = auditor.builder.with_id_resolver(sqlalchemy_primary_key)
        self._audited = tuple(audited) if audited is not None else None
        self._context: RequestContextSnapshot = RequestContext.snapshot()
        self._pending: list[AuditRecord] = []
        self.session: Any = None

    @property
    def pending(self) -> list[AuditRecord]:
        """Records built but not yet dispatched."""
        return list(self._pending)

    async def __aenter__(self) -> "SqlAlchemyAuditUnitOfWork":
        self.session = self._factory()
        self._context = RequestContext.snapshot()
        self._pending = []
        event.listen(self.session.sync_session, "before_flush", self._before_flush)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        try:
            if exc_type is None:
                await self.commit()
            else:
                await self.rollback()
        finally:
            event.remove(self.session.sync_session, "before_flush", self._before_flush)
            await self.session.close()

    async def commit(self) -> None:
        await self.session.commit()
        records, self._pending = self._pending, []
        for record in records:
            await self._auditor.dispatcher.dispatch(record)

    async def rollback(self) -> None:
        await self.session.rollback()
        if self._pending:
            logger.debug("audit.records_discarded", count=len(self._pending))
        self._pending = []

    # ------------------------------------------------------------------
    # Flush hook
    # ------------------------------------------------------------------

    def _is_audited(self, obj: Any) -> bool:
        return self._audited is None or isinstance(obj, self._audited)

    def _before_flush(self, session: Any, flush_context: Any, instances: Any) -> None:  # noqa: ARG002
        for obj in list(session.new):
            if self._is_audited(obj):
                self._collect(obj, AuditAction.CREATE)
        for obj in list(session.dirty):
            if self._is_audited(obj) and session.is_modified(obj, include_collections=False):
                self._collect(obj, AuditAction.UPDATE, old_value=self._previous_snapshot(obj))
        for obj in list(session.deleted):
            if self._is_audited(obj):
                self._collect(obj, AuditAction.DELETE)

    def _previous_snapshot(self, obj: Any) -> str | None:
        try:
            return self._builder.serializer.serialize_mapping(
                column_values(obj, previous=True), resolve_entity_name(obj)
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning("audit.snapshot_failed", entity_name=resolve_entity_name(obj), error=repr(exc))
            return None

    def _collect(self, obj: Any, action: AuditAction, old_value: str | None = None) -> None:
        record = self._builder.build(obj, action, context=self._context, old_value=old_value)
        if record is not None:
            self._pending.append(record)


__all__ = ["SqlAlchemyAuditUnitOfWork"]
