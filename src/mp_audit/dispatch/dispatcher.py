"""Dispatch – AuditDispatcher.

The single entry point that hands a built record to the configured sinks.
Sink failures terminate in a log line here; nothing propagates back into
the business mutation that produced the record.
"""
from __future__ import annotations

import asyncio
from typing import Iterable

from mp_audit.config.validation import AuditConfigError
from mp_audit.dispatch.sink import AuditSink
from mp_audit.observability.logging import get_logger
from mp_audit.record import AuditRecord

logger = get_logger(__name__)


class AuditDispatcher:
    """Route audit records to zero or more sinks.

    Parameters
    ----------
    sinks:
        Sinks written in order for every record.  Swapping a direct store
        sink for a broker sink changes the delivery policy without touching
        the builder or call sites.
    enabled:
        ``False`` turns :meth:`dispatch` into an explicit no-op.  An enabled
        dispatcher without sinks is rejected as misconfiguration.
    """

    def __init__(self, sinks: Iterable[AuditSink], *, enabled: bool = True) -> None:
        self._sinks: tuple[AuditSink, ...] = tuple(sinks)
        self._enabled = enabled
        self._pending: set[asyncio.Task[None]] = set()
        if enabled and not self._sinks:
            raise AuditConfigError(
                "Audit dispatcher is enabled but no sink is configured; "
                "use AuditDispatcher.disabled() to turn auditing off"
            )

    @classmethod
    def disabled(cls) -> "AuditDispatcher":
        """Dispatcher that never contacts a backend."""
        return cls((), enabled=False)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def sinks(self) -> tuple[AuditSink, ...]:
        return self._sinks

    async def dispatch(self, record: AuditRecord) -> None:
        """Hand *record* to every sink; failures are logged, never raised."""
        if not self._enabled:
            logger.debug("audit.dispatch_skipped", record_id=record.id, reason="disabled")
            return
        for sink in self._sinks:
            try:
                await sink.write(record)
            except asyncio.CancelledError:
                raise
            except Exception as exc:  # noqa: BLE001
                logger.error(
                    "audit.dispatch_failed",
                    record_id=record.id,
                    entity_name=record.entity_name,
                    action=record.action.value,
                    sink=sink.kind,
                    error=repr(exc),
                    error_code=getattr(exc, "code", None),
                )
            else:
                logger.debug("audit.dispatched", record_id=record.id, sink=sink.kind)

    def dispatch_nowait(self, record: AuditRecord) -> asyncio.Task[None] | None:
        """Schedule :meth:`dispatch` on the running loop and return immediately.

        Must be called from a coroutine or callback running on an event loop.
        """
        if not self._enabled:
            return None
        task = asyncio.get_running_loop().create_task(self.dispatch(record))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def start(self) -> None:
        """Open sink connections eagerly so failures surface at startup."""
        for sink in self._sinks:
            await sink.start()

    async def drain(self) -> None:
        """Wait for all fire-and-forget dispatches scheduled so far."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def aclose(self) -> None:
        """Drain pending dispatches and close every sink."""
        await self.drain()
        for sink in self._sinks:
            try:
                await sink.close()
            except Exception as exc:  # noqa: BLE001
                logger.warning("audit.sink_close_failed", sink=sink.kind, error=repr(exc))


__all__ = ["AuditDispatcher"]
