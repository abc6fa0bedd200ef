"""Dispatch – RetryingSink (tenacity-backed backoff around any sink)."""
from __future__ import annotations

from typing import Any

import tenacity

from mp_audit.dispatch.sink import AuditSink
from mp_audit.observability.logging import get_logger
from mp_audit.record import AuditRecord

logger = get_logger(__name__)


class RetryingSink(AuditSink):
    """Retry a failing :class:`AuditSink` write with backoff.

    Parameters
    ----------
    inner:
        The sink to protect.
    max_attempts:
        Maximum number of write attempts (including the first call).
    wait:
        A ``tenacity`` wait strategy.  Defaults to
        ``wait_exponential(multiplier=0.2, max=5)``.
    retry:
        A ``tenacity`` retry predicate.  Defaults to retrying on any
        exception.

    After the last attempt the last exception propagates to the
    dispatcher, which logs it.
    """

    def __init__(
        self,
        inner: AuditSink,
        max_attempts: int = 3,
        wait: Any = None,
        retry: Any = None,
    ) -> None:
        self._inner = inner
        self._max_attempts = max_attempts
        self._wait = wait or tenacity.wait_exponential(multiplier=0.2, max=5)
        self._retry = retry or tenacity.retry_if_exception_type(Exception)
        self.kind = f"retrying:{inner.kind}"

    @property
    def inner(self) -> AuditSink:
        return self._inner

    def _before_sleep(self, state: tenacity.RetryCallState) -> None:
        outcome = state.outcome
        logger.warning(
            "audit.sink_retry",
            sink=self._inner.kind,
            attempt=state.attempt_number,
            error=repr(outcome.exception()) if outcome is not None else None,
        )

    async def write(self, record: AuditRecord) -> None:
        async for attempt in tenacity.AsyncRetrying(
            stop=tenacity.stop_after_attempt(self._max_attempts),
            wait=self._wait,
            retry=self._retry,
            reraise=True,
            before_sleep=self._before_sleep,
        ):
            with attempt:
                await self._inner.write(record)

    async def start(self) -> None:
        await self._inner.start()

    async def close(self) -> None:
        await self._inner.close()


__all__ = ["RetryingSink"]
