"""Context – RequestContext backed by ``contextvars``.

Each asyncio task (and each thread) sees its own copy of the stored caller
identity, so concurrent requests never observe each other's values.  The
inbound-request collaborator must still call :meth:`RequestContext.clear`
on every exit path, or use :meth:`RequestContext.scope`.
"""
from __future__ import annotations

import contextlib
import dataclasses
from contextvars import ContextVar, Token
from typing import Iterator


@dataclasses.dataclass(frozen=True)
class RequestContextSnapshot:
    """Immutable copy of the caller identity for one request."""

    acting_user: str | None = None
    source_address: str | None = None
    request_path: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.acting_user is None and self.source_address is None and self.request_path is None


EMPTY_CONTEXT = RequestContextSnapshot()

_CTX_VAR: ContextVar[RequestContextSnapshot] = ContextVar("_mp_audit_request_ctx", default=EMPTY_CONTEXT)


class RequestContext:
    """Ambient, request-scoped caller identity used to attribute audit records."""

    @staticmethod
    def set(
        acting_user: str | None,
        source_address: str | None,
        request_path: str | None,
    ) -> Token[RequestContextSnapshot]:
        """Store the caller identity for the current execution scope."""
        return _CTX_VAR.set(RequestContextSnapshot(acting_user, source_address, request_path))

    @staticmethod
    def get_acting_user() -> str | None:
        return _CTX_VAR.get().acting_user

    @staticmethod
    def get_source_address() -> str | None:
        return _CTX_VAR.get().source_address

    @staticmethod
    def get_request_path() -> str | None:
        return _CTX_VAR.get().request_path

    @staticmethod
    def snapshot() -> RequestContextSnapshot:
        """Return the current values as one frozen snapshot."""
        return _CTX_VAR.get()

    @staticmethod
    def clear() -> None:
        """Remove all stored values for the current execution scope."""
        _CTX_VAR.set(EMPTY_CONTEXT)

    @staticmethod
    @contextlib.contextmanager
    def scope(
        acting_user: str | None,
        source_address: str | None,
        request_path: str | None,
    ) -> Iterator[RequestContextSnapshot]:
        """Set the caller identity for the duration of a ``with`` block.

        The context is cleared on exit, including when the block raises.
        """
        RequestContext.set(acting_user, source_address, request_path)
        try:
            yield _CTX_VAR.get()
        finally:
            RequestContext.clear()


__all__ = ["EMPTY_CONTEXT", "RequestContext", "RequestContextSnapshot"]
