"""FastAPI adapter – FastAPIAuditContextMiddleware."""
from __future__ import annotations

from typing import TYPE_CHECKING

from mp_audit.context import RequestContext
from mp_audit.observability.logging import get_logger

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Receive, Scope, Send

logger = get_logger(__name__)


def _require_fastapi() -> None:
    try:
        import fastapi  # noqa: F401
    except ImportError as exc:
        raise ImportError(
            "Install 'mp-audit[fastapi]' to use the FastAPI adapter"
        ) from exc


def _header(headers: dict[bytes, bytes], name: bytes) -> str:
    # ASGI header values are latin-1 byte strings
    return headers.get(name, b"").decode("latin-1").strip()


class FastAPIAuditContextMiddleware:
    """Populate :class:`RequestContext` for each HTTP request and clear it after.

    Resolution:

    * acting user: ``X-User-Id`` header (configurable);
    * source address: first hop of ``X-Forwarded-For`` when
      *trust_forwarded* is set, otherwise the ASGI client host;
    * request path: the ASGI ``path``.

    The context is cleared when the request finishes, including when the
    application raises.  A scope that cannot be resolved is logged and the
    request proceeds with an empty context.
    """

    def __init__(
        self,
        app: "ASGIApp",
        user_header: str = "X-User-Id",
        forwarded_header: str = "X-Forwarded-For",
        trust_forwarded: bool = True,
    ) -> None:
        _require_fastapi()
        self.app = app
        self._user_header = user_header.lower().encode()
        self._forwarded_header = forwarded_header.lower().encode()
        self._trust_forwarded = trust_forwarded

    def _source_address(self, scope: "Scope", headers: dict[bytes, bytes]) -> str | None:
        if self._trust_forwarded:
            forwarded = _header(headers, self._forwarded_header)
            if forwarded:
                return forwarded.split(",")[0].strip() or None
        client = scope.get("client")
        if client and isinstance(client, (tuple, list)):
            return str(client[0])
        return None

    def _resolve(self, scope: "Scope") -> tuple[str | None, str | None, str | None]:
        try:
            headers = dict(scope.get("headers") or [])
            user = _header(headers, self._user_header) or None
            return user, self._source_address(scope, headers), scope.get("path")
        except Exception as exc:
            logger.warning("audit.context_resolution_failed", path=scope.get("path"), error=repr(exc))
            return None, None, None

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        with RequestContext.scope(*self._resolve(scope)):
            await self.app(scope, receive, send)


__all__ = ["FastAPIAuditContextMiddleware"]
