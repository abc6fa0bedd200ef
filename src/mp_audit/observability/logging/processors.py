"""Observability – structlog processors and get_logger helper."""
from __future__ import annotations

from typing import Any

import structlog


class RequestContextProcessor:
    """structlog processor that injects the caller identity of the current request.

    Injects ``acting_user``, ``source_address`` and ``request_path`` when
    they are set in :class:`~mp_audit.context.RequestContext`.
    """

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        from mp_audit.context import RequestContext

        snapshot = RequestContext.snapshot()
        if snapshot.acting_user is not None:
            event_dict.setdefault("acting_user", snapshot.acting_user)
        if snapshot.source_address is not None:
            event_dict.setdefault("source_address", snapshot.source_address)
        if snapshot.request_path is not None:
            event_dict.setdefault("request_path", snapshot.request_path)
        return event_dict


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = ["RequestContextProcessor", "get_logger"]
