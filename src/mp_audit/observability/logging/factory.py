"""Observability – configure_logging (structlog JSON output)."""
from __future__ import annotations

import logging
from typing import Any, Iterable

import structlog

from mp_audit.observability.logging.filters import SensitiveFieldsFilter
from mp_audit.observability.logging.processors import RequestContextProcessor


def configure_logging(
    level: int = logging.INFO,
    sensitive_fields: Iterable[str] | None = None,
) -> None:
    """Route structlog and stdlib logging through one JSON renderer on stderr."""
    _filter = SensitiveFieldsFilter(sensitive_fields)

    def _redact(logger: Any, method: Any, event_dict: dict[str, Any]) -> dict[str, Any]:  # noqa: ARG001
        return _filter.redact_deep(event_dict)

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        RequestContextProcessor(),
        _redact,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


__all__ = ["configure_logging"]
