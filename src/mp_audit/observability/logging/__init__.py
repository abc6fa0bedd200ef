"""Observability – structured logging helpers."""
from mp_audit.observability.logging.factory import configure_logging
from mp_audit.observability.logging.filters import SensitiveFieldsFilter
from mp_audit.observability.logging.processors import RequestContextProcessor, get_logger

__all__ = [
    "RequestContextProcessor",
    "SensitiveFieldsFilter",
    "configure_logging",
    "get_logger",
]
