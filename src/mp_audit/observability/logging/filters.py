"""Observability – SensitiveFieldsFilter."""
from __future__ import annotations

from typing import Any, Iterable

from mp_audit.kernel.security import DEFAULT_SENSITIVE_FIELDS


class SensitiveFieldsFilter:
    """Replace values of sensitive keys with ``[REDACTED]``."""

    REDACTED = "[REDACTED]"

    def __init__(self, sensitive_fields: Iterable[str] | None = None) -> None:
        fields = DEFAULT_SENSITIVE_FIELDS if sensitive_fields is None else sensitive_fields
        self._fields = frozenset(f.lower() for f in fields)

    @property
    def fields(self) -> frozenset[str]:
        return self._fields

    def redact(self, data: dict[str, Any]) -> dict[str, Any]:
        return {k: (self.REDACTED if k.lower() in self._fields else v) for k, v in data.items()}

    def redact_deep(self, data: Any) -> Any:
        """Recursively redact nested dicts, lists and tuples."""
        if isinstance(data, dict):
            return {
                k: self.REDACTED if str(k).lower() in self._fields else self.redact_deep(v)
                for k, v in data.items()
            }
        if isinstance(data, list):
            return [self.redact_deep(item) for item in data]
        if isinstance(data, tuple):
            return tuple(self.redact_deep(item) for item in data)
        return data


__all__ = ["SensitiveFieldsFilter"]
