"""Root of the mp-audit error hierarchy."""

from __future__ import annotations

from typing import Any


class BaseError(Exception):
    """Base class for every error raised by mp-audit.

    Args:
        message: Human-readable description.
        code: Stable slug for log queries; defaults to ``default_code``.
        detail: Extra context rendered into log events.
        cause: The lower-level exception this error wraps.
    """

    default_code: str = "audit_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = dict(detail or {})
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form, safe to pass as structlog event fields."""
        payload: dict[str, Any] = {"error_code": self.code, "error_message": self.message}
        payload.update(self.detail)
        if self.cause is not None:
            payload["cause"] = repr(self.cause)
        return payload


__all__ = ["BaseError"]
