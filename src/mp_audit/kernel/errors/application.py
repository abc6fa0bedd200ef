"""Application-layer errors: wiring mistakes detected at startup."""

from __future__ import annotations

from mp_audit.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """The audit pipeline was assembled or configured incorrectly."""

    default_code = "application_error"


__all__ = ["ApplicationError"]
