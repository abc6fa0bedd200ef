"""Infrastructure errors: snapshot serialisation and sink I/O failures."""

from __future__ import annotations

from typing import Any

from mp_audit.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a business rule violation."""

    default_code = "infrastructure_error"


class SnapshotSerializationError(InfrastructureError):
    """An entity could not be rendered into an audit snapshot."""

    default_code = "snapshot_serialization_error"

    def __init__(
        self,
        message: str,
        *,
        entity_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.entity_type = entity_type


class SinkError(InfrastructureError):
    """Base class for failures raised by an audit sink."""

    default_code = "sink_error"


class SinkWriteError(SinkError):
    """A sink failed to accept a record (unreachable, rejected, timed out)."""

    default_code = "sink_write_error"

    def __init__(
        self,
        sink: str,
        record_id: str,
        message: str | None = None,
        *,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message or f"Sink '{sink}' failed to write record '{record_id}'",
            **kwargs,
        )
        self.sink = sink
        self.record_id = record_id
        self.status_code = status_code


__all__ = [
    "InfrastructureError",
    "SinkError",
    "SinkWriteError",
    "SnapshotSerializationError",
]
