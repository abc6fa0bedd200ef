"""Kafka adapter – AuditRecordSerializer."""
from __future__ import annotations

from mp_audit.kernel.errors import SnapshotSerializationError
from mp_audit.record import AuditRecord


class AuditRecordSerializer:
    """JSON serialiser/deserialiser for audit records on the wire."""

    def serialize(self, record: AuditRecord) -> bytes:
        return record.to_json().encode()

    def key(self, record: AuditRecord) -> bytes:
        return record.id.encode()

    def deserialize(self, data: bytes) -> AuditRecord:
        try:
            return AuditRecord.from_json(data)
        except (KeyError, ValueError, TypeError) as exc:
            raise SnapshotSerializationError(
                f"Malformed audit record payload: {exc}",
                entity_type="AuditRecord",
                cause=exc,
            ) from exc


__all__ = ["AuditRecordSerializer"]
