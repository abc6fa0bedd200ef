"""Record – AuditRecord model, identifier discovery, snapshots and RecordBuilder."""
from mp_audit.record.builder import RecordBuilder
from mp_audit.record.identity import (
    DEFAULT_ID_RESOLVERS,
    HasAuditIdentity,
    IdResolver,
    audit_id_field,
    resolve_entity_id,
    resolve_entity_name,
)
from mp_audit.record.models import TIMESTAMP_FORMAT, AuditAction, AuditRecord
from mp_audit.record.snapshot import SnapshotSerializer

__all__ = [
    "AuditAction",
    "AuditRecord",
    "DEFAULT_ID_RESOLVERS",
    "HasAuditIdentity",
    "IdResolver",
    "RecordBuilder",
    "SnapshotSerializer",
    "TIMESTAMP_FORMAT",
    "audit_id_field",
    "resolve_entity_id",
    "resolve_entity_name",
]
