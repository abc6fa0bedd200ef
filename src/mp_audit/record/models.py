"""Record – AuditAction, AuditRecord and the persisted wire format."""

from __future__ import annotations

import dataclasses
import json
import uuid
from datetime import UTC, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from mp_audit.kernel.time import utc_now

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class AuditAction(str, Enum):
    """The lifecycle event that produced a record."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, value: "AuditAction | str") -> "AuditAction":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown audit action {value!r}") from None


def new_record_id() -> str:
    return str(uuid.uuid4())


def format_timestamp(value: datetime) -> str:
    """Render *value* in the fixed UTC wire format (``2026-01-01T12:00:00Z``)."""
    return value.astimezone(UTC).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime:
    return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=UTC)


@dataclasses.dataclass(frozen=True)
class AuditRecord:
    """An immutable description of one entity mutation.

    Parameters
    ----------
    entity_name:
        Name of the audited entity type, e.g. ``"Account"``.
    action:
        :class:`AuditAction` supplied by the lifecycle hook that fired.
    service_name / compliance_tag:
        Static per-deployment labels (``"kyc-service"``, ``"KYC"``).
    entity_id:
        String form of the entity identifier; ``None`` when the entity
        exposes none.
    changed_by / source_ip / request_uri:
        Caller identity copied from the request context.
    old_value / new_value:
        Serialized snapshots of the entity state.
    id:
        Unique record identifier; generated once, at build time.
    timestamp:
        UTC moment the change was detected.
    metadata:
        Free-form extra context, exposed read-only.
    """

    entity_name: str
    action: AuditAction
    service_name: str
    compliance_tag: str
    entity_id: str | None = None
    changed_by: str | None = None
    source_ip: str | None = None
    request_uri: str | None = None
    old_value: str | None = None
    new_value: str | None = None
    id: str = dataclasses.field(default_factory=new_record_id)
    timestamp: datetime = dataclasses.field(default_factory=utc_now)
    metadata: Mapping[str, Any] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "action", AuditAction.parse(self.action))
        ts = self.timestamp
        ts = ts.replace(tzinfo=UTC) if ts.tzinfo is None else ts.astimezone(UTC)
        # second precision, same as the wire format
        object.__setattr__(self, "timestamp", ts.replace(microsecond=0))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata or {})))

    def __hash__(self) -> int:
        # metadata is a mapping proxy; the id alone identifies a record
        return hash(self.id)

    # ------------------------------------------------------------------
    # Wire format
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Return the persisted document shape (camelCase keys)."""
        return {
            "id": self.id,
            "entityName": self.entity_name,
            "entityId": self.entity_id,
            "action": self.action.value,
            "changedBy": self.changed_by,
            "sourceIp": self.source_ip,
            "requestUri": self.request_uri,
            "oldValue": self.old_value,
            "newValue": self.new_value,
            "serviceName": self.service_name,
            "complianceTag": self.compliance_tag,
            "timestamp": format_timestamp(self.timestamp),
            "metadata": dict(self.metadata),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AuditRecord":
        return cls(
            id=data["id"],
            entity_name=data["entityName"],
            entity_id=data.get("entityId"),
            action=AuditAction.parse(data["action"]),
            changed_by=data.get("changedBy"),
            source_ip=data.get("sourceIp"),
            request_uri=data.get("requestUri"),
            old_value=data.get("oldValue"),
            new_value=data.get("newValue"),
            service_name=data["serviceName"],
            compliance_tag=data["complianceTag"],
            timestamp=parse_timestamp(data["timestamp"]),
            metadata=data.get("metadata") or {},
        )

    @classmethod
    def from_json(cls, raw: str | bytes) -> "AuditRecord":
        return cls.from_dict(json.loads(raw))


__all__ = [
    "AuditAction",
    "AuditRecord",
    "TIMESTAMP_FORMAT",
    "format_timestamp",
    "new_record_id",
    "parse_timestamp",
]
