"""MongoDB adapter – MongoAuditSink."""
from __future__ import annotations

from typing import Any

from mp_audit.dispatch import AuditSink
from mp_audit.record import AuditRecord


class MongoAuditSink(AuditSink):
    """Direct store sink: upsert each record keyed by ``_id = record.id``.

    *collection* is a shared motor ``AsyncIOMotorCollection``.  The stored
    document is the wire form of the record plus ``_id``.
    """

    kind = "mongodb"

    def __init__(self, collection: Any) -> None:
        self._col = collection

    @staticmethod
    def _to_document(record: AuditRecord) -> dict[str, Any]:
        doc = record.to_dict()
        doc["_id"] = record.id
        return doc

    async def write(self, record: AuditRecord) -> None:
        doc = self._to_document(record)
        await self._col.replace_one({"_id": doc["_id"]}, doc, upsert=True)

    async def get(self, record_id: str) -> AuditRecord | None:
        doc = await self._col.find_one({"_id": record_id})
        if doc is None:
            return None
        doc.pop("_id", None)
        return AuditRecord.from_dict(doc)

    async def find_by_entity(self, entity_name: str, entity_id: str) -> list[AuditRecord]:
        """Return the trail of one entity, oldest first."""
        cursor = self._col.find({"entityName": entity_name, "entityId": entity_id}).sort("timestamp", 1)
        records: list[AuditRecord] = []
        async for doc in cursor:
            doc.pop("_id", None)
            records.append(AuditRecord.from_dict(doc))
        return records

    @classmethod
    async def create_indexes(cls, collection: Any) -> None:
        """Create the lookup indexes (idempotent)."""
        await collection.create_index([("entityName", 1), ("entityId", 1), ("timestamp", 1)])
        await collection.create_index([("changedBy", 1), ("timestamp", 1)])


__all__ = ["MongoAuditSink"]
