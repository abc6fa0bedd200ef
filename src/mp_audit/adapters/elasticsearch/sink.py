"""Elasticsearch adapter – ElasticsearchAuditSink."""
from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from mp_audit.dispatch import AuditSink
from mp_audit.kernel.errors import SinkWriteError
from mp_audit.observability.logging import get_logger
from mp_audit.record import AuditRecord

logger = get_logger(__name__)

AUDIT_INDEX_MAPPINGS: dict[str, Any] = {
    "properties": {
        "id": {"type": "keyword"},
        "entityName": {"type": "keyword"},
        "entityId": {"type": "keyword"},
        "action": {"type": "keyword"},
        "changedBy": {"type": "keyword"},
        "sourceIp": {"type": "keyword"},
        "requestUri": {"type": "keyword"},
        "oldValue": {"type": "text", "index": False},
        "newValue": {"type": "text", "index": False},
        "serviceName": {"type": "keyword"},
        "complianceTag": {"type": "keyword"},
        "timestamp": {"type": "date", "format": "strict_date_time_no_millis"},
        "metadata": {"type": "object", "enabled": False},
    }
}


class ElasticsearchAuditSink(AuditSink):
    """Direct store sink: index each record under ``/{index}/_doc/{record.id}``.

    ``PUT`` with an explicit id is an upsert, so dispatching the same record
    twice leaves one document.

    Parameters
    ----------
    client:
        Shared ``httpx.AsyncClient`` whose ``base_url`` points at the cluster.
    index:
        Target index name.
    refresh:
        Optional ``refresh`` query parameter (``"wait_for"`` in tests).
    """

    kind = "elasticsearch"

    def __init__(
        self,
        client: httpx.AsyncClient,
        index: str = "audit-logs",
        *,
        refresh: str | None = None,
        owns_client: bool = False,
    ) -> None:
        self._client = client
        self._index = index
        self._refresh = refresh
        self._owns_client = owns_client

    @classmethod
    def from_url(cls, base_url: str, index: str = "audit-logs", timeout: float = 10.0, **kwargs: Any) -> "ElasticsearchAuditSink":
        """Create a sink that owns its own client (closed by :meth:`close`)."""
        client = httpx.AsyncClient(base_url=base_url, timeout=timeout)
        return cls(client, index, owns_client=True, **kwargs)

    @property
    def index(self) -> str:
        return self._index

    def _doc_url(self, record_id: str) -> str:
        return f"/{quote(self._index, safe='')}/_doc/{quote(record_id, safe='')}"

    async def write(self, record: AuditRecord) -> None:
        params = {"refresh": self._refresh} if self._refresh else None
        url = self._doc_url(record.id)
        try:
            response = await self._client.put(url, json=record.to_dict(), params=params)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise SinkWriteError(self.kind, record.id, f"Elasticsearch write timed out: PUT {url}") from exc
        except httpx.HTTPStatusError as exc:
            raise SinkWriteError(
                self.kind,
                record.id,
                f"HTTP {exc.response.status_code} from PUT {url}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise SinkWriteError(self.kind, record.id, str(exc)) from exc
        logger.debug("audit.es_indexed", index=self._index, record_id=record.id)

    async def create_index(self) -> bool:
        """Create the index with the audit mapping; ``False`` if it already exists."""
        response = await self._client.put(
            f"/{quote(self._index, safe='')}",
            json={"mappings": AUDIT_INDEX_MAPPINGS},
        )
        if response.status_code == 400 and "resource_already_exists" in response.text:
            return False
        response.raise_for_status()
        return True

    async def get(self, record_id: str) -> dict[str, Any] | None:
        """Fetch the stored document for *record_id* (compliance retrieval)."""
        response = await self._client.get(self._doc_url(record_id))
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json().get("_source")

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()


__all__ = ["AUDIT_INDEX_MAPPINGS", "ElasticsearchAuditSink"]
