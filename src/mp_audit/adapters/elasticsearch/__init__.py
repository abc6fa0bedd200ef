"""Elasticsearch adapter – direct store sink over the REST API (httpx).

Requires the ``elasticsearch`` extra::

    pip install "mp-audit[elasticsearch]"
"""
from mp_audit.adapters.elasticsearch.sink import AUDIT_INDEX_MAPPINGS, ElasticsearchAuditSink

__all__ = ["AUDIT_INDEX_MAPPINGS", "ElasticsearchAuditSink"]
