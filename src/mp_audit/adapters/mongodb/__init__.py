"""MongoDB adapter – direct store sink.

Requires the ``mongodb`` extra::

    pip install "mp-audit[mongodb]"
"""
from mp_audit.adapters.mongodb.sink import MongoAuditSink

__all__ = ["MongoAuditSink"]
