"""
mp_audit – Entity-change audit logging for regulated services.

Import path convention::

    from mp_audit.context import RequestContext
    from mp_audit.record import AuditAction, AuditRecord, RecordBuilder
    from mp_audit.dispatch import AuditDispatcher, AuditSink
    from mp_audit.adapters.kafka import KafkaAuditSink
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
