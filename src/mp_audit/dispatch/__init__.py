"""Dispatch – AuditSink port, AuditDispatcher and RetryingSink."""
from mp_audit.dispatch.dispatcher import AuditDispatcher
from mp_audit.dispatch.retry import RetryingSink
from mp_audit.dispatch.sink import AuditSink

__all__ = ["AuditDispatcher", "AuditSink", "RetryingSink"]
