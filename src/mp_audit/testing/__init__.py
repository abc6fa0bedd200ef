"""Testing support – in-memory sinks and a frozen clock.

Use in unit tests::

    from mp_audit.testing import FakeClock, InMemoryAuditSink
"""

from mp_audit.testing.fakes import FailingAuditSink, FakeClock, FrozenClock, InMemoryAuditSink

__all__ = ["FailingAuditSink", "FakeClock", "FrozenClock", "InMemoryAuditSink"]
