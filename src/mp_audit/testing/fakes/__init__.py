"""Testing fakes – in-memory doubles for the sink port and the clock."""
from mp_audit.kernel.time import FrozenClock
from mp_audit.testing.fakes.clock import FakeClock
from mp_audit.testing.fakes.sinks import FailingAuditSink, InMemoryAuditSink

__all__ = ["FailingAuditSink", "FakeClock", "FrozenClock", "InMemoryAuditSink"]
