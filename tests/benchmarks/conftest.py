"""Shared fixtures for the audit benchmarks."""

from __future__ import annotations

import asyncio

import pytest

from mp_audit.context import RequestContext


@pytest.fixture(scope="session")
def event_loop():
    """One event loop for the whole benchmark session, for stable timings."""
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture()
def request_context():
    """Populate the caller identity the way the ASGI middleware would."""
    with RequestContext.scope("alice", "10.0.0.5", "/accounts/42") as snapshot:
        yield snapshot
