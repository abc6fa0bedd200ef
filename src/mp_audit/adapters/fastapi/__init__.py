"""FastAPI adapter – request-context middleware.

Requires the ``fastapi`` extra::

    pip install "mp-audit[fastapi]"
"""
from mp_audit.adapters.fastapi.middleware import FastAPIAuditContextMiddleware

__all__ = ["FastAPIAuditContextMiddleware"]
