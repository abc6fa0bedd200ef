"""Context – request-scoped caller identity."""
from mp_audit.context.request_context import EMPTY_CONTEXT, RequestContext, RequestContextSnapshot

__all__ = ["EMPTY_CONTEXT", "RequestContext", "RequestContextSnapshot"]
