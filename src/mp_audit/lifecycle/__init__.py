"""Lifecycle – explicit before-create/update/remove hooks."""
from mp_audit.lifecycle.auditor import EntityAuditor

__all__ = ["EntityAuditor"]
