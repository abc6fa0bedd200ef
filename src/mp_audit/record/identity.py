"""Record – entity name and identifier discovery.

Entities declare their identifier explicitly, in order of precedence:

1. implement :class:`HasAuditIdentity` (``audit_identity()``);
2. name the attribute with a ``__audit_id__`` class attribute;
3. mark a dataclass field with :func:`audit_id_field`.

Adapters can contribute further resolvers, e.g. the SQLAlchemy adapter
resolves mapped primary keys.
"""
from __future__ import annotations

import dataclasses
from typing import Any, Callable, Iterable, Protocol, runtime_checkable

from mp_audit.observability.logging import get_logger

logger = get_logger(__name__)

AUDIT_ID_METADATA_KEY = "audit_id"

IdResolver = Callable[[Any], Any]
"""Return the identifier value of an entity, or ``None`` when unknown."""


@runtime_checkable
class HasAuditIdentity(Protocol):
    """Capability: the entity knows its own audit identifier."""

    def audit_identity(self) -> Any: ...


def audit_id_field(**kwargs: Any) -> Any:
    """``dataclasses.field`` that marks the entity identifier.

    Example::

        @dataclass
        class Account:
            account_no: str = audit_id_field()
            owner: str = ""
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[AUDIT_ID_METADATA_KEY] = True
    return dataclasses.field(metadata=metadata, **kwargs)


def from_capability(entity: Any) -> Any:
    if isinstance(entity, HasAuditIdentity):
        return entity.audit_identity()
    return None


def from_declared_attribute(entity: Any) -> Any:
    attr = getattr(type(entity), "__audit_id__", None)
    if isinstance(attr, str):
        return getattr(entity, attr, None)
    return None


def from_dataclass_field(entity: Any) -> Any:
    if not dataclasses.is_dataclass(entity) or isinstance(entity, type):
        return None
    for field in dataclasses.fields(entity):
        if field.metadata.get(AUDIT_ID_METADATA_KEY):
            return getattr(entity, field.name, None)
    return None


DEFAULT_ID_RESOLVERS: tuple[IdResolver, ...] = (
    from_capability,
    from_declared_attribute,
    from_dataclass_field,
)


def resolve_entity_id(entity: Any, resolvers: Iterable[IdResolver] = DEFAULT_ID_RESOLVERS) -> str | None:
    """Return ``str(identifier)`` from the first resolver that finds one.

    Resolver failures are logged and treated as "not found"; this function
    never raises.
    """
    for resolver in resolvers:
        try:
            value = resolver(entity)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "audit.id_resolver_failed",
                resolver=getattr(resolver, "__name__", repr(resolver)),
                entity_type=type(entity).__name__,
                error=repr(exc),
            )
            continue
        if value is not None:
            return str(value)
    return None


def resolve_entity_name(entity: Any) -> str:
    """``__audit_name__`` when declared, otherwise the class name."""
    name = getattr(type(entity), "__audit_name__", None)
    if isinstance(name, str) and name:
        return name
    return type(entity).__name__


__all__ = [
    "AUDIT_ID_METADATA_KEY",
    "DEFAULT_ID_RESOLVERS",
    "HasAuditIdentity",
    "IdResolver",
    "audit_id_field",
    "from_capability",
    "from_dataclass_field",
    "from_declared_attribute",
    "resolve_entity_id",
    "resolve_entity_name",
]
