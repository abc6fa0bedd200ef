"""Record – SnapshotSerializer.

Renders an entity into the JSON string stored in ``oldValue`` /
``newValue``.  Sensitive keys are redacted before rendering so personal
secrets never reach the audit index.
"""
from __future__ import annotations

import dataclasses
import json
from enum import Enum
from typing import Any, Iterable, Mapping

from mp_audit.kernel.errors import SnapshotSerializationError
from mp_audit.kernel.security import DEFAULT_SENSITIVE_FIELDS
from mp_audit.observability.logging import SensitiveFieldsFilter


class SnapshotSerializer:
    """Convert entities to sorted-key JSON with sensitive fields redacted.

    Parameters
    ----------
    redact_fields:
        Keys (case-insensitive) whose values are replaced with
        ``[REDACTED]`` at any nesting depth.  Defaults to
        :data:`~mp_audit.kernel.security.DEFAULT_SENSITIVE_FIELDS`.
    """

    def __init__(self, redact_fields: Iterable[str] | None = None) -> None:
        self._filter = SensitiveFieldsFilter(
            DEFAULT_SENSITIVE_FIELDS if redact_fields is None else redact_fields
        )

    def to_mapping(self, entity: Any) -> dict[str, Any]:
        """Return the public state of *entity* as a plain dict."""
        if isinstance(entity, Mapping):
            return dict(entity)
        if hasattr(entity, "model_dump"):
            return entity.model_dump(mode="json")
        if dataclasses.is_dataclass(entity) and not isinstance(entity, type):
            return dataclasses.asdict(entity)
        try:
            state = vars(entity)
        except TypeError as exc:
            raise SnapshotSerializationError(
                f"Cannot snapshot {type(entity).__name__}: no public state",
                entity_type=type(entity).__name__,
                cause=exc,
            ) from exc
        # SQLAlchemy keeps its instance state under ``_sa_instance_state``
        return {k: v for k, v in state.items() if not k.startswith("_")}

    def normalise(self, value: Any, _active: frozenset[int] = frozenset()) -> Any:
        """Reduce *value* to dicts, lists and scalars at every depth.

        Nested entities go through :meth:`to_mapping`; tuples and sets
        become lists.  Values with no public state (datetimes, decimals)
        are left for the JSON renderer.  An entity reached again through its
        own graph is rendered as ``"<TypeName>"``.
        """
        if value is None or isinstance(value, (str, bytes, int, float, Enum)):
            return value
        container = (
            isinstance(value, (Mapping, list, tuple, set, frozenset))
            or hasattr(value, "model_dump")
            or dataclasses.is_dataclass(value)
            or hasattr(value, "__dict__")
        )
        if not container or isinstance(value, type) or callable(value):
            return value
        if id(value) in _active:
            if not isinstance(value, (Mapping, list, tuple, set, frozenset)):
                # back-reference between entities, e.g. a bidirectional relationship
                return f"<{type(value).__name__}>"
            raise SnapshotSerializationError(
                f"Circular reference in {type(value).__name__} snapshot",
                entity_type=type(value).__name__,
            )
        active = _active | {id(value)}
        if isinstance(value, (list, tuple)):
            return [self.normalise(item, active) for item in value]
        if isinstance(value, (set, frozenset)):
            return sorted((self.normalise(item, active) for item in value), key=repr)
        return {k: self.normalise(v, active) for k, v in self.to_mapping(value).items()}

    def serialize_mapping(self, data: Mapping[str, Any], entity_type: str = "dict") -> str:
        try:
            return json.dumps(
                self._filter.redact_deep(self.normalise(dict(data))),
                ensure_ascii=False,
                sort_keys=True,
                default=str,
            )
        except (TypeError, ValueError, RecursionError) as exc:
            raise SnapshotSerializationError(
                f"Cannot serialize {entity_type} snapshot: {exc}",
                entity_type=entity_type,
                cause=exc,
            ) from exc

    def serialize(self, entity: Any) -> str:
        """Return the JSON snapshot of *entity*.

        Raises
        ------
        SnapshotSerializationError
            When the entity cannot be converted or rendered.
        """
        root = frozenset({id(entity)})
        try:
            data = {k: self.normalise(v, root) for k, v in self.to_mapping(entity).items()}
        except SnapshotSerializationError:
            raise
        except Exception as exc:
            raise SnapshotSerializationError(
                f"Cannot snapshot {type(entity).__name__}: {exc}",
                entity_type=type(entity).__name__,
                cause=exc,
            ) from exc
        return self.serialize_mapping(data, type(entity).__name__)


__all__ = ["SnapshotSerializer"]
