"""SQLAlchemy adapter – primary-key resolver and column snapshots."""
from __future__ import annotations

from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import NoInspectionAvailable


def sqlalchemy_primary_key(entity: Any) -> Any:
    """Return the mapped primary key of *entity*, or ``None``.

    Composite keys are joined with ``":"``.  Keys generated by the database
    are unknown before the INSERT, so a new row with an autoincrement key
    resolves to ``None``.
    """
    try:
        mapper = sa_inspect(type(entity))
    except NoInspectionAvailable:
        return None
    state_dict = sa_inspect(entity).dict
    values = [state_dict.get(mapper.get_property_by_column(col).key) for col in mapper.primary_key]
    if not values or all(v is None for v in values):
        return None
    if len(values) == 1:
        return values[0]
    return ":".join("" if v is None else str(v) for v in values)


def column_values(entity: Any, *, previous: bool = False) -> dict[str, Any]:
    """Loaded column values of *entity* without triggering a lazy load.

    With *previous*, attributes modified in this flush report the value
    they had before the change.
    """
    state = sa_inspect(entity)
    values: dict[str, Any] = {}
    for attr in state.mapper.column_attrs:
        if attr.key not in state.dict:
            continue
        value = state.dict[attr.key]
        if previous:
            history = state.attrs[attr.key].history
            if history.deleted:
                value = history.deleted[0]
        values[attr.key] = value
    return values


__all__ = ["column_values", "sqlalchemy_primary_key"]
