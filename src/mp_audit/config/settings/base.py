"""Config settings – Settings base dataclass."""
from __future__ import annotations

import dataclasses


@dataclasses.dataclass
class Settings:
    """Dataclass whose fields map to ``{_prefix}_{FIELD}`` environment variables.

    Subclasses override :meth:`_validate` for cross-field checks; it runs on
    every construction, so an invalid combination never yields an instance.
    """

    _prefix: dataclasses.ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        return None

    @classmethod
    def env_key(cls, field_name: str) -> str:
        """Environment variable for *field_name*, e.g. ``AUDIT_SINK_KIND``."""
        prefix = cls._prefix.upper()
        return f"{prefix}_{field_name.upper()}" if prefix else field_name.upper()

    @classmethod
    def required_fields(cls) -> tuple[str, ...]:
        """Names of fields with no default."""
        return tuple(
            f.name
            for f in dataclasses.fields(cls)
            if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING
        )


__all__ = ["Settings"]
