"""Config settings – EnvSettingsLoader, DotenvSettingsLoader."""
from __future__ import annotations

import abc
import dataclasses
import os
from typing import Any, TypeVar

from dotenv import load_dotenv

from mp_audit.config.settings.base import Settings
from mp_audit.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

T = TypeVar("T", bound=Settings)

_TRUTHY = ("1", "true", "yes", "on")


def construct_settings(settings_class: type[T], values: dict[str, Any]) -> T:
    """Build *settings_class* from *values*, mapping failures to :class:`ConfigError`."""
    for name in settings_class.required_fields():
        if name not in values:
            raise MissingRequiredSettingError(settings_class.env_key(name))
    try:
        return settings_class(**values)
    except ConfigError:
        raise
    except Exception as exc:
        raise ConfigError(f"Failed to construct {settings_class.__name__}: {exc}", cause=exc) from exc


class SettingsLoader(abc.ABC):
    """Port: one source of settings values."""

    @abc.abstractmethod
    def read(self, settings_class: type[T]) -> dict[str, Any]:
        """Return the coerced field values this source provides."""

    def load(self, settings_class: type[T]) -> T:
        return construct_settings(settings_class, self.read(settings_class))


class EnvSettingsLoader(SettingsLoader):
    """Read settings from OS environment variables.

    A field ``sink_kind`` on a class with ``_prefix = "AUDIT"`` is read from
    ``AUDIT_SINK_KIND``.  Values are coerced from the field annotation:
    ``bool``, ``int``, ``float`` and comma-separated ``tuple`` / ``list``.
    """

    def read(self, settings_class: type[T]) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for field in dataclasses.fields(settings_class):  # type: ignore[arg-type]
            env_key = settings_class.env_key(field.name)
            raw = os.environ.get(env_key)
            if raw is None:
                continue
            values[field.name] = self._coerce(env_key, raw, field.type)
        return values

    def _coerce(self, key: str, value: str, type_hint: Any) -> Any:  # noqa: PLR0911
        # annotations are strings under ``from __future__ import annotations``
        hint = type_hint if isinstance(type_hint, str) else getattr(type_hint, "__name__", str(type_hint))
        if hint == "bool":
            return value.strip().lower() in _TRUTHY
        if hint == "int":
            try:
                return int(value)
            except ValueError as exc:
                raise InvalidSettingValueError(key, value, "expected an integer") from exc
        if hint == "float":
            try:
                return float(value)
            except ValueError as exc:
                raise InvalidSettingValueError(key, value, "expected a number") from exc
        if hint.startswith(("list", "tuple")):
            return tuple(v.strip() for v in value.split(",") if v.strip())
        return value


class DotenvSettingsLoader(EnvSettingsLoader):
    """Load a ``.env`` file into the environment, then read it."""

    def __init__(self, env_file: str = ".env", override: bool = False) -> None:
        self._env_file = env_file
        self._override = override

    def read(self, settings_class: type[T]) -> dict[str, Any]:
        load_dotenv(self._env_file, override=self._override)
        return super().read(settings_class)


__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "SettingsLoader", "construct_settings"]
