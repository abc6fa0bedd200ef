"""Config settings – SettingsFactory."""
from __future__ import annotations

from typing import Any, Sequence, TypeVar

from mp_audit.config.settings.base import Settings
from mp_audit.config.settings.loaders import SettingsLoader, construct_settings

T = TypeVar("T", bound=Settings)


class SettingsFactory:
    """Layer several settings sources and construct once.

    Later loaders override earlier ones field by field, and *overrides*
    beat every loader.  Nothing is constructed until all sources are
    merged, so an incomplete early source cannot mask a later value.
    """

    @staticmethod
    def create(
        settings_cls: type[T],
        loaders: Sequence[SettingsLoader] | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> T:
        """Merge *loaders* then *overrides* and build *settings_cls*.

        Raises
        ------
        MissingRequiredSettingError
            A field without a default was supplied by no source.
        InvalidSettingValueError
            A value failed coercion or validation.
        ConfigError
            Construction failed for any other reason.
        """
        merged: dict[str, Any] = {}
        for loader in loaders or ():
            merged.update(loader.read(settings_cls))
        merged.update(overrides or {})
        return construct_settings(settings_cls, merged)


__all__ = ["SettingsFactory"]
