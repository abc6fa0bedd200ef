"""Config – AuditSettings.

Environment variables (prefix ``AUDIT``)::

    AUDIT_ENABLED=true
    AUDIT_SERVICE_NAME=kyc-aml-service
    AUDIT_COMPLIANCE_TAG=KYC
    AUDIT_SINK_KIND=queued            # direct | queued | none
    AUDIT_SINK_TOPIC=audit-logs
    AUDIT_SINK_BOOTSTRAP_SERVERS=localhost:9092
"""
from __future__ import annotations

import dataclasses
from typing import Sequence

from mp_audit.config.settings import EnvSettingsLoader, Settings, SettingsFactory, SettingsLoader
from mp_audit.config.validation import InvalidSettingValueError, MissingRequiredSettingError

SINK_KINDS = ("direct", "queued", "none")
STORE_BACKENDS = ("elasticsearch", "mongodb")


@dataclasses.dataclass
class AuditSettings(Settings):
    """Deployment-level audit configuration.

    Validation runs on construction so a misconfigured pipeline fails at
    process start instead of dropping every record at first dispatch.
    """

    _prefix = "AUDIT"

    enabled: bool = True
    service_name: str = "default-service"
    compliance_tag: str = "GENERAL"
    sink_kind: str = "direct"
    sink_topic: str = "audit-logs"
    sink_index: str = "audit-logs"
    sink_store: str = "elasticsearch"
    sink_url: str | None = None
    sink_database: str = "audit"
    sink_bootstrap_servers: str | None = None
    sink_wait_for_ack: bool = False
    retry_attempts: int = 1
    redact_fields: tuple[str, ...] = ()

    def _validate(self) -> None:
        self.sink_kind = self.sink_kind.strip().lower()
        self.sink_store = self.sink_store.strip().lower()

        if self.sink_kind not in SINK_KINDS:
            raise InvalidSettingValueError(
                "AUDIT_SINK_KIND", self.sink_kind, f"expected one of {', '.join(SINK_KINDS)}"
            )
        if not self.service_name:
            raise InvalidSettingValueError("AUDIT_SERVICE_NAME", self.service_name, "must not be empty")
        if self.retry_attempts < 1:
            raise InvalidSettingValueError("AUDIT_RETRY_ATTEMPTS", self.retry_attempts, "must be >= 1")

        if not self.is_active:
            return

        if self.sink_kind == "direct":
            if self.sink_store not in STORE_BACKENDS:
                raise InvalidSettingValueError(
                    "AUDIT_SINK_STORE", self.sink_store, f"expected one of {', '.join(STORE_BACKENDS)}"
                )
            if not self.sink_url:
                raise MissingRequiredSettingError("AUDIT_SINK_URL")
            if self.sink_store == "elasticsearch" and not self.sink_index:
                raise MissingRequiredSettingError("AUDIT_SINK_INDEX")
        elif self.sink_kind == "queued":
            if not self.sink_bootstrap_servers:
                raise MissingRequiredSettingError("AUDIT_SINK_BOOTSTRAP_SERVERS")
            if not self.sink_topic:
                raise MissingRequiredSettingError("AUDIT_SINK_TOPIC")

    @property
    def is_active(self) -> bool:
        """``True`` when records should reach a backend."""
        return self.enabled and self.sink_kind != "none"

    @classmethod
    def load(
        cls,
        loaders: Sequence[SettingsLoader] | None = None,
        **overrides: object,
    ) -> "AuditSettings":
        """Build settings from *loaders* (environment by default) plus overrides."""
        return SettingsFactory.create(
            cls,
            loaders=loaders if loaders is not None else [EnvSettingsLoader()],
            overrides=dict(overrides) or None,
        )


__all__ = ["AuditSettings", "SINK_KINDS", "STORE_BACKENDS"]
