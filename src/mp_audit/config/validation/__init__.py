"""Config validation errors."""
from mp_audit.config.validation.errors import (
    AuditConfigError,
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "AuditConfigError",
    "ConfigError",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
]
