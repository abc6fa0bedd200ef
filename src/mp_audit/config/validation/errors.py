"""Config validation errors raised while loading AuditSettings."""
from mp_audit.kernel.errors import ApplicationError


class ConfigError(ApplicationError):
    """The audit pipeline cannot start with the given configuration."""
    default_code = "config_error"


class MissingRequiredSettingError(ConfigError):
    """A setting needed by the chosen sink was not supplied."""
    default_code = "missing_required_setting"

    def __init__(self, setting_name: str) -> None:
        super().__init__(f"Required setting '{setting_name}' is missing", detail={"setting": setting_name})
        self.setting_name = setting_name


class InvalidSettingValueError(ConfigError):
    """A setting was supplied but its value is unusable."""
    default_code = "invalid_setting_value"

    def __init__(self, setting_name: str, value: object, reason: str) -> None:
        super().__init__(
            f"Setting '{setting_name}' has invalid value {value!r}: {reason}",
            detail={"setting": setting_name, "reason": reason},
        )
        self.setting_name = setting_name
        self.value = value
        self.reason = reason


# Raised for wiring mistakes such as an enabled dispatcher without sinks.
AuditConfigError = ConfigError

__all__ = [
    "AuditConfigError",
    "ConfigError",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
]
