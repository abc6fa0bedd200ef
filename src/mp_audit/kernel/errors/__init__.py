"""Kernel error hierarchy: public re-export surface.

Hierarchy::

    BaseError
    ├── ApplicationError            (application.py)
    │   └── ConfigError             (mp_audit.config.validation)
    └── InfrastructureError         (infrastructure.py)
        ├── SnapshotSerializationError
        └── SinkError
            └── SinkWriteError
"""

from mp_audit.kernel.errors.application import ApplicationError
from mp_audit.kernel.errors.base import BaseError
from mp_audit.kernel.errors.infrastructure import (
    InfrastructureError,
    SinkError,
    SinkWriteError,
    SnapshotSerializationError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "InfrastructureError",
    "SinkError",
    "SinkWriteError",
    "SnapshotSerializationError",
]
