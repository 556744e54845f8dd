"""
Core resplane infrastructure: error types and configuration loading.
"""

from resplane.core.config import LoggingConfig, ResplaneConfig, load_config
from resplane.core.errors import (
    BackendError,
    BadPropertyIdsError,
    CatalogError,
    ConfigError,
    ConstraintViolationError,
    ResourceAlreadyExistsError,
    ResourceNotFoundError,
    ResplaneError,
    UnsupportedOperationError,
)

__all__ = [
    "BackendError",
    "BadPropertyIdsError",
    "CatalogError",
    "ConfigError",
    "ConstraintViolationError",
    "LoggingConfig",
    "ResourceAlreadyExistsError",
    "ResourceNotFoundError",
    "ResplaneConfig",
    "ResplaneError",
    "UnsupportedOperationError",
    "load_config",
]
