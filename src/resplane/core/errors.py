"""
Error types for resplane providers, catalogs and backend controllers.
"""

from collections.abc import Iterable


class ResplaneError(Exception):
    """Base exception for all resplane errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class CatalogError(ResplaneError):
    """
    Raised when the property catalog is unusable.

    Examples:
    - Unknown resource type requested from the catalog
    - Key or primary key property missing from the property set
    - Catalog file that cannot be read or parsed
    """

    pass


class ConfigError(ResplaneError):
    """Raised when a resplane.toml file cannot be read or has invalid values."""

    pass


class BadPropertyIdsError(ResplaneError):
    """
    Raised before any backend call when a request names property ids
    that the resource type does not support.
    """

    def __init__(self, resource_type: str, property_ids: Iterable[str]):
        self.resource_type = resource_type
        self.property_ids = frozenset(property_ids)
        listed = ", ".join(sorted(self.property_ids))
        super().__init__(f"The properties [{listed}] are not supported by {resource_type} resources")


class UnsupportedOperationError(ResplaneError):
    """Raised when a resource type does not allow the requested operation."""

    def __init__(self, resource_type: str, operation: str):
        self.resource_type = resource_type
        self.operation = operation
        super().__init__(f"Cannot {operation} a {resource_type} resource")


class BackendError(ResplaneError):
    """
    Raised by (or on behalf of) a backend controller when a call fails.

    Controllers raise subclasses directly; any other exception escaping a
    controller is wrapped in a plain BackendError with the resource type
    and operation attached.
    """

    def __init__(
        self,
        message: str,
        resource_type: str | None = None,
        operation: str | None = None,
    ):
        self.resource_type = resource_type
        self.operation = operation
        super().__init__(message)


class ResourceAlreadyExistsError(BackendError):
    """Raised by a controller when a create collides with an existing entity."""

    pass


class ResourceNotFoundError(BackendError):
    """Raised by a controller when the addressed entity does not exist."""

    pass


class ConstraintViolationError(BackendError):
    """Raised by a controller when a request breaks a backend constraint."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)
