"""
Custom exceptions for the catalog service.

Each exception carries a stable machine-readable code and the HTTP status the
request boundary maps it to. Repositories and the auth gate raise these; the
app's exception handlers turn them into error responses.
"""

from typing import Any, Optional


class CatalogServiceException(Exception):
    """Base exception for all catalog service errors."""

    code = "catalog_error"
    status_code = 500

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(CatalogServiceException):
    """Raised when required fields are missing or malformed."""

    code = "validation_error"
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        details = {}
        if field:
            details = {"field": field, "value": str(value)}
        super().__init__(message=message, details=details)


class NotFoundException(CatalogServiceException):
    """Raised when a record lookup by id or email misses."""

    code = "not_found"
    status_code = 404

    def __init__(self, entity: str, key: str):
        super().__init__(
            message=f"{entity} not found", details={"entity": entity, "key": key}
        )


class UnauthorizedException(CatalogServiceException):
    """Raised when a bearer token is missing or invalid, or credentials are wrong."""

    code = "unauthorized"
    status_code = 401


class ForbiddenException(CatalogServiceException):
    """Raised when a valid principal lacks the admin capability."""

    code = "forbidden"
    status_code = 403


class ConflictException(CatalogServiceException):
    """Raised when a create or update would duplicate a unique key."""

    code = "conflict"
    status_code = 409


class StorageException(CatalogServiceException):
    """Raised when a collection file cannot be read, parsed or written."""

    code = "storage_error"
    status_code = 500

    def __init__(self, collection: str, operation: str, reason: Optional[str] = None):
        message = f"Storage {operation} failed for collection '{collection}'"
        super().__init__(
            message=message,
            details={"collection": collection, "operation": operation, "reason": reason},
        )
