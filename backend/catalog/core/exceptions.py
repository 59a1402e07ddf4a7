from typing import Dict, Optional


class CatalogError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500
    error = "Internal server error"

    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or {}


class NotFoundError(CatalogError):
    status_code = 404
    error = "Resource not found"


class InvalidArgumentError(CatalogError):
    """Validation failure. `errors` maps each offending field to a message."""

    status_code = 400
    error = "Invalid input data"

    def __init__(self, message: str = "Validation failed", errors: Optional[Dict[str, str]] = None):
        super().__init__(message, errors)


class ConflictError(CatalogError):
    status_code = 409
    error = "Conflict"


class InternalError(CatalogError):
    status_code = 500
    error = "Internal server error"


def raise_if_errors(errors: Dict[str, str], message: str = "Validation failed"):
    """Raise a single InvalidArgumentError carrying every collected problem."""
    if errors:
        raise InvalidArgumentError(message, errors)
