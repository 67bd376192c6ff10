"""
Domain error types and shared error messages.
"""


class DomainError(ValueError):
    """Base class for domain-level errors."""


class ValidationError(DomainError):
    """Invalid input rejected before any figure is computed."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


def property_not_found(property_id: str) -> str:
    """Return message for missing property."""
    return f"Property with ID {property_id} not found"
