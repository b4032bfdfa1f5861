"""
Error taxonomy for the cookbook catalog.

The storage layer raises ValidationError for bad input and InternalError for
persistence failures; "not found" is reported with a None/False return value.
The route layer raises NotFoundError and translates all three into HTTP
responses (400, 404, 500).
"""

from typing import Dict, List, Optional


class CookbookError(Exception):
    """Base class for all catalog errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CookbookError):
    """
    Malformed or incomplete input.

    Attributes:
        errors: Field-level details, each a dict with "field" and "message" keys
    """

    def __init__(self, message: str, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(f"Invalid {field}: {message}", errors=[{"field": field, "message": message}])


class NotFoundError(CookbookError):
    """Unknown recipe id."""

    def __init__(self, message: str = "Recipe not found"):
        super().__init__(message)


class InternalError(CookbookError):
    """Storage or connectivity failure. Details are logged, never sent to clients."""
