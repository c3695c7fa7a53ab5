"""
Domain errors raised by the services and rendered by the route handlers.
"""

from typing import Any, Dict, List, Optional


class ApiError(Exception):
    """Base class for expected failures that map to an HTTP response."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "message": self.message}


class ValidationFailed(ApiError):
    """Malformed or missing input. Carries a list of field errors."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: List[Dict[str, str]]) -> None:
        self.errors = errors
        super().__init__()

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "errors": self.errors}


class Conflict(ApiError):
    status_code = 400
    default_message = "Resource already exists."


class Unauthorized(ApiError):
    status_code = 401
    default_message = "Not authorised. Please log in."


class Forbidden(ApiError):
    status_code = 403
    default_message = "Not authorised to perform this action."


class NotFound(ApiError):
    status_code = 404
    default_message = "Not found."


class CapacityExceeded(ApiError):
    status_code = 400
    default_message = "This event is at full capacity."
