"""Base exceptions for event-stream.

All exceptions inherit from EventStreamError and carry an error code and a
details mapping so callers can render structured error responses.
"""

from typing import Any, Dict, Optional


class EventStreamError(Exception):
    """Base exception for all event-stream errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


def create_error_response(exception: EventStreamError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The event-stream exception

    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
        }
    }
