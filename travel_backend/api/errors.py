"""
Error taxonomy for the travel notes API.

Every error is rendered by a single exception handler as
{"success": false, "response": <message>} so clients see one envelope.
Authentication failures and missing records carry no detail about which
users or records exist.
"""
from typing import Any, Dict, Optional


class TravelNotesError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": False, "response": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(TravelNotesError):
    status_code = 400
    default_message = "Invalid input"


class DuplicateUsername(TravelNotesError):
    status_code = 400
    default_message = "Username already exists"


class WeakPassword(TravelNotesError):
    status_code = 400
    default_message = "Password must be at least 8 characters long."


class InvalidCredentials(TravelNotesError):
    status_code = 400
    default_message = "Username and password don't match"


class Unauthorized(TravelNotesError):
    status_code = 401
    default_message = "Please log in."


class NotFound(TravelNotesError):
    status_code = 400
    default_message = "Could not find that record"


class ServiceUnavailable(TravelNotesError):
    status_code = 503
    default_message = "Service unavailable"


class InfrastructureFault(TravelNotesError):
    status_code = 500
    default_message = "Something went wrong"
