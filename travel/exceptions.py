"""
Typed failures raised by the booking core.

Every error carries a ``kind`` (stable machine-readable name), a human-readable
message and the HTTP status the transport layer maps it to.
"""

from typing import Any, Dict, Optional


class TravelError(Exception):
    """Base exception for all domain-level errors."""

    kind = "TravelError"
    status_code = 400
    headers: Optional[Dict[str, str]] = None

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.kind, "message": self.message, "field": self.field}


class InvalidInput(TravelError):
    """Raised when a precondition on caller input fails."""

    kind = "InvalidInput"
    status_code = 400


class NotFound(TravelError):
    """Raised when a referenced entity does not exist."""

    kind = "NotFound"
    status_code = 404

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found with id: {entity_id}")


class AlreadyExists(TravelError):
    kind = "AlreadyExists"
    status_code = 400


class AuthenticationFailed(TravelError):
    kind = "AuthenticationFailed"
    status_code = 401
    headers = {"WWW-Authenticate": "Bearer"}


class PermissionDenied(TravelError):
    kind = "PermissionDenied"
    status_code = 403


class InvalidTransition(TravelError):
    """
    Raised when an illegal state transition is attempted.
    """

    kind = "InvalidTransition"
    status_code = 409


class UpdateNotAllowed(TravelError):
    kind = "UpdateNotAllowed"
    status_code = 409


class DeletionNotAllowed(TravelError):
    kind = "DeletionNotAllowed"
    status_code = 409


class InsufficientCapacity(TravelError):
    """Raised when fewer units are available than requested."""

    kind = "InsufficientCapacity"
    status_code = 409


class CapacityExceeded(TravelError):
    """Raised when a release would push availability above capacity."""

    kind = "CapacityExceeded"
    status_code = 409


class Expired(TravelError):
    """Raised when reserving a resource whose start date has passed."""

    kind = "Expired"
    status_code = 409


class PaymentNotAllowed(TravelError):
    kind = "PaymentNotAllowed"
    status_code = 409


class PaymentAlreadyExists(TravelError):
    kind = "PaymentAlreadyExists"
    status_code = 409


class AlreadyProcessed(TravelError):
    kind = "AlreadyProcessed"
    status_code = 409


class Unprocessable(TravelError):
    kind = "Unprocessable"
    status_code = 422


class RefundNotAllowed(TravelError):
    kind = "RefundNotAllowed"
    status_code = 409


class Conflict(TravelError):
    """Raised when a concurrent write was detected; the caller should retry."""

    kind = "Conflict"
    status_code = 409
