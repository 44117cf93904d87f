"""
Domain Errors

Every error raised by the booking core carries a stable ``kind`` tag so
that the calling surface can map it without string matching:

- ValidationError       caller-fixable input problem
- NotFoundError         unit or booking does not exist
- BookingConflict       requested dates overlap existing bookings
- IdentityRoleConflict  email belongs to a staff/agent account
- InvalidTransitionError  lifecycle transition not allowed
- TransactionAborted    lock timeout / serialization failure, safe to retry
"""

from __future__ import annotations

from typing import Any, Sequence


class BookingError(Exception):
    """Base class for booking core errors."""

    kind = "booking_error"
    status_code = 500
    retryable = False

    def __init__(self, message: str, *, data: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.data = data or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "message": self.message,
            "retryable": self.retryable,
            "data": self.data,
        }


class ValidationError(BookingError):
    kind = "validation_error"
    status_code = 400

    def __init__(self, message: str, *, field: str | None = None, data: dict[str, Any] | None = None):
        payload = dict(data or {})
        if field:
            payload.setdefault("field", field)
        super().__init__(message, data=payload)
        self.field = field


class NotFoundError(BookingError):
    kind = "not_found"
    status_code = 404

    def __init__(self, resource: str, identifier: Any = None):
        message = f"{resource} not found"
        data = {"resource": resource}
        if identifier is not None:
            data["id"] = str(identifier)
        super().__init__(message, data=data)
        self.resource = resource
        self.identifier = identifier


class BookingConflict(BookingError):
    """
    The requested dates overlap bookings that hold the unit.

    ``conflicts`` is the redacted list (booking id, dates, status) so it can
    be shown to any caller without leaking guest data.
    """

    kind = "booking_conflict"
    status_code = 409

    def __init__(self, conflicts: Sequence[Any], *, unit_id: Any = None, queried_range: dict | None = None):
        self.conflicts = list(conflicts)
        self.conflicting_count = len(self.conflicts)
        self.unit_id = unit_id
        data: dict[str, Any] = {
            "available": False,
            "conflicting_count": self.conflicting_count,
            "conflicts": [_conflict_to_dict(item) for item in self.conflicts],
        }
        if unit_id is not None:
            data["unit_id"] = str(unit_id)
        if queried_range:
            data["queried_range"] = queried_range
        super().__init__("Unit is not available for the selected dates", data=data)


class IdentityRoleConflict(BookingError):
    kind = "identity_role_conflict"
    status_code = 400

    def __init__(self, email: str, role: str):
        super().__init__(
            "This email is already registered with a different role",
            data={"field": "email", "role": str(role)},
        )
        self.email = email
        self.role = role


class InvalidTransitionError(BookingError):
    kind = "invalid_transition"
    status_code = 409

    def __init__(self, current: str, target: str):
        super().__init__(
            f"Cannot change booking status from {current} to {target}",
            data={"current_status": str(current), "target_status": str(target)},
        )
        self.current = current
        self.target = target


class TransactionAborted(BookingError):
    kind = "transaction_aborted"
    status_code = 503
    retryable = True

    def __init__(self, message: str = "The booking could not be completed, please retry"):
        super().__init__(message)


def _conflict_to_dict(item: Any) -> dict[str, Any]:
    if hasattr(item, "to_dict"):
        return item.to_dict()
    return dict(item)
