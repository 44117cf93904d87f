"""
Booking Lifecycle

Status finite state machine:
- PENDING -> CONFIRMED (paid / approved)
- PENDING -> CANCELLED
- CONFIRMED -> COMPLETED (stay took place)
- CONFIRMED -> CANCELLED

COMPLETED and CANCELLED are terminal.
"""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.exceptions import InvalidTransitionError, ValidationError


class BookingStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    CONFIRMED = "confirmed", _("Confirmed")
    COMPLETED = "completed", _("Completed")
    CANCELLED = "cancelled", _("Cancelled")


ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset(status for status, targets in ALLOWED_TRANSITIONS.items() if not targets)

# Bookings in these statuses occupy the unit's calendar. PENDING is a hold:
# it blocks new requests for the same dates until confirmed or cancelled.
BLOCKING_STATUSES: tuple[str, ...] = (
    BookingStatus.PENDING,
    BookingStatus.CONFIRMED,
    BookingStatus.COMPLETED,
)


def parse_status(value) -> BookingStatus:
    """Accept ``"CONFIRMED"``, ``"confirmed"`` or a BookingStatus member."""
    if isinstance(value, BookingStatus):
        return value
    try:
        return BookingStatus(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(status.name for status in BookingStatus)
        raise ValidationError(f"Invalid status. Must be one of: {allowed}", field="status") from None


def can_transition(current, target) -> bool:
    return BookingStatus(target) in ALLOWED_TRANSITIONS[BookingStatus(current)]


def ensure_transition(current, target) -> BookingStatus:
    """Return the target status or raise InvalidTransitionError."""
    current_status = BookingStatus(current)
    target_status = BookingStatus(target)
    if target_status not in ALLOWED_TRANSITIONS[current_status]:
        raise InvalidTransitionError(current_status.name, target_status.name)
    return target_status
