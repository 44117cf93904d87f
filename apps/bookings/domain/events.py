"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from shared.domain.base import DomainEvent


@dataclass
class BookingCreated(DomainEvent):
    """
    Event: A new booking was created

    Triggers:
    - Send confirmation email to guest
    - Notify the referring agent
    """
    booking_id: UUID | None = None
    unit_id: UUID | None = None
    guest_id: int | None = None
    check_in: date | None = None
    check_out: date | None = None
    status: str = ''
    source: str = ''
    total_amount: int = 0
    currency: str = ''

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            'booking_id': str(self.booking_id),
            'unit_id': str(self.unit_id),
            'guest_id': self.guest_id,
            'check_in': self.check_in.isoformat() if self.check_in else None,
            'check_out': self.check_out.isoformat() if self.check_out else None,
            'status': self.status,
            'source': self.source,
            'total_amount': self.total_amount,
            'currency': self.currency,
        })
        return data


@dataclass
class BookingStatusChanged(DomainEvent):
    """Event: Booking moved along its lifecycle (confirmed, completed, cancelled)"""
    booking_id: UUID | None = None
    unit_id: UUID | None = None
    old_status: str = ''
    new_status: str = ''
    changed_by: int | None = None

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            'booking_id': str(self.booking_id),
            'unit_id': str(self.unit_id),
            'old_status': self.old_status,
            'new_status': self.new_status,
            'changed_by': self.changed_by,
        })
        return data
