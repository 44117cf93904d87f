"""Shared builders for booking tests."""

from __future__ import annotations

from datetime import date

from apps.bookings.application.command_handlers import CreateBookingCommand, GuestContact
from apps.units.models import Unit


def make_unit(**overrides) -> Unit:
    fields = {
        "name": "Riverside Tent",
        "nightly_rate": 15000,
        "max_guests": 4,
        "currency": "PKR",
        "status": Unit.Status.ACTIVE,
    }
    fields.update(overrides)
    return Unit.objects.create(**fields)


def make_command(unit, check_in: date, check_out: date, **overrides) -> CreateBookingCommand:
    guest = overrides.pop(
        "guest",
        GuestContact(full_name="Jane Doe", email="jane@example.com", phone="+923001234567"),
    )
    fields = {
        "unit_id": unit.pk,
        "check_in": check_in,
        "check_out": check_out,
        "guest": guest,
        "adults": 2,
        "children": 0,
    }
    fields.update(overrides)
    return CreateBookingCommand(**fields)
