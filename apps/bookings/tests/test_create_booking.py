"""Tests for the transactional booking creation protocol."""

from __future__ import annotations

from datetime import date, timedelta

from django.test import TestCase
from django.utils import timezone

from apps.bookings.application.command_handlers import (
    BookingSource,
    CreateBookingHandler,
    GuestContact,
    PaymentStatusHint,
)
from apps.bookings.domain.events import BookingCreated
from apps.bookings.domain.pricing import AddOn
from apps.bookings.models import Booking
from apps.units.models import Unit
from apps.users.models import User
from shared.application.message_bus import message_bus
from shared.domain.exceptions import (
    BookingConflict,
    IdentityRoleConflict,
    NotFoundError,
    ValidationError,
)

from .helpers import make_command, make_unit

MARCH_1 = date(2036, 3, 1)
MARCH_4 = date(2036, 3, 4)
MARCH_7 = date(2036, 3, 7)


class CreateBookingScenarioTests(TestCase):
    """Rate 15000/night, capacity 4: book, conflict, then back-to-back."""

    def setUp(self) -> None:
        self.unit = make_unit(nightly_rate=15000, max_guests=4)
        self.handler = CreateBookingHandler()

    def test_scenario(self) -> None:
        first = self.handler.handle(make_command(self.unit, MARCH_1, MARCH_4))
        self.assertEqual(first.nights, 3)
        self.assertEqual(first.total_amount, 45000)
        self.assertEqual(first.booking.total_amount, 45000)
        self.assertEqual(first.booking.status, Booking.Status.PENDING)

        with self.assertRaises(BookingConflict) as ctx:
            self.handler.handle(make_command(self.unit, MARCH_1, MARCH_4))
        self.assertEqual(ctx.exception.conflicting_count, 1)
        self.assertEqual(ctx.exception.data["conflicts"][0]["booking_id"], str(first.booking.pk))
        self.assertEqual(ctx.exception.data["queried_range"]["nights"], 3)

        third = self.handler.handle(make_command(self.unit, MARCH_4, MARCH_7))
        self.assertEqual(third.booking.status, Booking.Status.PENDING)
        self.assertEqual(Booking.objects.filter(unit=self.unit).count(), 2)

    def test_conflict_payload_has_no_guest_data(self) -> None:
        self.handler.handle(make_command(self.unit, MARCH_1, MARCH_4))
        with self.assertRaises(BookingConflict) as ctx:
            self.handler.handle(make_command(self.unit, date(2036, 3, 2), date(2036, 3, 3)))
        conflict = ctx.exception.data["conflicts"][0]
        self.assertEqual(set(conflict), {"booking_id", "check_in", "check_out", "status"})

    def test_cancelled_booking_frees_the_dates(self) -> None:
        first = self.handler.handle(make_command(self.unit, MARCH_1, MARCH_4)).booking
        first.apply_transition(Booking.Status.CANCELLED)
        first.save()

        second = self.handler.handle(make_command(self.unit, MARCH_1, MARCH_4))
        self.assertEqual(second.booking.status, Booking.Status.PENDING)

    def test_paid_hint_creates_confirmed_booking(self) -> None:
        result = self.handler.handle(
            make_command(self.unit, MARCH_1, MARCH_4, status_hint=PaymentStatusHint.PAID, source=BookingSource.STAFF)
        )
        self.assertEqual(result.booking.status, Booking.Status.CONFIRMED)
        self.assertEqual(result.booking.source, Booking.Source.STAFF)

    def test_amount_and_occupancy_breakdown(self) -> None:
        result = self.handler.handle(
            make_command(
                self.unit,
                MARCH_1,
                MARCH_4,
                adults=2,
                children=1,
                add_ons=(AddOn("Firewood", 1500, 2),),
            )
        )
        self.assertEqual(result.occupancy, {"adults": 2, "children": 1, "total": 3})
        self.assertEqual(result.base_amount, 45000)
        self.assertEqual(result.add_ons_amount, 3000)
        self.assertEqual(result.total_amount, 48000)
        booking = Booking.objects.get(pk=result.booking.pk)
        self.assertEqual(booking.guests_count, 3)
        self.assertEqual(booking.nightly_rate, 15000)
        self.assertEqual(booking.add_ons, [{"name": "Firewood", "unit_price": 1500, "quantity": 2}])
        self.assertEqual(str(booking.total_money), "PKR 480.00")

    def test_large_totals_are_persisted(self) -> None:
        unit = make_unit(name="Presidential lodge", nightly_rate=2_000_000_000)
        result = self.handler.handle(make_command(unit, MARCH_1, MARCH_4))
        booking = Booking.objects.get(pk=result.booking.pk)
        self.assertEqual(booking.total_amount, 6_000_000_000)
        self.assertEqual(booking.base_amount, 6_000_000_000)

    def test_total_money_for_unlisted_currency(self) -> None:
        unit = make_unit(name="Dubai pod", currency="AED")
        result = self.handler.handle(make_command(unit, MARCH_1, MARCH_4))
        self.assertEqual(result.booking.currency, "AED")
        self.assertEqual(str(result.booking.total_money), "AED 450.00")

    def test_booking_created_event_published_after_commit(self) -> None:
        received = []
        message_bus.register_event_handler(BookingCreated, received.append)
        self.addCleanup(message_bus.unregister_event_handler, BookingCreated, received.append)

        with self.captureOnCommitCallbacks(execute=True):
            result = self.handler.handle(make_command(self.unit, MARCH_1, MARCH_4))

        self.assertEqual(len(received), 1)
        self.assertEqual(received[0].booking_id, result.booking.pk)
        self.assertEqual(received[0].total_amount, 45000)


class CreateBookingValidationTests(TestCase):
    def setUp(self) -> None:
        self.unit = make_unit(max_guests=2)
        self.handler = CreateBookingHandler()

    def test_check_out_must_follow_check_in(self) -> None:
        with self.assertRaises(ValidationError):
            self.handler.handle(make_command(self.unit, MARCH_4, MARCH_4))
        with self.assertRaises(ValidationError):
            self.handler.handle(make_command(self.unit, MARCH_4, MARCH_1))

    def test_check_in_in_the_past_is_rejected(self) -> None:
        today = timezone.localdate()
        with self.assertRaises(ValidationError) as ctx:
            self.handler.handle(make_command(self.unit, today - timedelta(days=400), today - timedelta(days=398)))
        self.assertEqual(ctx.exception.field, "check_in")
        self.assertFalse(Booking.objects.exists())

    def test_check_in_today_is_accepted(self) -> None:
        today = timezone.localdate()
        result = self.handler.handle(make_command(self.unit, today, today + timedelta(days=1)))
        self.assertEqual(result.nights, 1)

    def test_occupancy_over_capacity(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            self.handler.handle(make_command(self.unit, MARCH_1, MARCH_4, adults=2, children=1))
        self.assertIn("capacity", ctx.exception.message)
        self.assertFalse(Booking.objects.exists())

    def test_occupancy_must_be_at_least_one(self) -> None:
        with self.assertRaises(ValidationError):
            self.handler.handle(make_command(self.unit, MARCH_1, MARCH_4, adults=0, children=0))

    def test_missing_contact_fields(self) -> None:
        with self.assertRaises(ValidationError):
            self.handler.handle(
                make_command(self.unit, MARCH_1, MARCH_4, guest=GuestContact(full_name="", email="a@example.com"))
            )
        with self.assertRaises(ValidationError):
            self.handler.handle(
                make_command(self.unit, MARCH_1, MARCH_4, guest=GuestContact(full_name="Ann", email=" "))
            )

    def test_unknown_unit(self) -> None:
        missing = Unit(pk="00000000-0000-0000-0000-000000000000")
        with self.assertRaises(NotFoundError):
            self.handler.handle(make_command(missing, MARCH_1, MARCH_4))

    def test_inactive_unit(self) -> None:
        self.unit.status = Unit.Status.INACTIVE
        self.unit.save()
        with self.assertRaises(ValidationError):
            self.handler.handle(make_command(self.unit, MARCH_1, MARCH_4))


class GuestIdentityTests(TestCase):
    def setUp(self) -> None:
        self.unit = make_unit()
        self.handler = CreateBookingHandler()

    def test_guest_name_fidelity(self) -> None:
        jane = self.handler.handle(
            make_command(self.unit, MARCH_1, MARCH_4, guest=GuestContact(full_name="Jane", email="e@example.com"))
        ).booking
        bob = self.handler.handle(
            make_command(self.unit, MARCH_4, MARCH_7, guest=GuestContact(full_name="Bob", email="E@Example.com"))
        ).booking

        jane.refresh_from_db()
        bob.refresh_from_db()
        self.assertEqual(jane.guest_name, "Jane")
        self.assertEqual(bob.guest_name, "Bob")
        self.assertEqual(jane.guest_id, bob.guest_id)
        self.assertEqual(User.objects.filter(email="e@example.com").count(), 1)

    def test_staff_email_is_rejected(self) -> None:
        User.objects.create_user(email="ops@example.com", password="StaffPass123", role=User.RoleChoices.STAFF)
        with self.assertRaises(IdentityRoleConflict):
            self.handler.handle(
                make_command(self.unit, MARCH_1, MARCH_4, guest=GuestContact(full_name="Ops", email="OPS@example.com"))
            )
        self.assertFalse(Booking.objects.exists())

    def test_failed_booking_leaves_no_new_identity(self) -> None:
        self.handler.handle(make_command(self.unit, MARCH_1, MARCH_4))
        with self.assertRaises(BookingConflict):
            self.handler.handle(
                make_command(
                    self.unit, MARCH_1, MARCH_4, guest=GuestContact(full_name="New", email="new@example.com")
                )
            )
        self.assertFalse(User.objects.filter(email="new@example.com").exists())
