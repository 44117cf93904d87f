"""Tests for booking status transitions."""

from __future__ import annotations

import uuid
from datetime import date

from django.test import TestCase

from apps.bookings.application.command_handlers import CreateBookingHandler, TransitionBookingStatusHandler
from apps.bookings.domain.events import BookingStatusChanged
from apps.bookings.models import Booking, BookingStatusGuardError
from shared.application.message_bus import message_bus
from shared.domain.exceptions import InvalidTransitionError, NotFoundError, ValidationError

from .helpers import make_command, make_unit


class TransitionBookingStatusTests(TestCase):
    def setUp(self) -> None:
        self.unit = make_unit()
        self.booking = CreateBookingHandler().handle(
            make_command(self.unit, date(2036, 3, 1), date(2036, 3, 4))
        ).booking
        self.handler = TransitionBookingStatusHandler()

    def test_pending_confirmed_completed(self) -> None:
        self.handler.handle(self.booking.pk, "CONFIRMED")
        booking = self.handler.handle(self.booking.pk, "completed")
        self.assertEqual(booking.status, Booking.Status.COMPLETED)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, Booking.Status.COMPLETED)

    def test_confirmed_cannot_return_to_pending(self) -> None:
        self.handler.handle(self.booking.pk, Booking.Status.CONFIRMED)
        with self.assertRaises(InvalidTransitionError):
            self.handler.handle(self.booking.pk, Booking.Status.PENDING)

    def test_cancel_stamps_cancelled_at(self) -> None:
        booking = self.handler.handle(self.booking.pk, Booking.Status.CANCELLED)
        self.assertIsNotNone(booking.cancelled_at)
        with self.assertRaises(InvalidTransitionError):
            self.handler.handle(self.booking.pk, Booking.Status.CONFIRMED)

    def test_unknown_booking(self) -> None:
        with self.assertRaises(NotFoundError):
            self.handler.handle(uuid.uuid4(), Booking.Status.CONFIRMED)

    def test_unknown_status(self) -> None:
        with self.assertRaises(ValidationError):
            self.handler.handle(self.booking.pk, "archived")

    def test_status_change_event(self) -> None:
        received = []
        message_bus.register_event_handler(BookingStatusChanged, received.append)
        self.addCleanup(message_bus.unregister_event_handler, BookingStatusChanged, received.append)

        with self.captureOnCommitCallbacks(execute=True):
            self.handler.handle(self.booking.pk, Booking.Status.CONFIRMED, changed_by_id=7)

        self.assertEqual(len(received), 1)
        self.assertEqual(received[0].old_status, "pending")
        self.assertEqual(received[0].new_status, "confirmed")
        self.assertEqual(received[0].changed_by, 7)


class BookingStatusGuardTests(TestCase):
    def setUp(self) -> None:
        self.unit = make_unit()
        self.booking = CreateBookingHandler().handle(
            make_command(self.unit, date(2036, 3, 1), date(2036, 3, 4))
        ).booking

    def test_direct_status_assignment_is_refused(self) -> None:
        booking = Booking.objects.get(pk=self.booking.pk)
        booking.status = Booking.Status.COMPLETED
        with self.assertRaises(BookingStatusGuardError):
            booking.save()
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.PENDING)

    def test_apply_transition_then_save(self) -> None:
        booking = Booking.objects.get(pk=self.booking.pk)
        booking.apply_transition(Booking.Status.CONFIRMED)
        booking.save()
        self.assertEqual(Booking.objects.get(pk=booking.pk).status, Booking.Status.CONFIRMED)

    def test_other_fields_can_still_be_edited(self) -> None:
        booking = Booking.objects.get(pk=self.booking.pk)
        booking.special_requests = "Late arrival"
        booking.save()
        self.assertEqual(Booking.objects.get(pk=booking.pk).special_requests, "Late arrival")
