"""Tests for the advisory availability query."""

from __future__ import annotations

import uuid
from datetime import date

from django.test import TestCase

from apps.bookings.application.command_handlers import CreateBookingHandler, TransitionBookingStatusHandler
from apps.bookings.models import Booking
from apps.bookings.services import check_availability, find_conflicting_bookings
from shared.domain.exceptions import NotFoundError, ValidationError

from .helpers import make_command, make_unit


class CheckAvailabilityTests(TestCase):
    def setUp(self) -> None:
        self.tent = make_unit(name="Tent")
        self.cabin = make_unit(name="Cabin")
        self.booking = CreateBookingHandler().handle(
            make_command(self.tent, date(2036, 3, 1), date(2036, 3, 4))
        ).booking

    def test_reports_each_unit(self) -> None:
        report = check_availability([self.tent.pk, self.cabin.pk], date(2036, 3, 2), date(2036, 3, 5))

        tent, cabin = report.per_unit
        self.assertFalse(tent.available)
        self.assertEqual(tent.conflicting_count, 1)
        self.assertEqual(tent.conflicts[0].booking_id, str(self.booking.pk))
        self.assertTrue(cabin.available)
        self.assertEqual(cabin.conflicting_count, 0)
        self.assertFalse(report.all_available)
        self.assertEqual(report.nights, 3)

    def test_back_to_back_is_available(self) -> None:
        report = check_availability([self.tent.pk], date(2036, 3, 4), date(2036, 3, 6))
        self.assertTrue(report.per_unit[0].available)

    def test_cancelled_bookings_do_not_block(self) -> None:
        TransitionBookingStatusHandler().handle(self.booking.pk, Booking.Status.CANCELLED)
        report = check_availability([self.tent.pk], date(2036, 3, 1), date(2036, 3, 4))
        self.assertTrue(report.per_unit[0].available)

    def test_pending_bookings_block(self) -> None:
        self.assertEqual(self.booking.status, Booking.Status.PENDING)
        conflicts = find_conflicting_bookings(self.tent.pk, date(2036, 3, 3), date(2036, 3, 4))
        self.assertEqual(len(conflicts), 1)
        self.assertEqual(conflicts[0].status, "pending")

    def test_exclude_booking_id(self) -> None:
        conflicts = find_conflicting_bookings(
            self.tent.pk, date(2036, 3, 1), date(2036, 3, 4), exclude_booking_id=self.booking.pk
        )
        self.assertEqual(conflicts, [])

    def test_duplicate_unit_ids_are_reported_once(self) -> None:
        report = check_availability([self.cabin.pk, str(self.cabin.pk)], date(2036, 3, 1), date(2036, 3, 2))
        self.assertEqual(len(report.per_unit), 1)

    def test_validation(self) -> None:
        with self.assertRaises(ValidationError):
            check_availability([], date(2036, 3, 1), date(2036, 3, 2))
        with self.assertRaises(ValidationError):
            check_availability([self.tent.pk], date(2036, 3, 2), date(2036, 3, 2))
        with self.assertRaises(ValidationError):
            check_availability(["not-a-uuid"], date(2036, 3, 1), date(2036, 3, 2))

    def test_unknown_unit(self) -> None:
        with self.assertRaises(NotFoundError):
            check_availability([self.tent.pk, uuid.uuid4()], date(2036, 3, 1), date(2036, 3, 2))

    def test_report_serializes_without_guest_data(self) -> None:
        payload = check_availability([self.tent.pk], date(2036, 3, 1), date(2036, 3, 4)).to_dict()
        self.assertEqual(payload["queried_range"], {"check_in": "2036-03-01", "check_out": "2036-03-04", "nights": 3})
        unit = payload["units"][0]
        self.assertEqual(unit["unit_id"], str(self.tent.pk))
        self.assertNotIn("guest_email", unit["conflicts"][0])

    def test_past_dates_can_be_queried(self) -> None:
        report = check_availability([self.cabin.pk], date(2020, 1, 1), date(2020, 1, 3))
        self.assertTrue(report.all_available)
        self.assertEqual(report.nights, 2)
