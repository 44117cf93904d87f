"""Tests for the booking status state machine."""

from __future__ import annotations

from django.test import SimpleTestCase

from apps.bookings.domain.lifecycle import (
    ALLOWED_TRANSITIONS,
    BLOCKING_STATUSES,
    TERMINAL_STATUSES,
    BookingStatus,
    can_transition,
    ensure_transition,
    parse_status,
)
from shared.domain.exceptions import InvalidTransitionError, ValidationError


class LifecycleTableTests(SimpleTestCase):
    def test_allowed_transitions(self) -> None:
        self.assertTrue(can_transition(BookingStatus.PENDING, BookingStatus.CONFIRMED))
        self.assertTrue(can_transition(BookingStatus.PENDING, BookingStatus.CANCELLED))
        self.assertTrue(can_transition(BookingStatus.CONFIRMED, BookingStatus.COMPLETED))
        self.assertTrue(can_transition(BookingStatus.CONFIRMED, BookingStatus.CANCELLED))

    def test_confirmed_cannot_go_back_to_pending(self) -> None:
        with self.assertRaises(InvalidTransitionError) as ctx:
            ensure_transition(BookingStatus.CONFIRMED, BookingStatus.PENDING)
        self.assertEqual(ctx.exception.current, "CONFIRMED")
        self.assertEqual(ctx.exception.target, "PENDING")
        self.assertEqual(ctx.exception.kind, "invalid_transition")

    def test_pending_cannot_skip_to_completed(self) -> None:
        self.assertFalse(can_transition(BookingStatus.PENDING, BookingStatus.COMPLETED))

    def test_terminal_statuses_reject_everything(self) -> None:
        self.assertEqual(TERMINAL_STATUSES, {BookingStatus.COMPLETED, BookingStatus.CANCELLED})
        for current in TERMINAL_STATUSES:
            for target in BookingStatus:
                with self.subTest(current=current, target=target):
                    with self.assertRaises(InvalidTransitionError):
                        ensure_transition(current, target)

    def test_happy_path_sequence(self) -> None:
        status = BookingStatus.PENDING
        status = ensure_transition(status, BookingStatus.CONFIRMED)
        status = ensure_transition(status, BookingStatus.COMPLETED)
        self.assertEqual(status, BookingStatus.COMPLETED)

    def test_every_status_has_an_entry(self) -> None:
        self.assertEqual(set(ALLOWED_TRANSITIONS), set(BookingStatus))

    def test_cancelled_does_not_block_the_calendar(self) -> None:
        self.assertNotIn(BookingStatus.CANCELLED, BLOCKING_STATUSES)
        self.assertIn(BookingStatus.PENDING, BLOCKING_STATUSES)


class ParseStatusTests(SimpleTestCase):
    def test_accepts_any_case(self) -> None:
        self.assertEqual(parse_status("CONFIRMED"), BookingStatus.CONFIRMED)
        self.assertEqual(parse_status(" cancelled "), BookingStatus.CANCELLED)
        self.assertEqual(parse_status(BookingStatus.PENDING), BookingStatus.PENDING)

    def test_rejects_unknown_status(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            parse_status("ARCHIVED")
        self.assertEqual(ctx.exception.field, "status")
