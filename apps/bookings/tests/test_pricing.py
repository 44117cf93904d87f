"""Tests for the stay pricing calculator."""

from __future__ import annotations

from datetime import date, datetime

from django.test import SimpleTestCase

from apps.bookings.domain.pricing import MAX_AMOUNT, AddOn, count_nights, quote_stay
from shared.domain.exceptions import ValidationError


class CountNightsTests(SimpleTestCase):
    def test_whole_days(self) -> None:
        self.assertEqual(count_nights(date(2026, 3, 1), date(2026, 3, 4)), 3)

    def test_partial_day_rounds_up(self) -> None:
        self.assertEqual(count_nights(datetime(2026, 3, 1, 14), datetime(2026, 3, 3, 11)), 2)
        self.assertEqual(count_nights(datetime(2026, 3, 1, 10), datetime(2026, 3, 3, 11)), 3)

    def test_less_than_one_night_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            count_nights(date(2026, 3, 1), date(2026, 3, 1))
        with self.assertRaises(ValidationError):
            count_nights(date(2026, 3, 2), date(2026, 3, 1))


class QuoteStayTests(SimpleTestCase):
    def test_base_amount_is_nights_times_rate(self) -> None:
        quote = quote_stay(15000, date(2026, 3, 1), date(2026, 3, 4))
        self.assertEqual(quote.nights, 3)
        self.assertEqual(quote.base_amount, 45000)
        self.assertEqual(quote.add_ons_amount, 0)
        self.assertEqual(quote.total_amount, 45000)

    def test_add_ons_are_price_times_quantity(self) -> None:
        quote = quote_stay(
            10000,
            date(2026, 3, 1),
            date(2026, 3, 3),
            [AddOn("Firewood", 1500, 2), AddOn("Breakfast", 800)],
        )
        self.assertEqual(quote.base_amount, 20000)
        self.assertEqual(quote.add_ons_amount, 3800)
        self.assertEqual(quote.total_amount, 23800)
        self.assertIsInstance(quote.total_amount, int)

    def test_rejects_bad_amounts(self) -> None:
        with self.assertRaises(ValidationError):
            quote_stay(-1, date(2026, 3, 1), date(2026, 3, 2))
        with self.assertRaises(ValidationError):
            quote_stay(100.5, date(2026, 3, 1), date(2026, 3, 2))
        with self.assertRaises(ValidationError):
            AddOn("Kayak", -100)
        with self.assertRaises(ValidationError):
            AddOn("Kayak", 100, 0)

    def test_totals_beyond_32_bits_are_exact(self) -> None:
        quote = quote_stay(2_000_000_000, date(2026, 3, 1), date(2026, 3, 31))
        self.assertEqual(quote.total_amount, 60_000_000_000)

    def test_rejects_total_beyond_storable_amount(self) -> None:
        with self.assertRaises(ValidationError):
            quote_stay(MAX_AMOUNT // 2, date(2026, 3, 1), date(2026, 3, 4))
        with self.assertRaises(ValidationError):
            quote_stay(1, date(2026, 3, 1), date(2026, 3, 2), [AddOn("Island", MAX_AMOUNT)])
