"""Booking persistence model."""

from __future__ import annotations

import secrets
import uuid

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.bookings.domain.lifecycle import BookingStatus, ensure_transition
from apps.bookings.domain.pricing import count_nights
from apps.units.models import default_currency
from shared.domain.value_objects import Money


class BookingStatusGuardError(RuntimeError):
    """Raised when code writes ``status`` without going through apply_transition()."""


class Booking(models.Model):
    """A reservation of one unit for a half-open date range [check_in, check_out)."""

    Status = BookingStatus

    class Source(models.TextChoices):
        PUBLIC = "public", _("Public website")
        STAFF = "staff", _("Staff back office")
        AGENT = "agent", _("Sales agent")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    reference = models.CharField(max_length=16, unique=True, editable=False)
    unit = models.ForeignKey(
        "units.Unit",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    guest = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    guest_name = models.CharField(
        max_length=255,
        help_text=_("Name exactly as given in the booking request."),
    )
    guest_email = models.EmailField()
    guest_phone = models.CharField(max_length=32, blank=True)
    check_in = models.DateField()
    check_out = models.DateField()
    adults = models.PositiveSmallIntegerField(default=1)
    children = models.PositiveSmallIntegerField(default=0)
    guests_count = models.PositiveSmallIntegerField(default=1)
    nightly_rate = models.PositiveBigIntegerField(
        help_text=_("Unit price per night at booking time, in minor currency units."),
    )
    base_amount = models.PositiveBigIntegerField(default=0)
    add_ons_amount = models.PositiveBigIntegerField(default=0)
    total_amount = models.PositiveBigIntegerField(default=0)
    currency = models.CharField(max_length=3, default=default_currency)
    add_ons = models.JSONField(default=list, blank=True)
    status = models.CharField(
        max_length=20,
        choices=BookingStatus.choices,
        default=BookingStatus.PENDING,
    )
    source = models.CharField(max_length=20, choices=Source.choices, default=Source.PUBLIC)
    agent = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="referred_bookings",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_bookings",
    )
    special_requests = models.TextField(blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(check_out__gt=models.F("check_in")),
                name="booking_valid_dates",
            ),
            models.CheckConstraint(
                condition=models.Q(guests_count__gte=1),
                name="booking_guests_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=0),
                name="booking_total_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["unit", "check_in", "check_out"], name="booking_unit_dates_idx"),
            models.Index(fields=["status"], name="booking_status_idx"),
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._loaded_status = None
        self._approved_status = None

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._loaded_status = instance.__dict__.get("status")
        return instance

    def refresh_from_db(self, *args, **kwargs):  # type: ignore
        super().refresh_from_db(*args, **kwargs)
        self._loaded_status = self.status
        self._approved_status = None

    def __str__(self) -> str:
        return f"Booking {self.reference} for {self.unit_id}"

    @property
    def nights(self) -> int:
        return count_nights(self.check_in, self.check_out)

    @property
    def total_money(self) -> Money:
        return Money(self.total_amount, (self.currency or default_currency()).upper())

    def apply_transition(self, target) -> BookingStatus:
        """Move the booking to ``target``; the only sanctioned way to change status."""
        new_status = ensure_transition(self.status, target)
        self.status = new_status
        self._approved_status = new_status
        if new_status == BookingStatus.CANCELLED:
            self.cancelled_at = timezone.now()
        return new_status

    def save(self, *args, **kwargs):  # type: ignore
        if self._state.adding:
            if not self.reference:
                self.reference = self.generate_reference()
        elif (
            self._loaded_status is not None
            and self.status != self._loaded_status
            and self.status != self._approved_status
        ):
            raise BookingStatusGuardError(
                f"Status of booking {self.reference} changed outside apply_transition()"
            )
        super().save(*args, **kwargs)
        self._loaded_status = self.status
        self._approved_status = None

    @staticmethod
    def generate_reference() -> str:
        return f"BK{secrets.token_hex(4).upper()}"
