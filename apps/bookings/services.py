"""Availability queries shared by the public surface and the creation protocol."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Sequence

from django.db import DEFAULT_DB_ALIAS, transaction  # type: ignore
from django.db.models import Q  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.domain.lifecycle import BLOCKING_STATUSES
from apps.bookings.models import Booking
from apps.units.models import Unit
from shared.domain.exceptions import NotFoundError, ValidationError
from shared.domain.value_objects import DateRange, ranges_overlap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConflictSummary:
    """Redacted view of a blocking booking: no guest data."""
    booking_id: str
    check_in: date
    check_out: date
    status: str

    @classmethod
    def from_booking(cls, booking: Booking) -> "ConflictSummary":
        return cls(
            booking_id=str(booking.pk),
            check_in=booking.check_in,
            check_out=booking.check_out,
            status=str(booking.status),
        )

    def to_dict(self) -> dict:
        return {
            "booking_id": self.booking_id,
            "check_in": self.check_in.isoformat(),
            "check_out": self.check_out.isoformat(),
            "status": self.status,
        }


@dataclass(frozen=True)
class UnitAvailability:
    unit_id: str
    available: bool
    conflicting_count: int
    conflicts: tuple[ConflictSummary, ...] = ()

    def to_dict(self) -> dict:
        return {
            "unit_id": self.unit_id,
            "available": self.available,
            "conflicting_count": self.conflicting_count,
            "conflicts": [conflict.to_dict() for conflict in self.conflicts],
        }


@dataclass(frozen=True)
class AvailabilityReport:
    check_in: date
    check_out: date
    per_unit: list[UnitAvailability] = field(default_factory=list)

    @property
    def nights(self) -> int:
        return len(DateRange(self.check_in, self.check_out))

    @property
    def all_available(self) -> bool:
        return all(item.available for item in self.per_unit)

    def queried_range(self) -> dict:
        return queried_range(self.check_in, self.check_out)

    def to_dict(self) -> dict:
        return {
            "queried_range": self.queried_range(),
            "all_available": self.all_available,
            "units": [item.to_dict() for item in self.per_unit],
        }


def queried_range(check_in: date, check_out: date) -> dict:
    return {
        "check_in": check_in.isoformat(),
        "check_out": check_out.isoformat(),
        "nights": (check_out - check_in).days,
    }


def validate_stay_dates(check_in: date, check_out: date) -> None:
    if check_in is None or check_out is None:
        raise ValidationError("check_in and check_out are required", field="check_in")
    if check_out <= check_in:
        raise ValidationError("Check-out date must be after check-in date", field="check_out")


def validate_check_in_not_past(check_in: date) -> None:
    """New bookings cannot start before today (server local date)."""
    if isinstance(check_in, datetime):
        check_in = check_in.date()
    if check_in < timezone.localdate():
        raise ValidationError("Check-in date must be today or in the future", field="check_in")


def _lock_queryset_if_possible(queryset, using: str):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection(using).in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def find_conflicting_bookings(
    unit_id,
    check_in: date,
    check_out: date,
    *,
    using: str = DEFAULT_DB_ALIAS,
    lock: bool = False,
    exclude_booking_id=None,
) -> list[ConflictSummary]:
    """Return the blocking bookings of ``unit_id`` that overlap [check_in, check_out)."""

    overlapping_filter = Q(check_in__lt=check_out) & Q(check_out__gt=check_in)

    bookings_qs = (
        Booking.objects.using(using)
        .filter(unit_id=unit_id, status__in=BLOCKING_STATUSES)
        .filter(overlapping_filter)
        .order_by("check_in", "created_at")
    )

    if exclude_booking_id is not None:
        bookings_qs = bookings_qs.exclude(pk=exclude_booking_id)

    if lock:
        bookings_qs = _lock_queryset_if_possible(bookings_qs, using)

    return [
        ConflictSummary.from_booking(booking)
        for booking in bookings_qs
        if ranges_overlap(booking.check_in, booking.check_out, check_in, check_out)
    ]


def check_availability(
    unit_ids: Iterable,
    check_in: date,
    check_out: date,
    *,
    using: str = DEFAULT_DB_ALIAS,
) -> AvailabilityReport:
    """
    Advisory availability for several units over one date range.

    Read-only: no locks are taken, so the answer can be stale by the time a
    booking is attempted. The creation protocol re-checks under lock.
    """
    requested: Sequence = _parse_unit_ids(unit_ids)
    if not requested:
        raise ValidationError("At least one unit is required", field="unit_ids")
    validate_stay_dates(check_in, check_out)

    known = {
        str(pk)
        for pk in Unit.objects.using(using).filter(pk__in=requested).values_list("pk", flat=True)
    }
    for unit_id in requested:
        if str(unit_id) not in known:
            raise NotFoundError("Unit", unit_id)

    per_unit = []
    for unit_id in requested:
        conflicts = find_conflicting_bookings(unit_id, check_in, check_out, using=using)
        per_unit.append(
            UnitAvailability(
                unit_id=str(unit_id),
                available=not conflicts,
                conflicting_count=len(conflicts),
                conflicts=tuple(conflicts),
            )
        )

    logger.debug(
        "Availability checked for %d unit(s) %s..%s", len(per_unit), check_in, check_out
    )
    return AvailabilityReport(check_in=check_in, check_out=check_out, per_unit=per_unit)


def _parse_unit_ids(unit_ids: Iterable) -> list[uuid.UUID]:
    result: list[uuid.UUID] = []
    for raw in unit_ids or ():
        try:
            unit_id = raw if isinstance(raw, uuid.UUID) else uuid.UUID(str(raw))
        except ValueError:
            raise ValidationError(f"'{raw}' is not a valid unit id", field="unit_ids") from None
        if unit_id not in result:
            result.append(unit_id)
    return result
