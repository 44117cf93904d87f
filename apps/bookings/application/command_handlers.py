"""
Booking Command Handlers

These are the use cases for the booking domain.
They orchestrate domain operations within transactions.

Commands:
- CreateBookingCommand: Create a new booking (public, staff and agent surfaces)
- TransitionBookingStatusHandler: Move a booking along its lifecycle
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Sequence
from uuid import UUID

from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError as DjangoValidationError  # type: ignore
from django.db import DEFAULT_DB_ALIAS, IntegrityError, OperationalError, transaction  # type: ignore

from apps.bookings.domain.events import BookingCreated, BookingStatusChanged
from apps.bookings.domain.lifecycle import BookingStatus, parse_status
from apps.bookings.domain.pricing import AddOn, PriceQuote, quote_stay
from apps.bookings.models import Booking
from apps.bookings.services import (
    find_conflicting_bookings,
    queried_range,
    validate_check_in_not_past,
    validate_stay_dates,
)
from apps.units.models import Unit
from apps.users.services import CustomerIdentityResolver, ensure_guest_role
from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import (
    BookingConflict,
    NotFoundError,
    TransactionAborted,
    ValidationError,
)

logger = logging.getLogger(__name__)

OVERLAP_CONSTRAINT = "booking_no_overlap"


# ===== Commands =====

class PaymentStatusHint(str, enum.Enum):
    UNPAID = "UNPAID"
    PAID = "PAID"


BookingSource = Booking.Source


@dataclass(frozen=True)
class GuestContact:
    full_name: str
    email: str
    phone: str = ''


@dataclass
class CreateBookingCommand:
    """
    Command to create a new booking

    This is the single entry point used by every surface.
    """
    unit_id: UUID
    check_in: date
    check_out: date
    guest: GuestContact
    adults: int = 1
    children: int = 0
    add_ons: Sequence[AddOn] = field(default_factory=tuple)
    status_hint: PaymentStatusHint = PaymentStatusHint.UNPAID
    source: str = BookingSource.PUBLIC
    agent_id: int | None = None
    created_by_id: int | None = None
    special_requests: str = ''

    @property
    def guests_count(self) -> int:
        return self.adults + self.children

    @property
    def initial_status(self) -> BookingStatus:
        if self.status_hint == PaymentStatusHint.PAID:
            return BookingStatus.CONFIRMED
        return BookingStatus.PENDING


@dataclass(frozen=True)
class BookingResult:
    booking: Booking
    nights: int
    adults: int
    children: int
    base_amount: int
    add_ons_amount: int
    total_amount: int

    @property
    def occupancy(self) -> dict:
        return {"adults": self.adults, "children": self.children, "total": self.adults + self.children}

    @property
    def amounts(self) -> dict:
        return {
            "base_amount": self.base_amount,
            "add_ons_amount": self.add_ons_amount,
            "total_amount": self.total_amount,
            "currency": self.booking.currency,
        }

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingResult":
        return cls(
            booking=booking,
            nights=booking.nights,
            adults=booking.adults,
            children=booking.children,
            base_amount=booking.base_amount,
            add_ons_amount=booking.add_ons_amount,
            total_amount=booking.total_amount,
        )


# ===== Command Handlers =====

class CreateBookingHandler:
    """
    Handler for CreateBooking command

    Strategy:
    1. Validate the request before touching the store
    2. Start database transaction (atomic) with a bounded lock wait
    3. Re-load the unit and check status and capacity
    4. Resolve or create the guest identity (atomic get_or_create)
    5. Re-check overlap against blocking bookings, locking the rows found
    6. Price the stay and insert the booking in a savepoint
    7. Commit; publish BookingCreated after commit

    On PostgreSQL the ``booking_no_overlap`` exclusion constraint makes a
    concurrent overlapping insert wait for the first writer and then fail,
    which is reported as a BookingConflict. On SQLite write transactions are
    serialized (BEGIN IMMEDIATE), so the re-check already sees the winner.
    """

    def __init__(self, using: str = DEFAULT_DB_ALIAS, identity_resolver: CustomerIdentityResolver | None = None):
        self.using = using
        self.identity_resolver = identity_resolver or CustomerIdentityResolver(using=using)

    def handle(self, command: CreateBookingCommand) -> BookingResult:
        """
        Handle booking creation

        Raises:
            ValidationError, NotFoundError, IdentityRoleConflict,
            BookingConflict, TransactionAborted
        """
        self._validate(command)

        logger.info(
            "Creating booking for unit %s, dates %s - %s, source %s",
            command.unit_id, command.check_in, command.check_out, command.source,
        )

        try:
            with DjangoUnitOfWork(using=self.using) as uow:
                set_lock_timeout(self.using)

                unit = self._load_unit(command.unit_id)
                if command.guests_count > unit.max_guests:
                    raise ValidationError(
                        f"Guests count ({command.guests_count}) exceeds unit capacity ({unit.max_guests})",
                        field="adults",
                    )

                identity = self.identity_resolver.resolve(
                    command.guest.email, command.guest.full_name, command.guest.phone
                )
                ensure_guest_role(identity.user)

                conflicts = find_conflicting_bookings(
                    unit.pk, command.check_in, command.check_out, using=self.using, lock=True
                )
                if conflicts:
                    raise self._conflict(unit.pk, command, conflicts)

                quote = quote_stay(unit.nightly_rate, command.check_in, command.check_out, command.add_ons)
                booking = self._insert(command, unit, identity.user, quote)

                uow.add_event(BookingCreated(
                    aggregate_id=booking.pk,
                    booking_id=booking.pk,
                    unit_id=unit.pk,
                    guest_id=identity.user.pk,
                    check_in=booking.check_in,
                    check_out=booking.check_out,
                    status=str(booking.status),
                    source=str(booking.source),
                    total_amount=booking.total_amount,
                    currency=booking.currency,
                ))
        except OperationalError as exc:
            logger.warning("Booking transaction aborted for unit %s: %s", command.unit_id, exc)
            raise TransactionAborted() from exc

        logger.info("Booking created successfully: %s (ID: %s)", booking.reference, booking.pk)

        return BookingResult(
            booking=booking,
            nights=quote.nights,
            adults=command.adults,
            children=command.children,
            base_amount=quote.base_amount,
            add_ons_amount=quote.add_ons_amount,
            total_amount=quote.total_amount,
        )

    def _validate(self, command: CreateBookingCommand) -> None:
        validate_stay_dates(command.check_in, command.check_out)
        validate_check_in_not_past(command.check_in)
        if command.adults < 0 or command.children < 0:
            raise ValidationError("Occupant counts cannot be negative", field="adults")
        if command.guests_count < 1:
            raise ValidationError("At least one guest is required", field="adults")
        if not (command.guest.full_name or '').strip():
            raise ValidationError("Guest name is required", field="full_name")
        if not (command.guest.email or '').strip():
            raise ValidationError("Guest email is required", field="email")

    def _load_unit(self, unit_id) -> Unit:
        try:
            unit = Unit.objects.using(self.using).get(pk=unit_id)
        except (Unit.DoesNotExist, DjangoValidationError):
            raise NotFoundError("Unit", unit_id) from None
        if not unit.is_bookable():
            raise ValidationError(f"Unit {unit.name} is not available for booking", field="unit_id")
        return unit

    def _insert(self, command: CreateBookingCommand, unit: Unit, guest, quote: PriceQuote) -> Booking:
        booking = Booking(
            unit=unit,
            guest=guest,
            guest_name=command.guest.full_name.strip(),
            guest_email=guest.email,
            guest_phone=(command.guest.phone or '').strip(),
            check_in=command.check_in,
            check_out=command.check_out,
            adults=command.adults,
            children=command.children,
            guests_count=command.guests_count,
            nightly_rate=unit.nightly_rate,
            base_amount=quote.base_amount,
            add_ons_amount=quote.add_ons_amount,
            total_amount=quote.total_amount,
            currency=unit.currency,
            add_ons=[add_on.to_dict() for add_on in command.add_ons],
            status=command.initial_status,
            source=command.source,
            agent_id=command.agent_id,
            created_by_id=command.created_by_id,
            special_requests=command.special_requests or '',
        )
        try:
            with transaction.atomic(using=self.using):
                booking.save(using=self.using)
        except IntegrityError as exc:
            if OVERLAP_CONSTRAINT not in str(exc):
                raise
            conflicts = find_conflicting_bookings(
                unit.pk, command.check_in, command.check_out, using=self.using
            )
            logger.warning("Concurrent booking won the dates on unit %s", unit.pk)
            raise self._conflict(unit.pk, command, conflicts) from exc
        return booking

    def _conflict(self, unit_id, command: CreateBookingCommand, conflicts) -> BookingConflict:
        logger.warning(
            "Booking conflict on unit %s for %s - %s: %s",
            unit_id, command.check_in, command.check_out,
            ", ".join(conflict.booking_id for conflict in conflicts),
        )
        return BookingConflict(
            conflicts,
            unit_id=unit_id,
            queried_range=queried_range(command.check_in, command.check_out),
        )


class TransitionBookingStatusHandler:
    """Handler for lifecycle transitions (confirm, complete, cancel)"""

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using

    def handle(self, booking_id, target, *, changed_by_id: int | None = None) -> Booking:
        target_status = parse_status(target)
        logger.info("Transitioning booking %s to %s", booking_id, target_status)

        try:
            with DjangoUnitOfWork(using=self.using) as uow:
                set_lock_timeout(self.using)

                try:
                    booking = Booking.objects.using(self.using).select_for_update().get(pk=booking_id)
                except (Booking.DoesNotExist, DjangoValidationError):
                    raise NotFoundError("Booking", booking_id) from None

                old_status = booking.status
                booking.apply_transition(target_status)

                if target_status == BookingStatus.CONFIRMED:
                    conflicts = find_conflicting_bookings(
                        booking.unit_id,
                        booking.check_in,
                        booking.check_out,
                        using=self.using,
                        lock=True,
                        exclude_booking_id=booking.pk,
                    )
                    if conflicts:
                        logger.warning("Cannot confirm booking %s: dates overlap another booking", booking.pk)
                        raise BookingConflict(
                            conflicts,
                            unit_id=booking.unit_id,
                            queried_range=queried_range(booking.check_in, booking.check_out),
                        )

                booking.save(using=self.using, update_fields=["status", "cancelled_at", "updated_at"])

                uow.add_event(BookingStatusChanged(
                    aggregate_id=booking.pk,
                    booking_id=booking.pk,
                    unit_id=booking.unit_id,
                    old_status=str(old_status),
                    new_status=str(booking.status),
                    changed_by=changed_by_id,
                ))
        except OperationalError as exc:
            logger.warning("Status transition aborted for booking %s: %s", booking_id, exc)
            raise TransactionAborted() from exc

        logger.info("Booking %s is now %s", booking.reference, booking.status)
        return booking


def set_lock_timeout(using: str = DEFAULT_DB_ALIAS) -> None:
    """Bound how long the current transaction waits for row locks."""
    connection = transaction.get_connection(using)
    if connection.vendor != "postgresql":
        # SQLite waits at most OPTIONS["timeout"] seconds for the write lock.
        return
    timeout_ms = int(float(settings.BOOKING_LOCK_TIMEOUT_SECONDS) * 1000)
    with connection.cursor() as cursor:
        cursor.execute(f"SET LOCAL lock_timeout = {timeout_ms}")
