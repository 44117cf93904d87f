"""Serializers for the booking surfaces."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .application.command_handlers import (
    CreateBookingCommand,
    GuestContact,
    PaymentStatusHint,
)
from .domain.lifecycle import BookingStatus
from .domain.pricing import AddOn
from .models import Booking


class AddOnSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=120)
    unit_price = serializers.IntegerField(min_value=0, help_text="Minor currency units.")
    quantity = serializers.IntegerField(min_value=1, default=1)


class BookingCreateSerializer(serializers.Serializer):
    """Booking request shared by the public, staff and agent surfaces."""

    unit = serializers.UUIDField()
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    adults = serializers.IntegerField(min_value=0, default=1)
    children = serializers.IntegerField(min_value=0, default=0)
    full_name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")
    add_ons = AddOnSerializer(many=True, required=False, default=list)
    special_requests = serializers.CharField(required=False, allow_blank=True, default="")
    payment_status = serializers.ChoiceField(
        choices=[hint.value for hint in PaymentStatusHint],
        required=False,
        default=PaymentStatusHint.UNPAID.value,
    )

    def to_command(
        self,
        *,
        source: str,
        agent_id: int | None = None,
        created_by_id: int | None = None,
        honour_payment_status: bool = False,
    ) -> CreateBookingCommand:
        data = self.validated_data
        status_hint = PaymentStatusHint.UNPAID
        if honour_payment_status:
            status_hint = PaymentStatusHint(data["payment_status"])
        return CreateBookingCommand(
            unit_id=data["unit"],
            check_in=data["check_in"],
            check_out=data["check_out"],
            adults=data["adults"],
            children=data["children"],
            guest=GuestContact(
                full_name=data["full_name"],
                email=data["email"],
                phone=data.get("phone", ""),
            ),
            add_ons=tuple(AddOn(**item) for item in data.get("add_ons", [])),
            status_hint=status_hint,
            source=source,
            agent_id=agent_id,
            created_by_id=created_by_id,
            special_requests=data.get("special_requests", ""),
        )


class BookingSerializer(serializers.ModelSerializer):
    """Read-only booking representation."""

    unit_id = serializers.ReadOnlyField(source="unit.id")
    unit_name = serializers.ReadOnlyField(source="unit.name")
    guest_id = serializers.ReadOnlyField(source="guest.id")
    agent_id = serializers.ReadOnlyField()
    nights = serializers.ReadOnlyField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "reference",
            "unit_id",
            "unit_name",
            "guest_id",
            "guest_name",
            "guest_email",
            "guest_phone",
            "check_in",
            "check_out",
            "nights",
            "adults",
            "children",
            "guests_count",
            "nightly_rate",
            "base_amount",
            "add_ons_amount",
            "total_amount",
            "currency",
            "add_ons",
            "status",
            "source",
            "agent_id",
            "special_requests",
            "cancelled_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BookingResultSerializer(serializers.Serializer):
    """Creation response: the booking plus its night, occupancy and amount breakdown."""

    booking = BookingSerializer()
    nights = serializers.IntegerField()
    occupancy = serializers.DictField()
    amounts = serializers.DictField()


class AvailabilityQuerySerializer(serializers.Serializer):
    unit_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)
    check_in = serializers.DateField()
    check_out = serializers.DateField()


class BookingTransitionSerializer(serializers.Serializer):
    status = serializers.CharField()

    def validate_status(self, value: str) -> str:
        allowed = {status.value for status in BookingStatus}
        normalized = value.strip().lower()
        if normalized not in allowed:
            raise serializers.ValidationError(
                f"Invalid status. Must be one of: {', '.join(sorted(allowed))}"
            )
        return normalized
