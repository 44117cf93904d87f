"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin
from django.utils.translation import gettext_lazy as _  # type: ignore

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    """Read-mostly: status changes go through the staff API transition endpoint."""

    list_display = (
        "reference",
        "unit",
        "guest_name",
        "guest_email",
        "status",
        "source",
        "check_in",
        "check_out",
        "total",
        "created_at",
    )
    list_filter = ("status", "source", "check_in", "check_out")
    search_fields = ("reference", "unit__name", "guest_email", "guest_name")
    readonly_fields = (
        "reference",
        "unit",
        "guest",
        "status",
        "check_in",
        "check_out",
        "nightly_rate",
        "base_amount",
        "add_ons_amount",
        "total_amount",
        "currency",
        "add_ons",
        "agent",
        "created_by",
        "cancelled_at",
        "created_at",
        "updated_at",
    )

    @admin.display(description=_("Total"), ordering="total_amount")
    def total(self, obj):  # type: ignore
        return str(obj.total_money)

    def has_add_permission(self, request):  # type: ignore
        return False

    def has_delete_permission(self, request, obj=None):  # type: ignore
        return False
