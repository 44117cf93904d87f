"""Admin registrations for the unit catalog."""

from __future__ import annotations

from django.contrib import admin

from .models import Unit


@admin.register(Unit)
class UnitAdmin(admin.ModelAdmin):
    list_display = ("name", "status", "nightly_rate", "currency", "max_guests", "updated_at")
    list_filter = ("status", "currency")
    search_fields = ("name",)
    readonly_fields = ("id", "created_at", "updated_at")
