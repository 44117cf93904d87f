"""FilterSet for the staff booking list."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .domain.lifecycle import BookingStatus
from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    """Status, unit, free-text search and stay window filters."""

    status = django_filters.CharFilter(method="filter_status")
    unit = django_filters.UUIDFilter(field_name="unit_id", lookup_expr="exact")
    source = django_filters.ChoiceFilter(choices=Booking.Source.choices)
    search = django_filters.CharFilter(method="filter_search")
    # Stay window: bookings whose stay intersects [from_date, to_date)
    from_date = django_filters.DateFilter(field_name="check_out", lookup_expr="gt")
    to_date = django_filters.DateFilter(field_name="check_in", lookup_expr="lt")

    class Meta:
        model = Booking
        fields = ["status", "unit", "source"]

    def filter_status(self, queryset, name, value):  # type: ignore
        value = (value or "").strip().lower()
        if value not in BookingStatus.values:
            return queryset.none()
        return queryset.filter(status=value)

    def filter_search(self, queryset, name, value):  # type: ignore
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(reference__icontains=value)
            | Q(guest_name__icontains=value)
            | Q(guest_email__icontains=value)
            | Q(guest_phone__icontains=value)
            | Q(unit__name__icontains=value)
        )
