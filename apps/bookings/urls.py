"""URL routing for the booking surfaces."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import AgentBookingViewSet, AvailabilityView, PublicBookingCreateView, StaffBookingViewSet

router = DefaultRouter()
router.register(r"staff", StaffBookingViewSet, basename="staff-booking")
router.register(r"agent", AgentBookingViewSet, basename="agent-booking")

urlpatterns = [
    path("availability/", AvailabilityView.as_view(), name="booking-availability"),
    path("public/", PublicBookingCreateView.as_view(), name="booking-public-create"),
    path("", include(router.urls)),
]
