"""API views for the public, staff and agent booking surfaces."""

from __future__ import annotations

from django.db import DEFAULT_DB_ALIAS  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import IsAgent, IsReferringAgent, IsStaffMember

from .application.command_handlers import (
    BookingResult,
    BookingSource,
    CreateBookingHandler,
    TransitionBookingStatusHandler,
)
from .filters import BookingFilterSet
from .models import Booking
from .serializers import (
    AvailabilityQuerySerializer,
    BookingCreateSerializer,
    BookingResultSerializer,
    BookingSerializer,
    BookingTransitionSerializer,
)
from .services import check_availability


class BookingCreationMixin:
    """Runs a validated BookingCreateSerializer through the creation handler."""

    using = DEFAULT_DB_ALIAS

    def perform_booking(self, request, **command_kwargs) -> Response:  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        command = serializer.to_command(**command_kwargs)
        result: BookingResult = CreateBookingHandler(using=self.using).handle(command)
        payload = BookingResultSerializer(result).data
        return Response(payload, status=status.HTTP_201_CREATED)


class AvailabilityView(APIView):
    """
    Advisory availability for one or more units.

    GET  ?unit=<id>&unit=<id>&check_in=YYYY-MM-DD&check_out=YYYY-MM-DD
    POST {"unit_ids": [...], "check_in": ..., "check_out": ...}
    """

    permission_classes = [permissions.AllowAny]
    using = DEFAULT_DB_ALIAS

    def get(self, request):  # type: ignore
        data = {
            "unit_ids": request.query_params.getlist("unit"),
            "check_in": request.query_params.get("check_in"),
            "check_out": request.query_params.get("check_out"),
        }
        return self._respond(data)

    def post(self, request):  # type: ignore
        return self._respond(request.data)

    def _respond(self, data) -> Response:
        serializer = AvailabilityQuerySerializer(data=data)
        serializer.is_valid(raise_exception=True)
        report = check_availability(
            serializer.validated_data["unit_ids"],
            serializer.validated_data["check_in"],
            serializer.validated_data["check_out"],
            using=self.using,
        )
        return Response(report.to_dict())


class PublicBookingCreateView(BookingCreationMixin, APIView):
    """Public booking form: always creates a PENDING booking."""

    permission_classes = [permissions.AllowAny]

    def post(self, request):  # type: ignore
        return self.perform_booking(request, source=BookingSource.PUBLIC)


class StaffBookingViewSet(
    BookingCreationMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Back-office booking management."""

    queryset = Booking.objects.select_related("unit", "guest").all()
    serializer_class = BookingSerializer
    permission_classes = [IsStaffMember]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = BookingFilterSet
    ordering_fields = ["created_at", "check_in", "total_amount"]
    ordering = ["-created_at"]

    def get_queryset(self):  # type: ignore
        return super().get_queryset().using(self.using)

    def create(self, request, *args, **kwargs):  # type: ignore
        return self.perform_booking(
            request,
            source=BookingSource.STAFF,
            created_by_id=request.user.pk,
            honour_payment_status=True,
        )

    @action(detail=True, methods=["post"])
    def transition(self, request, pk=None):  # type: ignore
        serializer = BookingTransitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = TransitionBookingStatusHandler(using=self.using).handle(
            pk,
            serializer.validated_data["status"],
            changed_by_id=request.user.pk,
        )
        booking = self.get_queryset().get(pk=booking.pk)
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data)


class AgentBookingViewSet(
    BookingCreationMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Sales agents: book on behalf of guests and follow their own referrals."""

    queryset = Booking.objects.select_related("unit", "guest").all()
    serializer_class = BookingSerializer
    permission_classes = [IsAgent, IsReferringAgent]

    def get_queryset(self):  # type: ignore
        return super().get_queryset().using(self.using).filter(agent=self.request.user)

    def create(self, request, *args, **kwargs):  # type: ignore
        return self.perform_booking(
            request,
            source=BookingSource.AGENT,
            agent_id=request.user.pk,
            created_by_id=request.user.pk,
        )
