"""Lodging unit catalog model."""

from __future__ import annotations

import uuid

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


def default_currency() -> str:
    return getattr(settings, "BOOKING_DEFAULT_CURRENCY", "PKR")


class Unit(models.Model):
    """A bookable lodging item (tent, cabin, pod) with a fixed nightly rate."""

    class Status(models.TextChoices):
        DRAFT = "draft", _("Draft")
        ACTIVE = "active", _("Active")
        INACTIVE = "inactive", _("Inactive")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    nightly_rate = models.PositiveIntegerField(
        help_text=_("Price per night in minor currency units (cents)."),
    )
    max_guests = models.PositiveSmallIntegerField(default=1)
    currency = models.CharField(max_length=3, default=default_currency)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Unit")
        verbose_name_plural = _("Units")
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(condition=models.Q(max_guests__gte=1), name="unit_capacity_positive"),
        ]
        indexes = [
            models.Index(fields=["status"], name="unit_status_idx"),
        ]

    def __str__(self) -> str:
        return self.name

    def is_bookable(self) -> bool:
        return self.status == self.Status.ACTIVE
