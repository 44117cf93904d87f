"""Customer identity resolution for bookings."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from django.contrib.auth.hashers import make_password  # type: ignore
from django.db import DEFAULT_DB_ALIAS  # type: ignore

from shared.domain.exceptions import IdentityRoleConflict, ValidationError

from .models import CustomUser, CustomUserManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedIdentity:
    user: CustomUser
    created: bool


class CustomerIdentityResolver:
    """
    Look up the guest identity for an email, creating it on first use.

    ``get_or_create`` inserts inside a savepoint and, when the unique
    constraint on the email fires because a concurrent request inserted the
    same address first, rolls back to the savepoint and fetches the row that
    won. Two requests with a brand-new email therefore end up sharing one
    identity instead of one of them failing.

    The stored name of an existing identity is never overwritten; bookings
    keep the name supplied with each request.
    """

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using

    def resolve(self, email: str, full_name: str, phone: str = "") -> ResolvedIdentity:
        normalized = CustomUserManager.normalize_email(email)
        if not normalized:
            raise ValidationError("Guest email is required", field="email")

        user, created = CustomUser.objects.db_manager(self.using).get_or_create(
            email=normalized,
            defaults={
                "full_name": (full_name or "").strip(),
                "phone": (phone or "").strip(),
                "role": CustomUser.RoleChoices.GUEST,
                "password": make_password(None),
            },
        )
        if created:
            logger.info("Created guest identity %s", user.pk)
        return ResolvedIdentity(user=user, created=created)


def ensure_guest_role(user: CustomUser) -> None:
    """Bookings may only reference identities carrying the guest role."""
    if not user.is_guest():
        logger.warning("Booking rejected: identity %s has role %s", user.pk, user.role)
        raise IdentityRoleConflict(user.email, user.role)
