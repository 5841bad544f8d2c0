"""Delivery status machine — who may move a delivery where, and when.

The rules are role-aware: couriers follow ``COURIER_TRANSITIONS`` while admins
may set any status. Transfer and postponement are separate operations with
their own guards.
"""

from __future__ import annotations

import uuid
from datetime import date, timedelta

from src.exceptions import (
    BusinessRuleException,
    ConflictException,
    InvalidTransitionException,
    ValidationException,
)
from src.models.enums import DeliveryStatus, UserRole
from src.modules.delivery.constants import (
    ALL_STATUSES,
    COURIER_TRANSFERABLE_STATUSES,
    COURIER_TRANSITIONS,
    DELETABLE_STATUSES,
    POSTPONABLE_STATUSES,
)


def next_valid_statuses(
    current_status: DeliveryStatus, actor_role: UserRole
) -> set[DeliveryStatus]:
    """Statuses ``actor_role`` may move a delivery to from ``current_status``."""
    if actor_role == UserRole.ADMIN:
        return set(ALL_STATUSES)
    return set(COURIER_TRANSITIONS.get(current_status, frozenset()))


def validate_transition(
    current_status: DeliveryStatus,
    target_status: DeliveryStatus,
    actor_role: UserRole,
) -> None:
    """Raise InvalidTransitionException if a courier asks for a forbidden move."""
    if actor_role == UserRole.ADMIN:
        return
    allowed = next_valid_statuses(current_status, actor_role)
    if target_status not in allowed:
        raise InvalidTransitionException(
            current_status.value,
            target_status.value,
            sorted(s.value for s in allowed),
        )


def can_transfer(
    current_status: DeliveryStatus,
    actor_role: UserRole,
    from_courier_id: uuid.UUID | None,
    acting_user_id: uuid.UUID,
) -> bool:
    """Whether the actor may reassign this delivery to another courier."""
    if actor_role == UserRole.ADMIN:
        return True
    return (
        current_status in COURIER_TRANSFERABLE_STATUSES
        and from_courier_id is not None
        and from_courier_id == acting_user_id
    )


def validate_transfer_target(
    from_courier_id: uuid.UUID | None,
    to_courier_id: uuid.UUID | None,
    target_exists: bool,
) -> None:
    """Check the destination of a transfer.

    ``target_exists`` is true only when ``to_courier_id`` names a user with the
    COURIER role. ``to_courier_id=None`` means unassign.
    """
    if to_courier_id is None:
        if from_courier_id is None:
            raise ValidationException("Delivery is not assigned to any courier")
        return
    if not target_exists:
        raise ValidationException(f"Target courier {to_courier_id} is not a valid courier")
    if from_courier_id == to_courier_id:
        raise ValidationException("Delivery is already assigned to this courier")


def earliest_postpone_date(today: date) -> date:
    return today + timedelta(days=1)


def validate_postpone(
    current_status: DeliveryStatus,
    postponed_to: date,
    today: date,
) -> None:
    """Postponement needs a pre-delivery status and a date from tomorrow on."""
    if current_status not in POSTPONABLE_STATUSES:
        raise BusinessRuleException(
            f"Cannot postpone a delivery in status '{current_status.value}'. "
            f"Allowed: {sorted(s.value for s in POSTPONABLE_STATUSES)}"
        )
    earliest = earliest_postpone_date(today)
    if postponed_to < earliest:
        raise ValidationException(
            f"Postponement date must be {earliest.isoformat()} or later",
            details=[{"field": "postponed_to", "message": "must be at least tomorrow"}],
        )


def validate_deletable(current_status: DeliveryStatus) -> None:
    if current_status not in DELETABLE_STATUSES:
        raise ConflictException(
            f"Cannot delete a delivery in status '{current_status.value}'. "
            f"Deletable statuses: {sorted(s.value for s in DELETABLE_STATUSES)}"
        )

