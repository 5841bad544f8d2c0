"""Delivery state machine transitions and status groups."""

from __future__ import annotations

from src.models.enums import DeliveryStatus

# Transitions a courier may make: from_status -> set of allowed to_statuses.
# Admins are not bound by this table.
COURIER_TRANSITIONS: dict[DeliveryStatus, frozenset[DeliveryStatus]] = {
    DeliveryStatus.CREATED: frozenset({DeliveryStatus.PICKED_UP, DeliveryStatus.CANCELED}),
    DeliveryStatus.PICKED_UP: frozenset({DeliveryStatus.DELIVERED, DeliveryStatus.CANCELED}),
    DeliveryStatus.DELIVERED: frozenset({DeliveryStatus.PAID}),
    DeliveryStatus.PAID: frozenset(),
    DeliveryStatus.POSTPONED: frozenset({DeliveryStatus.PICKED_UP, DeliveryStatus.CANCELED}),
    DeliveryStatus.CANCELED: frozenset(),
}

ALL_STATUSES: frozenset[DeliveryStatus] = frozenset(DeliveryStatus)

# Terminal statuses, no further courier transitions
TERMINAL_STATUSES: frozenset[DeliveryStatus] = frozenset(
    {DeliveryStatus.PAID, DeliveryStatus.CANCELED}
)

# Postponement is its own operation, allowed only before delivery
POSTPONABLE_STATUSES: frozenset[DeliveryStatus] = frozenset(
    {DeliveryStatus.CREATED, DeliveryStatus.PICKED_UP}
)

# Couriers may hand a delivery over only before picking it up
COURIER_TRANSFERABLE_STATUSES: frozenset[DeliveryStatus] = frozenset(
    {DeliveryStatus.CREATED}
)

# Deliveries that never carried cash can be removed
DELETABLE_STATUSES: frozenset[DeliveryStatus] = frozenset(
    {DeliveryStatus.CREATED, DeliveryStatus.POSTPONED, DeliveryStatus.CANCELED}
)

# Client statement buckets
PENDING_STATUSES: frozenset[DeliveryStatus] = frozenset(
    {DeliveryStatus.CREATED, DeliveryStatus.PICKED_UP}
)

# Placeholder accepted by list filters for deliveries without a courier
UNASSIGNED = "UNASSIGNED"

REMARKS_MAX_LENGTH = 1000
