"""Settlement eligibility sets and report filters."""

from __future__ import annotations

from src.models.enums import DeliveryStatus

# Deliveries considered in client (J+1) settlement and client statements
CLIENT_SETTLEMENT_STATUSES: frozenset[DeliveryStatus] = frozenset(
    {DeliveryStatus.DELIVERED, DeliveryStatus.PAID}
)

# Only cash actually collected can be confirmed, on either track
CONFIRMABLE_STATUS = DeliveryStatus.PAID

# J+1 list filters
FILTER_PENDING = "pending"
FILTER_SETTLED = "settled"
FILTER_ALL = "all"
SETTLEMENT_FILTERS = (FILTER_PENDING, FILTER_SETTLED, FILTER_ALL)
