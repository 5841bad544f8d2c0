"""Settlement engine — who owes whom for a delivery, and how much.

Three amounts are derived from a delivery's price, collect amount and payment
flags:

* ``total_due`` — cash the receiver hands the courier at the door.
* courier remittance — what the courier hands the office for a PAID delivery
  (the gross ``total_due``; fees are netted by the office afterwards).
* client settlement — what the office pays the client the day after (J+1).
  Negative means the client owes the office (a debit).

Every report and form goes through these functions; nothing else in the code
base re-derives the branching.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any

from src.models.enums import DeliveryStatus, SettlementDirection
from src.modules.settlement.constants import CLIENT_SETTLEMENT_STATUSES


def effective_collect_amount(is_prepaid: bool, collect_amount: int | None) -> int:
    """Goods amount the receiver still owes; always 0 when goods were prepaid."""
    if is_prepaid:
        return 0
    return collect_amount or 0


def compute_total_due(
    is_prepaid: bool,
    delivery_price: int,
    collect_amount: int | None,
) -> int:
    """Cash the receiver pays the courier.

    ``delivery_fee_prepaid`` deliberately plays no part here: it only changes
    how the fee is netted against the client later.
    """
    return delivery_price + effective_collect_amount(is_prepaid, collect_amount)


def compute_client_settlement_amount(
    status: DeliveryStatus,
    is_prepaid: bool,
    delivery_fee_prepaid: bool,
    delivery_price: int,
    collect_amount: int | None,
) -> int:
    """Signed amount the office owes the client for one delivery.

    PAID deliveries net the collected cash against the fee. DELIVERED ones
    have not been cashed in yet, so only the fee debit of a prepaid delivery
    is already known. Any other status settles nothing.
    """
    if status == DeliveryStatus.PAID:
        collected = effective_collect_amount(is_prepaid, collect_amount)
        if not is_prepaid:
            if delivery_fee_prepaid:
                return collected
            return collected - delivery_price
        if delivery_fee_prepaid:
            return 0
        return -delivery_price

    if status == DeliveryStatus.DELIVERED:
        if is_prepaid and not delivery_fee_prepaid:
            return -delivery_price
        return 0

    return 0


def compute_courier_remittance(
    status: DeliveryStatus,
    is_prepaid: bool,
    delivery_price: int,
    collect_amount: int | None,
) -> int:
    """Cash a courier owes the office for one delivery (gross, PAID only)."""
    if status != DeliveryStatus.PAID:
        return 0
    return compute_total_due(is_prepaid, delivery_price, collect_amount)


def settlement_direction(amount: int) -> SettlementDirection:
    if amount > 0:
        return SettlementDirection.OFFICE_OWES_CLIENT
    if amount < 0:
        return SettlementDirection.CLIENT_OWES_OFFICE
    return SettlementDirection.SETTLED


def settlement_cutoff(today: date, delay_days: int = 1) -> date:
    """Latest planned date that is due for client settlement (J+1 by default)."""
    return today - timedelta(days=delay_days)


def is_eligible_for_client_settlement(
    status: DeliveryStatus,
    planned_date: date,
    cutoff: date,
) -> bool:
    """Eligibility keys off the planned date, not the completion date."""
    return status in CLIENT_SETTLEMENT_STATUSES and planned_date <= cutoff


# ---------------------------------------------------------------------------
# Per-delivery breakdown and aggregation
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SettlementBreakdown:
    """All settlement amounts of one delivery."""

    delivery_id: uuid.UUID | None
    status: DeliveryStatus
    delivery_price: int
    collect_amount: int
    total_due: int
    courier_remittance: int
    client_amount: int

    @property
    def direction(self) -> SettlementDirection:
        return settlement_direction(self.client_amount)

    @property
    def client_amount_abs(self) -> int:
        return abs(self.client_amount)


def settle_delivery(delivery: Any) -> SettlementBreakdown:
    """Run every settlement formula on a delivery record (ORM row or any object
    exposing the same attribute names)."""
    status = DeliveryStatus(delivery.status)
    is_prepaid = bool(delivery.is_prepaid)
    fee_prepaid = bool(delivery.delivery_fee_prepaid)
    price = int(delivery.delivery_price)
    collect = delivery.collect_amount

    return SettlementBreakdown(
        delivery_id=getattr(delivery, "id", None),
        status=status,
        delivery_price=price,
        collect_amount=effective_collect_amount(is_prepaid, collect),
        total_due=compute_total_due(is_prepaid, price, collect),
        courier_remittance=compute_courier_remittance(status, is_prepaid, price, collect),
        client_amount=compute_client_settlement_amount(
            status, is_prepaid, fee_prepaid, price, collect
        ),
    )


@dataclass
class SettlementTotals:
    """Sums over a group of breakdowns. Totals are plain sums of row amounts."""

    delivery_count: int = 0
    total_collect: int = 0
    total_delivery_fees: int = 0
    total_due: int = 0
    total_courier_remittance: int = 0
    total_client_amount: int = 0
    delivery_ids: list[uuid.UUID] = field(default_factory=list)

    def add(self, breakdown: SettlementBreakdown) -> None:
        self.delivery_count += 1
        self.total_collect += breakdown.collect_amount
        self.total_delivery_fees += breakdown.delivery_price
        self.total_due += breakdown.total_due
        self.total_courier_remittance += breakdown.courier_remittance
        self.total_client_amount += breakdown.client_amount
        if breakdown.delivery_id is not None:
            self.delivery_ids.append(breakdown.delivery_id)

    @property
    def client_direction(self) -> SettlementDirection:
        return settlement_direction(self.total_client_amount)


def summarize(breakdowns: Iterable[SettlementBreakdown]) -> SettlementTotals:
    totals = SettlementTotals()
    for breakdown in breakdowns:
        totals.add(breakdown)
    return totals


def group_totals(
    deliveries: Iterable[Any],
    key: str,
) -> dict[Any, tuple[list[tuple[Any, SettlementBreakdown]], SettlementTotals]]:
    """Group deliveries by ``key`` (e.g. ``sender_id`` or ``courier_id``).

    Returns ``{key_value: ([(delivery, breakdown), ...], totals)}`` preserving
    first-seen order of groups and rows.
    """
    groups: dict[Any, tuple[list[tuple[Any, SettlementBreakdown]], SettlementTotals]] = {}
    for delivery in deliveries:
        group_key = getattr(delivery, key)
        if group_key not in groups:
            groups[group_key] = ([], SettlementTotals())
        rows, totals = groups[group_key]
        breakdown = settle_delivery(delivery)
        rows.append((delivery, breakdown))
        totals.add(breakdown)
    return groups
