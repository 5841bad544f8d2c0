"""Settlement service — J+1 client settlements, courier remittance reports,
client statements and their batch confirmations.

All amounts come from ``src.modules.settlement.engine``; this module only
loads rows and writes the settlement flags.
"""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, date, datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from src.config import settings
from src.exceptions import NotFoundException, ValidationException
from src.models.client import Client
from src.models.delivery import Delivery
from src.models.enums import DeliveryStatus, SettlementType
from src.modules.delivery.constants import PENDING_STATUSES
from src.modules.delivery.service import planned_between
from src.modules.settlement.constants import (
    CLIENT_SETTLEMENT_STATUSES,
    CONFIRMABLE_STATUS,
    FILTER_PENDING,
    FILTER_SETTLED,
    SETTLEMENT_FILTERS,
)
from src.modules.settlement.engine import (
    SettlementBreakdown,
    SettlementTotals,
    group_totals,
    is_eligible_for_client_settlement,
    settle_delivery,
    settlement_cutoff,
    summarize,
)

logger = logging.getLogger(__name__)


class SettlementService:
    def __init__(self, db: AsyncSession):
        self.db = db

    # ------------------------------------------------------------------
    # J+1 client settlements
    # ------------------------------------------------------------------

    async def list_client_settlements(
        self,
        filter_: str = FILTER_PENDING,
        today: date | None = None,
    ) -> tuple[date, dict]:
        """Deliveries due for client settlement, grouped by sending client.

        Returns ``(cutoff, groups)`` where ``groups`` maps each client id to
        ``([(delivery, breakdown), ...], totals)``.
        """
        if filter_ not in SETTLEMENT_FILTERS:
            raise ValidationException(
                f"Unknown filter '{filter_}'. Expected one of {list(SETTLEMENT_FILTERS)}"
            )

        today = today or settings.business_today()
        cutoff = settlement_cutoff(today, settings.settlement_delay_days)

        query = (
            select(Delivery)
            .options(joinedload(Delivery.sender), joinedload(Delivery.courier))
            .where(
                Delivery.status.in_(list(CLIENT_SETTLEMENT_STATUSES)),
                Delivery.planned_date <= cutoff,
            )
        )
        if filter_ == FILTER_PENDING:
            query = query.where(Delivery.is_settled.is_(False))
        elif filter_ == FILTER_SETTLED:
            query = query.where(Delivery.is_settled.is_(True))

        result = await self.db.execute(
            query.order_by(Delivery.planned_date.desc())
        )
        deliveries = [
            d
            for d in result.unique().scalars().all()
            if is_eligible_for_client_settlement(d.status, d.planned_date, cutoff)
        ]

        groups = group_totals(deliveries, "sender_id")
        logger.info(
            "Client settlements (%s, cutoff %s): %d deliveries across %d clients",
            filter_,
            cutoff,
            len(deliveries),
            len(groups),
        )
        return cutoff, groups

    async def confirm_client_settlement(
        self,
        delivery_ids: list[uuid.UUID],
        settlement_type: SettlementType,
        settled_by: uuid.UUID,
    ) -> int:
        """Mark PAID, not yet settled deliveries as settled with the client.

        Rows that are not PAID or already settled are left untouched, so
        confirming the same batch twice is a no-op. Returns the number of
        rows actually updated.
        """
        if not delivery_ids:
            raise ValidationException("At least one delivery must be selected")

        result = await self.db.execute(
            update(Delivery)
            .where(
                Delivery.id.in_(delivery_ids),
                Delivery.status == CONFIRMABLE_STATUS,
                Delivery.is_settled.is_(False),
            )
            .values(
                is_settled=True,
                settled_at=datetime.now(UTC),
                settled_by=settled_by,
                settlement_type=settlement_type,
            )
            .execution_options(synchronize_session=False)
        )
        await self.db.flush()

        settled = result.rowcount or 0
        logger.info(
            "Client settlement confirmed by %s via %s: %d of %d deliveries",
            settled_by,
            settlement_type.value,
            settled,
            len(delivery_ids),
        )
        return settled

    # ------------------------------------------------------------------
    # Courier remittance
    # ------------------------------------------------------------------

    async def courier_day_report(
        self,
        report_date: date,
        courier_id: uuid.UUID | None = None,
    ) -> dict:
        """PAID deliveries of a day grouped by courier, with remittance totals."""
        query = (
            select(Delivery)
            .options(joinedload(Delivery.sender), joinedload(Delivery.courier))
            .where(
                Delivery.status == CONFIRMABLE_STATUS,
                Delivery.planned_date == report_date,
            )
        )
        if courier_id is not None:
            query = query.where(Delivery.courier_id == courier_id)

        result = await self.db.execute(query.order_by(Delivery.updated_at.desc()))
        deliveries = list(result.unique().scalars().all())

        groups = group_totals(deliveries, "courier_id")
        logger.info(
            "Courier report for %s (courier %s): %d deliveries",
            report_date,
            courier_id or "all",
            len(deliveries),
        )
        return groups

    async def confirm_courier_settlement(
        self,
        delivery_ids: list[uuid.UUID],
        settled_by: uuid.UUID,
    ) -> int:
        """Record that couriers handed over the cash of these PAID deliveries."""
        if not delivery_ids:
            raise ValidationException("At least one delivery must be selected")

        result = await self.db.execute(
            update(Delivery)
            .where(
                Delivery.id.in_(delivery_ids),
                Delivery.status == CONFIRMABLE_STATUS,
                Delivery.courier_settled.is_(False),
            )
            .values(
                courier_settled=True,
                courier_settled_at=datetime.now(UTC),
                courier_settled_by=settled_by,
            )
            .execution_options(synchronize_session=False)
        )
        await self.db.flush()

        settled = result.rowcount or 0
        logger.info(
            "Courier remittance confirmed by %s: %d of %d deliveries",
            settled_by,
            settled,
            len(delivery_ids),
        )
        return settled

    # ------------------------------------------------------------------
    # Client statement
    # ------------------------------------------------------------------

    async def client_summary(
        self,
        client_id: uuid.UUID,
        start_date: date,
        end_date: date,
    ) -> tuple[Client, list[tuple[Delivery, SettlementBreakdown]], SettlementTotals, dict]:
        """Statement of one client's deliveries planned in a date range.

        Postponed deliveries appear in the range of their original date too.
        Only DELIVERED and PAID rows carry a non-zero client amount.
        """
        if end_date < start_date:
            raise ValidationException("end_date must not be before start_date")

        client_result = await self.db.execute(select(Client).where(Client.id == client_id))
        client = client_result.scalar_one_or_none()
        if client is None:
            raise NotFoundException(f"Client {client_id} not found")

        result = await self.db.execute(
            select(Delivery)
            .where(
                Delivery.sender_id == client_id,
                planned_between(start_date, end_date),
            )
            .order_by(Delivery.planned_date.desc())
        )
        deliveries = list(result.scalars().all())

        rows = [(d, settle_delivery(d)) for d in deliveries]
        totals = summarize(b for _, b in rows)

        statuses = [d.status for d in deliveries]
        stats = {
            "total": len(deliveries),
            "delivered": sum(1 for s in statuses if s in CLIENT_SETTLEMENT_STATUSES),
            "postponed": statuses.count(DeliveryStatus.POSTPONED),
            "canceled": statuses.count(DeliveryStatus.CANCELED),
            "pending": sum(1 for s in statuses if s in PENDING_STATUSES),
        }
        return client, rows, totals, stats

