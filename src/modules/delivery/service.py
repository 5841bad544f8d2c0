"""Delivery service — CRUD, status transitions, postponement, transfers."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, date, datetime
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from src.config import settings
from src.exceptions import ForbiddenException, NotFoundException, ValidationException
from src.models.client import Client
from src.models.delivery import Delivery
from src.models.enums import DeliveryStatus, UserRole
from src.models.user import User
from src.modules.auth.dependencies import AuthenticatedUser
from src.modules.delivery.constants import COURIER_TRANSFERABLE_STATUSES, UNASSIGNED
from src.modules.delivery.state_machine import (
    can_transfer,
    next_valid_statuses,
    validate_deletable,
    validate_postpone,
    validate_transfer_target,
    validate_transition,
)
from src.modules.pricing.engine import compute_price
from src.modules.settlement.engine import compute_total_due

logger = logging.getLogger(__name__)

PRICING_FIELDS = frozenset({"zone", "weight_kg", "is_express"})

# Matches the NUMERIC(8, 2) weight column
WEIGHT_STEP = Decimal("0.01")


def stored_weight(weight_kg) -> Decimal:
    """Weight rounded the way the database stores it, so the price follows the stored value."""
    return Decimal(str(weight_kg)).quantize(WEIGHT_STEP, rounding=ROUND_HALF_UP)


def planned_between(start: date, end: date):
    """Match deliveries planned in [start, end] now or before a postponement."""
    return or_(
        and_(Delivery.planned_date >= start, Delivery.planned_date <= end),
        and_(
            Delivery.original_planned_date >= start,
            Delivery.original_planned_date <= end,
        ),
    )


class DeliveryService:
    def __init__(self, db: AsyncSession):
        self.db = db

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _get_delivery(self, delivery_id: uuid.UUID) -> Delivery:
        """Fetch a delivery by ID. Raises NotFoundException if missing."""
        result = await self.db.execute(
            select(Delivery).where(Delivery.id == delivery_id)
        )
        delivery = result.scalar_one_or_none()
        if delivery is None:
            raise NotFoundException(f"Delivery {delivery_id} not found")
        return delivery

    async def _get_delivery_with_relations(self, delivery_id: uuid.UUID) -> Delivery:
        """Fetch a delivery with sender and courier eagerly loaded."""
        result = await self.db.execute(
            select(Delivery)
            .options(joinedload(Delivery.sender), joinedload(Delivery.courier))
            .where(Delivery.id == delivery_id)
        )
        delivery = result.unique().scalar_one_or_none()
        if delivery is None:
            raise NotFoundException(f"Delivery {delivery_id} not found")
        return delivery

    async def _ensure_client(self, client_id: uuid.UUID) -> None:
        result = await self.db.execute(select(Client.id).where(Client.id == client_id))
        if result.scalar_one_or_none() is None:
            raise ValidationException(f"Client {client_id} does not exist")

    async def _find_courier(self, courier_id: uuid.UUID) -> User | None:
        result = await self.db.execute(
            select(User).where(User.id == courier_id, User.role == UserRole.COURIER)
        )
        return result.scalar_one_or_none()

    async def _ensure_courier(self, courier_id: uuid.UUID) -> None:
        if await self._find_courier(courier_id) is None:
            raise ValidationException(f"Courier {courier_id} does not exist")

    @staticmethod
    def _ensure_courier_owns(delivery: Delivery, actor: AuthenticatedUser) -> None:
        """Couriers may only act on deliveries assigned to them."""
        if actor.role == UserRole.COURIER and delivery.courier_id != actor.id:
            raise ForbiddenException("This delivery is not assigned to you")

    @staticmethod
    def _apply_amounts(delivery: Delivery) -> None:
        """Keep collect_amount and total_due consistent with the payment flags."""
        if delivery.is_prepaid:
            delivery.collect_amount = 0
        delivery.total_due = compute_total_due(
            delivery.is_prepaid, delivery.delivery_price, delivery.collect_amount
        )

    # ------------------------------------------------------------------
    # Create / update / delete
    # ------------------------------------------------------------------

    async def create_delivery(
        self,
        created_by: uuid.UUID,
        planned_date: date,
        sender_id: uuid.UUID,
        receiver_name: str,
        receiver_phone: str,
        receiver_address: str,
        weight_kg: Decimal | float,
        zone,
        is_express: bool = False,
        parcel_count: int = 1,
        description: str | None = None,
        note: str | None = None,
        delivery_price: int | None = None,
        collect_amount: int | None = None,
        is_prepaid: bool = False,
        delivery_fee_prepaid: bool = False,
        courier_id: uuid.UUID | None = None,
        today: date | None = None,
    ) -> Delivery:
        """Create a delivery in CREATED status.

        The tariff price is always stored as ``auto_price``; ``delivery_price``
        is the admin override when given, the tariff otherwise.
        """
        today = today or settings.business_today()
        if planned_date < today:
            raise ValidationException(
                "Planned date must be today or later",
                details=[{"field": "planned_date", "message": "in the past"}],
            )

        await self._ensure_client(sender_id)
        if courier_id is not None:
            await self._ensure_courier(courier_id)

        weight_kg = stored_weight(weight_kg)
        auto_price = compute_price(zone, weight_kg, is_express)

        delivery = Delivery(
            planned_date=planned_date,
            sender_id=sender_id,
            courier_id=courier_id,
            receiver_name=receiver_name,
            receiver_phone=receiver_phone,
            receiver_address=receiver_address,
            parcel_count=parcel_count,
            weight_kg=weight_kg,
            description=description,
            note=note,
            zone=zone,
            is_express=is_express,
            auto_price=auto_price,
            delivery_price=auto_price if delivery_price is None else delivery_price,
            collect_amount=collect_amount,
            is_prepaid=is_prepaid,
            delivery_fee_prepaid=delivery_fee_prepaid,
            status=DeliveryStatus.CREATED,
        )
        self._apply_amounts(delivery)

        self.db.add(delivery)
        await self.db.flush()

        logger.info(
            "Created delivery %s for client %s by %s (price %s, total due %s%s)",
            delivery.id,
            sender_id,
            created_by,
            delivery.delivery_price,
            delivery.total_due,
            ", price overridden" if delivery.delivery_price != auto_price else "",
        )
        return await self._get_delivery_with_relations(delivery.id)

    async def update_delivery(
        self,
        delivery_id: uuid.UUID,
        updated_by: uuid.UUID,
        **changes,
    ) -> Delivery:
        """Edit a delivery. Changing zone, weight or express re-prices it."""
        delivery = await self._get_delivery(delivery_id)

        if "sender_id" in changes and changes["sender_id"] is not None:
            await self._ensure_client(changes["sender_id"])
        if changes.get("courier_id") is not None:
            await self._ensure_courier(changes["courier_id"])

        if changes.get("weight_kg") is not None:
            changes["weight_kg"] = stored_weight(changes["weight_kg"])

        for key, value in changes.items():
            if value is None and key not in ("courier_id", "collect_amount", "description", "note"):
                continue
            setattr(delivery, key, value)

        if PRICING_FIELDS.intersection(changes):
            delivery.auto_price = compute_price(
                delivery.zone, delivery.weight_kg, delivery.is_express
            )
            delivery.delivery_price = delivery.auto_price
        self._apply_amounts(delivery)

        await self.db.flush()
        logger.info(
            "Delivery %s updated by %s: %s (price %s, total due %s)",
            delivery_id,
            updated_by,
            sorted(changes),
            delivery.delivery_price,
            delivery.total_due,
        )
        return await self._get_delivery_with_relations(delivery_id)

    async def delete_delivery(self, delivery_id: uuid.UUID) -> None:
        """Delete a delivery that never left the office."""
        delivery = await self._get_delivery(delivery_id)
        validate_deletable(delivery.status)
        await self.db.delete(delivery)
        await self.db.flush()
        logger.info("Deleted delivery %s (%s)", delivery_id, delivery.status.value)

    # ------------------------------------------------------------------
    # List / Get
    # ------------------------------------------------------------------

    async def get_delivery(
        self, delivery_id: uuid.UUID, actor: AuthenticatedUser | None = None
    ) -> Delivery:
        delivery = await self._get_delivery_with_relations(delivery_id)
        if actor is not None:
            self._ensure_courier_owns(delivery, actor)
        return delivery

    async def list_deliveries(
        self,
        actor: AuthenticatedUser,
        on_date: date | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        status: DeliveryStatus | None = None,
        courier_id: str | None = None,
        client_id: uuid.UUID | None = None,
        assigned_to_me: bool = False,
    ) -> list[Delivery]:
        """List deliveries. Couriers only ever see their own."""
        query = select(Delivery).options(
            joinedload(Delivery.sender), joinedload(Delivery.courier)
        )

        if actor.role == UserRole.COURIER or assigned_to_me:
            query = query.where(Delivery.courier_id == actor.id)
        elif courier_id:
            if courier_id == UNASSIGNED:
                query = query.where(Delivery.courier_id.is_(None))
            else:
                try:
                    query = query.where(Delivery.courier_id == uuid.UUID(courier_id))
                except ValueError as exc:
                    raise ValidationException(f"Invalid courier id '{courier_id}'") from exc

        if client_id is not None:
            query = query.where(Delivery.sender_id == client_id)

        if on_date is not None:
            query = query.where(planned_between(on_date, on_date))
        elif start_date is not None and end_date is not None:
            if end_date < start_date:
                raise ValidationException("end_date must not be before start_date")
            query = query.where(planned_between(start_date, end_date))

        if status is not None:
            query = query.where(Delivery.status == status)

        result = await self.db.execute(query.order_by(Delivery.planned_date.desc()))
        return list(result.unique().scalars().all())

    async def get_next_statuses(
        self, delivery_id: uuid.UUID, actor: AuthenticatedUser
    ) -> tuple[Delivery, set[DeliveryStatus]]:
        delivery = await self._get_delivery(delivery_id)
        self._ensure_courier_owns(delivery, actor)
        return delivery, next_valid_statuses(delivery.status, actor.role)

    # ------------------------------------------------------------------
    # Status transitions
    # ------------------------------------------------------------------

    async def change_status(
        self,
        delivery_id: uuid.UUID,
        actor: AuthenticatedUser,
        target: DeliveryStatus,
    ) -> Delivery:
        """Move a delivery to ``target``. Admins bypass the transition table."""
        delivery = await self._get_delivery(delivery_id)
        self._ensure_courier_owns(delivery, actor)
        validate_transition(delivery.status, target, actor.role)

        old_status = delivery.status
        delivery.status = target
        await self.db.flush()

        logger.info(
            "Delivery %s transitioned %s -> %s by %s %s",
            delivery_id,
            old_status.value,
            target.value,
            actor.role.value,
            actor.id,
        )
        return await self._get_delivery_with_relations(delivery_id)

    async def postpone(
        self,
        delivery_id: uuid.UUID,
        actor: AuthenticatedUser,
        postponed_to: date,
        today: date | None = None,
    ) -> Delivery:
        """Reschedule a delivery. The first planned date is kept for reports."""
        delivery = await self._get_delivery(delivery_id)
        self._ensure_courier_owns(delivery, actor)
        validate_postpone(delivery.status, postponed_to, today or settings.business_today())

        if delivery.original_planned_date is None:
            delivery.original_planned_date = delivery.planned_date
        delivery.status = DeliveryStatus.POSTPONED
        delivery.postponed_to = postponed_to
        delivery.planned_date = postponed_to
        await self.db.flush()

        logger.info(
            "Delivery %s postponed to %s by %s (originally %s)",
            delivery_id,
            postponed_to,
            actor.id,
            delivery.original_planned_date,
        )
        return await self._get_delivery_with_relations(delivery_id)

    # ------------------------------------------------------------------
    # Transfer / remarks
    # ------------------------------------------------------------------

    async def transfer(
        self,
        delivery_id: uuid.UUID,
        actor: AuthenticatedUser,
        new_courier_id: uuid.UUID | None,
    ) -> tuple[Delivery, dict]:
        """Reassign (or unassign) the courier of a delivery."""
        delivery = await self._get_delivery_with_relations(delivery_id)

        if not can_transfer(delivery.status, actor.role, delivery.courier_id, actor.id):
            if delivery.status not in COURIER_TRANSFERABLE_STATUSES:
                raise ValidationException(
                    "Only deliveries that have not been picked up can be transferred"
                )
            raise ForbiddenException("This delivery is not assigned to you")

        new_courier = None
        if new_courier_id is not None:
            new_courier = await self._find_courier(new_courier_id)
        validate_transfer_target(
            delivery.courier_id, new_courier_id, target_exists=new_courier is not None
        )

        from_courier = delivery.courier
        delivery.courier_id = new_courier_id
        await self.db.flush()

        action = "reassigned" if new_courier_id else "unassigned"
        logger.info(
            "Delivery %s %s from %s to %s by %s",
            delivery_id,
            action,
            from_courier.id if from_courier else None,
            new_courier_id,
            actor.id,
        )
        refreshed = await self._get_delivery_with_relations(delivery_id)
        transfer_info = {
            "from_courier": from_courier,
            "to_courier": new_courier,
            "transferred_at": datetime.now(UTC),
            "action": action,
        }
        return refreshed, transfer_info

    async def set_remarks(
        self,
        delivery_id: uuid.UUID,
        actor: AuthenticatedUser,
        remarks: str,
    ) -> Delivery:
        """Store the courier's free-text remarks on a delivery."""
        delivery = await self._get_delivery(delivery_id)
        self._ensure_courier_owns(delivery, actor)
        delivery.courier_remarks = remarks
        await self.db.flush()
        logger.info("Remarks updated on delivery %s by %s", delivery_id, actor.id)
        return await self._get_delivery_with_relations(delivery_id)
