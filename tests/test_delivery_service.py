"""Unit tests for DeliveryService — pricing on create/edit, lifecycle, transfers."""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import ValidationError

from src.exceptions import (
    ConflictException,
    ForbiddenException,
    InvalidTransitionException,
    NotFoundException,
    ValidationException,
)
from src.models.delivery import Delivery
from src.models.enums import DeliveryStatus, UserRole, Zone
from src.models.user import User
from src.modules.auth.dependencies import AuthenticatedUser
from src.modules.delivery.schemas import DeliveryCreate
from src.modules.delivery.service import DeliveryService
from src.modules.pricing.engine import compute_price

TODAY = date(2026, 5, 14)

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_db():
    """Create a mock AsyncSession."""
    session = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    session.flush = AsyncMock()
    return session


@pytest.fixture
def delivery_service(mock_db):
    return DeliveryService(mock_db)


def _admin() -> AuthenticatedUser:
    return AuthenticatedUser(id=uuid.uuid4(), email="admin@demo.local", role=UserRole.ADMIN)


def _courier(courier_id=None) -> AuthenticatedUser:
    return AuthenticatedUser(
        id=courier_id or uuid.uuid4(), email="livreur@demo.local", role=UserRole.COURIER
    )


def _make_delivery(
    status=DeliveryStatus.CREATED,
    courier_id=None,
    zone=Zone.TANA,
    weight_kg="1.0",
    is_express=False,
    delivery_price=3000,
    collect_amount=10000,
    is_prepaid=False,
    planned_date=TODAY,
):
    """Create a transient Delivery row."""
    return Delivery(
        id=uuid.uuid4(),
        planned_date=planned_date,
        sender_id=uuid.uuid4(),
        courier_id=courier_id,
        receiver_name="Rakoto",
        receiver_phone="0341234567",
        receiver_address="Analakely, Antananarivo",
        parcel_count=1,
        weight_kg=Decimal(weight_kg),
        zone=zone,
        is_express=is_express,
        auto_price=delivery_price,
        delivery_price=delivery_price,
        collect_amount=collect_amount,
        total_due=delivery_price + (0 if is_prepaid else collect_amount or 0),
        is_prepaid=is_prepaid,
        delivery_fee_prepaid=False,
        status=status,
    )


def _make_user() -> User:
    user_id = uuid.uuid4()
    return User(
        id=user_id,
        email=f"{user_id.hex[:8]}@demo.local",
        name="Livreur",
        password_hash="x",
        role=UserRole.COURIER,
    )


def _make_scalar_result(value):
    """Create a mock result that returns a scalar value."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.scalar.return_value = value
    unique_mock = MagicMock()
    unique_mock.scalar_one_or_none.return_value = value
    result.unique.return_value = unique_mock
    scalars_mock = MagicMock()
    scalars_mock.all.return_value = [value] if value else []
    result.scalars.return_value = scalars_mock
    return result


def _added(mock_db) -> Delivery:
    return mock_db.add.call_args[0][0]


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


class TestCreateDelivery:
    def _create_kwargs(self, **overrides):
        kwargs = dict(
            created_by=uuid.uuid4(),
            planned_date=TODAY,
            sender_id=uuid.uuid4(),
            receiver_name="Rabe",
            receiver_phone="0331234567",
            receiver_address="Ivato, Antananarivo",
            weight_kg=3,
            zone=Zone.PERI,
            collect_amount=15000,
            today=TODAY,
        )
        kwargs.update(overrides)
        return kwargs

    @pytest.mark.asyncio
    async def test_prices_from_tariff(self, delivery_service, mock_db):
        mock_db.execute.side_effect = [
            _make_scalar_result(uuid.uuid4()),  # client exists
            _make_scalar_result(MagicMock()),  # reload
        ]

        await delivery_service.create_delivery(**self._create_kwargs())

        delivery = _added(mock_db)
        assert delivery.auto_price == 7000
        assert delivery.delivery_price == 7000
        assert delivery.total_due == 22000
        assert delivery.status == DeliveryStatus.CREATED
        mock_db.flush.assert_awaited()

    @pytest.mark.asyncio
    async def test_admin_override_keeps_tariff_as_auto_price(self, delivery_service, mock_db):
        mock_db.execute.side_effect = [
            _make_scalar_result(uuid.uuid4()),
            _make_scalar_result(MagicMock()),
        ]

        await delivery_service.create_delivery(**self._create_kwargs(delivery_price=5000))

        delivery = _added(mock_db)
        assert delivery.auto_price == 7000
        assert delivery.delivery_price == 5000
        assert delivery.total_due == 20000

    @pytest.mark.asyncio
    async def test_prepaid_goods_store_zero_collect(self, delivery_service, mock_db):
        mock_db.execute.side_effect = [
            _make_scalar_result(uuid.uuid4()),
            _make_scalar_result(MagicMock()),
        ]

        await delivery_service.create_delivery(**self._create_kwargs(is_prepaid=True))

        delivery = _added(mock_db)
        assert delivery.collect_amount == 0
        assert delivery.total_due == 7000

    @pytest.mark.asyncio
    async def test_rejects_past_planned_date(self, delivery_service, mock_db):
        with pytest.raises(ValidationException, match="today or later"):
            await delivery_service.create_delivery(
                **self._create_kwargs(planned_date=date(2026, 5, 13))
            )
        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejects_unknown_client(self, delivery_service, mock_db):
        mock_db.execute.return_value = _make_scalar_result(None)

        with pytest.raises(ValidationException, match="Client"):
            await delivery_service.create_delivery(**self._create_kwargs())

    @pytest.mark.asyncio
    async def test_rejects_non_courier_assignee(self, delivery_service, mock_db):
        mock_db.execute.side_effect = [
            _make_scalar_result(uuid.uuid4()),  # client exists
            _make_scalar_result(None),  # no courier with that id
        ]

        with pytest.raises(ValidationException, match="Courier"):
            await delivery_service.create_delivery(
                **self._create_kwargs(courier_id=uuid.uuid4())
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "weight_kg,stored,price",
        [
            ("2.00", Decimal("2.00"), 3000),
            ("2.004", Decimal("2.00"), 3000),
            ("2.01", Decimal("2.01"), 6000),
            ("5.004", Decimal("5.00"), 6000),
        ],
    )
    async def test_price_follows_stored_weight(
        self, delivery_service, mock_db, weight_kg, stored, price
    ):
        mock_db.execute.side_effect = [
            _make_scalar_result(uuid.uuid4()),
            _make_scalar_result(MagicMock()),
        ]

        await delivery_service.create_delivery(
            **self._create_kwargs(weight_kg=Decimal(weight_kg), zone=Zone.TANA)
        )

        delivery = _added(mock_db)
        assert delivery.weight_kg == stored
        assert delivery.auto_price == price
        assert delivery.auto_price == compute_price(Zone.TANA, delivery.weight_kg, False)


# ---------------------------------------------------------------------------
# Update / delete
# ---------------------------------------------------------------------------


class TestUpdateDelivery:
    @pytest.mark.asyncio
    async def test_weight_is_rounded_before_repricing(self, delivery_service, mock_db):
        delivery = _make_delivery(delivery_price=3000)
        mock_db.execute.side_effect = [
            _make_scalar_result(delivery),
            _make_scalar_result(delivery),
        ]

        await delivery_service.update_delivery(
            delivery.id, updated_by=uuid.uuid4(), weight_kg=2.004
        )

        assert delivery.weight_kg == Decimal("2.00")
        assert delivery.delivery_price == 3000

    @pytest.mark.asyncio
    async def test_weight_change_reprices(self, delivery_service, mock_db):
        delivery = _make_delivery(delivery_price=9999)
        mock_db.execute.side_effect = [
            _make_scalar_result(delivery),
            _make_scalar_result(delivery),
        ]

        await delivery_service.update_delivery(
            delivery.id, updated_by=uuid.uuid4(), weight_kg=3
        )

        assert delivery.auto_price == 6000
        assert delivery.delivery_price == 6000
        assert delivery.total_due == 16000

    @pytest.mark.asyncio
    async def test_other_edits_keep_overridden_price(self, delivery_service, mock_db):
        delivery = _make_delivery(delivery_price=9999)
        mock_db.execute.side_effect = [
            _make_scalar_result(delivery),
            _make_scalar_result(delivery),
        ]

        await delivery_service.update_delivery(
            delivery.id, updated_by=uuid.uuid4(), receiver_name="Randria", collect_amount=20000
        )

        assert delivery.delivery_price == 9999
        assert delivery.receiver_name == "Randria"
        assert delivery.total_due == 29999

    @pytest.mark.asyncio
    async def test_marking_prepaid_recomputes_total_due(self, delivery_service, mock_db):
        delivery = _make_delivery()
        mock_db.execute.side_effect = [
            _make_scalar_result(delivery),
            _make_scalar_result(delivery),
        ]

        await delivery_service.update_delivery(
            delivery.id, updated_by=uuid.uuid4(), is_prepaid=True
        )

        assert delivery.collect_amount == 0
        assert delivery.total_due == 3000

    @pytest.mark.asyncio
    async def test_missing_delivery(self, delivery_service, mock_db):
        mock_db.execute.return_value = _make_scalar_result(None)

        with pytest.raises(NotFoundException):
            await delivery_service.update_delivery(uuid.uuid4(), updated_by=uuid.uuid4())


class TestDeleteDelivery:
    @pytest.mark.asyncio
    async def test_delete_created(self, delivery_service, mock_db):
        delivery = _make_delivery()
        mock_db.execute.return_value = _make_scalar_result(delivery)

        await delivery_service.delete_delivery(delivery.id)

        mock_db.delete.assert_awaited_once_with(delivery)

    @pytest.mark.asyncio
    async def test_paid_cannot_be_deleted(self, delivery_service, mock_db):
        delivery = _make_delivery(status=DeliveryStatus.PAID)
        mock_db.execute.return_value = _make_scalar_result(delivery)

        with pytest.raises(ConflictException):
            await delivery_service.delete_delivery(delivery.id)
        mock_db.delete.assert_not_awaited()


# ---------------------------------------------------------------------------
# List
# ---------------------------------------------------------------------------


def _compiled_query(mock_db) -> str:
    return str(mock_db.execute.call_args[0][0])


class TestListDeliveries:
    @pytest.mark.asyncio
    async def test_courier_only_sees_own(self, delivery_service, mock_db):
        mock_db.execute.return_value = _make_scalar_result(None)

        await delivery_service.list_deliveries(actor=_courier(), courier_id="UNASSIGNED")

        sql = _compiled_query(mock_db)
        assert "deliveries.courier_id = " in sql
        assert "IS NULL" not in sql

    @pytest.mark.asyncio
    async def test_unassigned_filter(self, delivery_service, mock_db):
        mock_db.execute.return_value = _make_scalar_result(None)

        await delivery_service.list_deliveries(actor=_admin(), courier_id="UNASSIGNED")

        assert "deliveries.courier_id IS NULL" in _compiled_query(mock_db)

    @pytest.mark.asyncio
    async def test_date_range_matches_original_date(self, delivery_service, mock_db):
        mock_db.execute.return_value = _make_scalar_result(None)

        await delivery_service.list_deliveries(
            actor=_admin(), start_date=date(2026, 5, 1), end_date=date(2026, 5, 31)
        )

        sql = _compiled_query(mock_db)
        assert "deliveries.planned_date >=" in sql
        assert "deliveries.original_planned_date >=" in sql

    @pytest.mark.asyncio
    async def test_invalid_courier_id(self, delivery_service, mock_db):
        with pytest.raises(ValidationException, match="courier id"):
            await delivery_service.list_deliveries(actor=_admin(), courier_id="not-a-uuid")

    @pytest.mark.asyncio
    async def test_inverted_range(self, delivery_service, mock_db):
        with pytest.raises(ValidationException):
            await delivery_service.list_deliveries(
                actor=_admin(), start_date=date(2026, 5, 31), end_date=date(2026, 5, 1)
            )


# ---------------------------------------------------------------------------
# Status changes
# ---------------------------------------------------------------------------


class TestChangeStatus:
    @pytest.mark.asyncio
    async def test_courier_picks_up(self, delivery_service, mock_db):
        courier = _courier()
        delivery = _make_delivery(courier_id=courier.id)
        mock_db.execute.side_effect = [
            _make_scalar_result(delivery),
            _make_scalar_result(delivery),
        ]

        await delivery_service.change_status(delivery.id, courier, DeliveryStatus.PICKED_UP)

        assert delivery.status == DeliveryStatus.PICKED_UP

    @pytest.mark.asyncio
    async def test_courier_cannot_skip_to_paid(self, delivery_service, mock_db):
        courier = _courier()
        delivery = _make_delivery(courier_id=courier.id)
        mock_db.execute.return_value = _make_scalar_result(delivery)

        with pytest.raises(InvalidTransitionException):
            await delivery_service.change_status(delivery.id, courier, DeliveryStatus.PAID)
        assert delivery.status == DeliveryStatus.CREATED

    @pytest.mark.asyncio
    async def test_courier_cannot_touch_other_delivery(self, delivery_service, mock_db):
        delivery = _make_delivery(courier_id=uuid.uuid4())
        mock_db.execute.return_value = _make_scalar_result(delivery)

        with pytest.raises(ForbiddenException):
            await delivery_service.change_status(
                delivery.id, _courier(), DeliveryStatus.PICKED_UP
            )

    @pytest.mark.asyncio
    async def test_admin_can_set_any_status(self, delivery_service, mock_db):
        delivery = _make_delivery(status=DeliveryStatus.CANCELED)
        mock_db.execute.side_effect = [
            _make_scalar_result(delivery),
            _make_scalar_result(delivery),
        ]

        await delivery_service.change_status(delivery.id, _admin(), DeliveryStatus.PAID)

        assert delivery.status == DeliveryStatus.PAID

    @pytest.mark.asyncio
    async def test_next_statuses_for_courier(self, delivery_service, mock_db):
        courier = _courier()
        delivery = _make_delivery(status=DeliveryStatus.DELIVERED, courier_id=courier.id)
        mock_db.execute.return_value = _make_scalar_result(delivery)

        _, statuses = await delivery_service.get_next_statuses(delivery.id, courier)

        assert statuses == {DeliveryStatus.PAID}


# ---------------------------------------------------------------------------
# Postpone
# ---------------------------------------------------------------------------


class TestPostpone:
    @pytest.mark.asyncio
    async def test_postpone_records_original_date(self, delivery_service, mock_db):
        courier = _courier()
        delivery = _make_delivery(courier_id=courier.id)
        mock_db.execute.side_effect = [
            _make_scalar_result(delivery),
            _make_scalar_result(delivery),
        ]

        await delivery_service.postpone(delivery.id, courier, date(2026, 5, 16), today=TODAY)

        assert delivery.status == DeliveryStatus.POSTPONED
        assert delivery.planned_date == date(2026, 5, 16)
        assert delivery.postponed_to == date(2026, 5, 16)
        assert delivery.original_planned_date == TODAY

    @pytest.mark.asyncio
    async def test_second_postpone_keeps_first_original_date(self, delivery_service, mock_db):
        delivery = _make_delivery(
            status=DeliveryStatus.PICKED_UP, planned_date=date(2026, 5, 16)
        )
        delivery.original_planned_date = date(2026, 5, 10)
        mock_db.execute.side_effect = [
            _make_scalar_result(delivery),
            _make_scalar_result(delivery),
        ]

        await delivery_service.postpone(delivery.id, _admin(), date(2026, 5, 20), today=TODAY)

        assert delivery.original_planned_date == date(2026, 5, 10)
        assert delivery.planned_date == date(2026, 5, 20)

    @pytest.mark.asyncio
    async def test_postpone_to_today_leaves_delivery_untouched(self, delivery_service, mock_db):
        delivery = _make_delivery()
        mock_db.execute.return_value = _make_scalar_result(delivery)

        with pytest.raises(ValidationException):
            await delivery_service.postpone(delivery.id, _admin(), TODAY, today=TODAY)

        assert delivery.status == DeliveryStatus.CREATED
        assert delivery.original_planned_date is None
        mock_db.flush.assert_not_awaited()


# ---------------------------------------------------------------------------
# Transfer / remarks
# ---------------------------------------------------------------------------


class TestTransfer:
    @pytest.mark.asyncio
    async def test_admin_reassigns(self, delivery_service, mock_db):
        old_courier, new_courier = _make_user(), _make_user()
        delivery = _make_delivery(status=DeliveryStatus.PICKED_UP, courier_id=old_courier.id)
        delivery.courier = old_courier
        mock_db.execute.side_effect = [
            _make_scalar_result(delivery),
            _make_scalar_result(new_courier),
            _make_scalar_result(delivery),
        ]

        _, info = await delivery_service.transfer(delivery.id, _admin(), new_courier.id)

        assert delivery.courier_id == new_courier.id
        assert info["action"] == "reassigned"
        assert info["from_courier"] is old_courier
        assert info["to_courier"] is new_courier

    @pytest.mark.asyncio
    async def test_courier_hands_over_created_delivery(self, delivery_service, mock_db):
        courier = _courier()
        colleague = _make_user()
        delivery = _make_delivery(courier_id=courier.id)
        mock_db.execute.side_effect = [
            _make_scalar_result(delivery),
            _make_scalar_result(colleague),
            _make_scalar_result(delivery),
        ]

        await delivery_service.transfer(delivery.id, courier, colleague.id)

        assert delivery.courier_id == colleague.id

    @pytest.mark.asyncio
    async def test_courier_cannot_transfer_after_pickup(self, delivery_service, mock_db):
        courier = _courier()
        delivery = _make_delivery(status=DeliveryStatus.PICKED_UP, courier_id=courier.id)
        mock_db.execute.return_value = _make_scalar_result(delivery)

        with pytest.raises(ValidationException, match="picked up"):
            await delivery_service.transfer(delivery.id, courier, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_courier_cannot_transfer_others(self, delivery_service, mock_db):
        delivery = _make_delivery(courier_id=uuid.uuid4())
        mock_db.execute.return_value = _make_scalar_result(delivery)

        with pytest.raises(ForbiddenException):
            await delivery_service.transfer(delivery.id, _courier(), uuid.uuid4())

    @pytest.mark.asyncio
    async def test_picked_up_delivery_of_another_courier(self, delivery_service, mock_db):
        delivery = _make_delivery(status=DeliveryStatus.PICKED_UP, courier_id=uuid.uuid4())
        mock_db.execute.return_value = _make_scalar_result(delivery)

        with pytest.raises(ValidationException, match="picked up"):
            await delivery_service.transfer(delivery.id, _courier(), uuid.uuid4())

    @pytest.mark.asyncio
    async def test_admin_unassigns(self, delivery_service, mock_db):
        delivery = _make_delivery(courier_id=uuid.uuid4())
        mock_db.execute.side_effect = [
            _make_scalar_result(delivery),
            _make_scalar_result(delivery),
        ]

        _, info = await delivery_service.transfer(delivery.id, _admin(), None)

        assert delivery.courier_id is None
        assert info["action"] == "unassigned"

    @pytest.mark.asyncio
    async def test_unassign_unassigned(self, delivery_service, mock_db):
        delivery = _make_delivery(courier_id=None)
        mock_db.execute.return_value = _make_scalar_result(delivery)

        with pytest.raises(ValidationException, match="not assigned"):
            await delivery_service.transfer(delivery.id, _admin(), None)


class TestRemarks:
    @pytest.mark.asyncio
    async def test_courier_sets_remarks(self, delivery_service, mock_db):
        courier = _courier()
        delivery = _make_delivery(courier_id=courier.id)
        mock_db.execute.side_effect = [
            _make_scalar_result(delivery),
            _make_scalar_result(delivery),
        ]

        await delivery_service.set_remarks(delivery.id, courier, "Receiver absent, call back")

        assert delivery.courier_remarks == "Receiver absent, call back"


# ---------------------------------------------------------------------------
# Form validation
# ---------------------------------------------------------------------------


class TestDeliveryCreateSchema:
    def _payload(self, **overrides):
        payload = dict(
            planned_date=TODAY,
            sender_id=uuid.uuid4(),
            receiver_name="Rabe",
            receiver_phone="0331234567",
            receiver_address="Ivato, Antananarivo",
            weight_kg="2.01",
            zone="TANA",
        )
        payload.update(overrides)
        return payload

    def test_two_decimal_weight_accepted(self):
        body = DeliveryCreate(**self._payload())
        assert body.weight_kg == Decimal("2.01")
        assert compute_price(body.zone, body.weight_kg, body.is_express) == 6000

    @pytest.mark.parametrize("weight_kg", ["2.004", 2.004])
    def test_weight_beyond_two_decimals_rejected(self, weight_kg):
        with pytest.raises(ValidationError):
            DeliveryCreate(**self._payload(weight_kg=weight_kg))

    def test_weight_below_minimum_rejected(self):
        with pytest.raises(ValidationError):
            DeliveryCreate(**self._payload(weight_kg="0.05"))
