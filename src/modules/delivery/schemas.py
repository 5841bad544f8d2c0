"""Pydantic v2 schemas for delivery endpoints."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models.enums import (
    DeliveryStatus,
    SettlementDirection,
    SettlementType,
    Zone,
)
from src.modules.client.schemas import ClientSummary
from src.modules.courier.schemas import CourierSummary
from src.modules.delivery.constants import REMARKS_MAX_LENGTH
from src.modules.pricing.engine import normalize_zone

# ---------------------------------------------------------------------------
# Create / update
# ---------------------------------------------------------------------------


class DeliveryCreate(BaseModel):
    """Admin delivery form. ``delivery_price`` overrides the tariff when given."""

    planned_date: date
    sender_id: uuid.UUID
    receiver_name: str = Field(..., min_length=2, max_length=200)
    receiver_phone: str = Field(..., min_length=5, max_length=30)
    receiver_address: str = Field(..., min_length=5, max_length=500)
    parcel_count: int = Field(1, ge=1)
    weight_kg: Decimal = Field(..., ge=Decimal("0.1"), max_digits=8, decimal_places=2)
    description: str | None = Field(None, max_length=2000)
    note: str | None = Field(None, max_length=2000)
    zone: Zone = Zone.TANA
    is_express: bool = False
    delivery_price: int | None = Field(None, ge=0)
    collect_amount: int | None = Field(None, ge=0)
    is_prepaid: bool = False
    delivery_fee_prepaid: bool = False
    courier_id: uuid.UUID | None = None

    @field_validator("zone", mode="before")
    @classmethod
    def _default_unknown_zone(cls, value):
        return normalize_zone(value)


class DeliveryUpdate(BaseModel):
    """Admin edit. Omitted fields keep their value."""

    planned_date: date | None = None
    sender_id: uuid.UUID | None = None
    receiver_name: str | None = Field(None, min_length=2, max_length=200)
    receiver_phone: str | None = Field(None, min_length=5, max_length=30)
    receiver_address: str | None = Field(None, min_length=5, max_length=500)
    parcel_count: int | None = Field(None, ge=1)
    weight_kg: Decimal | None = Field(None, ge=Decimal("0.1"), max_digits=8, decimal_places=2)
    description: str | None = Field(None, max_length=2000)
    note: str | None = Field(None, max_length=2000)
    zone: Zone | None = None
    is_express: bool | None = None
    collect_amount: int | None = Field(None, ge=0)
    is_prepaid: bool | None = None
    delivery_fee_prepaid: bool | None = None
    courier_id: uuid.UUID | None = None

    @field_validator("zone", mode="before")
    @classmethod
    def _default_unknown_zone(cls, value):
        if value is None:
            return None
        return normalize_zone(value)


# ---------------------------------------------------------------------------
# Lifecycle actions
# ---------------------------------------------------------------------------


class StatusChangeRequest(BaseModel):
    status: DeliveryStatus


class PostponeRequest(BaseModel):
    postponed_to: date


class TransferRequest(BaseModel):
    """``new_courier_id = null`` unassigns the delivery."""

    new_courier_id: uuid.UUID | None = None


class RemarksRequest(BaseModel):
    courier_remarks: str = Field(..., min_length=1, max_length=REMARKS_MAX_LENGTH)


class NextStatusesResponse(BaseModel):
    delivery_id: uuid.UUID
    current_status: DeliveryStatus
    next_statuses: list[DeliveryStatus]


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class DeliveryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    planned_date: date
    original_planned_date: date | None = None
    postponed_to: date | None = None
    sender_id: uuid.UUID
    courier_id: uuid.UUID | None = None
    receiver_name: str
    receiver_phone: str
    receiver_address: str
    parcel_count: int
    weight_kg: Decimal
    description: str | None = None
    note: str | None = None
    zone: Zone
    is_express: bool
    auto_price: int
    delivery_price: int
    collect_amount: int | None = None
    total_due: int
    is_prepaid: bool
    delivery_fee_prepaid: bool
    status: DeliveryStatus
    courier_remarks: str | None = None
    courier_settled: bool
    courier_settled_at: datetime | None = None
    courier_settled_by: uuid.UUID | None = None
    is_settled: bool
    settled_at: datetime | None = None
    settled_by: uuid.UUID | None = None
    settlement_type: SettlementType | None = None
    sender: ClientSummary | None = None
    courier: CourierSummary | None = None
    created_at: datetime
    updated_at: datetime


class SettlementPreview(BaseModel):
    """Settlement amounts of one delivery in its current state."""

    total_due: int
    courier_remittance: int
    client_amount: int
    client_amount_abs: int
    direction: SettlementDirection


class DeliveryDetailResponse(DeliveryResponse):
    settlement: SettlementPreview | None = None


class TransferInfo(BaseModel):
    from_courier: CourierSummary | None = None
    to_courier: CourierSummary | None = None
    transferred_at: datetime
    action: str


class TransferResponse(BaseModel):
    delivery: DeliveryResponse
    transfer_info: TransferInfo
