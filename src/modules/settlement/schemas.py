"""Pydantic v2 schemas for settlement lists, reports and confirmations."""

from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from src.models.enums import DeliveryStatus, SettlementDirection, SettlementType, Zone

# ---------------------------------------------------------------------------
# Rows
# ---------------------------------------------------------------------------


class SettlementRow(BaseModel):
    """One delivery with its settlement amounts."""

    delivery_id: uuid.UUID
    planned_date: date
    original_planned_date: date | None = None
    receiver_name: str
    receiver_address: str
    zone: Zone
    status: DeliveryStatus
    is_prepaid: bool
    delivery_fee_prepaid: bool
    delivery_price: int
    collect_amount: int
    total_due: int
    courier_remittance: int
    client_amount: int
    client_amount_abs: int
    direction: SettlementDirection
    is_settled: bool
    settled_at: datetime | None = None
    settlement_type: SettlementType | None = None
    courier_settled: bool
    courier_settled_at: datetime | None = None


class SettlementTotalsResponse(BaseModel):
    delivery_count: int
    total_collect: int
    total_delivery_fees: int
    total_due: int
    total_courier_remittance: int
    total_client_amount: int
    total_client_amount_abs: int
    direction: SettlementDirection


# ---------------------------------------------------------------------------
# J+1 client settlements
# ---------------------------------------------------------------------------


class ClientSettlementGroup(BaseModel):
    client_id: uuid.UUID
    client_name: str
    client_phone: str | None = None
    deliveries: list[SettlementRow]
    totals: SettlementTotalsResponse


class ClientSettlementListResponse(BaseModel):
    filter: str
    cutoff_date: date
    clients: list[ClientSettlementGroup]
    totals: SettlementTotalsResponse


class ConfirmClientSettlementRequest(BaseModel):
    delivery_ids: list[uuid.UUID] = Field(..., min_length=1)
    settlement_type: SettlementType


class ConfirmCourierSettlementRequest(BaseModel):
    delivery_ids: list[uuid.UUID] = Field(..., min_length=1)


class ConfirmSettlementResponse(BaseModel):
    requested: int
    settled_count: int


# ---------------------------------------------------------------------------
# Courier day report
# ---------------------------------------------------------------------------


class CourierReportGroup(BaseModel):
    courier_id: uuid.UUID | None = None
    courier_name: str
    deliveries: list[SettlementRow]
    totals: SettlementTotalsResponse
    settled_count: int
    pending_count: int


class CourierReportResponse(BaseModel):
    report_date: date
    couriers: list[CourierReportGroup]
    totals: SettlementTotalsResponse


# ---------------------------------------------------------------------------
# Client statement
# ---------------------------------------------------------------------------


class ClientSummaryStats(BaseModel):
    total: int
    delivered: int
    postponed: int
    canceled: int
    pending: int


class ClientSummaryResponse(BaseModel):
    """Statement of one client over a date range."""

    client_id: uuid.UUID
    client_name: str
    client_phone: str | None = None
    start_date: date
    end_date: date
    stats: ClientSummaryStats
    deliveries: list[SettlementRow]
    totals: SettlementTotalsResponse
    total_to_remit: int
    total_to_remit_abs: int
    direction: SettlementDirection
