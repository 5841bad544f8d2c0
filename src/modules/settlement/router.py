"""Settlement API routers — J+1 client settlements and admin reports."""

from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.database.session import get_db
from src.modules.auth.dependencies import AuthenticatedUser, require_admin
from src.modules.settlement.constants import FILTER_PENDING
from src.modules.settlement.engine import (
    SettlementBreakdown,
    SettlementTotals,
    settlement_direction,
)
from src.modules.settlement.schemas import (
    ClientSettlementGroup,
    ClientSettlementListResponse,
    ClientSummaryResponse,
    ClientSummaryStats,
    ConfirmClientSettlementRequest,
    ConfirmCourierSettlementRequest,
    ConfirmSettlementResponse,
    CourierReportGroup,
    CourierReportResponse,
    SettlementRow,
    SettlementTotalsResponse,
)
from src.modules.settlement.service import SettlementService

router = APIRouter(prefix="/settlements", tags=["settlements"])

# Secondary router for reports (different prefix)
reports_router = APIRouter(prefix="/reports", tags=["reports"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _row(delivery, breakdown: SettlementBreakdown) -> SettlementRow:
    return SettlementRow(
        delivery_id=delivery.id,
        planned_date=delivery.planned_date,
        original_planned_date=delivery.original_planned_date,
        receiver_name=delivery.receiver_name,
        receiver_address=delivery.receiver_address,
        zone=delivery.zone,
        status=breakdown.status,
        is_prepaid=delivery.is_prepaid,
        delivery_fee_prepaid=delivery.delivery_fee_prepaid,
        delivery_price=breakdown.delivery_price,
        collect_amount=breakdown.collect_amount,
        total_due=breakdown.total_due,
        courier_remittance=breakdown.courier_remittance,
        client_amount=breakdown.client_amount,
        client_amount_abs=breakdown.client_amount_abs,
        direction=breakdown.direction,
        is_settled=delivery.is_settled,
        settled_at=delivery.settled_at,
        settlement_type=delivery.settlement_type,
        courier_settled=delivery.courier_settled,
        courier_settled_at=delivery.courier_settled_at,
    )


def _totals(totals: SettlementTotals) -> SettlementTotalsResponse:
    return SettlementTotalsResponse(
        delivery_count=totals.delivery_count,
        total_collect=totals.total_collect,
        total_delivery_fees=totals.total_delivery_fees,
        total_due=totals.total_due,
        total_courier_remittance=totals.total_courier_remittance,
        total_client_amount=totals.total_client_amount,
        total_client_amount_abs=abs(totals.total_client_amount),
        direction=totals.client_direction,
    )


def _grand_totals(groups: dict) -> SettlementTotals:
    grand = SettlementTotals()
    for rows, _ in groups.values():
        for _, breakdown in rows:
            grand.add(breakdown)
    return grand


# ---------------------------------------------------------------------------
# J+1 client settlements
# ---------------------------------------------------------------------------


@router.get("/", response_model=ClientSettlementListResponse)
async def list_client_settlements(
    filter: str = Query(FILTER_PENDING, pattern="^(pending|settled|all)$"),
    user: AuthenticatedUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Deliveries due for client settlement (planned J-1 or earlier), per client."""
    svc = SettlementService(db)
    cutoff, groups = await svc.list_client_settlements(filter_=filter)

    clients = []
    for rows, totals in groups.values():
        sender = rows[0][0].sender
        clients.append(
            ClientSettlementGroup(
                client_id=rows[0][0].sender_id,
                client_name=sender.name if sender else "",
                client_phone=sender.phone if sender else None,
                deliveries=[_row(d, b) for d, b in rows],
                totals=_totals(totals),
            )
        )

    return ClientSettlementListResponse(
        filter=filter,
        cutoff_date=cutoff,
        clients=clients,
        totals=_totals(_grand_totals(groups)),
    )


@router.post("/settle", response_model=ConfirmSettlementResponse)
async def confirm_client_settlement(
    body: ConfirmClientSettlementRequest,
    user: AuthenticatedUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    svc = SettlementService(db)
    settled = await svc.confirm_client_settlement(
        body.delivery_ids, body.settlement_type, settled_by=user.id
    )
    return ConfirmSettlementResponse(requested=len(body.delivery_ids), settled_count=settled)


# ---------------------------------------------------------------------------
# Courier remittance report
# ---------------------------------------------------------------------------


@reports_router.get("/courier-settlement", response_model=CourierReportResponse)
async def courier_settlement_report(
    report_date: date = Query(..., alias="date"),
    courier_id: uuid.UUID | None = Query(None),
    user: AuthenticatedUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Cash each courier owes the office for the day's PAID deliveries."""
    svc = SettlementService(db)
    groups = await svc.courier_day_report(report_date, courier_id=courier_id)

    couriers = []
    for key, (rows, totals) in groups.items():
        courier = rows[0][0].courier
        settled_count = sum(1 for d, _ in rows if d.courier_settled)
        couriers.append(
            CourierReportGroup(
                courier_id=key,
                courier_name=courier.name if courier else "",
                deliveries=[_row(d, b) for d, b in rows],
                totals=_totals(totals),
                settled_count=settled_count,
                pending_count=len(rows) - settled_count,
            )
        )

    return CourierReportResponse(
        report_date=report_date,
        couriers=couriers,
        totals=_totals(_grand_totals(groups)),
    )


@reports_router.post("/courier-settlement/confirm", response_model=ConfirmSettlementResponse)
async def confirm_courier_settlement(
    body: ConfirmCourierSettlementRequest,
    user: AuthenticatedUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    svc = SettlementService(db)
    settled = await svc.confirm_courier_settlement(body.delivery_ids, settled_by=user.id)
    return ConfirmSettlementResponse(requested=len(body.delivery_ids), settled_count=settled)


# ---------------------------------------------------------------------------
# Client statement
# ---------------------------------------------------------------------------


@reports_router.get("/client-summary", response_model=ClientSummaryResponse)
async def client_summary(
    start_date: date = Query(...),
    end_date: date = Query(...),
    client_id: uuid.UUID = Query(...),
    user: AuthenticatedUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    svc = SettlementService(db)
    client, rows, totals, stats = await svc.client_summary(client_id, start_date, end_date)

    return ClientSummaryResponse(
        client_id=client.id,
        client_name=client.name,
        client_phone=client.phone,
        start_date=start_date,
        end_date=end_date,
        stats=ClientSummaryStats(**stats),
        deliveries=[_row(d, b) for d, b in rows],
        totals=_totals(totals),
        total_to_remit=totals.total_client_amount,
        total_to_remit_abs=abs(totals.total_client_amount),
        direction=settlement_direction(totals.total_client_amount),
    )
