"""Delivery API router — CRUD, lifecycle actions, transfers."""

from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.database.session import get_db
from src.models.enums import DeliveryStatus
from src.modules.auth.dependencies import AuthenticatedUser, get_current_user, require_admin
from src.modules.courier.schemas import CourierSummary
from src.modules.delivery.schemas import (
    DeliveryCreate,
    DeliveryDetailResponse,
    DeliveryResponse,
    DeliveryUpdate,
    NextStatusesResponse,
    PostponeRequest,
    RemarksRequest,
    SettlementPreview,
    StatusChangeRequest,
    TransferInfo,
    TransferRequest,
    TransferResponse,
)
from src.modules.delivery.service import DeliveryService
from src.modules.settlement.engine import settle_delivery

router = APIRouter(prefix="/deliveries", tags=["deliveries"])


def _summary(courier) -> CourierSummary | None:
    return CourierSummary.model_validate(courier) if courier is not None else None


def _detail(delivery) -> DeliveryDetailResponse:
    response = DeliveryDetailResponse.model_validate(delivery)
    breakdown = settle_delivery(delivery)
    response.settlement = SettlementPreview(
        total_due=breakdown.total_due,
        courier_remittance=breakdown.courier_remittance,
        client_amount=breakdown.client_amount,
        client_amount_abs=breakdown.client_amount_abs,
        direction=breakdown.direction,
    )
    return response


# ---------------------------------------------------------------------------
# List / create
# ---------------------------------------------------------------------------


@router.get("/", response_model=list[DeliveryResponse])
async def list_deliveries(
    on_date: date | None = Query(None, alias="date"),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    status: DeliveryStatus | None = Query(None),
    courier_id: str | None = Query(None, description="Courier UUID or UNASSIGNED"),
    client_id: uuid.UUID | None = Query(None),
    assigned_to_me: bool = Query(False),
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List deliveries. Date filters also match the pre-postponement date."""
    svc = DeliveryService(db)
    deliveries = await svc.list_deliveries(
        actor=user,
        on_date=on_date,
        start_date=start_date,
        end_date=end_date,
        status=status,
        courier_id=courier_id,
        client_id=client_id,
        assigned_to_me=assigned_to_me,
    )
    return [DeliveryResponse.model_validate(d) for d in deliveries]


@router.post("/", response_model=DeliveryDetailResponse, status_code=201)
async def create_delivery(
    body: DeliveryCreate,
    user: AuthenticatedUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    svc = DeliveryService(db)
    delivery = await svc.create_delivery(created_by=user.id, **body.model_dump())
    return _detail(delivery)


# ---------------------------------------------------------------------------
# Get / update / delete
# ---------------------------------------------------------------------------


@router.get("/{delivery_id}", response_model=DeliveryDetailResponse)
async def get_delivery(
    delivery_id: uuid.UUID,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    svc = DeliveryService(db)
    delivery = await svc.get_delivery(delivery_id, actor=user)
    return _detail(delivery)


@router.patch("/{delivery_id}", response_model=DeliveryDetailResponse)
async def update_delivery(
    delivery_id: uuid.UUID,
    body: DeliveryUpdate,
    user: AuthenticatedUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    svc = DeliveryService(db)
    delivery = await svc.update_delivery(
        delivery_id, updated_by=user.id, **body.model_dump(exclude_unset=True)
    )
    return _detail(delivery)


@router.delete("/{delivery_id}", status_code=204)
async def delete_delivery(
    delivery_id: uuid.UUID,
    user: AuthenticatedUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    svc = DeliveryService(db)
    await svc.delete_delivery(delivery_id)
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


@router.get("/{delivery_id}/next-statuses", response_model=NextStatusesResponse)
async def get_next_statuses(
    delivery_id: uuid.UUID,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    svc = DeliveryService(db)
    delivery, statuses = await svc.get_next_statuses(delivery_id, user)
    return NextStatusesResponse(
        delivery_id=delivery.id,
        current_status=delivery.status,
        next_statuses=sorted(statuses, key=lambda s: s.value),
    )


@router.post("/{delivery_id}/status", response_model=DeliveryDetailResponse)
async def change_status(
    delivery_id: uuid.UUID,
    body: StatusChangeRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    svc = DeliveryService(db)
    delivery = await svc.change_status(delivery_id, user, body.status)
    return _detail(delivery)


@router.post("/{delivery_id}/postpone", response_model=DeliveryResponse)
async def postpone_delivery(
    delivery_id: uuid.UUID,
    body: PostponeRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    svc = DeliveryService(db)
    delivery = await svc.postpone(delivery_id, user, body.postponed_to)
    return DeliveryResponse.model_validate(delivery)


@router.post("/{delivery_id}/transfer", response_model=TransferResponse)
async def transfer_delivery(
    delivery_id: uuid.UUID,
    body: TransferRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Reassign a delivery to another courier, or unassign it."""
    svc = DeliveryService(db)
    delivery, info = await svc.transfer(delivery_id, user, body.new_courier_id)
    return TransferResponse(
        delivery=DeliveryResponse.model_validate(delivery),
        transfer_info=TransferInfo(
            from_courier=_summary(info["from_courier"]),
            to_courier=_summary(info["to_courier"]),
            transferred_at=info["transferred_at"],
            action=info["action"],
        ),
    )


@router.post("/{delivery_id}/remarks", response_model=DeliveryResponse)
async def set_remarks(
    delivery_id: uuid.UUID,
    body: RemarksRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    svc = DeliveryService(db)
    delivery = await svc.set_remarks(delivery_id, user, body.courier_remarks)
    return DeliveryResponse.model_validate(delivery)
