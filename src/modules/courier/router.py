"""Courier API router — couriers may read the roster, admins manage it."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.database.session import get_db
from src.modules.auth.dependencies import (
    AuthenticatedUser,
    get_current_user,
    require_admin,
)
from src.modules.courier.schemas import CourierCreate, CourierResponse, CourierUpdate
from src.modules.courier.service import CourierService

router = APIRouter(prefix="/couriers", tags=["couriers"])


@router.get("/", response_model=list[CourierResponse])
async def list_couriers(
    search: str | None = Query(None, max_length=100),
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List couriers. Couriers use this to pick a transfer target."""
    svc = CourierService(db)
    couriers = await svc.list_couriers(search=search)
    return [CourierResponse.model_validate(c) for c in couriers]


@router.post("/", response_model=CourierResponse, status_code=201)
async def create_courier(
    body: CourierCreate,
    user: AuthenticatedUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    svc = CourierService(db)
    courier = await svc.create_courier(
        email=body.email,
        name=body.name,
        password=body.password,
        phone=body.phone,
    )
    return CourierResponse.model_validate(courier)


@router.get("/{courier_id}", response_model=CourierResponse)
async def get_courier(
    courier_id: uuid.UUID,
    user: AuthenticatedUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    svc = CourierService(db)
    return CourierResponse.model_validate(await svc.get_courier(courier_id))


@router.patch("/{courier_id}", response_model=CourierResponse)
async def update_courier(
    courier_id: uuid.UUID,
    body: CourierUpdate,
    user: AuthenticatedUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    svc = CourierService(db)
    courier = await svc.update_courier(courier_id, **body.model_dump(exclude_unset=True))
    return CourierResponse.model_validate(courier)


@router.delete("/{courier_id}", status_code=204)
async def delete_courier(
    courier_id: uuid.UUID,
    user: AuthenticatedUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Delete a courier without assigned deliveries."""
    svc = CourierService(db)
    await svc.delete_courier(courier_id)
    return Response(status_code=204)
