"""Client API router — admin CRUD."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.database.session import get_db
from src.modules.auth.dependencies import AuthenticatedUser, require_admin
from src.modules.client.schemas import ClientCreate, ClientResponse, ClientUpdate
from src.modules.client.service import ClientService

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("/", response_model=list[ClientResponse])
async def list_clients(
    search: str | None = Query(None, max_length=100),
    user: AuthenticatedUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    svc = ClientService(db)
    clients = await svc.list_clients(search=search)
    return [ClientResponse.model_validate(c) for c in clients]


@router.post("/", response_model=ClientResponse, status_code=201)
async def create_client(
    body: ClientCreate,
    user: AuthenticatedUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    svc = ClientService(db)
    client = await svc.create_client(**body.model_dump())
    return ClientResponse.model_validate(client)


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: uuid.UUID,
    user: AuthenticatedUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    svc = ClientService(db)
    return ClientResponse.model_validate(await svc.get_client(client_id))


@router.patch("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: uuid.UUID,
    body: ClientUpdate,
    user: AuthenticatedUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    svc = ClientService(db)
    client = await svc.update_client(client_id, **body.model_dump(exclude_unset=True))
    return ClientResponse.model_validate(client)


@router.delete("/{client_id}", status_code=204)
async def delete_client(
    client_id: uuid.UUID,
    user: AuthenticatedUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Delete a client without deliveries."""
    svc = ClientService(db)
    await svc.delete_client(client_id)
    return Response(status_code=204)
