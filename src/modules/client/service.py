"""Client service — CRUD with a delivery-reference guard on delete."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.exceptions import ConflictException, NotFoundException
from src.models.client import Client
from src.models.delivery import Delivery

logger = logging.getLogger(__name__)


class ClientService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_client(self, client_id: uuid.UUID) -> Client:
        """Fetch a client by ID. Raises NotFoundException if missing."""
        result = await self.db.execute(select(Client).where(Client.id == client_id))
        client = result.scalar_one_or_none()
        if client is None:
            raise NotFoundException(f"Client {client_id} not found")
        return client

    async def list_clients(self, search: str | None = None) -> list[Client]:
        """List clients, newest first, optionally filtered on name/phone/address."""
        query = select(Client)
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    Client.name.ilike(pattern),
                    Client.phone.contains(search),
                    Client.pickup_address.ilike(pattern),
                )
            )
        result = await self.db.execute(query.order_by(Client.created_at.desc()))
        return list(result.scalars().all())

    async def create_client(self, **fields) -> Client:
        client = Client(**fields)
        self.db.add(client)
        await self.db.flush()
        logger.info("Created client %s (%s)", client.id, client.name)
        return client

    async def update_client(self, client_id: uuid.UUID, **fields) -> Client:
        client = await self.get_client(client_id)
        for key, value in fields.items():
            setattr(client, key, value)
        await self.db.flush()
        logger.info("Updated client %s: %s", client_id, sorted(fields))
        return client

    async def delete_client(self, client_id: uuid.UUID) -> None:
        """Delete a client that no delivery references."""
        client = await self.get_client(client_id)

        count_result = await self.db.execute(
            select(func.count()).select_from(Delivery).where(Delivery.sender_id == client_id)
        )
        delivery_count = count_result.scalar() or 0
        if delivery_count > 0:
            raise ConflictException(
                f"Cannot delete client {client_id}: {delivery_count} delivery(ies) reference it"
            )

        await self.db.delete(client)
        await self.db.flush()
        logger.info("Deleted client %s", client_id)
