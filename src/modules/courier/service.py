"""Courier accounts — users with the COURIER role."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.exceptions import ConflictException, NotFoundException
from src.models.delivery import Delivery
from src.models.enums import UserRole
from src.models.user import User
from src.modules.auth.service import hash_password

logger = logging.getLogger(__name__)


class CourierService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_courier(self, courier_id: uuid.UUID) -> User:
        """Fetch a courier by ID. Raises NotFoundException if missing or not a courier."""
        courier = await self.find_courier(courier_id)
        if courier is None:
            raise NotFoundException(f"Courier {courier_id} not found")
        return courier

    async def find_courier(self, courier_id: uuid.UUID) -> User | None:
        result = await self.db.execute(
            select(User).where(User.id == courier_id, User.role == UserRole.COURIER)
        )
        return result.scalar_one_or_none()

    async def list_couriers(self, search: str | None = None) -> list[User]:
        query = select(User).where(User.role == UserRole.COURIER)
        if search:
            query = query.where(
                or_(User.name.ilike(f"%{search}%"), User.email.contains(search.lower()))
            )
        result = await self.db.execute(query.order_by(User.created_at.desc()))
        return list(result.scalars().all())

    async def _ensure_email_free(self, email: str, exclude_id: uuid.UUID | None = None) -> None:
        query = select(func.count()).select_from(User).where(User.email == email)
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)
        result = await self.db.execute(query)
        if (result.scalar() or 0) > 0:
            raise ConflictException(f"Email {email} is already in use")

    async def create_courier(
        self,
        email: str,
        name: str,
        password: str,
        phone: str | None = None,
    ) -> User:
        email = email.lower()
        await self._ensure_email_free(email)

        courier = User(
            email=email,
            name=name,
            phone=phone,
            password_hash=hash_password(password),
            role=UserRole.COURIER,
        )
        self.db.add(courier)
        await self.db.flush()
        logger.info("Created courier %s (%s)", courier.id, email)
        return courier

    async def update_courier(
        self,
        courier_id: uuid.UUID,
        email: str | None = None,
        name: str | None = None,
        phone: str | None = None,
        password: str | None = None,
    ) -> User:
        """Update profile fields; the password is only replaced when given."""
        courier = await self.get_courier(courier_id)

        if email is not None and email.lower() != courier.email:
            await self._ensure_email_free(email.lower(), exclude_id=courier_id)
            courier.email = email.lower()
        if name is not None:
            courier.name = name
        if phone is not None:
            courier.phone = phone
        if password:
            courier.password_hash = hash_password(password)

        await self.db.flush()
        logger.info("Updated courier %s", courier_id)
        return courier

    async def delete_courier(self, courier_id: uuid.UUID) -> None:
        """Delete a courier that no delivery is assigned to."""
        courier = await self.get_courier(courier_id)

        count_result = await self.db.execute(
            select(func.count()).select_from(Delivery).where(Delivery.courier_id == courier_id)
        )
        delivery_count = count_result.scalar() or 0
        if delivery_count > 0:
            raise ConflictException(
                f"Cannot delete courier {courier_id}: {delivery_count} delivery(ies) assigned"
            )

        await self.db.delete(courier)
        await self.db.flush()
        logger.info("Deleted courier %s", courier_id)
