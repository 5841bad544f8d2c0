from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.database.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from src.models.enums import UserRole

if TYPE_CHECKING:
    from src.models.delivery import Delivery


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Back-office account: an ADMIN, or a COURIER that deliveries are assigned to."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(30))
    role: Mapped[UserRole] = mapped_column(server_default="COURIER", nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, server_default="true", nullable=False)

    # Relationships
    deliveries: Mapped[list[Delivery]] = relationship(
        "Delivery",
        foreign_keys="Delivery.courier_id",
        back_populates="courier",
        lazy="noload",
    )

    __table_args__ = (
        Index("ix_users_role", "role"),
    )
