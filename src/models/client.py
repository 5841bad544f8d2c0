"""Client model — the shippers whose parcels the office delivers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.database.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from src.models.enums import PickupZone

if TYPE_CHECKING:
    from src.models.delivery import Delivery


class Client(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "clients"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    phone: Mapped[str] = mapped_column(String(30), nullable=False)
    pickup_address: Mapped[str] = mapped_column(String(500), nullable=False)
    pickup_zone: Mapped[PickupZone] = mapped_column(
        nullable=False, server_default="TANA_VILLE"
    )
    note: Mapped[str | None] = mapped_column(Text)

    # Relationships
    deliveries: Mapped[list[Delivery]] = relationship(
        "Delivery", back_populates="sender", lazy="noload"
    )

    __table_args__ = (
        Index("ix_clients_name", "name"),
    )
