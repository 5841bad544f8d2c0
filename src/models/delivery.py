"""Delivery model — one parcel run from a client to a receiver, with its cash trail."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.database.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from src.models.enums import DeliveryStatus, SettlementType, Zone

if TYPE_CHECKING:
    from src.models.client import Client
    from src.models.user import User


class Delivery(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "deliveries"

    # Scheduling
    planned_date: Mapped[date] = mapped_column(Date, nullable=False)
    original_planned_date: Mapped[date | None] = mapped_column(Date)
    postponed_to: Mapped[date | None] = mapped_column(Date)

    # Parties
    sender_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("clients.id", ondelete="RESTRICT"),
        nullable=False,
    )
    courier_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="RESTRICT")
    )

    # Receiver info
    receiver_name: Mapped[str] = mapped_column(String(200), nullable=False)
    receiver_phone: Mapped[str] = mapped_column(String(30), nullable=False)
    receiver_address: Mapped[str] = mapped_column(String(500), nullable=False)

    # Parcel
    parcel_count: Mapped[int] = mapped_column(Integer, nullable=False, server_default="1")
    weight_kg: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    note: Mapped[str | None] = mapped_column(Text)

    # Pricing (integer Ariary)
    zone: Mapped[Zone] = mapped_column(nullable=False, server_default="TANA")
    is_express: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="false")
    auto_price: Mapped[int] = mapped_column(Integer, nullable=False)
    delivery_price: Mapped[int] = mapped_column(Integer, nullable=False)
    collect_amount: Mapped[int | None] = mapped_column(Integer)
    total_due: Mapped[int] = mapped_column(Integer, nullable=False)

    # Payment flags
    is_prepaid: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="false")
    delivery_fee_prepaid: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default="false"
    )

    status: Mapped[DeliveryStatus] = mapped_column(
        nullable=False, server_default="CREATED"
    )
    courier_remarks: Mapped[str | None] = mapped_column(Text)

    # Courier -> office settlement
    courier_settled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default="false"
    )
    courier_settled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    courier_settled_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL")
    )

    # Office -> client settlement
    is_settled: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="false")
    settled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    settled_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL")
    )
    settlement_type: Mapped[SettlementType | None] = mapped_column()

    # Relationships
    sender: Mapped[Client] = relationship(
        "Client", back_populates="deliveries", lazy="noload"
    )
    courier: Mapped[User | None] = relationship(
        "User",
        foreign_keys=[courier_id],
        back_populates="deliveries",
        lazy="noload",
    )

    __table_args__ = (
        CheckConstraint("parcel_count >= 1", name="ck_deliveries_parcel_count"),
        CheckConstraint("weight_kg >= 0.1", name="ck_deliveries_weight_kg"),
        CheckConstraint("delivery_price >= 0", name="ck_deliveries_delivery_price"),
        Index("ix_deliveries_planned_date", "planned_date"),
        Index("ix_deliveries_original_planned_date", "original_planned_date"),
        Index("ix_deliveries_sender_id", "sender_id"),
        Index("ix_deliveries_courier_id", "courier_id"),
        Index("ix_deliveries_status", "status"),
    )
