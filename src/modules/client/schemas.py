"""Pydantic v2 schemas for client (shipper) endpoints."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.enums import PickupZone


class ClientCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=200)
    phone: str = Field(..., min_length=5, max_length=30)
    pickup_address: str = Field(..., min_length=5, max_length=500)
    pickup_zone: PickupZone = PickupZone.TANA_VILLE
    note: str | None = Field(None, max_length=2000)


class ClientUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=200)
    phone: str | None = Field(None, min_length=5, max_length=30)
    pickup_address: str | None = Field(None, min_length=5, max_length=500)
    pickup_zone: PickupZone | None = None
    note: str | None = Field(None, max_length=2000)


class ClientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    phone: str
    pickup_address: str
    pickup_zone: PickupZone
    note: str | None = None
    created_at: datetime
    updated_at: datetime


class ClientSummary(BaseModel):
    """Compact client shape embedded in delivery responses."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    phone: str
    pickup_address: str
