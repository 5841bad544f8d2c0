"""Pydantic v2 schemas for courier account endpoints."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from src.models.enums import UserRole


class CourierCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=2, max_length=200)
    phone: str | None = Field(None, max_length=30)
    password: str = Field(..., min_length=6, max_length=128)


class CourierUpdate(BaseModel):
    email: EmailStr | None = None
    name: str | None = Field(None, min_length=2, max_length=200)
    phone: str | None = Field(None, max_length=30)
    password: str | None = Field(None, min_length=6, max_length=128)


class CourierResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    name: str
    phone: str | None = None
    role: UserRole
    created_at: datetime


class CourierSummary(BaseModel):
    """Compact courier shape embedded in delivery responses."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    email: str
    phone: str | None = None
