"""Pydantic v2 schemas for pricing endpoints."""

from __future__ import annotations

from pydantic import BaseModel

from src.models.enums import Zone


class PriceQuoteResponse(BaseModel):
    zone: Zone
    weight_kg: float
    is_express: bool
    parcel_count: int
    delivery_price: int
    pickup_fee: int


class PricingSummaryResponse(BaseModel):
    zone: Zone
    light_max_kg: int
    heavy_max_kg: int
    light_price: int
    heavy_price: int
    extra_kg_price: int
    express_surcharge: int
    pickup_fee: int
    pickup_free_from_parcels: int | None = None
