"""Pricing API router — quotes for the delivery form."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from src.models.enums import Zone
from src.modules.auth.dependencies import AuthenticatedUser, get_current_user
from src.modules.pricing.engine import (
    compute_pickup_fee,
    compute_price,
    get_pricing_summary,
    normalize_zone,
)
from src.modules.pricing.schemas import PriceQuoteResponse, PricingSummaryResponse

router = APIRouter(prefix="/pricing", tags=["pricing"])


@router.get("/quote", response_model=PriceQuoteResponse)
async def quote_price(
    zone: str = Query("TANA"),
    weight_kg: float = Query(..., ge=0.1),
    is_express: bool = Query(False),
    parcel_count: int = Query(1, ge=1),
    user: AuthenticatedUser = Depends(get_current_user),
):
    """Compute the delivery fee and pickup fee for a prospective delivery."""
    valid_zone = normalize_zone(zone)
    return PriceQuoteResponse(
        zone=valid_zone,
        weight_kg=weight_kg,
        is_express=is_express,
        parcel_count=parcel_count,
        delivery_price=compute_price(valid_zone, weight_kg, is_express),
        pickup_fee=compute_pickup_fee(valid_zone, parcel_count),
    )


@router.get("/zones/{zone}", response_model=PricingSummaryResponse)
async def zone_summary(
    zone: Zone,
    user: AuthenticatedUser = Depends(get_current_user),
):
    """Tariff grid of one zone."""
    return PricingSummaryResponse(**get_pricing_summary(zone))
