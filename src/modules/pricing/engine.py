"""Delivery fee computation from the tariff grid.

Pure functions, no I/O. ``compute_price`` is called by the delivery service on
create/edit and by the quote endpoint used by the delivery form.
"""

from __future__ import annotations

import logging
import math
from decimal import Decimal

from src.models.enums import Zone
from src.modules.pricing.constants import (
    DEFAULT_ZONE,
    EXPRESS_SURCHARGE,
    EXTRA_KG_PRICE,
    HEAVY_MAX_KG,
    HEAVY_PRICE,
    LIGHT_MAX_KG,
    LIGHT_PRICE,
    PICKUP_FEE,
    PICKUP_FREE_FROM_PARCELS,
)

logger = logging.getLogger(__name__)


def normalize_zone(zone: Zone | str | None) -> Zone:
    """Return ``zone`` as a Zone, falling back to TANA for anything unknown."""
    if isinstance(zone, Zone):
        return zone
    try:
        return Zone(zone)
    except ValueError:
        logger.warning("Unknown delivery zone %r, pricing as %s", zone, DEFAULT_ZONE.value)
        return DEFAULT_ZONE


def compute_price(
    zone: Zone | str | None,
    weight_kg: float | Decimal,
    is_express: bool,
) -> int:
    """Delivery fee for one parcel run.

    Up to 2 kg pays the light price; up to 5 kg adds the heavy price; beyond
    that every started kg adds ``EXTRA_KG_PRICE``. Express adds the zone's
    surcharge on top.
    """
    valid_zone = normalize_zone(zone)

    price = LIGHT_PRICE[valid_zone]
    if weight_kg > LIGHT_MAX_KG:
        price += HEAVY_PRICE[valid_zone]
    if weight_kg > HEAVY_MAX_KG:
        extra_kg = math.ceil(weight_kg - HEAVY_MAX_KG)
        price += extra_kg * EXTRA_KG_PRICE

    if is_express:
        price += EXPRESS_SURCHARGE[valid_zone]

    return int(price)


def compute_pickup_fee(zone: Zone | str | None, parcel_count: int) -> int:
    """Fee for collecting parcels at the client's address."""
    valid_zone = normalize_zone(zone)
    free_from = PICKUP_FREE_FROM_PARCELS.get(valid_zone)
    if free_from is not None and parcel_count >= free_from:
        return 0
    return PICKUP_FEE[valid_zone]


def get_pricing_summary(zone: Zone | str | None) -> dict:
    """Tariff grid of one zone, as shown next to the delivery form."""
    valid_zone = normalize_zone(zone)
    return {
        "zone": valid_zone,
        "light_max_kg": LIGHT_MAX_KG,
        "heavy_max_kg": HEAVY_MAX_KG,
        "light_price": LIGHT_PRICE[valid_zone],
        "heavy_price": LIGHT_PRICE[valid_zone] + HEAVY_PRICE[valid_zone],
        "extra_kg_price": EXTRA_KG_PRICE,
        "express_surcharge": EXPRESS_SURCHARGE[valid_zone],
        "pickup_fee": PICKUP_FEE[valid_zone],
        "pickup_free_from_parcels": PICKUP_FREE_FROM_PARCELS.get(valid_zone),
    }
