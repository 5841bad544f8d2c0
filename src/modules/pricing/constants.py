"""Tariff grid — integer Ariary per zone, weight tier and service level."""

from __future__ import annotations

from src.models.enums import Zone

DEFAULT_ZONE = Zone.TANA

# Weight tiers (kg)
LIGHT_MAX_KG = 2
HEAVY_MAX_KG = 5

# Price for parcels up to LIGHT_MAX_KG
LIGHT_PRICE: dict[Zone, int] = {
    Zone.TANA: 3000,
    Zone.PERI: 3000,
    Zone.SUPER: 4000,
}

# Added on top of the light price for parcels up to HEAVY_MAX_KG
HEAVY_PRICE: dict[Zone, int] = {
    Zone.TANA: 3000,
    Zone.PERI: 4000,
    Zone.SUPER: 4000,
}

# Per started kg above HEAVY_MAX_KG
EXTRA_KG_PRICE = 1000

# Same-day service
EXPRESS_SURCHARGE: dict[Zone, int] = {
    Zone.TANA: 2000,
    Zone.PERI: 3000,
    Zone.SUPER: 6000,
}

# Pickup at the client's address
PICKUP_FEE: dict[Zone, int] = {
    Zone.TANA: 0,
    Zone.PERI: 2000,
    Zone.SUPER: 5000,
}
# Pickup becomes free from this many parcels
PICKUP_FREE_FROM_PARCELS: dict[Zone, int] = {
    Zone.PERI: 3,
}
