# Import all models so SQLAlchemy metadata is populated for Alembic autogenerate
from src.models.client import Client
from src.models.delivery import Delivery
from src.models.enums import (
    DeliveryStatus,
    PickupZone,
    SettlementDirection,
    SettlementType,
    UserRole,
    Zone,
)
from src.models.user import User

__all__ = [
    "Client",
    "Delivery",
    "DeliveryStatus",
    "PickupZone",
    "SettlementDirection",
    "SettlementType",
    "User",
    "UserRole",
    "Zone",
]
