import enum


class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    COURIER = "COURIER"


class DeliveryStatus(str, enum.Enum):
    CREATED = "CREATED"
    PICKED_UP = "PICKED_UP"
    DELIVERED = "DELIVERED"
    PAID = "PAID"
    POSTPONED = "POSTPONED"
    CANCELED = "CANCELED"


class Zone(str, enum.Enum):
    """Pricing tier of a delivery destination."""

    TANA = "TANA"
    PERI = "PERI"
    SUPER = "SUPER"


class PickupZone(str, enum.Enum):
    """Operational grouping of a client's pickup address."""

    TANA_VILLE = "TANA_VILLE"
    PERIPHERIE = "PERIPHERIE"
    SUPER_PERIPHERIE = "SUPER_PERIPHERIE"


class SettlementType(str, enum.Enum):
    CASH_COURIER = "CASH_COURIER"
    MOBILE_MONEY = "MOBILE_MONEY"
    OFFICE_PICKUP = "OFFICE_PICKUP"


class SettlementDirection(str, enum.Enum):
    OFFICE_OWES_CLIENT = "OFFICE_OWES_CLIENT"
    CLIENT_OWES_OFFICE = "CLIENT_OWES_OFFICE"
    SETTLED = "SETTLED"
