"""Database seeder for Tokana — demo users, clients and J+1 deliveries.

Run via: python -m src.seed
"""

import uuid
from datetime import timedelta
from decimal import Decimal

from sqlalchemy import text
from sqlalchemy.orm import Session

from src.config import settings
from src.database.engine import sync_engine
from src.modules.auth.service import hash_password
from src.modules.pricing.engine import compute_price
from src.modules.settlement.engine import compute_total_due
from src.seed_data.clients import CLIENTS
from src.seed_data.deliveries import DELIVERIES
from src.seed_data.users import USERS

# Stable ids so re-seeding updates rows instead of duplicating them
SEED_NAMESPACE = uuid.UUID("8f6d3c52-5b7e-4a8e-9a51-6c0e3f2b7d10")


def _seed_id(key: str) -> uuid.UUID:
    return uuid.uuid5(SEED_NAMESPACE, key)


# ---------------------------------------------------------------------------
# Seed functions
# ---------------------------------------------------------------------------


def seed_users(session: Session) -> dict[str, uuid.UUID]:
    """Upsert users by email. Returns ``{email: id}``."""
    ids: dict[str, uuid.UUID] = {}
    for user in USERS:
        user_id = session.execute(
            text("""
                INSERT INTO users (email, password_hash, name, phone, role, is_active)
                VALUES (:email, :password_hash, :name, :phone, :role, true)
                ON CONFLICT (email) DO UPDATE SET
                    name = EXCLUDED.name,
                    phone = EXCLUDED.phone,
                    role = EXCLUDED.role
                RETURNING id
            """),
            {
                "email": user["email"],
                "password_hash": hash_password(user["password"]),
                "name": user["name"],
                "phone": user.get("phone"),
                "role": user["role"],
            },
        ).scalar_one()
        ids[user["email"]] = user_id

    print(f"  Seeded {len(USERS)} users.")
    return ids


def seed_clients(session: Session) -> dict[str, uuid.UUID]:
    """Insert clients missing by name. Returns ``{key: id}``."""
    ids: dict[str, uuid.UUID] = {}
    created = 0
    for client in CLIENTS:
        client_id = session.execute(
            text("SELECT id FROM clients WHERE name = :name"),
            {"name": client["name"]},
        ).scalar_one_or_none()

        if client_id is None:
            client_id = session.execute(
                text("""
                    INSERT INTO clients (id, name, phone, pickup_address, pickup_zone)
                    VALUES (:id, :name, :phone, :pickup_address, :pickup_zone)
                    RETURNING id
                """),
                {
                    "id": _seed_id(client["key"]),
                    "name": client["name"],
                    "phone": client["phone"],
                    "pickup_address": client["pickup_address"],
                    "pickup_zone": client["pickup_zone"],
                },
            ).scalar_one()
            created += 1
        ids[client["key"]] = client_id

    print(f"  Seeded {created} new clients ({len(CLIENTS)} total).")
    return ids


def seed_deliveries(
    session: Session,
    user_ids: dict[str, uuid.UUID],
    client_ids: dict[str, uuid.UUID],
) -> None:
    """Insert demo deliveries dated relative to today; existing ones are kept."""
    today = settings.business_today()
    admin_id = user_ids["admin@demo.local"]
    created = 0

    for delivery in DELIVERIES:
        weight = Decimal(delivery["weight_kg"])
        is_express = delivery.get("is_express", False)
        price = compute_price(delivery["zone"], weight, is_express)
        total_due = compute_total_due(
            delivery["is_prepaid"], price, delivery["collect_amount"]
        )
        courier_settled = delivery["courier_settled"]
        planned = today - timedelta(days=delivery["days_ago"])

        result = session.execute(
            text("""
                INSERT INTO deliveries (id, planned_date, sender_id, courier_id,
                    receiver_name, receiver_phone, receiver_address,
                    parcel_count, weight_kg, description, zone, is_express,
                    auto_price, delivery_price, collect_amount, total_due,
                    is_prepaid, delivery_fee_prepaid, status,
                    courier_settled, courier_settled_at, courier_settled_by)
                VALUES (:id, :planned_date, :sender_id, :courier_id,
                    :receiver_name, :receiver_phone, :receiver_address,
                    :parcel_count, :weight_kg, :description, :zone, :is_express,
                    :price, :price, :collect_amount, :total_due,
                    :is_prepaid, :delivery_fee_prepaid, :status,
                    :courier_settled, CASE WHEN :courier_settled THEN now() END,
                    :courier_settled_by)
                ON CONFLICT (id) DO NOTHING
            """),
            {
                "id": _seed_id(delivery["key"]),
                "planned_date": planned,
                "sender_id": client_ids[delivery["client"]],
                "courier_id": user_ids.get(delivery["courier"]) if delivery["courier"] else None,
                "receiver_name": delivery["receiver_name"],
                "receiver_phone": delivery["receiver_phone"],
                "receiver_address": delivery["receiver_address"],
                "parcel_count": delivery["parcel_count"],
                "weight_kg": weight,
                "description": delivery.get("description"),
                "zone": delivery["zone"],
                "is_express": is_express,
                "price": price,
                "collect_amount": delivery["collect_amount"],
                "total_due": total_due,
                "is_prepaid": delivery["is_prepaid"],
                "delivery_fee_prepaid": delivery["delivery_fee_prepaid"],
                "status": delivery["status"],
                "courier_settled": courier_settled,
                "courier_settled_by": admin_id if courier_settled else None,
            },
        )
        created += result.rowcount

    print(f"  Seeded {created} new deliveries ({len(DELIVERIES)} defined).")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main() -> None:
    """Run all seed functions inside a single transaction."""
    print("Seeding Tokana database...")

    with Session(sync_engine) as session:
        with session.begin():
            # 1. Users
            user_ids = seed_users(session)

            # 2. Clients
            client_ids = seed_clients(session)

            # 3. Deliveries (FK → users, clients)
            seed_deliveries(session, user_ids, client_ids)

    print("Seeding complete.")


if __name__ == "__main__":
    main()
