"""Users, clients and deliveries

Revision ID: 001
Revises: None
Create Date: 2026-10-18

Creates: users, clients, deliveries
Enums: userrole, deliverystatus, zone, pickupzone, settlementtype
"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto";')

    # ── 1. Create enum types ──────────────────────────────────────────────
    op.execute("CREATE TYPE userrole AS ENUM ('ADMIN', 'COURIER');")
    op.execute("""
        CREATE TYPE deliverystatus AS ENUM (
            'CREATED', 'PICKED_UP', 'DELIVERED', 'PAID', 'POSTPONED', 'CANCELED'
        );
    """)
    op.execute("CREATE TYPE zone AS ENUM ('TANA', 'PERI', 'SUPER');")
    op.execute("""
        CREATE TYPE pickupzone AS ENUM (
            'TANA_VILLE', 'PERIPHERIE', 'SUPER_PERIPHERIE'
        );
    """)
    op.execute("""
        CREATE TYPE settlementtype AS ENUM (
            'CASH_COURIER', 'MOBILE_MONEY', 'OFFICE_PICKUP'
        );
    """)

    # ── 2. Create users table ──────────────────────────────────────────────
    op.execute("""
        CREATE TABLE users (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            email VARCHAR(255) NOT NULL,
            password_hash VARCHAR(255) NOT NULL,
            name VARCHAR(200) NOT NULL,
            phone VARCHAR(30),
            role userrole NOT NULL DEFAULT 'COURIER',
            is_active BOOLEAN NOT NULL DEFAULT true,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT uq_users_email UNIQUE (email)
        );
    """)
    op.execute("CREATE INDEX ix_users_role ON users (role);")

    # ── 3. Create clients table ────────────────────────────────────────────
    op.execute("""
        CREATE TABLE clients (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            name VARCHAR(200) NOT NULL,
            phone VARCHAR(30) NOT NULL,
            pickup_address VARCHAR(500) NOT NULL,
            pickup_zone pickupzone NOT NULL DEFAULT 'TANA_VILLE',
            note TEXT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        );
    """)
    op.execute("CREATE INDEX ix_clients_name ON clients (name);")

    # ── 4. Create deliveries table ─────────────────────────────────────────
    op.execute("""
        CREATE TABLE deliveries (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),

            -- Scheduling
            planned_date DATE NOT NULL,
            original_planned_date DATE,
            postponed_to DATE,

            -- Parties
            sender_id UUID NOT NULL REFERENCES clients(id) ON DELETE RESTRICT,
            courier_id UUID REFERENCES users(id) ON DELETE RESTRICT,

            -- Receiver info
            receiver_name VARCHAR(200) NOT NULL,
            receiver_phone VARCHAR(30) NOT NULL,
            receiver_address VARCHAR(500) NOT NULL,

            -- Parcel
            parcel_count INTEGER NOT NULL DEFAULT 1,
            weight_kg NUMERIC(8, 2) NOT NULL,
            description TEXT,
            note TEXT,

            -- Pricing (integer Ariary)
            zone zone NOT NULL DEFAULT 'TANA',
            is_express BOOLEAN NOT NULL DEFAULT false,
            auto_price INTEGER NOT NULL,
            delivery_price INTEGER NOT NULL,
            collect_amount INTEGER,
            total_due INTEGER NOT NULL,

            -- Payment flags
            is_prepaid BOOLEAN NOT NULL DEFAULT false,
            delivery_fee_prepaid BOOLEAN NOT NULL DEFAULT false,

            status deliverystatus NOT NULL DEFAULT 'CREATED',
            courier_remarks TEXT,

            -- Courier -> office settlement
            courier_settled BOOLEAN NOT NULL DEFAULT false,
            courier_settled_at TIMESTAMPTZ,
            courier_settled_by UUID REFERENCES users(id) ON DELETE SET NULL,

            -- Office -> client settlement
            is_settled BOOLEAN NOT NULL DEFAULT false,
            settled_at TIMESTAMPTZ,
            settled_by UUID REFERENCES users(id) ON DELETE SET NULL,
            settlement_type settlementtype,

            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT ck_deliveries_parcel_count CHECK (parcel_count >= 1),
            CONSTRAINT ck_deliveries_weight_kg CHECK (weight_kg >= 0.1),
            CONSTRAINT ck_deliveries_delivery_price CHECK (delivery_price >= 0)
        );
    """)
    op.execute("CREATE INDEX ix_deliveries_planned_date ON deliveries (planned_date);")
    op.execute(
        "CREATE INDEX ix_deliveries_original_planned_date ON deliveries (original_planned_date);"
    )
    op.execute("CREATE INDEX ix_deliveries_sender_id ON deliveries (sender_id);")
    op.execute("CREATE INDEX ix_deliveries_courier_id ON deliveries (courier_id);")
    op.execute("CREATE INDEX ix_deliveries_status ON deliveries (status);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS deliveries;")
    op.execute("DROP TABLE IF EXISTS clients;")
    op.execute("DROP TABLE IF EXISTS users;")

    op.execute("DROP TYPE IF EXISTS settlementtype;")
    op.execute("DROP TYPE IF EXISTS pickupzone;")
    op.execute("DROP TYPE IF EXISTS zone;")
    op.execute("DROP TYPE IF EXISTS deliverystatus;")
    op.execute("DROP TYPE IF EXISTS userrole;")
