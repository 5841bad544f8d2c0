"""
Seed data for demo deliveries exercising J+1 settlement.

``days_ago`` is relative to the business date at seed time.  Prices and
``total_due`` are computed by the pricing and settlement engines.

Client A: collect, fee due          -> office owes the client
Client B: collect, fee prepaid      -> office owes the full collect
Client C: goods prepaid, fee due    -> client owes the fee (debit)
"""

DELIVERIES = [
    # ── Client A ───────────────────────────────────────────────────────────
    {
        "key": "j1-a1",
        "client": "client-a",
        "courier": "livreur1@demo.local",
        "days_ago": 1,
        "receiver_name": "Receiver A1",
        "receiver_phone": "0341234567",
        "receiver_address": "Antanimena, Antananarivo",
        "parcel_count": 2,
        "weight_kg": "3.0",
        "description": "Clothes",
        "zone": "TANA",
        "collect_amount": 50000,
        "is_prepaid": False,
        "delivery_fee_prepaid": False,
        "status": "PAID",
        "courier_settled": True,
    },
    {
        "key": "j1-a2",
        "client": "client-a",
        "courier": "livreur1@demo.local",
        "days_ago": 1,
        "receiver_name": "Receiver A2",
        "receiver_phone": "0331234567",
        "receiver_address": "Tsaralalana, Antananarivo",
        "parcel_count": 1,
        "weight_kg": "1.5",
        "description": "Documents",
        "zone": "TANA",
        "collect_amount": 30000,
        "is_prepaid": False,
        "delivery_fee_prepaid": False,
        "status": "PAID",
        "courier_settled": True,
    },
    {
        "key": "j1-a3",
        "client": "client-a",
        "courier": "livreur2@demo.local",
        "days_ago": 2,
        "receiver_name": "Receiver A3",
        "receiver_phone": "0321234567",
        "receiver_address": "Ankorondrano, Antananarivo",
        "parcel_count": 3,
        "weight_kg": "4.0",
        "description": "Electronics",
        "zone": "TANA",
        "collect_amount": 75000,
        "is_prepaid": False,
        "delivery_fee_prepaid": False,
        "status": "PAID",
        "courier_settled": False,
    },
    # ── Client B ───────────────────────────────────────────────────────────
    {
        "key": "j1-b1",
        "client": "client-b",
        "courier": "livreur1@demo.local",
        "days_ago": 1,
        "receiver_name": "Receiver B1",
        "receiver_phone": "0341111222",
        "receiver_address": "Ivato, Antananarivo",
        "parcel_count": 1,
        "weight_kg": "2.0",
        "description": "Books",
        "zone": "PERI",
        "collect_amount": 40000,
        "is_prepaid": False,
        "delivery_fee_prepaid": True,
        "status": "PAID",
        "courier_settled": True,
    },
    {
        "key": "j1-b2",
        "client": "client-b",
        "courier": "livreur2@demo.local",
        "days_ago": 2,
        "receiver_name": "Receiver B2",
        "receiver_phone": "0331111222",
        "receiver_address": "Ambohimanarina, Antananarivo",
        "parcel_count": 2,
        "weight_kg": "3.5",
        "description": "Accessories",
        "zone": "PERI",
        "collect_amount": 60000,
        "is_prepaid": False,
        "delivery_fee_prepaid": True,
        "status": "DELIVERED",
        "courier_settled": False,
    },
    # ── Client C ───────────────────────────────────────────────────────────
    {
        "key": "j1-c1",
        "client": "client-c",
        "courier": "livreur1@demo.local",
        "days_ago": 1,
        "receiver_name": "Receiver C1",
        "receiver_phone": "0342222333",
        "receiver_address": "Ambatobe, Antananarivo",
        "parcel_count": 1,
        "weight_kg": "1.0",
        "description": "Small parcel",
        "zone": "PERI",
        "collect_amount": 0,
        "is_prepaid": True,
        "delivery_fee_prepaid": False,
        "status": "PAID",
        "courier_settled": True,
    },
    {
        "key": "j1-c2",
        "client": "client-c",
        "courier": "livreur2@demo.local",
        "days_ago": 3,
        "receiver_name": "Receiver C2",
        "receiver_phone": "0332222333",
        "receiver_address": "Ankadifotsy, Antananarivo",
        "parcel_count": 2,
        "weight_kg": "2.5",
        "description": "Important documents",
        "zone": "SUPER",
        "is_express": True,
        "collect_amount": 0,
        "is_prepaid": True,
        "delivery_fee_prepaid": False,
        "status": "PAID",
        "courier_settled": True,
    },
    # ── Today's run ────────────────────────────────────────────────────────
    {
        "key": "today-a4",
        "client": "client-a",
        "courier": "livreur1@demo.local",
        "days_ago": 0,
        "receiver_name": "Receiver A4",
        "receiver_phone": "0349876543",
        "receiver_address": "Behoririka, Antananarivo",
        "parcel_count": 1,
        "weight_kg": "6.2",
        "description": "Kitchenware",
        "zone": "TANA",
        "collect_amount": 35000,
        "is_prepaid": False,
        "delivery_fee_prepaid": False,
        "status": "CREATED",
        "courier_settled": False,
    },
    {
        "key": "today-unassigned",
        "client": "client-b",
        "courier": None,
        "days_ago": 0,
        "receiver_name": "Receiver B3",
        "receiver_phone": "0339876543",
        "receiver_address": "Ambohipo, Antananarivo",
        "parcel_count": 1,
        "weight_kg": "0.8",
        "description": "Cosmetics",
        "zone": "TANA",
        "collect_amount": 18000,
        "is_prepaid": False,
        "delivery_fee_prepaid": False,
        "status": "CREATED",
        "courier_settled": False,
    },
]
