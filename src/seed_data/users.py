"""
Seed data for users.
One admin and two couriers.  Passwords are hashed at seed time.
"""

ADMIN_PASSWORD = "admin123"
COURIER_PASSWORD = "tokana123"

USERS = [
    {
        "email": "admin@demo.local",
        "name": "Admin",
        "role": "ADMIN",
        "phone": None,
        "password": ADMIN_PASSWORD,
    },
    {
        "email": "livreur1@demo.local",
        "name": "Livreur One",
        "role": "COURIER",
        "phone": "0320000001",
        "password": COURIER_PASSWORD,
    },
    {
        "email": "livreur2@demo.local",
        "name": "Livreur Two",
        "role": "COURIER",
        "phone": "0320000002",
        "password": COURIER_PASSWORD,
    },
]
