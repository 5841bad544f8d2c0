"""
Seed data for clients (senders).
Clients are matched by name when re-seeding.
"""

CLIENTS = [
    {
        "key": "client-a",
        "name": "Client A",
        "phone": "0341111111",
        "pickup_address": "Andravoahangy, Antananarivo",
        "pickup_zone": "TANA_VILLE",
    },
    {
        "key": "client-b",
        "name": "Client B",
        "phone": "0332222222",
        "pickup_address": "Analakely, Antananarivo",
        "pickup_zone": "TANA_VILLE",
    },
    {
        "key": "client-c",
        "name": "Client C",
        "phone": "0323333333",
        "pickup_address": "Itaosy, Antananarivo",
        "pickup_zone": "PERIPHERIE",
    },
]
