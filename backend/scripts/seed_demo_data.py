#!/usr/bin/env python3
"""Replace all venues, units and reservations with a small demo set (one venue per type).
Run from backend: python scripts/seed_demo_data.py
"""
import logging
import sys
from decimal import Decimal
from pathlib import Path

# Ensure backend is on path when run as script
backend_dir = Path(__file__).resolve().parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from app.db.session import SessionLocal
from app.models import BookableUnit, Reservation, Room, Seat, Table, Venue

logger = logging.getLogger(__name__)

DEMO_VENUES = [
    {"name": "Café des Nattes", "type": "CAFE", "city": "Sidi Bou Said", "address": "Rue Habib Thameur", "rating": Decimal("4.6")},
    {"name": "Dar El Jeld", "type": "RESTAURANT", "city": "Tunis", "address": "5-10 Rue Dar El Jeld", "rating": Decimal("4.8")},
    {"name": "La Badira", "type": "HOTEL", "city": "Hammamet", "address": "Route Touristique Nord", "rating": Decimal("4.7")},
    {"name": "Pathé Tunis City", "type": "CINEMA", "city": "Tunis", "address": "Tunis City Mall", "rating": Decimal("4.3")},
]


def _units_for(venue: Venue) -> list[BookableUnit]:
    if venue.type in ("CAFE", "RESTAURANT"):
        return [
            Table(venue_id=venue.id, unit_number=n, capacity=cap, price=Decimal(price), location_label=label, is_vip=vip)
            for n, cap, price, label, vip in [
                (1, 2, "20", "Terrasse", False),
                (2, 4, "30", "Salle", False),
                (3, 6, "60", "Salon VIP", True),
            ]
        ]
    if venue.type == "HOTEL":
        return [
            Room(venue_id=venue.id, unit_number=n, capacity=cap, price=Decimal(price), room_type=rt)
            for n, cap, price, rt in [(101, 2, "320", "Double"), (102, 3, "380", "Triple"), (201, 4, "650", "Suite")]
        ]
    return [
        Seat(venue_id=venue.id, unit_number=n, price=Decimal("15" if n <= 20 else "22"), zone="Standard" if n <= 20 else "Premium")
        for n in range(1, 31)
    ]


def main():
    logging.basicConfig(level=logging.INFO)
    db = SessionLocal()
    try:
        db.query(Reservation).delete()
        db.query(BookableUnit).delete()
        db.query(Venue).delete()
        for data in DEMO_VENUES:
            venue = Venue(description=f"{data['name']} ({data['city']})", **data)
            db.add(venue)
            db.flush()
            units = _units_for(venue)
            db.add_all(units)
            venue.starting_price = min(u.price for u in units)
            logger.info("Seeded %s with %s units", venue.name, len(units))
        db.commit()
        print("Demo data seeded.")
    except Exception as e:
        db.rollback()
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
