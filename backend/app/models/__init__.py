from app.models.bookable_unit import UNIT_CLASSES, BookableUnit, Room, Seat, Table
from app.models.reservation import Reservation
from app.models.venue import Venue

__all__ = [
    "BookableUnit",
    "Reservation",
    "Room",
    "Seat",
    "Table",
    "UNIT_CLASSES",
    "Venue",
]
