"""Availability engine and its read-side helpers."""
from app.services.reservations.engine import cancel, check_and_reserve, compute_availability
from app.services.reservations.locks import UnitLockRegistry, unit_locks
from app.services.reservations.queries import (
    get_reservation_for_user,
    get_ticket,
    list_reservations_for_user,
    list_units_with_status,
    reservation_to_dict,
)
from app.services.reservations.types import GuestInfo, Interval, ReservationRequest, overlaps

__all__ = [
    "GuestInfo",
    "Interval",
    "ReservationRequest",
    "UnitLockRegistry",
    "cancel",
    "check_and_reserve",
    "compute_availability",
    "get_reservation_for_user",
    "get_ticket",
    "list_reservations_for_user",
    "list_units_with_status",
    "overlaps",
    "reservation_to_dict",
    "unit_locks",
]
