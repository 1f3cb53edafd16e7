"""
Request validation for admissions. Raises ReservationValidationError with a
message specific to the violated rule; returns normalized values otherwise.
"""
from decimal import Decimal, InvalidOperation

from app.core.constants import (
    DEFAULT_UNIT_KIND,
    GUEST_PHONE_PATTERN,
    KIND_SEAT,
    MAX_PARTY_SIZE,
    MAX_TOTAL_PRICE,
    MIN_PARTY_SIZE,
    SEAT_CAPACITY,
    UNIT_KINDS,
)
from app.core.errors import ReservationValidationError
from app.services.reservations.types import GuestInfo, Interval


def normalize_unit_kind(kind: str | None) -> str:
    """TABLE | ROOM | SEAT (case-insensitive); anything else falls back to TABLE."""
    k = (kind or "").strip().upper()
    return k if k in UNIT_KINDS else DEFAULT_UNIT_KIND


def normalize_phone(phone: str) -> str:
    return "".join(phone.split())


def validate_guest(guest: GuestInfo) -> GuestInfo:
    """Trimmed names and whitespace-free phone, or ReservationValidationError."""
    first = (guest.first_name or "").strip()
    last = (guest.last_name or "").strip()
    phone = (guest.phone or "").strip()
    if not first:
        raise ReservationValidationError("First name is required", field="guest_first_name")
    if not last:
        raise ReservationValidationError("Last name is required", field="guest_last_name")
    if not phone:
        raise ReservationValidationError("Phone is required", field="guest_phone")
    phone = normalize_phone(phone)
    if not GUEST_PHONE_PATTERN.match(phone):
        raise ReservationValidationError(
            "Invalid phone format (e.g. 12345678 or +21612345678)", field="guest_phone"
        )
    return GuestInfo(first_name=first, last_name=last, phone=phone)


def validate_party_size(party_size: int | None) -> int:
    party = party_size or MIN_PARTY_SIZE
    if party < MIN_PARTY_SIZE or party > MAX_PARTY_SIZE:
        raise ReservationValidationError(
            f"Party size must be between {MIN_PARTY_SIZE} and {MAX_PARTY_SIZE}", field="party_size"
        )
    return party


def validate_interval(interval: Interval) -> Interval:
    if not interval.is_valid:
        raise ReservationValidationError("start_at must be before end_at", field="start_at")
    return interval


def validate_price_override(price_override: Decimal | None) -> Decimal | None:
    if price_override is None:
        return None
    try:
        price = Decimal(str(price_override))
    except InvalidOperation:
        raise ReservationValidationError("total_price must be a number", field="total_price") from None
    if not price.is_finite():
        raise ReservationValidationError("total_price must be a finite number", field="total_price")
    if price < 0:
        raise ReservationValidationError("total_price cannot be negative", field="total_price")
    if price > MAX_TOTAL_PRICE:
        raise ReservationValidationError(f"total_price cannot exceed {MAX_TOTAL_PRICE}", field="total_price")
    return price


def check_unit_capacity(kind: str, party_size: int, capacity: int) -> None:
    """Seats hold exactly one guest; tables and rooms up to their capacity."""
    if kind == KIND_SEAT:
        if party_size > SEAT_CAPACITY:
            raise ReservationValidationError("1 guest per seat", field="party_size", max_capacity=SEAT_CAPACITY)
        return
    if party_size > capacity:
        raise ReservationValidationError(
            f"Max capacity: {capacity} guests", field="party_size", max_capacity=capacity
        )
