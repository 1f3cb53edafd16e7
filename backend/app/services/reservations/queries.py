"""
Read-side helpers around the engine: a user's reservations, single reservation, ticket,
and venue units with availability status. Return dicts ready for JSON.
"""
from sqlalchemy.orm import Session, joinedload

from app.core.clock import Clock, as_utc, system_clock
from app.core.errors import ReservationNotFoundError
from app.models.bookable_unit import BookableUnit
from app.models.reservation import Reservation
from app.services.reservations import store
from app.services.reservations.engine import compute_availability
from app.services.reservations.types import Interval


def _iso(at) -> str | None:
    return as_utc(at).isoformat() if at else None


def unit_to_dict(unit: BookableUnit) -> dict:
    out = {
        "id": unit.id,
        "venue_id": unit.venue_id,
        "kind": unit.kind,
        "unit_number": unit.unit_number,
        "capacity": unit.effective_capacity,
        "price": float(unit.price),
    }
    extras = {
        "location_label": unit.location_label,
        "is_vip": unit.is_vip,
        "room_type": unit.room_type,
        "zone": unit.zone,
    }
    out.update({k: v for k, v in extras.items() if v is not None})
    return out


def reservation_to_dict(r: Reservation) -> dict:
    return {
        "id": r.id,
        "user_id": r.user_id,
        "venue_id": r.venue_id,
        "booking_kind": r.booking_kind,
        "table_id": r.table_id,
        "room_id": r.room_id,
        "seat_id": r.seat_id,
        "start_at": _iso(r.start_at),
        "end_at": _iso(r.end_at),
        "status": r.status,
        "total_price": float(r.total_price),
        "guest_first_name": r.guest_first_name,
        "guest_last_name": r.guest_last_name,
        "guest_phone": r.guest_phone,
        "party_size": r.party_size,
        "created_at": _iso(r.created_at),
        "updated_at": _iso(r.updated_at),
    }


def list_reservations_for_user(
    db: Session,
    user_id: str,
    *,
    upcoming_only: bool = False,
    clock: Clock = system_clock,
) -> list[Reservation]:
    """User's reservations, latest start first. upcoming_only keeps those ending after now."""
    q = db.query(Reservation).filter(Reservation.user_id == user_id)
    if upcoming_only:
        q = q.filter(Reservation.end_at > clock())
    return q.order_by(Reservation.start_at.desc()).all()


def get_reservation_for_user(
    db: Session, reservation_id: int, user_id: str | None, *, is_admin: bool = False
) -> Reservation:
    row = store.get_reservation(db, reservation_id)
    if row is None or (not is_admin and (user_id is None or row.user_id != user_id)):
        raise ReservationNotFoundError("Reservation not found")
    return row


def get_ticket(db: Session, reservation_id: int, user_id: str | None) -> dict:
    """Ticket view for QR display/print; qr_payload is the reservation id."""
    row = (
        db.query(Reservation)
        .options(joinedload(Reservation.venue))
        .filter(Reservation.id == reservation_id, Reservation.user_id == user_id)
        .first()
    )
    if row is None or user_id is None:
        raise ReservationNotFoundError("Reservation not found")
    unit = row.unit
    venue = row.venue
    return {
        "id": row.id,
        "start_at": _iso(row.start_at),
        "end_at": _iso(row.end_at),
        "status": row.status,
        "booking_kind": row.booking_kind,
        "total_price": float(row.total_price),
        "party_size": row.party_size,
        "venue_name": venue.name if venue else None,
        "venue_address": venue.address if venue else None,
        "venue_city": venue.city if venue else None,
        "unit_number": unit.unit_number if unit else None,
        "qr_payload": str(row.id),
    }


def list_units_with_status(db: Session, venue_id: int, interval: Interval | None = None) -> list[dict]:
    """All units of a venue (by kind, then number) with "available" / "reserved" for interval."""
    units = store.list_units_for_venue(db, venue_id)
    statuses = compute_availability(db, [u.id for u in units], interval)
    return [{**unit_to_dict(u), "status": statuses[u.id]} for u in units]
