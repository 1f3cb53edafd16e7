"""
Reservations API: create (admission), list mine, get one, ticket, cancel.

Caller identified by X-User-Id header (401 when missing); X-User-Role: admin may cancel or
read any reservation. Engine errors are mapped by core.errors.reservation_error_to_http.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.api.deps import current_user_id, is_admin
from app.core.errors import ReservationError, reservation_error_to_http
from app.db.session import get_db
from app.services.reservations import (
    GuestInfo,
    ReservationRequest,
    cancel,
    check_and_reserve,
    get_reservation_for_user,
    get_ticket,
    list_reservations_for_user,
    reservation_to_dict,
)
from app.services.reservations.validation import normalize_unit_kind

router = APIRouter()
logger = logging.getLogger(__name__)


class CreateReservationBody(BaseModel):
    venue_id: int
    booking_type: str | None = Field(None, description="TABLE | ROOM | SEAT; anything else is treated as TABLE")
    table_id: int | None = None
    room_id: int | None = None
    seat_id: int | None = None
    start_at: datetime
    end_at: datetime
    total_price: Decimal | None = Field(None, description="Overrides the unit's base price when nonzero")
    guest_first_name: str = ""
    guest_last_name: str = ""
    guest_phone: str = ""
    party_size: int | None = 1

    def unit_id_for(self, kind: str) -> int | None:
        return {"TABLE": self.table_id, "ROOM": self.room_id, "SEAT": self.seat_id}.get(kind)


# --- Create ---


@router.post("/reservations", status_code=201)
def create_reservation(
    body: CreateReservationBody,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
) -> dict[str, Any]:
    """Admit a reservation for one table, room or seat. 409 when the unit is taken for that window."""
    kind = normalize_unit_kind(body.booking_type)
    request = ReservationRequest(
        venue_id=body.venue_id,
        unit_kind=kind,
        unit_id=body.unit_id_for(kind),
        start_at=body.start_at,
        end_at=body.end_at,
        guest=GuestInfo(body.guest_first_name, body.guest_last_name, body.guest_phone),
        party_size=body.party_size,
        price_override=body.total_price,
        user_id=user_id,
    )
    try:
        row = check_and_reserve(db, request)
    except ReservationError as e:
        raise reservation_error_to_http(e)
    return {"message": "Reservation created", "reservation": reservation_to_dict(row)}


# --- List mine ---


@router.get("/reservations")
@router.get("/reservations/me")
def my_reservations(
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
    upcoming_only: bool = Query(False),
) -> list[dict[str, Any]]:
    """Current user's reservations, latest start first."""
    rows = list_reservations_for_user(db, user_id, upcoming_only=upcoming_only)
    return [reservation_to_dict(r) for r in rows]


# --- Ticket ---


@router.get("/reservations/{reservation_id}/ticket")
def reservation_ticket(
    reservation_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
) -> dict[str, Any]:
    """Ticket data for QR display/print."""
    try:
        return get_ticket(db, reservation_id, user_id)
    except ReservationError as e:
        raise reservation_error_to_http(e)


# --- Get one ---


@router.get("/reservations/{reservation_id}")
def get_reservation(
    reservation_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
    admin: bool = Depends(is_admin),
) -> dict[str, Any]:
    try:
        row = get_reservation_for_user(db, reservation_id, user_id, is_admin=admin)
    except ReservationError as e:
        raise reservation_error_to_http(e)
    return reservation_to_dict(row)


# --- Cancel ---


@router.patch("/reservations/{reservation_id}/cancel")
def cancel_reservation(
    reservation_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
    admin: bool = Depends(is_admin),
) -> dict[str, Any]:
    """Cancel (one-way). 409 if already cancelled; the freed window is bookable immediately."""
    try:
        row = cancel(db, reservation_id, user_id, is_admin=admin)
    except ReservationError as e:
        raise reservation_error_to_http(e)
    return {"message": "Reservation cancelled", "reservation": reservation_to_dict(row)}
