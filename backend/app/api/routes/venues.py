"""Venue units with availability status for an optional [start_at, end_at) window."""
import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.errors import STATUS_BAD_REQUEST, STATUS_NOT_FOUND, ReservationError, reservation_error_to_http
from app.db.session import get_db
from app.models.venue import Venue
from app.services.reservations import Interval, list_units_with_status

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/venues/{venue_id}/units")
def venue_units(
    venue_id: int,
    db: Session = Depends(get_db),
    start_at: datetime | None = Query(None),
    end_at: datetime | None = Query(None),
) -> dict[str, Any]:
    """
    Tables, rooms and seats of a venue. With start_at and end_at each unit gets
    status "reserved" if a non-cancelled reservation overlaps the window, else "available".
    Without a window every unit is "available".
    """
    venue = db.query(Venue).filter(Venue.id == venue_id).first()
    if venue is None:
        raise HTTPException(status_code=STATUS_NOT_FOUND, detail={"error": "Venue not found"})
    interval = None
    if start_at is not None and end_at is not None:
        interval = Interval.utc(start_at, end_at)
        if not interval.is_valid:
            raise HTTPException(status_code=STATUS_BAD_REQUEST, detail={"error": "start_at must be before end_at"})
    try:
        units = list_units_with_status(db, venue_id, interval)
    except ReservationError as e:
        raise reservation_error_to_http(e)
    return {"venue_id": venue.id, "venue_name": venue.name, "units": units}
