"""Venue record (café, restaurant, hotel, cinema); owns its bookable units."""
from sqlalchemy import CheckConstraint, Column, DateTime, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.constants import VENUE_TYPES
from app.db.base import Base, sql_in_list


class Venue(Base):
    __tablename__ = "venues"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(256), nullable=False)
    type = Column(String(16), nullable=False)  # CAFE | RESTAURANT | HOTEL | CINEMA
    city = Column(String(128), nullable=False)
    address = Column(String(256), nullable=False)
    description = Column(Text, nullable=False, default="")
    rating = Column(Numeric(2, 1), nullable=False, default=0)
    starting_price = Column(Numeric(10, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    units = relationship("BookableUnit", back_populates="venue", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint(f"type IN {sql_in_list(VENUE_TYPES)}", name="ck_venues_type"),
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_venues_rating"),
        Index("ix_venues_city_type", "city", "type"),
    )
