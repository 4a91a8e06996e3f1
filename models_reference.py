"""
Reference data tables - SQLAlchemy 2.x models.
Airline codes, airport codes and per-airline booking class → cabin mappings,
read by DatabaseReferenceProvider.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models using SQLAlchemy 2.0 declarative style."""
    pass


def generate_uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ==================== AIRLINE CODES ====================

class AirlineCode(Base):
    """Master airline codes, names and alliance membership."""
    __tablename__ = "airline_codes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    iata_code: Mapped[str] = mapped_column(String(3), unique=True, nullable=False)
    icao_code: Mapped[Optional[str]] = mapped_column(String(4), nullable=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    alliance: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    logo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)

    booking_classes: Mapped[List["BookingClass"]] = relationship(
        back_populates="airline", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("idx_airline_codes_iata", "iata_code"),
    )

    def to_dict(self) -> dict:
        return {
            "iata_code": self.iata_code,
            "icao_code": self.icao_code,
            "name": self.name,
            "country": self.country,
            "alliance": self.alliance,
            "logo_url": self.logo_url,
        }


# ==================== AIRPORT CODES ====================

class AirportCode(Base):
    """Airport metadata used for names, great-circle distance and timezones."""
    __tablename__ = "airport_codes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    iata_code: Mapped[str] = mapped_column(String(3), unique=True, nullable=False)
    icao_code: Mapped[Optional[str]] = mapped_column(String(4), nullable=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    timezone: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    # lower sorts first in autocomplete
    priority: Mapped[int] = mapped_column(Integer, default=100)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)

    __table_args__ = (
        Index("idx_airport_codes_iata", "iata_code"),
    )

    def to_dict(self) -> dict:
        return {
            "iata_code": self.iata_code,
            "icao_code": self.icao_code,
            "name": self.name,
            "city": self.city,
            "country": self.country,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "timezone": self.timezone,
        }


# ==================== BOOKING CLASSES ====================

class BookingClass(Base):
    """One airline's RBD letter and the cabin it sells into."""
    __tablename__ = "booking_classes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    airline_id: Mapped[str] = mapped_column(String(36), ForeignKey("airline_codes.id"), nullable=False)
    booking_class_code: Mapped[str] = mapped_column(String(1), nullable=False)
    service_class: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    class_description: Mapped[str] = mapped_column(String(100), nullable=False)
    booking_priority: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True)

    airline: Mapped["AirlineCode"] = relationship(back_populates="booking_classes")

    __table_args__ = (
        UniqueConstraint("airline_id", "booking_class_code", name="uq_booking_class_airline_code"),
    )

    def to_dict(self) -> dict:
        return {
            "airline": self.airline.iata_code if self.airline else None,
            "booking_class_code": self.booking_class_code,
            "service_class": self.service_class,
            "class_description": self.class_description,
            "booking_priority": self.booking_priority,
            "active": self.active,
        }
