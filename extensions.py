"""
SQLAlchemy 2.x extensions for the reference data store.
Provides engine / session management and the seeding routine that loads the
bundled mappings into the airline_codes, airport_codes and booking_classes
tables.
"""

import logging
import os

from sqlalchemy import create_engine
from sqlalchemy.orm import scoped_session, sessionmaker

from cabin_classes import CARRIER_CABIN_TABLES, GENERIC_CABIN_TABLE
from config import settings
from mappings import AIRLINES, AIRPORTS
from models_reference import AirlineCode, AirportCode, Base, BookingClass

logger = logging.getLogger(__name__)

DATABASE_URL = settings.database_url

# Create engine with SQLAlchemy 2.0 style
engine = create_engine(DATABASE_URL, echo=False)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Scoped session for thread safety
db_session = scoped_session(SessionLocal)


def init_db(bind=None, session_factory=None):
    """Create the reference tables and load the bundled reference data."""
    bind = bind or engine
    if bind.url.get_backend_name() == "sqlite" and bind.url.database:
        os.makedirs(os.path.dirname(os.path.abspath(bind.url.database)), exist_ok=True)
    Base.metadata.create_all(bind=bind)
    counts = seed_reference_data(session_factory or sessionmaker(bind=bind))
    logger.info("Reference database initialized: %s", counts)
    return counts


def seed_reference_data(session_factory=SessionLocal) -> dict:
    """
    Insert airlines, airports and carrier booking classes from mappings.py
    that are not in the database yet. Existing rows are left untouched.
    """
    counts = {"airlines": 0, "airports": 0, "booking_classes": 0}
    session = session_factory()
    try:
        airlines = {a.iata_code: a for a in session.query(AirlineCode).all()}
        for code, (name, alliance, country) in AIRLINES.items():
            if code in airlines:
                continue
            airline = AirlineCode(iata_code=code, name=name, alliance=alliance, country=country)
            session.add(airline)
            airlines[code] = airline
            counts["airlines"] += 1

        known_airports = {row[0] for row in session.query(AirportCode.iata_code).all()}
        for code, (name, city, country, lat, lon, tz) in AIRPORTS.items():
            if code in known_airports:
                continue
            session.add(AirportCode(iata_code=code, name=name, city=city, country=country,
                                    latitude=lat, longitude=lon, timezone=tz))
            counts["airports"] += 1

        session.flush()

        for carrier, table in CARRIER_CABIN_TABLES.items():
            airline = airlines.get(carrier)
            if airline is None:
                continue
            existing = {b.booking_class_code for b in airline.booking_classes}
            for priority, (letter, label) in enumerate(table.items(), 1):
                if letter in existing:
                    continue
                session.add(BookingClass(
                    airline_id=airline.id,
                    booking_class_code=letter,
                    service_class=GENERIC_CABIN_TABLE.get(letter),
                    class_description=label,
                    booking_priority=priority,
                    active=True,
                ))
                counts["booking_classes"] += 1

        session.commit()
        if any(counts.values()):
            logger.info("Seeded reference data from mappings: %s", counts)
    except Exception:
        session.rollback()
        logger.exception("Error seeding reference data")
        raise
    finally:
        session.close()
    return counts
