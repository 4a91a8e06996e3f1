"""
reference_data.py
=================
Read-only reference lookups consumed by the cabin resolver and enrichment.

    lookup_airline(iata)                 → AirlineRecord | None
    lookup_airport(iata)                 → AirportRecord | None
    lookup_booking_class(carrier, rbd)   → BookingClassRecord | None

Providers:
    StaticReferenceProvider    bundled mappings.py tables
    DatabaseReferenceProvider  airline_codes / airport_codes / booking_classes
    HttpReferenceProvider      PostgREST-style REST endpoint over the same tables

Transport and query failures are raised as ReferenceLookupError; callers
treat them exactly like "not found".
"""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from typing import Optional

import requests
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from config import settings
from errors import ReferenceLookupError
from mappings import AIRLINES, AIRPORTS
from models_reference import AirlineCode, AirportCode, BookingClass

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════════
#  RECORDS
# ══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AirlineRecord:
    iata_code: str
    name: str
    alliance: Optional[str] = None
    country: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class AirportRecord:
    iata_code: str
    name: str
    city: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    timezone: Optional[str] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class BookingClassRecord:
    carrier: str
    booking_class: str
    cabin_label: str
    service_class: Optional[str] = None
    priority: Optional[int] = None

    def to_dict(self) -> dict:
        return asdict(self)


# ══════════════════════════════════════════════════════════════════════════════
#  PROVIDER INTERFACE
# ══════════════════════════════════════════════════════════════════════════════

class ReferenceDataProvider(ABC):
    """Synchronous keyed lookups. Enrichment runs them in worker threads."""

    name = "abstract"

    @abstractmethod
    def lookup_airline(self, iata_code: str) -> Optional[AirlineRecord]:
        ...

    @abstractmethod
    def lookup_airport(self, iata_code: str) -> Optional[AirportRecord]:
        ...

    @abstractmethod
    def lookup_booking_class(self, carrier: str,
                             booking_class: str) -> Optional[BookingClassRecord]:
        ...


class StaticReferenceProvider(ReferenceDataProvider):
    """
    Bundled tables only. Booking-class lookups answer nothing: the same
    tables already back the resolver's carrier stage.
    """

    name = "static"

    def lookup_airline(self, iata_code):
        code = (iata_code or "").upper()
        row = AIRLINES.get(code)
        if row is None:
            return None
        name, alliance, country = row
        return AirlineRecord(code, name, alliance, country)

    def lookup_airport(self, iata_code):
        code = (iata_code or "").upper()
        row = AIRPORTS.get(code)
        if row is None:
            return None
        name, city, country, lat, lon, tz = row
        return AirportRecord(code, name, city, country, lat, lon, tz)

    def lookup_booking_class(self, carrier, booking_class):
        return None


class DatabaseReferenceProvider(ReferenceDataProvider):
    """Reads the SQLAlchemy reference tables; one short session per lookup."""

    name = "database"

    def __init__(self, session_factory=None):
        if session_factory is None:
            from extensions import db_session
            session_factory = db_session
        self.session_factory = session_factory

    def lookup_airline(self, iata_code):
        with self._session("airline", iata_code) as session:
            row = session.query(AirlineCode).filter_by(iata_code=iata_code.upper()).first()
            if row is None:
                return None
            return AirlineRecord(row.iata_code, row.name, row.alliance, row.country)

    def lookup_airport(self, iata_code):
        with self._session("airport", iata_code) as session:
            row = session.query(AirportCode).filter_by(iata_code=iata_code.upper()).first()
            if row is None:
                return None
            return AirportRecord(row.iata_code, row.name, row.city, row.country,
                                 row.latitude, row.longitude, row.timezone)

    def lookup_booking_class(self, carrier, booking_class):
        with self._session("booking_class", f"{carrier}/{booking_class}") as session:
            row = (
                session.query(BookingClass)
                .join(AirlineCode, BookingClass.airline_id == AirlineCode.id)
                .filter(
                    AirlineCode.iata_code == carrier.upper(),
                    BookingClass.booking_class_code == booking_class.upper(),
                    BookingClass.active.is_(True),
                )
                .first()
            )
            if row is None:
                return None
            return BookingClassRecord(carrier.upper(), row.booking_class_code,
                                      row.class_description, row.service_class,
                                      row.booking_priority)

    def _session(self, kind: str, key: str):
        return _read_session(self.session_factory, kind, key)


@contextmanager
def _read_session(session_factory, kind: str, key: str):
    """One short-lived session; SQLAlchemy errors become ReferenceLookupError."""
    session = None
    try:
        session = session_factory()
        yield session
    except SQLAlchemyError as e:
        raise ReferenceLookupError(f"{kind} lookup {key}: {e}",
                                   context={"kind": kind, "key": key}) from e
    finally:
        if session is not None:
            session.close()


class HttpReferenceProvider(ReferenceDataProvider):
    """
    PostgREST-style endpoint exposing the reference tables:

        GET {base_url}/airline_codes?iata_code=eq.DL&limit=1
        GET {base_url}/airport_codes?iata_code=eq.ATL&limit=1
        GET {base_url}/booking_classes?select=*,airline_codes!inner(iata_code)
            &airline_codes.iata_code=eq.DL&booking_class_code=eq.Z&active=eq.true
    """

    name = "http"

    def __init__(self, base_url: str, api_key: str = "", timeout: float = 5.0,
                 session: Optional[requests.Session] = None):
        if not base_url:
            raise ValueError("HttpReferenceProvider needs a base_url")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if api_key:
            self.session.headers.update({
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
            })

    def lookup_airline(self, iata_code):
        row = self._first("airline_codes", {"iata_code": f"eq.{iata_code.upper()}"})
        if row is None:
            return None
        return AirlineRecord(row["iata_code"], row["name"], row.get("alliance"), row.get("country"))

    def lookup_airport(self, iata_code):
        row = self._first("airport_codes", {"iata_code": f"eq.{iata_code.upper()}"})
        if row is None:
            return None
        return AirportRecord(row["iata_code"], row["name"], row.get("city"), row.get("country"),
                             row.get("latitude"), row.get("longitude"), row.get("timezone"))

    def lookup_booking_class(self, carrier, booking_class):
        row = self._first("booking_classes", {
            "select": "*,airline_codes!inner(iata_code)",
            "airline_codes.iata_code": f"eq.{carrier.upper()}",
            "booking_class_code": f"eq.{booking_class.upper()}",
            "active": "eq.true",
        })
        if row is None:
            return None
        return BookingClassRecord(carrier.upper(), row["booking_class_code"],
                                  row["class_description"], row.get("service_class"),
                                  row.get("booking_priority"))

    def _first(self, table: str, params: dict) -> Optional[dict]:
        url = f"{self.base_url}/{table}"
        try:
            response = self.session.get(url, params={**params, "limit": 1}, timeout=self.timeout)
            response.raise_for_status()
            rows = response.json()
        except (requests.RequestException, ValueError) as e:
            raise ReferenceLookupError(
                f"GET {table} failed: {e}", context={"table": table, "params": params}
            ) from e
        if not isinstance(rows, list):
            raise ReferenceLookupError(f"GET {table}: expected a JSON array",
                                       context={"table": table})
        return rows[0] if rows else None


def build_provider(config=settings) -> ReferenceDataProvider:
    """Pick a provider from settings.reference_provider (static | database | http)."""
    kind = (config.reference_provider or "static").strip().lower()
    if kind == "database":
        import extensions
        if config.database_url == extensions.DATABASE_URL:
            provider = DatabaseReferenceProvider(extensions.db_session)
        else:
            engine = create_engine(config.database_url, echo=False)
            provider = DatabaseReferenceProvider(sessionmaker(bind=engine))
    elif kind == "http":
        provider = HttpReferenceProvider(config.reference_api_url, config.reference_api_key,
                                         config.reference_timeout)
    else:
        if kind != "static":
            logger.warning("Unknown REFERENCE_PROVIDER %r, using static data", kind)
        provider = StaticReferenceProvider()

    logger.info("Reference data provider: %s", provider.name)
    return provider
