from datetime import date, time

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import create_app
from extensions import init_db
from gds_parser import GDSParser
from itinerary import FlightSegment
from reference_data import DatabaseReferenceProvider, StaticReferenceProvider
from samples import REF_YEAR


@pytest.fixture
def parser():
    return GDSParser(ref_year=REF_YEAR, format_fallback=True)


@pytest.fixture
def static_provider():
    return StaticReferenceProvider()


@pytest.fixture
def session_factory():
    """Seeded in-memory reference database, one per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    factory = sessionmaker(bind=engine)
    init_db(bind=engine, session_factory=factory)
    yield factory
    engine.dispose()


@pytest.fixture
def db_provider(session_factory):
    return DatabaseReferenceProvider(session_factory)


@pytest.fixture
def app(static_provider):
    app = create_app(provider=static_provider, configure_logging=False)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_segment():
    """FlightSegment factory with MSY→ATL defaults."""
    def _make(number=1, dep="MSY", arr="ATL", day=13, dep_time=time(12, 40),
              arr_time=time(15, 13), offset=0, carrier="DL", booking_class="Y", **extra):
        return FlightSegment(
            segment_number=number,
            flight_number=f"{carrier}{100 + number}",
            carrier=carrier,
            booking_class=booking_class,
            flight_date=date(REF_YEAR, 9, day) if day else None,
            day_of_week="",
            departure_airport=dep,
            arrival_airport=arr,
            status="SS1",
            departure_time=dep_time,
            arrival_time=arr_time,
            arrival_day_offset=offset,
            **extra,
        )
    return _make
