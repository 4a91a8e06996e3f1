from types import SimpleNamespace
from unittest import mock

import pytest
import requests
from sqlalchemy.exc import OperationalError

from errors import ReferenceLookupError
from extensions import seed_reference_data
from models_reference import AirlineCode, AirportCode, BookingClass
from reference_data import (
    DatabaseReferenceProvider,
    HttpReferenceProvider,
    StaticReferenceProvider,
    build_provider,
)


# ══════════════════════════════════════════════════════════════════════════════
#  STATIC
# ══════════════════════════════════════════════════════════════════════════════

class TestStaticProvider:
    def test_airport(self, static_provider):
        airport = static_provider.lookup_airport("jfk")
        assert airport.iata_code == "JFK"
        assert airport.city == "New York"
        assert airport.timezone == "America/New_York"
        assert airport.has_coordinates

    def test_airline(self, static_provider):
        airline = static_provider.lookup_airline("LH")
        assert airline.name == "Lufthansa"
        assert airline.alliance == "Star Alliance"

    def test_misses(self, static_provider):
        assert static_provider.lookup_airport("QQQ") is None
        assert static_provider.lookup_airline("Q9") is None
        assert static_provider.lookup_booking_class("DL", "Z") is None


# ══════════════════════════════════════════════════════════════════════════════
#  DATABASE
# ══════════════════════════════════════════════════════════════════════════════

class TestDatabaseProvider:
    def test_seeded_tables(self, session_factory):
        session = session_factory()
        try:
            assert session.query(AirlineCode).filter_by(iata_code="DL").one().alliance == "SkyTeam"
            assert session.query(AirportCode).count() > 50
            assert session.query(BookingClass).count() > 0

            delta_one = (session.query(BookingClass).join(AirlineCode)
                         .filter(AirlineCode.iata_code == "DL",
                                 BookingClass.booking_class_code == "Z")
                         .one())
            assert delta_one.to_dict()["airline"] == "DL"
            assert delta_one.to_dict()["class_description"] == "Delta One"
            assert delta_one.airline.to_dict()["name"] == "Delta Air Lines"
            assert session.query(AirportCode).filter_by(iata_code="MSY").one().to_dict()["city"] == "New Orleans"
        finally:
            session.close()

    def test_seeding_twice_adds_nothing(self, session_factory):
        counts = seed_reference_data(session_factory)
        assert counts == {"airlines": 0, "airports": 0, "booking_classes": 0}

    def test_lookups(self, db_provider):
        assert db_provider.lookup_airline("dl").name == "Delta Air Lines"
        airport = db_provider.lookup_airport("ATL")
        assert airport.city == "Atlanta"
        assert airport.timezone == "America/New_York"
        booking = db_provider.lookup_booking_class("DL", "Z")
        assert booking.cabin_label == "Delta One"
        assert booking.service_class == "Business Class"

    def test_misses(self, db_provider):
        assert db_provider.lookup_airline("Q9") is None
        assert db_provider.lookup_airport("QQQ") is None
        assert db_provider.lookup_booking_class("Q9", "Y") is None

    def test_inactive_booking_class_is_ignored(self, session_factory, db_provider):
        session = session_factory()
        try:
            row = (session.query(BookingClass).join(AirlineCode)
                   .filter(AirlineCode.iata_code == "DL", BookingClass.booking_class_code == "Z")
                   .one())
            row.active = False
            session.commit()
        finally:
            session.close()
        assert db_provider.lookup_booking_class("DL", "Z") is None

    def test_database_errors_become_lookup_errors(self):
        def broken_factory():
            raise OperationalError("SELECT 1", {}, Exception("database is locked"))

        provider = DatabaseReferenceProvider(broken_factory)
        with pytest.raises(ReferenceLookupError) as exc:
            provider.lookup_airport("ATL")
        assert exc.value.context["kind"] == "airport"


# ══════════════════════════════════════════════════════════════════════════════
#  HTTP
# ══════════════════════════════════════════════════════════════════════════════

def _response(payload, status=200):
    response = mock.Mock(spec=requests.Response)
    response.status_code = status
    response.json.return_value = payload
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} Error")
    return response


@pytest.fixture
def http_session():
    session = requests.Session()
    with mock.patch.object(session, "get") as get:
        yield session, get


class TestHttpProvider:
    def test_airport(self, http_session):
        session, get = http_session
        get.return_value = _response([{
            "iata_code": "ATL", "name": "Hartsfield-Jackson", "city": "Atlanta",
            "latitude": 33.64, "longitude": -84.43, "timezone": "America/New_York",
        }])
        provider = HttpReferenceProvider("https://ref.example.com/rest/v1/", "key123",
                                         timeout=2, session=session)

        airport = provider.lookup_airport("atl")

        assert airport.city == "Atlanta"
        assert airport.has_coordinates
        get.assert_called_once_with(
            "https://ref.example.com/rest/v1/airport_codes",
            params={"iata_code": "eq.ATL", "limit": 1},
            timeout=2,
        )
        assert session.headers["apikey"] == "key123"
        assert session.headers["Authorization"] == "Bearer key123"

    def test_booking_class(self, http_session):
        session, get = http_session
        get.return_value = _response([{
            "booking_class_code": "Z", "class_description": "Delta One",
            "service_class": "Business Class", "booking_priority": 4,
        }])
        provider = HttpReferenceProvider("https://ref.example.com", session=session)

        booking = provider.lookup_booking_class("dl", "z")

        assert booking.carrier == "DL"
        assert booking.cabin_label == "Delta One"
        params = get.call_args.kwargs["params"]
        assert params["airline_codes.iata_code"] == "eq.DL"
        assert params["booking_class_code"] == "eq.Z"

    def test_empty_result_is_none(self, http_session):
        session, get = http_session
        get.return_value = _response([])
        provider = HttpReferenceProvider("https://ref.example.com", session=session)
        assert provider.lookup_airline("DL") is None

    @pytest.mark.parametrize("failure", [
        requests.ConnectionError("refused"),
        requests.Timeout("slow"),
    ])
    def test_transport_errors(self, http_session, failure):
        session, get = http_session
        get.side_effect = failure
        provider = HttpReferenceProvider("https://ref.example.com", session=session)
        with pytest.raises(ReferenceLookupError):
            provider.lookup_airline("DL")

    def test_http_error_status(self, http_session):
        session, get = http_session
        get.return_value = _response({"message": "nope"}, status=500)
        provider = HttpReferenceProvider("https://ref.example.com", session=session)
        with pytest.raises(ReferenceLookupError):
            provider.lookup_airport("ATL")

    def test_unexpected_body(self, http_session):
        session, get = http_session
        get.return_value = _response({"iata_code": "DL"})
        provider = HttpReferenceProvider("https://ref.example.com", session=session)
        with pytest.raises(ReferenceLookupError):
            provider.lookup_airline("DL")

    def test_base_url_required(self):
        with pytest.raises(ValueError):
            HttpReferenceProvider("")


# ══════════════════════════════════════════════════════════════════════════════
#  FACTORY
# ══════════════════════════════════════════════════════════════════════════════

def _config(**overrides):
    values = dict(reference_provider="static", database_url="sqlite://",
                  reference_api_url="", reference_api_key="", reference_timeout=5)
    values.update(overrides)
    return SimpleNamespace(**values)


def test_build_static_provider():
    assert build_provider(_config()).name == "static"


def test_build_unknown_provider_falls_back_to_static():
    assert isinstance(build_provider(_config(reference_provider="ldap")), StaticReferenceProvider)


def test_build_http_provider():
    provider = build_provider(_config(reference_provider="HTTP",
                                      reference_api_url="https://ref.example.com"))
    assert isinstance(provider, HttpReferenceProvider)
    assert provider.base_url == "https://ref.example.com"


def test_build_database_provider():
    provider = build_provider(_config(reference_provider="database"))
    assert isinstance(provider, DatabaseReferenceProvider)
