import time

import pytest

from app import create_app
from config import settings
from errors import ReferenceLookupError
from reference_data import StaticReferenceProvider

from samples import NO_SEGMENTS, ROUND_TRIP_I, SINGLE_SEGMENT


class OfflineProvider(StaticReferenceProvider):
    name = "offline"

    def lookup_airport(self, iata_code):
        raise ReferenceLookupError("reference store offline")

    def lookup_airline(self, iata_code):
        raise ReferenceLookupError("reference store offline")


class SlowProvider(StaticReferenceProvider):
    name = "slow"

    def lookup_airport(self, iata_code):
        time.sleep(0.3)
        return super().lookup_airport(iata_code)


@pytest.fixture
def offline_client():
    app = create_app(provider=OfflineProvider(), configure_logging=False)
    app.config["TESTING"] = True
    return app.test_client()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok", "reference_provider": "static"}


# ==================== PARSE ====================

def test_parse_single_segment(client):
    response = client.post("/api/itinerary/parse", json={"text": SINGLE_SEGMENT})
    assert response.status_code == 200
    data = response.get_json()
    assert data["ok"] is True
    assert data["route"] == "MSY-ATL"
    seg = data["segments"][0]
    assert seg["flight_number"] == "DL2542"
    assert seg["cabin_class"] == "Delta One"
    assert seg["departure_time"] == "12:40 PM"
    assert seg["arrival_time"] == "3:13 PM"
    assert len(data["legs"]) == 1
    assert data["enriched"] is False


def test_parse_and_enrich(client):
    response = client.post("/api/itinerary/parse",
                           json={"text": SINGLE_SEGMENT, "enrich": True})
    assert response.status_code == 200
    seg = response.get_json()["segments"][0]
    assert seg["airline_name"] == "Delta Air Lines"
    assert seg["arrival_city"] == "Atlanta"
    assert seg["block_minutes"] is not None


def test_enrich_with_offline_reference_data_still_succeeds(offline_client):
    response = offline_client.post("/api/itinerary/parse",
                                   json={"text": SINGLE_SEGMENT, "enrich": True})
    assert response.status_code == 200
    seg = response.get_json()["segments"][0]
    assert seg["departure_city"] is None
    assert seg["airline_name"] is None
    assert seg["distance_km"] is None
    assert seg["duration"] == "2h 0m"


def test_enrich_timeout_returns_parsed_itinerary(monkeypatch):
    monkeypatch.setattr(settings, "enrichment_timeout", 0.05)
    client = create_app(provider=SlowProvider(), configure_logging=False).test_client()

    started = time.monotonic()
    response = client.post("/api/itinerary/parse",
                           json={"text": SINGLE_SEGMENT, "enrich": True})
    elapsed = time.monotonic() - started

    assert response.status_code == 200
    data = response.get_json()
    assert data["enriched"] is False
    assert data["segments"][0]["departure_city"] is None
    # worker-thread lookups still finish before the response
    assert elapsed >= 0.3


@pytest.mark.parametrize("body", [{}, {"text": ""}, {"text": "hello"}])
def test_validation_failure_is_400(client, body):
    response = client.post("/api/itinerary/parse", json=body)
    assert response.status_code == 400
    data = response.get_json()
    assert data["ok"] is False
    assert data["error_type"] == "VALIDATION_ERROR"
    assert data["reasons"]
    assert data["error"] == data["user_message"]


def test_parse_failure_is_422(client):
    response = client.post("/api/itinerary/parse", json={"text": NO_SEGMENTS})
    assert response.status_code == 422
    data = response.get_json()
    assert data["error_type"] == "PARSING_ERROR"
    assert data["message"] == "No flight segments could be extracted"


def test_non_json_body(client):
    response = client.post("/api/itinerary/parse", data="not json",
                           content_type="text/plain")
    assert response.status_code == 400


def test_legs(client):
    response = client.post("/api/itinerary/legs", json={"text": ROUND_TRIP_I})
    assert response.status_code == 200
    data = response.get_json()
    assert data["route"] == "MSY-CDG/CDG-MSY"
    assert data["total_legs"] == 2
    assert [len(leg["segments"]) for leg in data["legs"]] == [2, 2]


def test_legs_validation_failure(client):
    response = client.post("/api/itinerary/legs", json={"text": ""})
    assert response.status_code == 400


# ==================== REFERENCE ====================

def test_airport_lookup(client):
    response = client.get("/api/reference/airports/cdg")
    assert response.status_code == 200
    assert response.get_json()["city"] == "Paris"


def test_airline_lookup(client):
    response = client.get("/api/reference/airlines/BA")
    assert response.status_code == 200
    assert response.get_json()["alliance"] == "oneworld"


def test_reference_not_found(client):
    assert client.get("/api/reference/airports/QQQ").status_code == 404
    assert client.get("/api/reference/airlines/Q9").status_code == 404


def test_reference_unavailable(offline_client):
    response = offline_client.get("/api/reference/airports/ATL")
    assert response.status_code == 503
    assert response.get_json()["error"] == "Reference data is temporarily unavailable."
    assert offline_client.get("/api/reference/airlines/DL").status_code == 503
