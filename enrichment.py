"""
enrichment.py
=============
Optional second pass over a ParsedItinerary: airline / airport names,
great-circle distance, duration and aircraft estimates, timezone-aware block
time and the authoritative cabin label.

Every segment is enriched concurrently and on its own: a lookup that fails
or finds nothing only costs that segment that one annotation. Providers are
synchronous and run in worker threads; coroutine providers are awaited as is.

    enriched = await enrich(itinerary, provider)
    enriched = await enrich_with_timeout(itinerary, provider, timeout=5)
"""

import asyncio
import inspect
import logging
import math
from dataclasses import replace
from datetime import datetime
from typing import Any, Optional

import pytz

from cabin_classes import CabinClassResolver
from config import settings
from errors import ErrorHandler, ReferenceLookupError
from itinerary import FlightSegment, ParsedItinerary
from mappings import ROUTE_TABLE
from reference_data import AirportRecord, ReferenceDataProvider, build_provider

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371
CRUISE_SPEED_KMH = 850
GROUND_TIME_MINUTES = 30
DEFAULT_DURATION_MINUTES = 120

# upper bound (km, exclusive) → typical equipment
AIRCRAFT_BY_DISTANCE = (
    (800, "Boeing 737-800"),
    (2000, "Airbus A320"),
    (4000, "Boeing 767-300"),
    (7000, "Boeing 777-200ER"),
)
LONG_HAUL_AIRCRAFT = "Airbus A350-900"


# ══════════════════════════════════════════════════════════════════════════════
#  ESTIMATES
# ══════════════════════════════════════════════════════════════════════════════

class FlightEstimator:
    """Distance-based estimates used when the GDS line does not say."""

    @staticmethod
    def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> int:
        d_lat = math.radians(lat2 - lat1)
        d_lon = math.radians(lon2 - lon1)
        a = (math.sin(d_lat / 2) ** 2
             + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2))
             * math.sin(d_lon / 2) ** 2)
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
        return round(EARTH_RADIUS_KM * c)

    @staticmethod
    def duration_minutes(distance_km: float) -> int:
        return round(distance_km / CRUISE_SPEED_KMH * 60) + GROUND_TIME_MINUTES

    @staticmethod
    def aircraft(distance_km: float) -> str:
        for limit, aircraft in AIRCRAFT_BY_DISTANCE:
            if distance_km < limit:
                return aircraft
        return LONG_HAUL_AIRCRAFT

    @staticmethod
    def block_minutes(segment: FlightSegment, dep: Optional[AirportRecord],
                      arr: Optional[AirportRecord]) -> Optional[int]:
        """Scheduled gate-to-gate minutes with both local times pinned to their zones."""
        if segment.flight_date is None or not (dep and dep.timezone and arr and arr.timezone):
            return None
        try:
            dep_tz = pytz.timezone(dep.timezone)
            arr_tz = pytz.timezone(arr.timezone)
        except pytz.UnknownTimeZoneError as e:
            logger.warning("Unknown timezone for %s/%s: %s", dep.iata_code, arr.iata_code, e)
            return None
        departure = dep_tz.localize(datetime.combine(segment.flight_date, segment.departure_time))
        arrival = arr_tz.localize(datetime.combine(segment.arrival_date, segment.arrival_time))
        minutes = int((arrival - departure).total_seconds() // 60)
        # negative means the printed offset disagrees with the zones
        return minutes if minutes > 0 else None


# ══════════════════════════════════════════════════════════════════════════════
#  LOOKUPS
# ══════════════════════════════════════════════════════════════════════════════

async def _call(method, *args) -> Any:
    if inspect.iscoroutinefunction(method):
        return await method(*args)
    return await asyncio.to_thread(method, *args)


def _settled(result: Any, what: str, segment: FlightSegment) -> Any:
    """gather(return_exceptions=True) outcome → value or None, logging failures."""
    if not isinstance(result, BaseException):
        return result
    if isinstance(result, ReferenceLookupError):
        error = result
    else:
        error = ReferenceLookupError(f"{what} lookup failed: {result}")
    error.context.setdefault("segment", segment.segment_number)
    error.context.setdefault("lookup", what)
    ErrorHandler.report(error, operation="enrich")
    return None


# ══════════════════════════════════════════════════════════════════════════════
#  SEGMENT ENRICHMENT
# ══════════════════════════════════════════════════════════════════════════════

async def enrich_segment(segment: FlightSegment, provider: ReferenceDataProvider,
                         resolver: Optional[CabinClassResolver] = None) -> FlightSegment:
    resolver = resolver or CabinClassResolver()

    results = await asyncio.gather(
        _call(provider.lookup_airline, segment.carrier),
        _call(provider.lookup_airport, segment.departure_airport),
        _call(provider.lookup_airport, segment.arrival_airport),
        _call(provider.lookup_booking_class, segment.carrier, segment.booking_class),
        return_exceptions=True,
    )
    airline = _settled(results[0], "airline", segment)
    dep = _settled(results[1], "departure airport", segment)
    arr = _settled(results[2], "arrival airport", segment)
    booking = _settled(results[3], "booking class", segment)

    updates = {}
    if airline:
        updates["airline_name"] = airline.name
        updates["airline_alliance"] = airline.alliance
    if dep:
        updates["departure_airport_name"] = dep.name
        updates["departure_city"] = dep.city
    if arr:
        updates["arrival_airport_name"] = arr.name
        updates["arrival_city"] = arr.city

    distance = None
    if dep and arr and dep.has_coordinates and arr.has_coordinates:
        distance = FlightEstimator.haversine_km(dep.latitude, dep.longitude,
                                                arr.latitude, arr.longitude)
        duration = FlightEstimator.duration_minutes(distance)
    else:
        known = ROUTE_TABLE.get(segment.departure_airport + segment.arrival_airport)
        if known:
            distance, duration = known
        else:
            duration = DEFAULT_DURATION_MINUTES
        logger.debug("Segment %d %s-%s: no coordinates, duration from %s",
                     segment.segment_number, segment.departure_airport,
                     segment.arrival_airport, "route table" if known else "default")

    updates["distance_km"] = distance
    updates["duration_minutes"] = duration
    if not segment.equipment_code and distance is not None:
        updates["aircraft_type"] = FlightEstimator.aircraft(distance)

    updates["block_minutes"] = FlightEstimator.block_minutes(segment, dep, arr)

    if booking:
        cabin = resolver.resolve(segment.booking_class, segment.carrier,
                                 reference_label=booking.cabin_label)
        updates["cabin_class"] = cabin.label
        updates["cabin_stage"] = cabin.stage

    return replace(segment, **updates)


async def _isolated(segment: FlightSegment, provider, resolver) -> FlightSegment:
    try:
        return await enrich_segment(segment, provider, resolver)
    except Exception:
        logger.exception("Enrichment failed for segment %d; keeping parsed values",
                         segment.segment_number)
        return segment


async def enrich(itinerary: ParsedItinerary,
                 provider: Optional[ReferenceDataProvider] = None,
                 resolver: Optional[CabinClassResolver] = None) -> ParsedItinerary:
    """New itinerary with every segment annotated as far as the provider allows."""
    provider = provider or build_provider(settings)
    resolver = resolver or CabinClassResolver()

    segments = await asyncio.gather(
        *(_isolated(seg, provider, resolver) for seg in itinerary.segments)
    )
    logger.info("Enriched %d segment(s) for %s via %s provider",
                len(segments), itinerary.route, getattr(provider, "name", "custom"))
    return replace(itinerary, segments=tuple(segments), enriched=True)


async def enrich_with_timeout(itinerary: ParsedItinerary,
                              provider: Optional[ReferenceDataProvider] = None,
                              timeout: Optional[float] = None) -> ParsedItinerary:
    """
    enrich() bounded by `timeout` seconds; the parsed itinerary comes back on timeout.

    Lookups already handed to worker threads are not cancelled. A caller that
    closes its event loop (asyncio.run) still waits for them.
    """
    timeout = settings.enrichment_timeout if timeout is None else timeout
    try:
        return await asyncio.wait_for(enrich(itinerary, provider), timeout)
    except asyncio.TimeoutError:
        logger.warning("Enrichment timed out after %.1fs; returning unenriched itinerary", timeout)
        return itinerary
