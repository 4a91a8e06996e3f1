"""
itinerary.py
============
Parse result types plus the two stages that work on whole segment lists:

  assemble_itinerary()  segments → ParsedItinerary (route, round trip,
                        total duration, layovers, year rollover)
  group_into_legs()     ParsedItinerary → [JourneyLeg] (24-hour rule)

All values are frozen; stages hand back updated copies via
dataclasses.replace().
"""

import logging
import math
from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

from errors import GDSError, PartialParseWarning
from gds_time import DurationCalculator, GDSDate, GDSTime, MINUTES_PER_DAY

logger = logging.getLogger(__name__)

# A later segment dated this far before its predecessor is taken to be
# in the following year (13DEC ... 02JAN).
YEAR_ROLLOVER_DAYS = 31


# ══════════════════════════════════════════════════════════════════════════════
#  DATA MODEL
# ══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class FlightSegment:
    segment_number: int
    flight_number: str
    carrier: str
    booking_class: str
    flight_date: Optional[date]
    day_of_week: str
    departure_airport: str
    arrival_airport: str
    status: str
    departure_time: time
    arrival_time: time
    arrival_day_offset: int = 0
    cabin_class: str = "Economy"
    cabin_stage: str = "default"

    equipment_code: Optional[str] = None
    aircraft_type: Optional[str] = None
    operated_by: Optional[str] = None
    layover_minutes: Optional[int] = None
    distance_km: Optional[int] = None
    duration_minutes: Optional[int] = None

    # filled in by enrichment
    airline_name: Optional[str] = None
    airline_alliance: Optional[str] = None
    departure_airport_name: Optional[str] = None
    departure_city: Optional[str] = None
    arrival_airport_name: Optional[str] = None
    arrival_city: Optional[str] = None
    block_minutes: Optional[int] = None

    def __post_init__(self):
        if self.departure_airport == self.arrival_airport:
            raise ValueError(
                f"Departure and arrival airport are both {self.departure_airport}"
            )
        if self.arrival_day_offset < 0:
            raise ValueError(f"Negative arrival day offset: {self.arrival_day_offset}")

    @property
    def arrival_date(self) -> Optional[date]:
        return DurationCalculator.arrival_date(self.flight_date, self.arrival_day_offset)

    @property
    def departure_datetime(self) -> Optional[datetime]:
        if self.flight_date is None:
            return None
        return datetime.combine(self.flight_date, self.departure_time)

    @property
    def arrival_datetime(self) -> Optional[datetime]:
        if self.arrival_date is None:
            return None
        return datetime.combine(self.arrival_date, self.arrival_time)

    def to_dict(self) -> dict:
        return {
            "segment_number":         self.segment_number,
            "flight_number":          self.flight_number,
            "carrier":                self.carrier,
            "booking_class":          self.booking_class,
            "cabin_class":            self.cabin_class,
            "cabin_stage":            self.cabin_stage,
            "flight_date":            self.flight_date.isoformat() if self.flight_date else None,
            "flight_date_display":    GDSDate.format(self.flight_date),
            "day_of_week":            self.day_of_week,
            "departure_airport":      self.departure_airport,
            "arrival_airport":        self.arrival_airport,
            "status":                 self.status,
            "departure_time":         GDSTime.display(self.departure_time),
            "arrival_time":           GDSTime.display(self.arrival_time),
            "arrival_day_offset":     self.arrival_day_offset,
            "equipment_code":         self.equipment_code,
            "aircraft_type":          self.aircraft_type,
            "operated_by":            self.operated_by,
            "layover_minutes":        self.layover_minutes,
            "layover":                _fmt(self.layover_minutes),
            "distance_km":            self.distance_km,
            "duration_minutes":       self.duration_minutes,
            "duration":               _fmt(self.duration_minutes),
            "airline_name":           self.airline_name,
            "airline_alliance":       self.airline_alliance,
            "departure_airport_name": self.departure_airport_name,
            "departure_city":         self.departure_city,
            "arrival_airport_name":   self.arrival_airport_name,
            "arrival_city":           self.arrival_city,
            "block_minutes":          self.block_minutes,
        }


@dataclass(frozen=True)
class LayoverInfo:
    airport: str
    duration_minutes: int
    terminal: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "airport": self.airport,
            "duration_minutes": self.duration_minutes,
            "duration": DurationCalculator.format(self.duration_minutes),
            "terminal": self.terminal,
        }


@dataclass(frozen=True)
class JourneyLeg:
    start_airport: str
    end_airport: str
    segments: Tuple[FlightSegment, ...]

    def to_dict(self) -> dict:
        return {
            "start_airport": self.start_airport,
            "end_airport": self.end_airport,
            "segments": [s.to_dict() for s in self.segments],
        }


@dataclass(frozen=True)
class ParsedItinerary:
    segments: Tuple[FlightSegment, ...]
    route: str
    is_round_trip: bool
    gds_format: str
    total_duration_minutes: Optional[int] = None
    layovers: Tuple[LayoverInfo, ...] = ()
    warnings: Tuple[PartialParseWarning, ...] = ()
    skipped_lines: int = 0
    format_fallback_used: bool = False
    enriched: bool = False

    ok = True

    def __post_init__(self):
        if not self.segments:
            raise ValueError("A parsed itinerary needs at least one segment")

    @property
    def total_segments(self) -> int:
        return len(self.segments)

    def to_dict(self) -> dict:
        return {
            "ok": True,
            "format": self.gds_format,
            "route": self.route,
            "is_round_trip": self.is_round_trip,
            "total_segments": self.total_segments,
            "total_duration_minutes": self.total_duration_minutes,
            "total_duration": _fmt(self.total_duration_minutes),
            "segments": [s.to_dict() for s in self.segments],
            "layovers": [l.to_dict() for l in self.layovers],
            "warnings": [w.to_dict() for w in self.warnings],
            "skipped_lines": self.skipped_lines,
            "format_fallback_used": self.format_fallback_used,
            "enriched": self.enriched,
        }


@dataclass(frozen=True)
class ParseFailure:
    """Terminal outcome of parse(); never carries segments."""
    error_type: str
    message: str
    user_message: str
    reasons: Tuple[str, ...] = ()
    warnings: Tuple[PartialParseWarning, ...] = ()

    ok = False

    @classmethod
    def from_error(cls, error: GDSError,
                   warnings: Iterable[PartialParseWarning] = ()) -> "ParseFailure":
        reasons = tuple(getattr(error, "reasons", ()) or ())
        return cls(
            error_type=error.error_type.value,
            message=error.message,
            user_message=error.user_message,
            reasons=reasons,
            warnings=tuple(warnings),
        )

    def to_dict(self) -> dict:
        return {
            "ok": False,
            "error_type": self.error_type,
            "error": self.message,
            "user_message": self.user_message,
            "reasons": list(self.reasons),
            "warnings": [w.to_dict() for w in self.warnings],
        }


def _fmt(minutes: Optional[int]) -> Optional[str]:
    return DurationCalculator.format(minutes) if minutes is not None else None


# ══════════════════════════════════════════════════════════════════════════════
#  SEGMENT GROUPER  (24-hour rule)
# ══════════════════════════════════════════════════════════════════════════════

def layover_between(current: FlightSegment, nxt: FlightSegment) -> int:
    """
    Minutes on the ground between `current` landing and `nxt` leaving.
    Uses the full dates when both are known; otherwise (or when the dates
    contradict each other) the clock difference wrapped past midnight.
    """
    return DurationCalculator.between(
        current.arrival_date, current.arrival_time,
        nxt.flight_date, nxt.departure_time,
    )


def is_connection(current: FlightSegment, nxt: FlightSegment) -> bool:
    return (nxt.departure_airport == current.arrival_airport
            and layover_between(current, nxt) < MINUTES_PER_DAY)


def group_segments(segments: Sequence[FlightSegment]) -> List[JourneyLeg]:
    legs: List[JourneyLeg] = []
    run: List[FlightSegment] = []

    for seg in segments:
        if run and not is_connection(run[-1], seg):
            legs.append(_leg(run))
            run = []
        run.append(seg)
    if run:
        legs.append(_leg(run))
    return legs


def group_into_legs(itinerary: ParsedItinerary) -> List[JourneyLeg]:
    legs = group_segments(itinerary.segments)
    logger.debug("Grouped %d segment(s) into %d leg(s)", itinerary.total_segments, len(legs))
    return legs


def _leg(run: List[FlightSegment]) -> JourneyLeg:
    return JourneyLeg(run[0].departure_airport, run[-1].arrival_airport, tuple(run))


# ══════════════════════════════════════════════════════════════════════════════
#  ITINERARY ASSEMBLER
# ══════════════════════════════════════════════════════════════════════════════

def roll_dates_forward(segments: Sequence[FlightSegment]) -> List[FlightSegment]:
    """
    GDS dates carry no year. When a segment is dated well before the one
    printed above it, the itinerary crossed New Year.
    """
    out: List[FlightSegment] = []
    prev: Optional[date] = None
    for seg in segments:
        d = seg.flight_date
        if d is not None and prev is not None and d < prev - timedelta(days=YEAR_ROLLOVER_DAYS):
            try:
                d = d.replace(year=d.year + 1)
            except ValueError:
                # 29FEB has no counterpart next year
                logger.warning("Cannot roll %s into the next year", d)
            else:
                seg = replace(seg, flight_date=d)
        if d is not None:
            prev = d
        out.append(seg)
    return out


def detect_round_trip(segments: Sequence[FlightSegment]) -> bool:
    return (len(segments) > 1
            and segments[0].departure_airport == segments[-1].arrival_airport)


def build_route_label(segments: Sequence[FlightSegment], round_trip: bool,
                      legs: Optional[Sequence[JourneyLeg]] = None) -> str:
    """
    One way: "MSY-CDG". Round trip: "MSY-CDG/CDG-MSY", where the turnaround
    point is the end of the first journey leg when there is a stopover,
    else the arrival of the last outbound segment (first ceil(n/2)).
    """
    origin = segments[0].departure_airport
    if not round_trip:
        return f"{origin}-{segments[-1].arrival_airport}"

    legs = legs if legs is not None else group_segments(segments)
    if len(legs) > 1 and legs[0].end_airport != origin:
        turnaround = legs[0].end_airport
    else:
        outbound = segments[:math.ceil(len(segments) / 2)]
        turnaround = outbound[-1].arrival_airport
    return f"{origin}-{turnaround}/{turnaround}-{origin}"


def total_duration(segments: Sequence[FlightSegment]) -> int:
    first, last = segments[0], segments[-1]
    return DurationCalculator.between(
        first.flight_date, first.departure_time,
        last.arrival_date, last.arrival_time,
    )


def assemble_itinerary(segments: Sequence[FlightSegment], gds_format: str,
                       warnings: Iterable[PartialParseWarning] = (),
                       skipped_lines: int = 0,
                       format_fallback_used: bool = False) -> ParsedItinerary:
    """Order is kept exactly as printed."""
    segs = roll_dates_forward(segments)

    layovers: List[LayoverInfo] = []
    for i in range(len(segs) - 1):
        current, nxt = segs[i], segs[i + 1]
        if nxt.departure_airport != current.arrival_airport:
            continue
        minutes = layover_between(current, nxt)
        segs[i] = replace(current, layover_minutes=minutes)
        layovers.append(LayoverInfo(current.arrival_airport, minutes))

    round_trip = detect_round_trip(segs)
    route = build_route_label(segs, round_trip)

    itinerary = ParsedItinerary(
        segments=tuple(segs),
        route=route,
        is_round_trip=round_trip,
        gds_format=getattr(gds_format, "value", gds_format),
        total_duration_minutes=total_duration(segs),
        layovers=tuple(layovers),
        warnings=tuple(warnings),
        skipped_lines=skipped_lines,
        format_fallback_used=format_fallback_used,
    )
    logger.debug("Assembled %s: %d segment(s), round trip=%s",
                 route, itinerary.total_segments, round_trip)
    return itinerary
