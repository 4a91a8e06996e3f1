"""
gds_parser.py
=============
Sabre itinerary text (Format I / Format VI) → ParsedItinerary.

Pipeline:
    validate_input → detect_format → LineExtractor → SegmentParser
    → assemble_itinerary

`parse()` never raises for bad input; it returns a ParseFailure instead.
One line failing to parse does not sink the others: it is recorded as a
PartialParseWarning and the remaining lines carry on.

Usage:
    result = parse(raw_text)
    if result.ok:
        legs = group_into_legs(result)
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple, Union

from cabin_classes import CabinClassResolver
from config import settings
from errors import ErrorHandler, ParsingError, PartialParseWarning, ValidationError
from gds_patterns import KIND_SKIP, patterns_for
from gds_time import DayOffsetCalculator, GDSDate, GDSTime, split_airport_block
from gds_validation import GDSFormat, detect_format, validate_input
from itinerary import FlightSegment, ParsedItinerary, ParseFailure, assemble_itinerary
from mappings import AIRCRAFT_TYPES

logger = logging.getLogger(__name__)

ParseResult = Union[ParsedItinerary, ParseFailure]

MIN_LINE_LENGTH = 10


# ══════════════════════════════════════════════════════════════════════════════
#  LINE EXTRACTOR
# ══════════════════════════════════════════════════════════════════════════════

# *IA« / *I / *VI / VI*
_RE_COMMAND_PREFIX = re.compile(r"^\s*(?:\*IA?|\*VI\*?|VI\*)[«»]?\s*")
_RE_ADMIN_LINE = re.compile(r"^(?:OPERATED\s+BY|CHECK[\s-]?IN|SEAT\s*MAP|MEAL)\b")
_RE_SEGMENT_SHAPE = re.compile(r"^\d{1,2}\s*(?:[A-Z]{2}|[A-Z]\d|\d[A-Z])\s*\d{1,4}")


@dataclass(frozen=True)
class CandidateLine:
    line_number: int
    text: str


@dataclass(frozen=True)
class ExtractedLines:
    candidates: Tuple[CandidateLine, ...]
    skipped: int


class LineExtractor:
    """Raw text → candidate segment lines, in source order."""

    @staticmethod
    def clean(line: str) -> str:
        return _RE_COMMAND_PREFIX.sub("", line).strip().upper()

    @staticmethod
    def extract(raw: str) -> ExtractedLines:
        candidates: List[CandidateLine] = []
        skipped = 0

        for number, line in enumerate(raw.splitlines(), 1):
            text = LineExtractor.clean(line)
            if len(text) < MIN_LINE_LENGTH:
                continue
            if _RE_ADMIN_LINE.match(text):
                skipped += 1
                logger.debug("Line %d skipped (administrative): %s", number, text)
                continue
            if not _RE_SEGMENT_SHAPE.match(text):
                logger.debug("Line %d dropped (not a segment line): %s", number, text)
                continue
            candidates.append(CandidateLine(number, text))

        return ExtractedLines(tuple(candidates), skipped)


# ══════════════════════════════════════════════════════════════════════════════
#  SEGMENT PARSER
# ══════════════════════════════════════════════════════════════════════════════

LINE_SEGMENT = "segment"
LINE_SKIPPED = "skipped"
LINE_FAILED = "failed"


@dataclass(frozen=True)
class LineResult:
    status: str
    segment: Optional[FlightSegment] = None
    reason: Optional[str] = None
    pattern: Optional[str] = None


class SegmentParser:
    """
    Applies one format's ordered pattern table to single lines.

    `ref_year` stands in for the year the GDS text leaves out.
    """

    def __init__(self, gds_format: GDSFormat, resolver: CabinClassResolver,
                 ref_year: int):
        self.gds_format = gds_format
        self.patterns = patterns_for(gds_format)
        self.resolver = resolver
        self.ref_year = ref_year

    def parse_line(self, line: str) -> LineResult:
        text = LineExtractor.clean(line)
        for pattern in self.patterns:
            g = pattern.match(text)
            if g is None:
                continue
            if pattern.kind == KIND_SKIP:
                logger.debug("Pattern %s skipped: %s", pattern.name, text)
                return LineResult(LINE_SKIPPED, pattern=pattern.name)
            try:
                segment = self._build_segment(g)
            except ValueError as e:
                return LineResult(LINE_FAILED, reason=str(e), pattern=pattern.name)
            logger.debug("Pattern %s: %s %s→%s", pattern.name, segment.flight_number,
                         segment.departure_airport, segment.arrival_airport)
            return LineResult(LINE_SEGMENT, segment=segment, pattern=pattern.name)

        return LineResult(LINE_FAILED, reason=f"No Format {self.gds_format.value} line pattern matched")

    def _build_segment(self, g: dict) -> FlightSegment:
        carrier = g["carrier"]
        booking_class = g.get("booking_class") or "Y"
        flight_date = GDSDate.parse(g["date"], self.ref_year)
        dep_airport, arr_airport = split_airport_block(g["airports"])
        dep_time = GDSTime.parse(g["dep_time"])
        arr_time = GDSTime.parse(g["arr_time"])

        offset = DayOffsetCalculator.calculate(
            dep_time, arr_time,
            flight_date=flight_date,
            arrival_date_token=g.get("arr_date"),
            marker=g.get("marker"),
        )
        cabin = self.resolver.resolve(booking_class, carrier)

        equipment = g.get("equipment")
        operated_by = (g.get("operated_by") or "").lstrip("/ ").strip() or None

        return FlightSegment(
            segment_number=int(g["seg_num"]),
            flight_number=f"{carrier}{g['digits']}",
            carrier=carrier,
            booking_class=booking_class,
            flight_date=flight_date,
            day_of_week=g.get("dow") or "",
            departure_airport=dep_airport,
            arrival_airport=arr_airport,
            status=g["status"],
            departure_time=dep_time,
            arrival_time=arr_time,
            arrival_day_offset=offset,
            cabin_class=cabin.label,
            cabin_stage=cabin.stage,
            equipment_code=equipment,
            aircraft_type=AIRCRAFT_TYPES.get(equipment, equipment) if equipment else None,
            operated_by=operated_by,
        )


# ══════════════════════════════════════════════════════════════════════════════
#  MAIN PARSER CLASS
# ══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class _FormatRun:
    gds_format: GDSFormat
    segments: Tuple[FlightSegment, ...]
    warnings: Tuple[PartialParseWarning, ...]
    skipped: int


class GDSParser:
    """
    Stateless apart from configuration; safe to share between threads.

    provider        optional synchronous reference provider; its booking-class
                    lookup becomes the resolver's first stage
    format_fallback retry with the other format when the detected one
                    yields no segment (defaults to settings.format_fallback)
    """

    def __init__(self, ref_year: Optional[int] = None,
                 resolver: Optional[CabinClassResolver] = None,
                 provider=None,
                 format_fallback: Optional[bool] = None):
        self.ref_year = ref_year
        if resolver is None:
            lookup = _cabin_lookup(provider) if provider is not None else None
            resolver = CabinClassResolver(lookup=lookup)
        self.resolver = resolver
        self.format_fallback = (settings.format_fallback
                                if format_fallback is None else format_fallback)

    def parse(self, raw_text: str) -> ParseResult:
        warnings: Tuple[PartialParseWarning, ...] = ()
        try:
            with ErrorHandler.stage("validate_input", ValidationError):
                validate_input(raw_text).raise_for_errors()

            with ErrorHandler.stage("detect_format"):
                detected = detect_format(raw_text)

            ref_year = self.ref_year or date.today().year
            run = self._run(raw_text, detected, ref_year)
            fallback_used = False

            if not run.segments and self.format_fallback:
                retry = self._run(raw_text, detected.other, ref_year)
                if retry.segments:
                    logger.info("Format %s found nothing; parsed as Format %s",
                                detected.value, retry.gds_format.value)
                    run, fallback_used = retry, True

            warnings = run.warnings
            if not run.segments:
                raise ParsingError(
                    "No flight segments could be extracted",
                    context={"format": detected.value, "unparsed_lines": len(run.warnings)},
                )

            with ErrorHandler.stage("assemble_itinerary"):
                return assemble_itinerary(
                    run.segments, run.gds_format.value,
                    warnings=run.warnings,
                    skipped_lines=run.skipped,
                    format_fallback_used=fallback_used,
                )
        except (ValidationError, ParsingError) as e:
            ErrorHandler.report(e, operation=e.context.get("operation", "parse"))
            return ParseFailure.from_error(e, warnings)

    def _run(self, raw_text: str, gds_format: GDSFormat, ref_year: int) -> _FormatRun:
        with ErrorHandler.stage("extract_lines", format=gds_format.value):
            extracted = LineExtractor.extract(raw_text)

        parser = SegmentParser(gds_format, self.resolver, ref_year)
        segments: List[FlightSegment] = []
        warnings: List[PartialParseWarning] = []
        skipped = extracted.skipped

        with ErrorHandler.stage("parse_segments", format=gds_format.value):
            for candidate in extracted.candidates:
                result = parser.parse_line(candidate.text)
                if result.status == LINE_SEGMENT:
                    segments.append(result.segment)
                elif result.status == LINE_SKIPPED:
                    skipped += 1
                else:
                    logger.warning("Line %d unparseable (%s): %s",
                                   candidate.line_number, result.reason, candidate.text)
                    warnings.append(PartialParseWarning(
                        candidate.line_number, candidate.text, result.reason))

        return _FormatRun(gds_format, tuple(segments), tuple(warnings), skipped)


def _cabin_lookup(provider):
    def lookup(carrier: str, booking_class: str) -> Optional[str]:
        record = provider.lookup_booking_class(carrier, booking_class)
        return record.cabin_label if record else None
    return lookup


def parse(raw_text: str, **kwargs) -> ParseResult:
    """Module-level entry point: GDSParser(**kwargs).parse(raw_text)"""
    return GDSParser(**kwargs).parse(raw_text)
