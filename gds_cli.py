#!/usr/bin/env python3
"""
GDS Itinerary Parse Tool
Parse Sabre itinerary text from a file or stdin and print a summary or JSON.

    python gds_cli.py itinerary.txt
    pbpaste | python gds_cli.py --enrich --json
"""

import argparse
import asyncio
import json
import sys

from config import settings, setup_logging
from enrichment import enrich_with_timeout
from gds_parser import parse
from gds_time import DurationCalculator, GDSDate, GDSTime
from itinerary import group_into_legs
from reference_data import build_provider


def print_separator(char="=", length=70):
    """Print a separator line"""
    print(char * length)


def print_header(text):
    """Print a formatted header"""
    print_separator()
    print(f"  {text}")
    print_separator()


def display_failure(failure):
    print(f"\n❌ {failure.error_type}: {failure.message}")
    for reason in failure.reasons:
        print(f"   • {reason}")
    for warning in failure.warnings:
        print(f"   ⚠️  line {warning.line_number}: {warning.reason}")


def display_itinerary(itinerary):
    """Human-readable itinerary summary"""
    kind = "Round trip" if itinerary.is_round_trip else "One way"
    print_header(f"✈️  {itinerary.route}  ({kind}, Format {itinerary.gds_format})")

    for leg_no, leg in enumerate(group_into_legs(itinerary), 1):
        print(f"\nLeg {leg_no}: {leg.start_airport} → {leg.end_airport}")
        print_separator("-")
        for s in leg.segments:
            offset = f" +{s.arrival_day_offset}" if s.arrival_day_offset else ""
            print(f"  {s.segment_number:>2}. {s.flight_number:<8} {GDSDate.format(s.flight_date)}  "
                  f"{s.departure_airport} {GDSTime.display(s.departure_time):>8} → "
                  f"{s.arrival_airport} {GDSTime.display(s.arrival_time):>8}{offset}  "
                  f"{s.booking_class} {s.cabin_class}  {s.status}")
            if s.departure_city or s.arrival_city:
                print(f"      {s.departure_city or s.departure_airport} → "
                      f"{s.arrival_city or s.arrival_airport}")
            if s.airline_name:
                alliance = f" ({s.airline_alliance})" if s.airline_alliance else ""
                print(f"      {s.airline_name}{alliance}")
            if s.operated_by:
                print(f"      Operated by {s.operated_by}")
            details = []
            if s.aircraft_type:
                details.append(s.aircraft_type)
            if s.distance_km is not None:
                details.append(f"{s.distance_km} km")
            if s.block_minutes is not None:
                details.append(f"block {DurationCalculator.format(s.block_minutes)}")
            elif s.duration_minutes is not None:
                details.append(f"est. {DurationCalculator.format(s.duration_minutes)}")
            if details:
                print(f"      {' · '.join(details)}")
            if s.layover_minutes is not None:
                print(f"      🕒 Layover at {s.arrival_airport}: "
                      f"{DurationCalculator.format(s.layover_minutes)}")

    print()
    print_separator("-")
    print(f"📊 Segments: {itinerary.total_segments}   "
          f"Total: {DurationCalculator.format(itinerary.total_duration_minutes)}")
    if itinerary.format_fallback_used:
        print("ℹ️  Parsed with the other GDS format after the detected one found nothing")
    if itinerary.skipped_lines:
        print(f"ℹ️  {itinerary.skipped_lines} administrative line(s) skipped")
    for warning in itinerary.warnings:
        print(f"⚠️  Line {warning.line_number} not parsed ({warning.reason}): {warning.line}")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Parse Sabre Format I / Format VI itinerary text.",
    )
    parser.add_argument(
        "file",
        nargs="?",
        help="File with itinerary text (default: read stdin)",
    )
    parser.add_argument(
        "--enrich",
        action="store_true",
        help="Add airline/airport names, distances and aircraft estimates",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print JSON instead of a summary",
    )
    args = parser.parse_args(argv)

    setup_logging(settings.log_level, stream=sys.stderr)

    if args.file:
        with open(args.file, encoding="utf-8") as fh:
            raw_text = fh.read()
    else:
        raw_text = sys.stdin.read()

    result = parse(raw_text)

    if result.ok and args.enrich:
        result = asyncio.run(enrich_with_timeout(result, build_provider(settings)))

    if args.json:
        body = result.to_dict()
        if result.ok:
            body["legs"] = [leg.to_dict() for leg in group_into_legs(result)]
        print(json.dumps(body, indent=2, ensure_ascii=False))
    elif result.ok:
        display_itinerary(result)
    else:
        display_failure(result)

    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
