"""
gds_time.py
===========
Compact GDS date / time tokens → canonical values.

    "13SEP"  → date(<ref year>, 9, 13)      (the source format carries no year)
    "1240P"  → time(12, 40)   displayed "12:40 PM"
    "745A"   → time(7, 45)
    "12A"    → time(0, 0)

Also the arrival-day-offset rules and the minute arithmetic shared by the
assembler and the grouper.
"""

import re
from datetime import date, datetime, time, timedelta
from typing import Dict, Optional, Tuple

MINUTES_PER_DAY = 24 * 60

GDS_MONTH_MAP: Dict[str, int] = {
    "JAN": 1, "FEB": 2, "MAR": 3, "APR": 4,
    "MAY": 5, "JUN": 6, "JUL": 7, "AUG": 8,
    "SEP": 9, "OCT": 10, "NOV": 11, "DEC": 12,
}

MONTH_ALT = "|".join(GDS_MONTH_MAP)

_RE_DATE = re.compile(rf"^(\d{{1,2}})({MONTH_ALT})$")
_RE_TIME = re.compile(r"^(\d{1,4})([AP])M?$")
_RE_MARKER = re.compile(r"(\d)")


# ══════════════════════════════════════════════════════════════════════════════
#  DATE
# ══════════════════════════════════════════════════════════════════════════════

class GDSDate:
    """DDMON tokens. Year comes from the caller (current year by default)."""

    @staticmethod
    def parse(token: str, ref_year: Optional[int] = None) -> date:
        """
        Raises ValueError for tokens that are not a real calendar date
        (e.g. "31FEB", or "29FEB" outside a leap year).
        """
        m = _RE_DATE.match(token.strip().upper())
        if not m:
            raise ValueError(f"Not a GDS date token: '{token}'")
        year = ref_year or date.today().year
        try:
            return date(year, GDS_MONTH_MAP[m.group(2)], int(m.group(1)))
        except ValueError as e:
            raise ValueError(f"Invalid GDS date '{token}' in {year}: {e}") from e

    @staticmethod
    def format(d: Optional[date]) -> str:
        if d is None:
            return "N/A"
        return d.strftime("%d %b %y")

    @staticmethod
    def days_between(flight_date: date, token: str) -> int:
        """
        Whole days from `flight_date` to the year-less `token`. A token that
        falls before the flight date is taken to be in the following year
        (31DEC → 01JAN).
        """
        arrival = GDSDate.parse(token, flight_date.year)
        if arrival < flight_date:
            arrival = GDSDate.parse(token, flight_date.year + 1)
        return (arrival - flight_date).days


# ══════════════════════════════════════════════════════════════════════════════
#  TIME
# ══════════════════════════════════════════════════════════════════════════════

class GDSTime:
    """12-hour compact time tokens: 3–4 digits (1–2 digits = whole hour) + A/P."""

    @staticmethod
    def parse(token: str) -> time:
        m = _RE_TIME.match(token.strip().upper())
        if not m:
            raise ValueError(f"Not a GDS time token: '{token}'")
        digits, period = m.group(1), m.group(2)

        if len(digits) <= 2:
            hour, minute = int(digits), 0
        else:
            hour, minute = int(digits[:-2]), int(digits[-2:])

        if not (1 <= hour <= 12) or minute > 59:
            raise ValueError(f"Time out of range: '{token}'")

        if period == "A" and hour == 12:
            hour = 0
        elif period == "P" and hour != 12:
            hour += 12
        return time(hour, minute)

    @staticmethod
    def display(t: Optional[time]) -> str:
        """time(15, 13) → '3:13 PM'"""
        if t is None:
            return "N/A"
        hour = t.hour % 12 or 12
        period = "AM" if t.hour < 12 else "PM"
        return f"{hour}:{t.minute:02d} {period}"

    @staticmethod
    def to_minutes(t: time) -> int:
        return t.hour * 60 + t.minute


# ══════════════════════════════════════════════════════════════════════════════
#  DAY OFFSET
# ══════════════════════════════════════════════════════════════════════════════

class DayOffsetCalculator:
    """
    Arrival day offset resolution order:
      1. explicit +N / #N marker on the line
      2. explicit arrival date token (day difference, at least 1)
      3. clock rollover: arrival hour earlier than departure hour → 1
    Rule 3 is a heuristic and cannot see same-clock-hour ultra long hauls.
    """

    @staticmethod
    def from_marker(marker: Optional[str]) -> int:
        """'+1' / '#2' / '¥1' / '' → N"""
        if not marker:
            return 0
        m = _RE_MARKER.search(marker)
        return int(m.group(1)) if m else 0

    @staticmethod
    def calculate(dep: time, arr: time, flight_date: Optional[date] = None,
                  arrival_date_token: Optional[str] = None,
                  marker: Optional[str] = None) -> int:
        explicit = DayOffsetCalculator.from_marker(marker)
        if explicit > 0:
            return explicit

        if arrival_date_token:
            if flight_date is None:
                return 1
            return max(1, GDSDate.days_between(flight_date, arrival_date_token))

        return 1 if arr.hour < dep.hour else 0


# ══════════════════════════════════════════════════════════════════════════════
#  MINUTE ARITHMETIC
# ══════════════════════════════════════════════════════════════════════════════

class DurationCalculator:
    """Plain clock arithmetic; no timezone correction (see enrichment for that)."""

    @staticmethod
    def wrapped_minutes(start: time, end: time) -> int:
        """Minutes from start to end, wrapping positively across midnight."""
        return (GDSTime.to_minutes(end) - GDSTime.to_minutes(start)) % MINUTES_PER_DAY

    @staticmethod
    def between(start_date: Optional[date], start: time,
                end_date: Optional[date], end: time) -> int:
        """
        Minutes between two dated clock readings. Falls back to the wrapped
        clock difference when either date is missing or the result would be
        negative (inconsistent dates).
        """
        if start_date is None or end_date is None:
            return DurationCalculator.wrapped_minutes(start, end)
        delta = datetime.combine(end_date, end) - datetime.combine(start_date, start)
        minutes = int(delta.total_seconds() // 60)
        if minutes < 0:
            return DurationCalculator.wrapped_minutes(start, end)
        return minutes

    @staticmethod
    def format(minutes: Optional[int]) -> str:
        """135 → '2h 15m'"""
        if minutes is None:
            return "N/A"
        return f"{minutes // 60}h {minutes % 60}m"

    @staticmethod
    def arrival_date(flight_date: Optional[date], offset: int) -> Optional[date]:
        if flight_date is None:
            return None
        return flight_date + timedelta(days=offset)


def split_airport_block(block: str) -> Tuple[str, str]:
    """'MSYATL' / 'MSY ATL' / 'MSYATL*SS1' → ('MSY', 'ATL')"""
    cleaned = re.sub(r"\s+", "", block.split("*")[0]).upper()
    return cleaned[:3], cleaned[3:6]
