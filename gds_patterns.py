"""
gds_patterns.py
===============
Ordered line-shape tables for the two Sabre itinerary layouts.

Each table is tried top to bottom and the first match wins, so stricter
shapes sit above looser ones that could also swallow them.

Format I  (*I / *IA)
    1 DL2542Z 13SEP J MSYATL*SS1  1240P  313P /DCDL /E
    2 AF 683J 14SEP Q ATLCDG*SS1   540P  835A  15SEP F /DCAF /E
    3 KL1234Y 16SEP S CDGAMS GK1   900A 1015A /E OPERATED BY /KLM CITYHOPPER

Format VI  (*VI)
     1 BA  952 Y 15SEP MO LHR MUC HK1  710A  1010A  320 0 ECONOMY
     2 LH  410 J 16SEP TU MUCIAD HK1  1155A   255P#1 359 0 BUSINESS
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from gds_time import MONTH_ALT

KIND_SEGMENT = "segment"
KIND_SKIP = "skip"


@dataclass(frozen=True)
class LinePattern:
    name: str
    regex: "re.Pattern[str]"
    kind: str = KIND_SEGMENT
    defaults: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def match(self, line: str) -> Optional[Dict[str, Optional[str]]]:
        """Named groups of the first match, with per-pattern defaults filled in."""
        m = self.regex.search(line)
        if not m:
            return None
        g = m.groupdict()
        for key, value in self.defaults.items():
            if not g.get(key):
                g[key] = value
        return g


def _compile(*parts: str) -> "re.Pattern[str]":
    return re.compile("".join(parts), re.VERBOSE)


def _segment(name: str, *parts: str, **defaults) -> LinePattern:
    return LinePattern(name, _compile(*parts), KIND_SEGMENT, MappingProxyType(defaults))


# ══════════════════════════════════════════════════════════════════════════════
#  SHARED FRAGMENTS
# ══════════════════════════════════════════════════════════════════════════════

_CARRIER = r"(?P<carrier>[A-Z]{2}|[A-Z]\d|\d[A-Z])"
_DATE = rf"(?P<date>\d{{1,2}}(?:{MONTH_ALT}))"
_STATUS = r"(?P<status>[A-Z]{2}\d{1,2})"

_TIMES = r"""
    \s+(?P<dep_time>\d{1,4}[AP])
    \s+(?P<arr_time>\d{1,4}[AP])
    (?:\s?(?P<marker>[+#¥]\d))?
"""

_OPERATED_BY = r"""
    \s+OPERATED\s+BY\s*/?\s*(?P<operated_by>.+?)\s*$
"""

# parse() already drops OPERATED BY lines in LineExtractor; this rule covers
# direct SegmentParser.parse_line callers.
_SKIP_OPERATED_BY = LinePattern(
    "operated_by_continuation",
    re.compile(r"^\s*OPERATED\s+BY\b"),
    KIND_SKIP,
)


# ══════════════════════════════════════════════════════════════════════════════
#  FORMAT I
# ══════════════════════════════════════════════════════════════════════════════

# "1 DL2542Z"
_I_HEAD_TIGHT = rf"""
    ^\s*(?P<seg_num>\d{{1,2}})\s*
    {_CARRIER}(?P<digits>\d{{1,4}})(?P<booking_class>[A-Z])
"""

# "1 DL 2542Z"
_I_HEAD_SPACED = rf"""
    ^\s*(?P<seg_num>\d{{1,2}})\s*
    {_CARRIER}\s+(?P<digits>\d{{1,4}})(?P<booking_class>[A-Z])
"""

# "1 DL2542 Z" / "1 DL 2542" (class letter detached or missing)
_I_HEAD_NO_SUFFIX = rf"""
    ^\s*(?P<seg_num>\d{{1,2}})\s*
    {_CARRIER}\s*(?P<digits>\d{{1,4}})(?:\s+(?P<booking_class>[A-Z]))?
"""

# " 13SEP J MSYATL"
_I_BODY = rf"""
    \s+{_DATE}
    \s+(?P<dow>[A-Z])
    \s+(?P<airports>[A-Z]{{6}})
"""

_I_BODY_LOOSE = rf"""
    \s+{_DATE}
    (?:\s+(?P<dow>[A-Z]))?
    \s+(?P<airports>[A-Z]{{3}}\s?[A-Z]{{3}})
"""

_I_STATUS_STAR = rf"\*{_STATUS}"
_I_STATUS_BARE = rf"\s+{_STATUS}"
_I_STATUS_ANY = rf"(?:\*|\s+){_STATUS}"

# " 15SEP F"
_I_NEXT_DAY = rf"""
    \s+(?P<arr_date>\d{{1,2}}(?:{MONTH_ALT}))
    (?:\s+(?P<arr_dow>[A-Z])\b)?
"""
_I_NEXT_DAY_OPT = f"(?:{_I_NEXT_DAY})?"

_I_DC = r"\s+/DC[A-Z0-9]*\s*/E\b"
_I_E = r"\s*/E\b"

FORMAT_I_PATTERNS: Tuple[LinePattern, ...] = (
    _SKIP_OPERATED_BY,

    # ── with trailing OPERATED BY ─────────────────────────────────────────────
    _segment("i_tight_dc_operated",
             _I_HEAD_TIGHT, _I_BODY, _I_STATUS_STAR, _TIMES, _I_NEXT_DAY_OPT, _I_DC, _OPERATED_BY),
    _segment("i_spaced_dc_operated",
             _I_HEAD_SPACED, _I_BODY, _I_STATUS_STAR, _TIMES, _I_NEXT_DAY_OPT, _I_DC, _OPERATED_BY),
    _segment("i_tight_e_operated",
             _I_HEAD_TIGHT, _I_BODY, _I_STATUS_ANY, _TIMES, _I_NEXT_DAY_OPT, _I_E, _OPERATED_BY),
    _segment("i_spaced_e_operated",
             _I_HEAD_SPACED, _I_BODY, _I_STATUS_ANY, _TIMES, _I_NEXT_DAY_OPT, _I_E, _OPERATED_BY),

    # ── *SS1 ... /DCxx /E, with then without next-day arrival date ────────────
    _segment("i_tight_dc_next_day",
             _I_HEAD_TIGHT, _I_BODY, _I_STATUS_STAR, _TIMES, _I_NEXT_DAY, _I_DC),
    _segment("i_spaced_dc_next_day",
             _I_HEAD_SPACED, _I_BODY, _I_STATUS_STAR, _TIMES, _I_NEXT_DAY, _I_DC),
    _segment("i_tight_dc",
             _I_HEAD_TIGHT, _I_BODY, _I_STATUS_STAR, _TIMES, _I_DC),
    _segment("i_spaced_dc",
             _I_HEAD_SPACED, _I_BODY, _I_STATUS_STAR, _TIMES, _I_DC),

    # ── GK1 ... /E ────────────────────────────────────────────────────────────
    _segment("i_tight_e_next_day",
             _I_HEAD_TIGHT, _I_BODY, _I_STATUS_BARE, _TIMES, _I_NEXT_DAY, _I_E),
    _segment("i_spaced_e_next_day",
             _I_HEAD_SPACED, _I_BODY, _I_STATUS_BARE, _TIMES, _I_NEXT_DAY, _I_E),
    _segment("i_tight_e",
             _I_HEAD_TIGHT, _I_BODY, _I_STATUS_BARE, _TIMES, _I_E),
    _segment("i_spaced_e",
             _I_HEAD_SPACED, _I_BODY, _I_STATUS_BARE, _TIMES, _I_E),

    # ── looser shapes: no /E, detached or missing class letter ───────────────
    _segment("i_any_spacing",
             _I_HEAD_TIGHT, _I_BODY_LOOSE, _I_STATUS_ANY, _TIMES, _I_NEXT_DAY_OPT),
    _segment("i_any_spacing_spaced",
             _I_HEAD_SPACED, _I_BODY_LOOSE, _I_STATUS_ANY, _TIMES, _I_NEXT_DAY_OPT),
    _segment("i_no_class_suffix",
             _I_HEAD_NO_SUFFIX, _I_BODY_LOOSE, _I_STATUS_ANY, _TIMES, _I_NEXT_DAY_OPT,
             booking_class="Y"),
)


# ══════════════════════════════════════════════════════════════════════════════
#  FORMAT VI
# ══════════════════════════════════════════════════════════════════════════════

# " 1 BA  952 Y 15SEP MO LHR MUC HK1"
_VI_HEAD = rf"""
    ^\s*(?P<seg_num>\d{{1,2}})\s*
    {_CARRIER}\s*(?P<digits>\d{{1,4}})
    \s+(?P<booking_class>[A-Z])
    \s+{_DATE}
    (?:\s+(?P<dow>[A-Z]{{1,2}}))?
    \s+(?P<airports>[A-Z]{{3}}\s*[A-Z]{{3}})
    \s+{_STATUS}
"""

_VI_ARR_DATE = rf"""
    \s+(?P<arr_date>\d{{1,2}}(?:{MONTH_ALT}))
    (?:\s+(?P<arr_dow>[A-Z]{{1,2}})\b)?
"""

_VI_EQUIPMENT = r"\s+(?P<equipment>[A-Z0-9]{3})\b"
_VI_EQUIPMENT_OPT = f"(?:{_VI_EQUIPMENT})?"

FORMAT_VI_PATTERNS: Tuple[LinePattern, ...] = (
    _SKIP_OPERATED_BY,
    _segment("vi_operated",
             _VI_HEAD, _TIMES, f"(?:{_VI_ARR_DATE})?", _VI_EQUIPMENT_OPT, r".*?", _OPERATED_BY),
    _segment("vi_arrival_date",
             _VI_HEAD, _TIMES, _VI_ARR_DATE, _VI_EQUIPMENT_OPT),
    _segment("vi_equipment",
             _VI_HEAD, _TIMES, _VI_EQUIPMENT),
    _segment("vi_basic",
             _VI_HEAD, _TIMES),
)


def patterns_for(gds_format) -> Tuple[LinePattern, ...]:
    """GDSFormat (or its value) → ordered pattern table"""
    value = getattr(gds_format, "value", gds_format)
    return FORMAT_VI_PATTERNS if value == "VI" else FORMAT_I_PATTERNS
