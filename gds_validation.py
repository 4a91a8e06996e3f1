"""
gds_validation.py
=================
Gatekeeping before any parsing work: input validation and format detection.

validate_input()  reject empty / too-short / non-itinerary text
detect_format()   Format I (default) vs Format VI (VI prefix or VI vocabulary)
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from errors import ValidationError

logger = logging.getLogger(__name__)

MIN_INPUT_LENGTH = 10


class GDSFormat(str, Enum):
    I = "I"
    VI = "VI"

    @property
    def other(self) -> "GDSFormat":
        return GDSFormat.VI if self is GDSFormat.I else GDSFormat.I


# ══════════════════════════════════════════════════════════════════════════════
#  INPUT VALIDATION
# ══════════════════════════════════════════════════════════════════════════════

_RE_FLIGHT_TOKEN  = re.compile(r"\d+\s*(?:[A-Z]{2}|[A-Z]\d|\d[A-Z])\s*\d+")
_RE_TIME_TOKEN    = re.compile(r"\d+[AP]")
_RE_AIRPORT_TOKEN = re.compile(r"[A-Z]{3}")
_RE_ERROR_MARKER  = re.compile(r"ERROR|INVALID")


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)

    def raise_for_errors(self) -> None:
        if not self.is_valid:
            raise ValidationError("Itinerary text failed validation", reasons=self.errors)

    def to_dict(self) -> dict:
        return {"is_valid": self.is_valid, "errors": list(self.errors)}


def validate_input(raw) -> ValidationResult:
    """
    Structural sanity checks only. A passing result does not promise that
    any segment will parse.
    """
    if not isinstance(raw, str) or not raw.strip():
        return ValidationResult(False, ["Input must be a non-empty string"])

    text = raw.strip().upper()
    errors: List[str] = []

    if len(text) < MIN_INPUT_LENGTH:
        errors.append("Input appears too short to be valid itinerary data")
    if not _RE_FLIGHT_TOKEN.search(text):
        errors.append('No valid flight pattern found (e.g., "1 AA 123")')
    if not _RE_TIME_TOKEN.search(text):
        errors.append('No valid time pattern found (e.g., "930A", "530P")')
    if not _RE_AIRPORT_TOKEN.search(text):
        errors.append("No valid airport codes found (3-letter codes)")
    if _RE_ERROR_MARKER.search(text):
        errors.append("Input contains error indicators")

    if errors:
        logger.warning("Itinerary input validation failed: %s | %r", errors, text[:100])
    return ValidationResult(not errors, errors)


# ══════════════════════════════════════════════════════════════════════════════
#  FORMAT DETECTION
# ══════════════════════════════════════════════════════════════════════════════

_RE_VI_PREFIX = re.compile(r"^\s*(?:\*VI|VI\*)", re.MULTILINE)
_RE_VI_VOCAB = re.compile(
    r"\b(?:TERMINAL|PREMIUM\s+ECONOMY|ECONOMY|BUSINESS|FIRST"
    r"|STAR\s+ALLIANCE|ONEWORLD|SKYTEAM)\b"
)


def detect_format(raw: str) -> GDSFormat:
    """Pure hint; the parser may still fall back to the other format."""
    text = (raw or "").upper()
    if _RE_VI_PREFIX.search(text) or _RE_VI_VOCAB.search(text):
        return GDSFormat.VI
    return GDSFormat.I
