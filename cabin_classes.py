"""
cabin_classes.py
================
Booking class (RBD) letter → human-readable cabin.

Carriers do not share one letter convention, so resolution runs through
named stages, first hit wins:

    reference  label supplied by an external lookup for (carrier, letter)
    carrier    built-in per-carrier table
    generic    IATA-convention table keyed by letter alone
    default    "Economy"

A carrier that has its own table entry for a letter never reaches the generic
table for that letter, even when the two disagree.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from errors import ErrorHandler, ReferenceLookupError

STAGE_REFERENCE = "reference"
STAGE_CARRIER = "carrier"
STAGE_GENERIC = "generic"
STAGE_DEFAULT = "default"

DEFAULT_CABIN = "Economy"


def _table(groups: dict) -> Mapping[str, str]:
    """{"Delta One": "JCDIZ", ...} → read-only {"J": "Delta One", ...}"""
    out = {}
    for label, letters in groups.items():
        for letter in letters:
            out[letter] = label
    return MappingProxyType(out)


# ══════════════════════════════════════════════════════════════════════════════
#  PER-CARRIER TABLES
# ══════════════════════════════════════════════════════════════════════════════

CARRIER_CABIN_TABLES: Mapping[str, Mapping[str, str]] = MappingProxyType({
    "DL": _table({
        "Delta One":      "JCDIZ",
        "Premium Select": "PAG",
        "Comfort+":       "WS",
        "Economy":        "YBMHQKLUTXV",
        "Basic Economy":  "E",
    }),
    "UA": _table({
        "United Polaris Business": "JCDZP",
        "Premium Plus":            "OAR",
        "Economy":                 "YBMEUHQVWSTLKGN",
    }),
    "AA": _table({
        "Flagship First":    "FA",
        "Flagship Business": "JRDIC",
        "Premium Economy":   "WP",
        "Main Cabin":        "YBHKMLVGSNQO",
    }),
    "LH": _table({
        "Lufthansa First":    "FA",
        "Lufthansa Business": "JCDZP",
        "Premium Economy":    "GEN",
        "Economy":            "YBMUHQVWSTLK",
    }),
    "BA": _table({
        "First":                "FA",
        "Club World":           "JCDRI",
        "World Traveller Plus": "WET",
        "World Traveller":      "YBHKMLVNSOQG",
    }),
    "AF": _table({
        "La Premiere": "PF",
        "Business":    "JCDIZ",
        "Premium":     "WSA",
        "Economy":     "YBMUKHLQTENRVGX",
    }),
    "KL": _table({
        "World Business Class": "JCDIZ",
        "Premium Comfort":      "WSA",
        "Economy":              "YBMUKHLQTENRVGX",
    }),
    "EK": _table({
        "First Class":     "FAR",
        "Business Class":  "JCIO",
        "Premium Economy": "WE",
        "Economy Class":   "YBMUKHQTLVXG",
    }),
})


# ══════════════════════════════════════════════════════════════════════════════
#  GENERIC (IATA CONVENTION)
# ══════════════════════════════════════════════════════════════════════════════

GENERIC_CABIN_TABLE: Mapping[str, str] = _table({
    "First Class":     "FA",
    "Business Class":  "JCDI",
    "Premium Economy": "PW",
    "Economy Class":   "YBMHKLQTENRVGXSUOZ",
})


@dataclass(frozen=True)
class CabinResolution:
    label: str
    stage: str


# (carrier, letter) → label or None; may raise
CabinLookup = Callable[[str, str], Optional[str]]


class CabinClassResolver:
    """
    Holds references to the lookup tables; never mutates them.

    `lookup` is an optional synchronous reference lookup consulted when no
    reference label is passed in. Its failures count as a miss.
    """

    def __init__(self,
                 carrier_tables: Mapping[str, Mapping[str, str]] = CARRIER_CABIN_TABLES,
                 generic_table: Mapping[str, str] = GENERIC_CABIN_TABLE,
                 lookup: Optional[CabinLookup] = None):
        self.carrier_tables = carrier_tables
        self.generic_table = generic_table
        self.lookup = lookup

    def resolve(self, booking_class: str, carrier: str,
                reference_label: Optional[str] = None) -> CabinResolution:
        letter = (booking_class or "").strip().upper()[:1]
        carrier = (carrier or "").strip().upper()

        if reference_label is None and self.lookup is not None and letter:
            reference_label = self._lookup(carrier, letter)
        if reference_label:
            return CabinResolution(reference_label, STAGE_REFERENCE)

        carrier_table = self.carrier_tables.get(carrier)
        if carrier_table and letter in carrier_table:
            return CabinResolution(carrier_table[letter], STAGE_CARRIER)

        if letter in self.generic_table:
            return CabinResolution(self.generic_table[letter], STAGE_GENERIC)

        return CabinResolution(DEFAULT_CABIN, STAGE_DEFAULT)

    def label(self, booking_class: str, carrier: str) -> str:
        return self.resolve(booking_class, carrier).label

    def _lookup(self, carrier: str, letter: str) -> Optional[str]:
        try:
            return self.lookup(carrier, letter)
        except Exception as e:
            ErrorHandler.report(
                ReferenceLookupError(f"booking class lookup {carrier}/{letter}: {e}",
                                     context={"carrier": carrier, "booking_class": letter}),
                operation="cabin_class_lookup",
            )
            return None
