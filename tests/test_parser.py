from datetime import date, time

import pytest

from cabin_classes import STAGE_CARRIER, STAGE_REFERENCE, CabinClassResolver
from gds_parser import (
    LINE_FAILED,
    LINE_SEGMENT,
    LINE_SKIPPED,
    GDSParser,
    LineExtractor,
    SegmentParser,
    parse,
)
from gds_patterns import FORMAT_I_PATTERNS, FORMAT_VI_PATTERNS, patterns_for
from gds_validation import GDSFormat
from reference_data import BookingClassRecord, StaticReferenceProvider

from samples import FORMAT_VI, NO_SEGMENTS, REF_YEAR, ROUND_TRIP_I, SINGLE_SEGMENT, UNMARKED_VI


def _format_i_parser():
    return SegmentParser(GDSFormat.I, CabinClassResolver(), REF_YEAR)


def _format_vi_parser():
    return SegmentParser(GDSFormat.VI, CabinClassResolver(), REF_YEAR)


# ══════════════════════════════════════════════════════════════════════════════
#  LINE EXTRACTOR
# ══════════════════════════════════════════════════════════════════════════════

class TestLineExtractor:
    def test_strips_command_prefix(self):
        assert LineExtractor.clean("*IA«1 DL2542Z 13SEP") == "1 DL2542Z 13SEP"
        assert LineExtractor.clean("*VI» 1 ba  952 y") == "1 BA  952 Y"

    def test_round_trip_candidates(self):
        extracted = LineExtractor.extract(ROUND_TRIP_I)
        assert [c.line_number for c in extracted.candidates] == [2, 3, 5, 6]
        assert extracted.skipped == 1

    def test_operated_by_line_is_skipped(self):
        extracted = LineExtractor.extract("OPERATED BY /DELTA CONNECTION")
        assert extracted.candidates == ()
        assert extracted.skipped == 1

    def test_free_text_is_dropped(self):
        extracted = LineExtractor.extract(FORMAT_VI)
        assert [c.line_number for c in extracted.candidates] == [2, 5]
        assert extracted.skipped == 0


# ══════════════════════════════════════════════════════════════════════════════
#  FORMAT I LINES
# ══════════════════════════════════════════════════════════════════════════════

class TestFormatILines:
    def test_tight_line_with_dc_suffix(self):
        result = _format_i_parser().parse_line(SINGLE_SEGMENT)
        assert result.status == LINE_SEGMENT
        assert result.pattern == "i_tight_dc"

        seg = result.segment
        assert seg.segment_number == 1
        assert seg.carrier == "DL"
        assert seg.flight_number == "DL2542"
        assert seg.booking_class == "Z"
        assert seg.flight_date == date(REF_YEAR, 9, 13)
        assert seg.day_of_week == "J"
        assert seg.departure_airport == "MSY"
        assert seg.arrival_airport == "ATL"
        assert seg.status == "SS1"
        assert seg.departure_time == time(12, 40)
        assert seg.arrival_time == time(15, 13)
        assert seg.arrival_day_offset == 0
        assert seg.cabin_class == "Delta One"
        assert seg.cabin_stage == STAGE_CARRIER

        data = seg.to_dict()
        assert data["departure_time"] == "12:40 PM"
        assert data["arrival_time"] == "3:13 PM"

    def test_spaced_line_with_next_day_date(self):
        line = "2 DL  84J 13SEP J ATLCDG*SS1   455P  735A  14SEP S /DCDL /E"
        result = _format_i_parser().parse_line(line)
        assert result.pattern == "i_spaced_dc_next_day"
        assert result.segment.flight_number == "DL84"
        assert result.segment.arrival_day_offset == 1
        assert result.segment.arrival_date == date(REF_YEAR, 9, 14)

    def test_operated_by_suffix(self):
        line = "3 KL1234Y 16SEP S CDGAMS GK1   900A 1015A /E OPERATED BY /KLM CITYHOPPER"
        result = _format_i_parser().parse_line(line)
        assert result.pattern == "i_tight_e_operated"
        assert result.segment.operated_by == "KLM CITYHOPPER"
        assert result.segment.status == "GK1"
        assert result.segment.cabin_class == "Economy"

    def test_missing_class_letter_defaults_to_y(self):
        line = "1 AA 100 13SEP MSYDFW HK1 600A 815A"
        result = _format_i_parser().parse_line(line)
        assert result.pattern == "i_no_class_suffix"
        assert result.segment.booking_class == "Y"
        assert result.segment.cabin_class == "Main Cabin"

    def test_operated_by_continuation_is_skipped(self):
        result = _format_i_parser().parse_line("OPERATED BY /KLM CITYHOPPER")
        assert result.status == LINE_SKIPPED
        assert result.pattern == "operated_by_continuation"

    def test_impossible_date_fails_the_line(self):
        result = _format_i_parser().parse_line(
            "3 DL2542Z 31FEB J MSYATL*SS1  1240P  313P /DCDL /E")
        assert result.status == LINE_FAILED
        assert "31FEB" in result.reason

    def test_same_departure_and_arrival_fails_the_line(self):
        result = _format_i_parser().parse_line(
            "1 DL2542Z 13SEP J MSYMSY*SS1  1240P  313P /DCDL /E")
        assert result.status == LINE_FAILED

    def test_unmatched_line(self):
        result = _format_i_parser().parse_line("2 DL  84J 13SEP J ATLCDG*SS1 455X")
        assert result.status == LINE_FAILED
        assert result.reason == "No Format I line pattern matched"

    def test_carrier_code_with_a_digit(self):
        result = _format_i_parser().parse_line("1 B6 623Y 15SEP J JFKBOS*SS1   700A  830A /DCB6 /E")
        assert result.pattern == "i_spaced_dc"
        assert result.segment.carrier == "B6"
        assert result.segment.flight_number == "B6623"


# ══════════════════════════════════════════════════════════════════════════════
#  FORMAT VI LINES
# ══════════════════════════════════════════════════════════════════════════════

class TestFormatVILines:
    def test_equipment_column(self):
        line = " 1 BA  952 Y 15SEP MO LHR MUC HK1  710A  1010A  320 0 ECONOMY"
        result = _format_vi_parser().parse_line(line)
        assert result.pattern == "vi_equipment"
        seg = result.segment
        assert seg.flight_number == "BA952"
        assert seg.day_of_week == "MO"
        assert (seg.departure_airport, seg.arrival_airport) == ("LHR", "MUC")
        assert seg.status == "HK1"
        assert seg.equipment_code == "320"
        assert seg.aircraft_type == "Airbus A320"
        assert seg.cabin_class == "World Traveller"

    def test_day_marker(self):
        line = " 3 UA  932 J 16SEP TU IADLHR HK1   600P   655A#1 77W 0 BUSINESS"
        seg = _format_vi_parser().parse_line(line).segment
        assert seg.arrival_day_offset == 1
        assert seg.aircraft_type == "Boeing 777-300ER"
        assert seg.cabin_class == "United Polaris Business"

    def test_arrival_date_across_new_year(self):
        line = " 1 AF   6 Y 31DEC WE CDGJFK HK1  1100P   125A 01JAN TH 77W"
        result = _format_vi_parser().parse_line(line)
        assert result.pattern == "vi_arrival_date"
        assert result.segment.arrival_day_offset == 1
        assert result.segment.arrival_date == date(REF_YEAR + 1, 1, 1)

    def test_operated_by_keeps_equipment_and_marker(self):
        line = (" 2 LH  410 J 16SEP TU MUCIAD HK1  1155A   255P#1 359 0 BUSINESS"
                " OPERATED BY /LUFTHANSA CITYLINE")
        result = _format_vi_parser().parse_line(line)
        assert result.pattern == "vi_operated"
        seg = result.segment
        assert seg.operated_by == "LUFTHANSA CITYLINE"
        assert seg.equipment_code == "359"
        assert seg.aircraft_type == "Airbus A350-900"
        assert seg.arrival_day_offset == 1
        assert seg.cabin_class == "Lufthansa Business"

    def test_operated_by_keeps_arrival_date(self):
        line = " 1 AF   6 Y 31DEC WE CDGJFK HK1  1100P   125A 01JAN TH 77W OPERATED BY DELTA"
        result = _format_vi_parser().parse_line(line)
        assert result.pattern == "vi_operated"
        seg = result.segment
        assert seg.arrival_date == date(REF_YEAR + 1, 1, 1)
        assert seg.equipment_code == "77W"
        assert seg.operated_by == "DELTA"

    def test_operated_by_continuation_is_skipped(self):
        result = _format_vi_parser().parse_line("OPERATED BY /LUFTHANSA CITYLINE")
        assert result.status == LINE_SKIPPED

    def test_pattern_tables_start_with_skip_rule(self):
        assert FORMAT_I_PATTERNS[0].name == "operated_by_continuation"
        assert FORMAT_VI_PATTERNS[0].name == "operated_by_continuation"
        assert patterns_for("VI") is FORMAT_VI_PATTERNS
        assert patterns_for(GDSFormat.I) is FORMAT_I_PATTERNS


# ══════════════════════════════════════════════════════════════════════════════
#  FULL PARSE
# ══════════════════════════════════════════════════════════════════════════════

class TestGDSParser:
    def test_single_segment(self, parser):
        result = parser.parse(SINGLE_SEGMENT)
        assert result.ok
        assert result.gds_format == "I"
        assert result.route == "MSY-ATL"
        assert not result.is_round_trip
        assert result.total_duration_minutes == 153
        assert result.layovers == ()
        assert result.warnings == ()

    def test_round_trip(self, parser):
        result = parser.parse(ROUND_TRIP_I)
        assert result.ok
        assert [s.flight_number for s in result.segments] == ["DL2542", "DL84", "DL85", "DL2311"]
        assert result.is_round_trip
        assert result.route == "MSY-CDG/CDG-MSY"
        assert result.skipped_lines == 1
        assert [(l.airport, l.duration_minutes) for l in result.layovers] == [
            ("ATL", 102), ("CDG", 8800), ("ATL", 135),
        ]
        assert result.segments[0].layover_minutes == 102
        assert result.segments[3].layover_minutes is None
        # 13SEP 12:40 → 20SEP 16:55
        assert result.total_duration_minutes == 7 * 1440 + 255

    def test_format_vi(self, parser):
        result = parser.parse(FORMAT_VI)
        assert result.ok
        assert result.gds_format == "VI"
        assert not result.format_fallback_used
        assert [s.flight_number for s in result.segments] == ["BA952", "LH410"]
        assert result.segments[1].cabin_class == "Lufthansa Business"
        assert result.route == "LHR-IAD"

    def test_format_fallback(self, parser):
        result = parser.parse(UNMARKED_VI)
        assert result.ok
        assert result.gds_format == "VI"
        assert result.format_fallback_used
        assert result.warnings == ()

    def test_format_fallback_disabled(self):
        result = GDSParser(ref_year=REF_YEAR, format_fallback=False).parse(UNMARKED_VI)
        assert not result.ok
        assert result.error_type == "PARSING_ERROR"
        assert len(result.warnings) == 1
        assert result.warnings[0].line_number == 1

    def test_carrier_code_with_a_digit(self, parser):
        result = parser.parse("1 B6 623Y 15SEP J JFKBOS*SS1   700A  830A /DCB6 /E")
        assert result.ok
        assert result.gds_format == "I"
        assert result.segments[0].flight_number == "B6623"
        assert result.segments[0].cabin_class == "Economy Class"
        assert result.route == "JFK-BOS"

    def test_operated_by_line_is_counted_not_parsed(self, parser):
        result = parser.parse(SINGLE_SEGMENT + "\nOPERATED BY /DELTA CONNECTION")
        assert result.total_segments == 1
        assert result.skipped_lines == 1
        assert result.warnings == ()

    def test_partial_parse_keeps_good_lines(self, parser):
        text = "\n".join([
            SINGLE_SEGMENT,
            "2 DL  84J 13SEP J ATLCDG*SS1 455X",
            "3 DL2542Z 31FEB J MSYATL*SS1  1240P  313P /DCDL /E",
        ])
        result = parser.parse(text)
        assert result.ok
        assert result.total_segments == 1
        assert [w.line_number for w in result.warnings] == [2, 3]

    def test_validation_failure_is_returned(self, parser):
        result = parser.parse("")
        assert not result.ok
        assert result.error_type == "VALIDATION_ERROR"
        assert result.reasons == ("Input must be a non-empty string",)
        assert result.user_message

    def test_no_segments_is_parsing_error(self, parser):
        result = parser.parse(NO_SEGMENTS)
        assert not result.ok
        assert result.error_type == "PARSING_ERROR"
        assert result.to_dict()["ok"] is False

    def test_year_rollover(self, parser):
        text = ("1 DL2542Z 20DEC S MSYATL*SS1  1240P  313P /DCDL /E\n"
                "2 DL2543Z 03JAN S ATLMSY*SS1   600P   705P /DCDL /E")
        result = parser.parse(text)
        assert result.segments[0].flight_date == date(REF_YEAR, 12, 20)
        assert result.segments[1].flight_date == date(REF_YEAR + 1, 1, 3)
        assert result.is_round_trip
        assert result.route == "MSY-ATL/ATL-MSY"

    def test_parse_is_idempotent(self):
        first = parse(ROUND_TRIP_I, ref_year=REF_YEAR)
        second = parse(ROUND_TRIP_I, ref_year=REF_YEAR)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_provider_booking_class_is_first_stage(self):
        class Provider(StaticReferenceProvider):
            def lookup_booking_class(self, carrier, booking_class):
                return BookingClassRecord(carrier, booking_class, "Delta One Suite")

        result = GDSParser(ref_year=REF_YEAR, provider=Provider()).parse(SINGLE_SEGMENT)
        assert result.segments[0].cabin_class == "Delta One Suite"
        assert result.segments[0].cabin_stage == STAGE_REFERENCE

    def test_failing_provider_falls_back_to_tables(self):
        class Provider(StaticReferenceProvider):
            def lookup_booking_class(self, carrier, booking_class):
                raise RuntimeError("reference store offline")

        result = GDSParser(ref_year=REF_YEAR, provider=Provider()).parse(SINGLE_SEGMENT)
        assert result.ok
        assert result.segments[0].cabin_class == "Delta One"

    @pytest.mark.parametrize("text", [SINGLE_SEGMENT, ROUND_TRIP_I, FORMAT_VI])
    def test_segments_keep_source_order(self, parser, text):
        numbers = [s.segment_number for s in parser.parse(text).segments]
        assert numbers == sorted(numbers)
