"""
HTTP surface for itinerary parsing.

    POST /api/itinerary/parse   {"text": "...", "enrich": false}
    POST /api/itinerary/legs    {"text": "..."}
    GET  /api/reference/airports/<code>
    GET  /api/reference/airlines/<code>
"""

import asyncio
import logging

from flask import Blueprint, current_app, jsonify, request

from enrichment import enrich_with_timeout
from errors import ErrorType, ReferenceLookupError
from gds_parser import GDSParser
from itinerary import group_into_legs

logger = logging.getLogger(__name__)

itinerary_bp = Blueprint("itinerary", __name__, url_prefix="/api")


def _provider():
    return current_app.extensions["reference_provider"]


def _raw_text():
    data = request.get_json(silent=True) or {}
    return data, data.get("text")


def _failure_response(failure):
    status = 400 if failure.error_type == ErrorType.VALIDATION_ERROR.value else 422
    body = failure.to_dict()
    body.update(message=failure.message, error=failure.user_message)
    return jsonify(body), status


# ==================== ITINERARY ====================

@itinerary_bp.route("/itinerary/parse", methods=["POST"])
def parse_itinerary():
    """
    Parse GDS text; optionally enrich it from reference data.

    asyncio.run waits for reference lookups still running in worker threads,
    so an enriched request can take up to ENRICHMENT_TIMEOUT plus
    REFERENCE_TIMEOUT.
    """
    data, text = _raw_text()
    try:
        result = GDSParser().parse(text)
        if not result.ok:
            return _failure_response(result)

        if data.get("enrich"):
            result = asyncio.run(enrich_with_timeout(result, _provider()))

        body = result.to_dict()
        body["legs"] = [leg.to_dict() for leg in group_into_legs(result)]
        return jsonify(body)
    except Exception:
        logger.exception("Itinerary parse request failed")
        return jsonify({"error": "Failed to parse itinerary"}), 500


@itinerary_bp.route("/itinerary/legs", methods=["POST"])
def itinerary_legs():
    """Journey legs only (24-hour connection rule)."""
    _, text = _raw_text()
    try:
        result = GDSParser().parse(text)
        if not result.ok:
            return _failure_response(result)
        legs = group_into_legs(result)
        return jsonify({
            "route": result.route,
            "total_legs": len(legs),
            "legs": [leg.to_dict() for leg in legs],
        })
    except Exception:
        logger.exception("Itinerary legs request failed")
        return jsonify({"error": "Failed to group itinerary"}), 500


# ==================== REFERENCE DATA ====================

@itinerary_bp.route("/reference/airports/<code>", methods=["GET"])
def get_airport(code):
    try:
        airport = _provider().lookup_airport(code)
    except ReferenceLookupError as e:
        logger.warning("Airport lookup %s failed: %s", code, e)
        return jsonify({"error": e.user_message}), 503
    if airport is None:
        return jsonify({"error": "Airport not found"}), 404
    return jsonify(airport.to_dict())


@itinerary_bp.route("/reference/airlines/<code>", methods=["GET"])
def get_airline(code):
    try:
        airline = _provider().lookup_airline(code)
    except ReferenceLookupError as e:
        logger.warning("Airline lookup %s failed: %s", code, e)
        return jsonify({"error": e.user_message}), 503
    if airline is None:
        return jsonify({"error": "Airline not found"}), 404
    return jsonify(airline.to_dict())
