"""HTTP routes for the calculator and survey flat-file stores."""

import logging
from http import HTTPStatus
from typing import Any, Callable, Dict, List

from flask import Blueprint, Response, current_app, jsonify, request
from pydantic import ValidationError

from bacc_backend.core.allowance import calculate_allowance
from bacc_backend.core.export import calculations_to_csv, surveys_to_csv
from bacc_backend.core.records import (
    JsonRecordStore,
    build_calculation_record,
    build_survey_record,
)
from bacc_backend.schemas.allowance import AllowanceRequest
from bacc_backend.schemas.survey import SurveySubmission

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


def _store(name: str) -> JsonRecordStore:
    return current_app.extensions["bacc.stores"][name]


def _json_body() -> Dict[str, Any]:
    payload = request.get_json(force=True, silent=True)
    return payload if isinstance(payload, dict) else {}


def csv_attachment(content: str, filename: str) -> Response:
    return Response(
        content,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Reject malformed calculator or survey payloads with a 400 and the field errors."""
    logger.info("Request validation failed: %s", exc.error_count())
    return (
        jsonify(
            {
                "error": "Missing required fields.",
                "detail": exc.errors(include_url=False, include_context=False, include_input=False),
            }
        ),
        HTTPStatus.BAD_REQUEST,
    )


@api_bp.post("/calculate-bacc")
def calculate_bacc() -> Any:
    """Compute the allowance and record the calculation."""
    payload = _json_body()
    children = payload.get("children")
    logger.info(
        "BACC calculation request: rank=%s location=%s costShare=%s children=%s",
        payload.get("rank"),
        payload.get("location"),
        payload.get("costShare"),
        [child.get("age") if isinstance(child, dict) else child for child in children]
        if isinstance(children, list)
        else children,
    )

    allowance_request = AllowanceRequest.model_validate(payload)
    result = calculate_allowance(allowance_request)

    # Saving is best-effort: a failed write is logged but the result is still returned.
    _store("calculations").append(build_calculation_record(allowance_request, result))

    logger.info(
        "Calculation completed: totalMonthly=%s totalAnnual=%s",
        result.totalMonthly,
        result.totalAnnual,
    )
    return jsonify(result.model_dump())


def _export(store_name: str, render: Callable[[List[Dict[str, Any]]], str], filename: str, missing: str, failure: str):
    store = _store(store_name)
    if not store.exists():
        return jsonify({"error": missing}), HTTPStatus.NOT_FOUND
    try:
        content = render(store.read_all())
    except Exception:
        logger.exception("Error exporting %s", filename)
        return jsonify({"error": failure}), HTTPStatus.INTERNAL_SERVER_ERROR
    logger.info("CSV export downloaded: %s", filename)
    return csv_attachment(content, filename)


def _listing(store_name: str, missing: str, found: str):
    store = _store(store_name)
    if not store.exists():
        return jsonify({"message": missing, "count": 0, "data": []})
    data = store.read_all()
    return jsonify({"message": found, "count": len(data), "data": data})


@api_bp.get("/export-csv")
def export_csv() -> Any:
    return _export(
        "calculations",
        calculations_to_csv,
        "bacc_calculations.csv",
        missing="No data available",
        failure="Error exporting data",
    )


@api_bp.get("/data")
def calculation_data() -> Any:
    return _listing("calculations", "No data available", "Data retrieved successfully")


@api_bp.post("/submit-survey")
def submit_survey() -> Any:
    """Record a free-form survey submission."""
    submission = SurveySubmission.model_validate(_json_body())
    logger.info("Survey submission: %d questions answered", len(submission.responses))

    try:
        record = build_survey_record(submission)
    except (OverflowError, ValueError, OSError):
        logger.exception("Error saving survey")
        return jsonify({"error": "Error saving survey data"}), HTTPStatus.INTERNAL_SERVER_ERROR

    _store("surveys").append(record)
    return jsonify({"success": True, "message": "Survey submitted successfully"})


@api_bp.get("/export-survey-csv")
def export_survey_csv() -> Any:
    return _export(
        "surveys",
        surveys_to_csv,
        "bacc_survey_responses.csv",
        missing="No survey data available",
        failure="Error exporting survey data",
    )


@api_bp.get("/survey-data")
def survey_data() -> Any:
    return _listing("surveys", "No survey data available", "Survey data retrieved successfully")
