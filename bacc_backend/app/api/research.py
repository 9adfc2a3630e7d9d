"""HTTP routes for the unified research store."""

import logging
from http import HTTPStatus
from typing import Any

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from bacc_backend.app.api.routes import csv_attachment
from bacc_backend.core.export import research_to_csv
from bacc_backend.core.research import ResearchStore, ResearchStoreError
from bacc_backend.schemas.research import ResearchSubmission

logger = logging.getLogger(__name__)

research_bp = Blueprint("research", __name__)


def _research_store() -> ResearchStore:
    return current_app.extensions["bacc.stores"]["research"]


def _error(message: str, status: HTTPStatus):
    return jsonify({"success": False, "error": message}), status


@research_bp.post("/research-data")
def save_research_data() -> Any:
    """Create or update the research record for a session."""
    payload = request.get_json(force=True, silent=True)
    if not isinstance(payload, dict) or not payload.get("sessionId"):
        return _error("Session ID is required", HTTPStatus.BAD_REQUEST)

    try:
        submission = ResearchSubmission.model_validate(payload)
    except ValidationError as exc:
        return (
            jsonify(
                {
                    "success": False,
                    "error": "Invalid research data",
                    "detail": exc.errors(include_url=False, include_context=False, include_input=False),
                }
            ),
            HTTPStatus.BAD_REQUEST,
        )

    logger.info("Saving research data for session: %s", submission.sessionId)
    dumped = submission.model_dump(mode="json")
    try:
        outcome = _research_store().upsert(
            submission.sessionId,
            calculator_data=dumped["calculatorData"],
            survey_data=dumped["surveyData"],
            metadata=dumped["metadata"],
            completion_status=dumped["completionStatus"],
        )
    except ResearchStoreError:
        logger.exception("Error saving research data")
        return _error("Internal server error", HTTPStatus.INTERNAL_SERVER_ERROR)

    message = "Research data saved successfully" if outcome.created else "Research data updated successfully"
    return jsonify({"success": True, "message": message, "sessionId": outcome.sessionId})


@research_bp.get("/research-data/export/csv")
def export_research_csv() -> Any:
    try:
        records = _research_store().fetch_all()
        if not records:
            return _error("No research data found for export", HTTPStatus.NOT_FOUND)
        content = research_to_csv(records)
    except ResearchStoreError:
        logger.exception("Error exporting research data")
        return _error("Failed to export research data", HTTPStatus.INTERNAL_SERVER_ERROR)

    return csv_attachment(content, '"bacc-research-data-export.csv"')
