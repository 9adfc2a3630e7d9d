"""CSV renderings of the stored calculation, survey and research data.

All three use ``csv.writer`` so that any field holding a comma, quote or
newline is quoted with embedded quotes doubled.
"""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime
from typing import Any, Dict, Iterable, List, Sequence

from bacc_backend.core.records import iso_timestamp
from bacc_backend.schemas.research import ResearchRecord

CALCULATION_HEADERS = [
    "Date",
    "Time",
    "Rank",
    "Location",
    "Cost Share %",
    "Number of Children",
    "Total Monthly",
    "Total Annual",
    "Child Details",
]

# (column header, response key)
SURVEY_COLUMNS = [
    ("Current Programs", "currentPrograms"),
    ("Program Preference", "programPreference"),
    ("Quality Care Impact", "qualityCare"),
    ("Mission Readiness Impact", "missionReadiness"),
    ("Marital Status", "maritalStatus"),
    ("Spouse Impact", "spouseImpact"),
    ("Career Impact", "careerDecision"),
]

SURVEY_HEADERS = (
    ["ID", "Date", "Time"]
    + [header for header, _ in SURVEY_COLUMNS]
    + ["Current Hurdles", "Follow-up Comments"]
)

RESEARCH_HEADERS = [
    "SessionID",
    "RecordCreated",
    "DataType",
    "Field",
    "Value",
    "QuestionText",
    "Result",
    "Timestamp",
]


def _render(headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows(rows)
    return buffer.getvalue()


def format_number(value: Any) -> str:
    """Render numbers without a trailing ``.0`` when integral."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return format_number(value)


def calculations_to_csv(records: List[Dict[str, Any]]) -> str:
    rows = []
    for record in records:
        children = record.get("children") or []
        child_details = "; ".join(
            f"{child.get('childNumber')}:{_text(child.get('age'))}" for child in children
        )
        rows.append(
            [
                _text(record.get("date")),
                _text(record.get("time")),
                _text(record.get("rank")),
                _text(record.get("location")),
                _text(record.get("costShare")),
                _text(record.get("numberOfChildren")),
                f"${format_number(record.get('totalMonthly'))}",
                f"${format_number(record.get('totalAnnual'))}",
                child_details,
            ]
        )
    return _render(CALCULATION_HEADERS, rows)


def surveys_to_csv(records: List[Dict[str, Any]]) -> str:
    rows = []
    for record in records:
        responses = record.get("responses") or {}
        hurdles = responses.get("currentHurdles")
        if isinstance(hurdles, list):
            hurdles = "; ".join(_text(item) for item in hurdles)
        follow_ups = " | ".join(
            f"{key}: {_text(value)}" for key, value in responses.items() if "_followup" in key
        )
        rows.append(
            [_text(record.get("id")), _text(record.get("date")), _text(record.get("time"))]
            + [_text(responses.get(key)) for _, key in SURVEY_COLUMNS]
            + [_text(hurdles), follow_ups]
        )
    return _render(SURVEY_HEADERS, rows)


def _iso(value: Any) -> str:
    if isinstance(value, datetime):
        return iso_timestamp(value)
    return _text(value)


def research_to_csv(records: List[ResearchRecord]) -> str:
    """One row per calculator entry and per survey answer of every session."""
    rows = []
    for record in records:
        created = _iso(record.createdAt)
        for field, info in record.calculatorData.items():
            info = info or {}
            rows.append(
                [
                    record.sessionId,
                    created,
                    "Calculator",
                    field,
                    json.dumps(info.get("input")),
                    "",
                    json.dumps(info.get("result") or ""),
                    _iso(info.get("timestamp")),
                ]
            )
        for question_id, info in record.surveyData.items():
            info = info or {}
            rows.append(
                [
                    record.sessionId,
                    created,
                    "Survey",
                    question_id,
                    json.dumps(info.get("response")),
                    info.get("questionText") or "",
                    "",
                    _iso(info.get("timestamp")),
                ]
            )
    return _render(RESEARCH_HEADERS, rows)
