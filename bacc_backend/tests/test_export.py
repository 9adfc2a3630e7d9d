from __future__ import annotations

import csv
import io
from datetime import datetime, timezone

from bacc_backend.core.export import (
    CALCULATION_HEADERS,
    RESEARCH_HEADERS,
    SURVEY_HEADERS,
    calculations_to_csv,
    research_to_csv,
    surveys_to_csv,
)
from bacc_backend.schemas.research import ResearchRecord


def parse(text: str) -> list:
    return list(csv.reader(io.StringIO(text)))


def calculation_record(**overrides) -> dict:
    record = {
        "date": "3/5/2024",
        "time": "2:07:09 PM",
        "rank": "E-5",
        "location": "Standard Cost",
        "costShare": 25,
        "numberOfChildren": 2,
        "children": [
            {"childNumber": 1, "age": "Infant (0-12 months)"},
            {"childNumber": 2, "age": "Toddler (13-24 months)"},
        ],
        "totalMonthly": 2025.0,
        "totalAnnual": 24300.5,
    }
    record.update(overrides)
    return record


def test_calculation_csv_has_one_row_per_record():
    rows = parse(calculations_to_csv([calculation_record(), calculation_record(rank="O-1")]))

    assert rows[0] == CALCULATION_HEADERS
    assert len(rows) == 3
    assert rows[1] == [
        "3/5/2024",
        "2:07:09 PM",
        "E-5",
        "Standard Cost",
        "25",
        "2",
        "$2025",
        "$24300.5",
        "1:Infant (0-12 months); 2:Toddler (13-24 months)",
    ]
    assert rows[2][2] == "O-1"


def test_calculation_csv_header_only_when_empty():
    assert calculations_to_csv([]) == ",".join(CALCULATION_HEADERS) + "\n"


def test_calculation_csv_escapes_every_field():
    record = calculation_record(rank='E-5, "acting"', date="1/1/2024")
    text = calculations_to_csv([record])

    assert '"E-5, ""acting"""' in text
    assert parse(text)[1][2] == 'E-5, "acting"'


def survey_record(**responses) -> dict:
    return {
        "id": "survey_1_abc",
        "date": "1/1/2024",
        "time": "9:00:00 AM",
        "responses": responses,
    }


def test_survey_csv_columns():
    record = survey_record(
        currentPrograms="CDC",
        programPreference="Fee assistance",
        qualityCare="High",
        missionReadiness="Improved",
        maritalStatus="Married",
        spouseImpact="Works",
        careerDecision="Stay",
        currentHurdles=["Cost", "Waitlist"],
        qualityCare_followup="Hours are short",
        careerDecision_followup='Said "maybe"',
    )

    rows = parse(surveys_to_csv([record]))

    assert rows[0] == SURVEY_HEADERS
    assert rows[1] == [
        "survey_1_abc",
        "1/1/2024",
        "9:00:00 AM",
        "CDC",
        "Fee assistance",
        "High",
        "Improved",
        "Married",
        "Works",
        "Stay",
        "Cost; Waitlist",
        'qualityCare_followup: Hours are short | careerDecision_followup: Said "maybe"',
    ]


def test_survey_csv_fills_missing_answers_with_blanks():
    rows = parse(surveys_to_csv([survey_record(currentHurdles="Cost")]))

    assert rows[1][3:10] == [""] * 7
    assert rows[1][10] == "Cost"
    assert rows[1][11] == ""


def test_research_csv_has_one_row_per_data_item():
    created = datetime(2024, 5, 1, tzinfo=timezone.utc)
    record = ResearchRecord(
        sessionId="sess-1",
        calculatorData={
            "rank": {"input": "E-5", "result": None, "timestamp": "2024-05-01T10:00:00Z"},
            "location": {"input": "High Cost"},
            "children": {"input": [{"age": "Infant"}], "result": {"totalMonthly": 1050}},
        },
        surveyData={
            "q1": {"response": "yes", "questionText": 'Do you use "CDC"?'},
            "q2": {"response": ["a", "b"]},
        },
        createdAt=created,
        updatedAt=created,
    )
    empty = ResearchRecord(sessionId="sess-2", createdAt=created, updatedAt=created)

    rows = parse(research_to_csv([record, empty]))

    assert rows[0] == RESEARCH_HEADERS
    body = rows[1:]
    assert len(body) == 5
    assert [row[2] for row in body] == ["Calculator"] * 3 + ["Survey"] * 2
    assert body[0] == [
        "sess-1",
        "2024-05-01T00:00:00.000Z",
        "Calculator",
        "rank",
        '"E-5"',
        "",
        '""',
        "2024-05-01T10:00:00Z",
    ]
    assert body[2][4] == '[{"age": "Infant"}]'
    assert body[2][6] == '{"totalMonthly": 1050}'
    assert body[3][5] == 'Do you use "CDC"?'
    assert body[3][6] == ""
    assert body[4][4] == '["a", "b"]'
