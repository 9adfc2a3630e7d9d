from __future__ import annotations

import json
import re
from datetime import datetime, timezone

from bacc_backend.core.allowance import calculate_allowance
from bacc_backend.core.records import (
    JsonRecordStore,
    build_calculation_record,
    build_survey_record,
    display_date,
    display_time,
    generate_survey_id,
    iso_timestamp,
)
from bacc_backend.schemas.allowance import AllowanceRequest
from bacc_backend.schemas.survey import SurveySubmission


def test_read_all_on_missing_file_is_empty(tmp_path):
    store = JsonRecordStore(tmp_path / "missing.json")

    assert not store.exists()
    assert store.read_all() == []


def test_append_then_read_all_grows_by_one(tmp_path):
    store = JsonRecordStore(tmp_path / "records.json")
    store.append({"n": 1})
    store.append({"n": 2})
    before = store.read_all()

    record = {"n": 3, "nested": {"values": [1, 2, 3]}}
    assert store.append(record) is True

    after = store.read_all()
    assert len(after) == len(before) + 1
    assert after[-1] == record
    assert after[:-1] == before


def test_file_is_a_pretty_printed_json_array(tmp_path):
    path = tmp_path / "records.json"
    JsonRecordStore(path).append({"a": 1})

    text = path.read_text()
    assert json.loads(text) == [{"a": 1}]
    assert "\n  " in text


def test_corrupt_file_reads_as_empty_and_is_replaced_on_append(tmp_path):
    path = tmp_path / "records.json"
    path.write_text("{not json")
    store = JsonRecordStore(path)

    assert store.read_all() == []
    assert store.append({"a": 1})
    assert store.read_all() == [{"a": 1}]


def test_non_array_document_reads_as_empty(tmp_path):
    path = tmp_path / "records.json"
    path.write_text('{"a": 1}')

    assert JsonRecordStore(path).read_all() == []


def test_failed_write_is_reported_not_raised(tmp_path):
    # The target path is a directory, so writing it fails.
    blocked = tmp_path / "blocked.json"
    blocked.mkdir()
    store = JsonRecordStore(blocked)

    assert store.append({"a": 1}) is False


def test_append_creates_missing_parent_directory(tmp_path):
    store = JsonRecordStore(tmp_path / "nested" / "dir" / "records.json")

    assert store.append({"a": 1})
    assert store.read_all() == [{"a": 1}]


def test_timestamp_formats():
    when = datetime(2024, 3, 5, 14, 7, 9, 123456, tzinfo=timezone.utc)

    assert iso_timestamp(when) == "2024-03-05T14:07:09.123Z"
    assert re.fullmatch(r"\d{1,2}/\d{1,2}/\d{4}", display_date(when))
    assert re.fullmatch(r"\d{1,2}:\d{2}:\d{2} (AM|PM)", display_time(when))


def test_calculation_record_shape():
    request = AllowanceRequest.model_validate(
        {
            "rank": "O-3",
            "location": "High Cost",
            "costShare": 0,
            "children": [{"age": "Infant (0-12 months)"}, {"age": "unknown"}],
        }
    )
    result = calculate_allowance(request)
    now = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    record = build_calculation_record(request, result, now=now)

    assert record["timestamp"] == "2024-01-02T03:04:05.000Z"
    assert record["rank"] == "O-3"
    assert record["location"] == "High Cost"
    assert record["costShare"] == 0
    assert record["numberOfChildren"] == 2
    assert record["children"] == [
        {"childNumber": 1, "age": "Infant (0-12 months)"},
        {"childNumber": 2, "age": "unknown"},
    ]
    assert record["totalMonthly"] == result.totalMonthly
    assert record["totalAnnual"] == result.totalAnnual
    assert len(record["perChildResults"]) == 1
    json.dumps(record)


def test_survey_id_format():
    when = datetime(2024, 1, 1, tzinfo=timezone.utc)
    survey_id = generate_survey_id(when)

    assert re.fullmatch(r"survey_1704067200000_[0-9a-z]{9}", survey_id)


def test_survey_record_uses_submitted_timestamp():
    submission = SurveySubmission.model_validate(
        {"timestamp": "2024-06-01T12:30:00Z", "responses": {"qualityCare": "Yes"}}
    )

    record = build_survey_record(submission)

    assert record["id"].startswith("survey_")
    assert record["submittedAt"] == "2024-06-01T12:30:00.000Z"
    assert record["responses"] == {"qualityCare": "Yes"}
    assert record["date"] and record["time"]


def test_survey_record_accepts_epoch_milliseconds():
    submission = SurveySubmission.model_validate({"timestamp": 1717245000000, "responses": {}})

    record = build_survey_record(submission)

    assert record["submittedAt"] == "2024-06-01T12:30:00.000Z"
