"""Flat-file JSON stores for calculation and survey records.

Each store keeps its whole collection as one JSON array on disk. ``append``
reads the array, adds the record and rewrites the file, so every operation is
O(n) in the number of stored records. There is no locking: two concurrent
appends to the same file can race and one of the writes is lost.
"""

from __future__ import annotations

import json
import logging
import secrets
import string
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from bacc_backend.schemas.allowance import AllowanceRequest, CalculationResult
from bacc_backend.schemas.survey import SurveySubmission

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


class JsonRecordStore:
    """Append-only collection persisted as a single JSON array."""

    def __init__(self, path: Path | str, label: str = "records"):
        self.path = Path(path)
        self.label = label

    def exists(self) -> bool:
        return self.path.is_file()

    def read_all(self) -> List[Dict[str, Any]]:
        """Return every stored record; unreadable or missing data reads as empty."""
        if not self.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Could not read %s from %s, treating as empty", self.label, self.path, exc_info=True)
            return []
        if not isinstance(data, list):
            logger.warning("%s does not hold a JSON array, treating as empty", self.path)
            return []
        return data

    def append(self, record: Dict[str, Any]) -> bool:
        """Add ``record`` and rewrite the file. Returns False if the write failed."""
        records = self.read_all()
        records.append(record)
        try:
            payload = json.dumps(records, indent=2)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(payload, encoding="utf-8")
        except (OSError, TypeError, ValueError):
            logger.exception("Error saving %s to %s", self.label, self.path)
            return False
        logger.info("Saved %s record (%d total) to %s", self.label, len(records), self.path)
        return True


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(when: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a ``Z`` suffix."""
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    utc = when.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def display_date(when: datetime) -> str:
    """Local calendar date as ``M/D/YYYY``."""
    local = _as_local(when)
    return f"{local.month}/{local.day}/{local.year}"


def display_time(when: datetime) -> str:
    """Local wall-clock time as ``h:MM:SS AM``."""
    local = _as_local(when)
    hour = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{hour}:{local.minute:02d}:{local.second:02d} {suffix}"


def _as_local(when: datetime) -> datetime:
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return when.astimezone()


def build_calculation_record(
    request: AllowanceRequest,
    result: CalculationResult,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Shape a calculation into the record persisted by the calculation store."""
    now = now or _utc_now()
    return {
        "timestamp": iso_timestamp(now),
        "date": display_date(now),
        "time": display_time(now),
        "rank": request.rank,
        "location": request.location,
        "costShare": request.costShare,
        "numberOfChildren": len(request.children),
        "children": [
            {"childNumber": number, "age": child.age}
            for number, child in enumerate(request.children, start=1)
        ],
        "totalMonthly": result.totalMonthly,
        "totalAnnual": result.totalAnnual,
        "perChildResults": [child.model_dump() for child in result.perChild],
    }


def generate_survey_id(now: Optional[datetime] = None) -> str:
    """``survey_<epochMillis>_<9 random base-36 chars>``; unique with high probability only."""
    now = now or _utc_now()
    millis = int(now.timestamp() * 1000)
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"survey_{millis}_{suffix}"


def build_survey_record(submission: SurveySubmission) -> Dict[str, Any]:
    submitted = submission.timestamp or _utc_now()
    return {
        "id": generate_survey_id(),
        "submittedAt": iso_timestamp(submitted),
        "date": display_date(submitted),
        "time": display_time(submitted),
        "responses": submission.responses,
    }
