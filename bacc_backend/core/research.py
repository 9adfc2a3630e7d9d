"""Keyed research store: one document per session, upserted by session id."""

from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from bacc_backend.schemas.research import ResearchRecord

logger = logging.getLogger(__name__)


class ResearchStoreError(RuntimeError):
    """The research database could not be opened, read or written."""


@dataclass
class UpsertOutcome:
    sessionId: str
    created: bool


class ResearchStore:
    """sqlite-backed collection of research sessions.

    ``session_id`` is the primary key. Calculator and survey maps are replaced
    wholesale on every write; metadata and completion status are shallow-merged.
    """

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path)

    def _connect(self) -> sqlite3.Connection:
        # Autocommit mode; transactions are opened explicitly.
        conn = sqlite3.connect(self.db_path, isolation_level=None)
        conn.row_factory = sqlite3.Row
        return conn

    def init(self) -> None:
        """Create the database file and table. Raises ResearchStoreError on failure."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = self._connect()
        except (OSError, sqlite3.Error) as exc:
            raise ResearchStoreError(f"cannot open research database at {self.db_path}: {exc}") from exc
        try:
            conn.execute(
                """
                create table if not exists research_data (
                    session_id text primary key,
                    calculator_data text not null,
                    survey_data text not null,
                    metadata text not null,
                    completion_status text not null,
                    created_at text not null,
                    updated_at text not null
                )
                """
            )
        except sqlite3.Error as exc:
            raise ResearchStoreError(f"cannot initialise research database: {exc}") from exc
        finally:
            conn.close()
        logger.info("Research store ready at %s", self.db_path)

    def upsert(
        self,
        session_id: str,
        calculator_data: Optional[Dict[str, Any]] = None,
        survey_data: Optional[Dict[str, Any]] = None,
        metadata: Optional[Dict[str, Any]] = None,
        completion_status: Optional[Dict[str, Any]] = None,
    ) -> UpsertOutcome:
        if not session_id or not session_id.strip():
            raise ValueError("Session ID is required")

        now = _now_iso()
        try:
            conn = self._connect()
        except sqlite3.Error as exc:
            raise ResearchStoreError(str(exc)) from exc
        try:
            conn.execute("begin immediate")
            row = conn.execute(
                "select metadata, completion_status from research_data where session_id = ?",
                (session_id,),
            ).fetchone()

            if row is None:
                conn.execute(
                    """
                    insert into research_data (
                        session_id, calculator_data, survey_data, metadata,
                        completion_status, created_at, updated_at
                    )
                    values (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        session_id,
                        json.dumps(calculator_data or {}),
                        json.dumps(survey_data or {}),
                        json.dumps(metadata or {}),
                        json.dumps(completion_status or {}),
                        now,
                        now,
                    ),
                )
                created = True
            else:
                merged_metadata = {**json.loads(row["metadata"]), **(metadata or {})}
                merged_status = {**json.loads(row["completion_status"]), **(completion_status or {})}
                conn.execute(
                    """
                    update research_data
                    set calculator_data = ?, survey_data = ?, metadata = ?,
                        completion_status = ?, updated_at = ?
                    where session_id = ?
                    """,
                    (
                        json.dumps(calculator_data or {}),
                        json.dumps(survey_data or {}),
                        json.dumps(merged_metadata),
                        json.dumps(merged_status),
                        now,
                        session_id,
                    ),
                )
                created = False
            conn.execute("commit")
        except (sqlite3.Error, TypeError, ValueError) as exc:
            if conn.in_transaction:
                conn.execute("rollback")
            raise ResearchStoreError(f"cannot save research data for {session_id}: {exc}") from exc
        finally:
            conn.close()

        return UpsertOutcome(sessionId=session_id, created=created)

    def get(self, session_id: str) -> Optional[ResearchRecord]:
        rows = self._select("where session_id = ?", (session_id,))
        return rows[0] if rows else None

    def fetch_all(self) -> List[ResearchRecord]:
        """Every stored session, newest first."""
        return self._select("order by created_at desc, rowid desc", ())

    def _select(self, clause: str, params: tuple) -> List[ResearchRecord]:
        try:
            conn = self._connect()
            try:
                rows = conn.execute(
                    f"""
                    select session_id, calculator_data, survey_data, metadata,
                           completion_status, created_at, updated_at
                    from research_data
                    {clause}
                    """,
                    params,
                ).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise ResearchStoreError(f"cannot read research data: {exc}") from exc

        return [
            ResearchRecord(
                sessionId=row["session_id"],
                calculatorData=json.loads(row["calculator_data"]),
                surveyData=json.loads(row["survey_data"]),
                metadata=json.loads(row["metadata"]),
                completionStatus=json.loads(row["completion_status"]),
                createdAt=row["created_at"],
                updatedAt=row["updated_at"],
            )
            for row in rows
        ]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")
