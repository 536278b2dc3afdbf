from __future__ import annotations

import json
import logging
import os
import sqlite3
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Protocol

from resume_optimizer.core.config import settings
from resume_optimizer.core.errors import PersistenceFailed
from resume_optimizer.schemas.optimization import OptimizationResult, ScoreBreakdown

logger = logging.getLogger(__name__)


class ResultSink(Protocol):
    def save(self, result: OptimizationResult, breakdown: ScoreBreakdown) -> str: ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SQLiteResultSink:
    """Stores optimization results as JSON rows; any sqlite error surfaces as ``PersistenceFailed``."""

    def __init__(self, db_path: str | None = None):
        self._db_path = db_path or settings.results_db_path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def _get_connection(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn

        directory = os.path.dirname(self._db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        conn = sqlite3.connect(
            self._db_path,
            check_same_thread=False,
            timeout=5,
            isolation_level=None,
        )
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        conn.execute("PRAGMA busy_timeout=5000;")
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS optimization_results (
                result_id TEXT PRIMARY KEY,
                provider TEXT,
                language TEXT,
                ats_score INTEGER NOT NULL,
                result_payload_json TEXT NOT NULL,
                breakdown_json TEXT NOT NULL,
                created_at TEXT NOT NULL
            );
            """
        )
        conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_optimization_results_created
            ON optimization_results (created_at);
            """
        )
        self._conn = conn
        return conn

    def save(self, result: OptimizationResult, breakdown: ScoreBreakdown) -> str:
        result_id = uuid.uuid4().hex
        try:
            with self._lock:
                conn = self._get_connection()
                conn.execute(
                    """
                    INSERT INTO optimization_results (
                        result_id, provider, language, ats_score, result_payload_json, breakdown_json, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        result_id,
                        result.provider,
                        result.language,
                        breakdown.total,
                        json.dumps(result.model_dump(), ensure_ascii=False),
                        json.dumps(breakdown.model_dump(), ensure_ascii=False),
                        _utc_now().isoformat(),
                    ),
                )
        except (sqlite3.Error, OSError) as exc:
            logger.warning("result_persist_failed path=%s: %s", self._db_path, exc)
            raise PersistenceFailed(f"Could not store optimization result: {exc}") from exc
        return result_id

    def get(self, result_id: str) -> dict[str, Any] | None:
        try:
            with self._lock:
                cur = self._get_connection().execute(
                    """
                    SELECT result_id, provider, language, ats_score, result_payload_json, breakdown_json, created_at
                    FROM optimization_results
                    WHERE result_id = ?
                    """,
                    (result_id,),
                )
                row = cur.fetchone()
        except (sqlite3.Error, OSError) as exc:
            raise PersistenceFailed(f"Could not read optimization result: {exc}") from exc

        if not row:
            return None

        return {
            "result_id": row[0],
            "provider": row[1],
            "language": row[2],
            "ats_score": row[3],
            "result": json.loads(row[4]) if row[4] else {},
            "breakdown": json.loads(row[5]) if row[5] else {},
            "created_at": datetime.fromisoformat(row[6]),
        }

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
