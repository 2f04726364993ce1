from __future__ import annotations

import json
import sqlite3
from collections import Counter
from pathlib import Path
from typing import Any

from ats_service.core.errors import StorageFailed
from ats_service.schemas.analysis import AnalysisRecord


_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _row_to_dict(cursor: sqlite3.Cursor, row: tuple) -> dict[str, Any]:
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


class ResultStore:
    """SQLite sink for analysis records.

    Every operation opens its own connection, so one store instance can be
    shared by concurrent requests.
    """

    def __init__(self, db_path: str | Path, *, enabled: bool = True, retention_days: int = 365):
        self._db_path = Path(db_path)
        self._enabled = enabled
        self._retention_days = max(1, int(retention_days))

    @property
    def enabled(self) -> bool:
        return self._enabled

    def init_db(self) -> None:
        if not self._enabled:
            return
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        with sqlite3.connect(self._db_path) as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS analyses (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    created_at TEXT NOT NULL,
                    job_role TEXT NOT NULL,
                    score INTEGER NOT NULL,
                    missing_keywords_json TEXT NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_analyses_created_at
                ON analyses (created_at)
                """
            )
            conn.commit()

    def save(self, record: AnalysisRecord) -> None:
        if not self._enabled:
            return
        try:
            with sqlite3.connect(self._db_path) as conn:
                conn.execute(
                    """
                    INSERT INTO analyses (created_at, job_role, score, missing_keywords_json)
                    VALUES (?, ?, ?, ?)
                    """,
                    (
                        record.created_at.strftime(_TIMESTAMP_FORMAT),
                        record.job_role,
                        record.score,
                        json.dumps(list(record.missing_keywords), ensure_ascii=False),
                    ),
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise StorageFailed(f"Could not save analysis record: {exc}") from exc

    def purge_old_records(self) -> int:
        if not self._enabled:
            return 0
        with sqlite3.connect(self._db_path) as conn:
            cur = conn.execute(
                "DELETE FROM analyses WHERE created_at < datetime('now', ?)",
                (f"-{self._retention_days} days",),
            )
            conn.commit()
            return int(cur.rowcount or 0)

    def get_latest(self, limit: int = 20) -> list[dict[str, Any]]:
        if not self._enabled:
            return []
        with sqlite3.connect(self._db_path) as conn:
            cur = conn.execute(
                """
                SELECT id, created_at, job_role, score, missing_keywords_json
                FROM analyses
                ORDER BY id DESC
                LIMIT ?
                """,
                (limit,),
            )
            rows = [_row_to_dict(cur, row) for row in cur.fetchall()]
        for row in rows:
            row["missing_keywords"] = json.loads(row.pop("missing_keywords_json") or "[]")
        return rows

    def get_summary(self, top: int = 10) -> dict[str, Any]:
        if not self._enabled:
            return {"total": 0, "average_score": None, "top_missing_keywords": []}
        with sqlite3.connect(self._db_path) as conn:
            total, average = conn.execute("SELECT COUNT(*), AVG(score) FROM analyses").fetchone()
            keyword_rows = conn.execute("SELECT missing_keywords_json FROM analyses").fetchall()

        counts: Counter[str] = Counter()
        for (raw,) in keyword_rows:
            counts.update(keyword.strip().lower() for keyword in json.loads(raw or "[]") if keyword.strip())
        return {
            "total": int(total or 0),
            "average_score": round(float(average), 1) if average is not None else None,
            "top_missing_keywords": [
                {"keyword": keyword, "count": count} for keyword, count in counts.most_common(top)
            ],
        }
