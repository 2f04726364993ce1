import sqlite3
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

from ats_service.core.errors import StorageFailed
from ats_service.schemas.analysis import AnalysisRecord
from ats_service.store.db import ResultStore


class ResultStoreTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.db_path = Path(self._tmp.name) / "nested" / "analyses.db"
        self.store = ResultStore(self.db_path, retention_days=30)
        self.store.init_db()

    def tearDown(self):
        self._tmp.cleanup()

    def test_save_and_read_latest(self):
        self.store.save(AnalysisRecord(job_role="Extracted from JD", score=72, missing_keywords=("Kubernetes",)))
        self.store.save(AnalysisRecord(job_role="Extracted from JD", score=40, missing_keywords=()))

        rows = self.store.get_latest(limit=10)
        self.assertEqual([row["score"] for row in rows], [40, 72])
        self.assertEqual(rows[1]["missing_keywords"], ["Kubernetes"])
        self.assertEqual(rows[1]["job_role"], "Extracted from JD")
        self.assertTrue(rows[1]["created_at"])

    def test_summary_counts_missing_keywords(self):
        self.store.save(AnalysisRecord(job_role="r", score=80, missing_keywords=("Kubernetes", "Go")))
        self.store.save(AnalysisRecord(job_role="r", score=60, missing_keywords=("kubernetes",)))

        summary = self.store.get_summary()
        self.assertEqual(summary["total"], 2)
        self.assertEqual(summary["average_score"], 70.0)
        self.assertEqual(summary["top_missing_keywords"][0], {"keyword": "kubernetes", "count": 2})

    def test_purge_removes_records_past_retention(self):
        old = datetime.now(timezone.utc) - timedelta(days=90)
        self.store.save(AnalysisRecord(job_role="r", score=10, created_at=old))
        self.store.save(AnalysisRecord(job_role="r", score=90))

        self.assertEqual(self.store.purge_old_records(), 1)
        self.assertEqual([row["score"] for row in self.store.get_latest()], [90])

    def test_save_failure_raises_storage_failed(self):
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DROP TABLE analyses")
            conn.commit()
        with self.assertRaises(StorageFailed):
            self.store.save(AnalysisRecord(job_role="r", score=50))

    def test_disabled_store_is_a_no_op(self):
        store = ResultStore(Path(self._tmp.name) / "unused.db", enabled=False)
        store.init_db()
        store.save(AnalysisRecord(job_role="r", score=50))
        self.assertEqual(store.get_latest(), [])
        self.assertFalse((Path(self._tmp.name) / "unused.db").exists())


if __name__ == "__main__":
    unittest.main()
