"""SQLite-based pipeline run tracker.

Records each reporting run through the pipeline stages (loaded, reshaped,
aggregated, assessed, reported). A failed run keeps the stage it failed
in and the error kind, so the failure can be reported verbatim.
"""

import sqlite3
import logging
from pathlib import Path
from datetime import datetime, timezone
from typing import Optional, Dict

logger = logging.getLogger(__name__)

STAGES = ['loaded', 'reshaped', 'aggregated', 'assessed', 'reported']


class RunTracker:
    """Tracks pipeline runs and the stages each run completed.

    **Pipeline Stages:**

    1. **Loaded**: grid and wide table read from the store
    2. **Reshaped**: long-format observations produced
    3. **Aggregated**: per-period summaries computed
    4. **Assessed**: trend assessment computed
    5. **Reported**: tables (and figures) written

    **Database Schema:**

    SQLite table `pipeline_runs`:

    - run_id: Unique run identifier (UTC timestamp)
    - variable, freq, store_path: What was reported
    - status: running, completed, failed
    - Timestamps: When each stage completed (ISO format)
    - failed_stage, error_kind, error_message: Failure details
    - num_cells, num_periods, classification: Run results

    **Typical Usage:**

    Called internally by the orchestrator::

        tracker = RunTracker(db_path)
        tracker.start_run(run_id, variable, "month", store_path)
        tracker.mark_stage_complete(run_id, "loaded", num_cells=81)
        ...
        stats = tracker.get_statistics()
        tracker.close()
    """

    def __init__(self, db_path: Path | str):
        """Initialize tracker.

        Parameters
        ----------
        db_path : Path or str
            Path to SQLite database file. Created if doesn't exist.
            Typically: <base_dir>/tables/run_tracker.db
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._conn = None

        self._init_database()
        logger.info("Run tracker initialized: %s", self.db_path)

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row  # Enable dict-like access
        return self._conn

    def _init_database(self):
        """Create database schema if it doesn't exist."""
        conn = self._get_connection()

        conn.execute("""
            CREATE TABLE IF NOT EXISTS pipeline_runs (
                run_id TEXT PRIMARY KEY,
                variable TEXT NOT NULL,
                freq TEXT NOT NULL,
                store_path TEXT,

                loaded_at TEXT,
                reshaped_at TEXT,
                aggregated_at TEXT,
                assessed_at TEXT,
                reported_at TEXT,

                status TEXT DEFAULT 'running',
                failed_stage TEXT,
                error_kind TEXT,
                error_message TEXT,

                num_cells INTEGER,
                num_periods INTEGER,
                classification TEXT,

                started_at TEXT DEFAULT CURRENT_TIMESTAMP,
                updated_at TEXT DEFAULT CURRENT_TIMESTAMP
            )
        """)

        conn.execute("CREATE INDEX IF NOT EXISTS idx_variable ON pipeline_runs(variable)")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_status ON pipeline_runs(status)")

        conn.commit()

    def start_run(self, run_id: str, variable: str, freq: str,
                  store_path: Optional[Path | str] = None) -> bool:
        """Register a new run.

        Returns
        -------
        bool
            True if the run was newly registered, False if run_id already exists.
        """
        conn = self._get_connection()

        cursor = conn.execute("SELECT run_id FROM pipeline_runs WHERE run_id = ?", (run_id,))
        if cursor.fetchone():
            return False

        now = datetime.now(timezone.utc).isoformat()
        conn.execute("""
            INSERT INTO pipeline_runs
            (run_id, variable, freq, store_path, status, started_at, updated_at)
            VALUES (?, ?, ?, ?, 'running', ?, ?)
        """, (
            run_id,
            variable,
            freq,
            str(store_path) if store_path else None,
            now,
            now,
        ))
        conn.commit()

        logger.debug("Registered run: %s", run_id)
        return True

    def mark_stage_complete(self, run_id: str, stage: str,
                            num_cells: Optional[int] = None,
                            num_periods: Optional[int] = None,
                            classification: Optional[str] = None):
        """Record that a stage finished for a run.

        Completing the 'reported' stage marks the run as completed.

        Raises
        ------
        ValueError
            If stage is not one of the valid pipeline stages.
        """
        if stage not in STAGES:
            raise ValueError(f"Invalid stage: {stage}. Must be one of {STAGES}")

        conn = self._get_connection()
        now = datetime.now(timezone.utc).isoformat()
        new_status = 'completed' if stage == 'reported' else 'running'

        assignments = [f"{stage}_at = ?", "status = ?", "updated_at = ?"]
        params = [now, new_status, now]
        for column, value in (("num_cells", num_cells),
                              ("num_periods", num_periods),
                              ("classification", classification)):
            if value is not None:
                assignments.append(f"{column} = ?")
                params.append(value)
        params.append(run_id)

        conn.execute(
            f"UPDATE pipeline_runs SET {', '.join(assignments)} WHERE run_id = ?",
            params,
        )
        conn.commit()

        logger.debug("Marked %s complete: %s", stage, run_id)

    def mark_failed(self, run_id: str, stage: str, error_kind: str, error_message: str):
        """Record that a run aborted in ``stage`` with the given error."""
        conn = self._get_connection()
        now = datetime.now(timezone.utc).isoformat()
        conn.execute("""
            UPDATE pipeline_runs
            SET status = 'failed',
                failed_stage = ?,
                error_kind = ?,
                error_message = ?,
                updated_at = ?
            WHERE run_id = ?
        """, (stage, error_kind, error_message, now, run_id))
        conn.commit()

        logger.debug("Marked run failed at %s: %s", stage, run_id)

    def get_run(self, run_id: str) -> Optional[Dict]:
        """Get the full record of a run, or None if unknown."""
        conn = self._get_connection()
        cursor = conn.execute("SELECT * FROM pipeline_runs WHERE run_id = ?", (run_id,))
        row = cursor.fetchone()
        if row:
            return dict(row)
        return None

    def get_statistics(self, variable: Optional[str] = None) -> Dict:
        """Summary counts of runs by status.

        Parameters
        ----------
        variable : str, optional
            Restrict to runs of one variable.

        Returns
        -------
        dict
            Keys: total, completed, failed, running
        """
        conn = self._get_connection()

        query = """
            SELECT
                COUNT(*) AS total,
                SUM(CASE WHEN status = 'completed' THEN 1 ELSE 0 END) AS completed,
                SUM(CASE WHEN status = 'failed' THEN 1 ELSE 0 END) AS failed,
                SUM(CASE WHEN status = 'running' THEN 1 ELSE 0 END) AS running
            FROM pipeline_runs
        """
        params = []
        if variable:
            query += " WHERE variable = ?"
            params.append(variable)

        row = conn.execute(query, params).fetchone()
        return {key: (row[key] or 0) for key in ("total", "completed", "failed", "running")}

    def close(self):
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None
            logger.debug("Run tracker closed")
