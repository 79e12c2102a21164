"""Persistent storage for fee records."""

import json
import sqlite3
from pathlib import Path
from typing import List, Optional
from .record import FeeRecord
from .logging import get_logger

logger = get_logger(__name__)


class StateManager:
    """Stores fee records in SQLite or a JSON file.

    Samples are stored as lists in canonical field order
    (fee, throughput, compute_units, sequence, timestamp).
    """

    def __init__(self, backend: str = "sqlite", db_path: str = None, json_path: str = None):
        """
        Initialize state manager.

        Args:
            backend: "sqlite" or "json"
            db_path: Path to SQLite database (for sqlite backend)
            json_path: Path to JSON file (for json backend)
        """
        self.backend = backend
        self.db_path = db_path or "state/feepredictor.db"
        self.json_path = json_path or "state/feepredictor.json"

        if backend == "sqlite":
            self._init_sqlite()
        elif backend == "json":
            self._init_json()
        else:
            raise ValueError(f"Unknown backend: {backend}")

    def _init_sqlite(self):
        """Initialize SQLite database."""
        db_path = Path(self.db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)

        self.conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self.conn.row_factory = sqlite3.Row

        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS fee_records (
                record_id TEXT PRIMARY KEY,
                authority TEXT NOT NULL,
                last_updated INTEGER NOT NULL,
                samples TEXT NOT NULL
            )
        """)
        self.conn.commit()
        logger.info(f"Initialized SQLite state database: {self.db_path}")

    def _init_json(self):
        """Initialize JSON state file."""
        json_path = Path(self.json_path)
        json_path.parent.mkdir(parents=True, exist_ok=True)

        if json_path.exists():
            with open(json_path, 'r') as f:
                self.state = json.load(f)
        else:
            self.state = {"records": {}}
            self._save_json()

        logger.info(f"Initialized JSON state file: {self.json_path}")

    def _save_json(self):
        with open(Path(self.json_path), 'w') as f:
            json.dump(self.state, f, indent=2)

    def load_record(self, record_id: str) -> Optional[FeeRecord]:
        """
        Load a fee record.

        Args:
            record_id: Record id

        Returns:
            FeeRecord if found, None otherwise
        """
        if self.backend == "sqlite":
            row = self.conn.execute(
                "SELECT record_id, authority, last_updated, samples FROM fee_records WHERE record_id = ?",
                (record_id,)
            ).fetchone()
            if row is None:
                return None
            data = {
                "record_id": row["record_id"],
                "authority": row["authority"],
                "last_updated": row["last_updated"],
                "samples": json.loads(row["samples"]),
            }
        else:
            data = self.state["records"].get(record_id)
            if data is None:
                return None
        return FeeRecord.from_dict(data)

    def save_record(self, record: FeeRecord):
        """Insert or replace a fee record."""
        data = record.to_dict()
        if self.backend == "sqlite":
            self.conn.execute("""
                INSERT OR REPLACE INTO fee_records (record_id, authority, last_updated, samples)
                VALUES (?, ?, ?, ?)
            """, (data["record_id"], data["authority"], data["last_updated"], json.dumps(data["samples"])))
            self.conn.commit()
        else:
            self.state["records"][record.record_id] = data
            self._save_json()

        logger.debug(f"Saved {record.record_id} with {len(data['samples'])} samples")

    def record_exists(self, record_id: str) -> bool:
        if self.backend == "sqlite":
            row = self.conn.execute(
                "SELECT 1 FROM fee_records WHERE record_id = ?",
                (record_id,)
            ).fetchone()
            return row is not None
        return record_id in self.state["records"]

    def list_record_ids(self) -> List[str]:
        if self.backend == "sqlite":
            rows = self.conn.execute("SELECT record_id FROM fee_records ORDER BY record_id").fetchall()
            return [row["record_id"] for row in rows]
        return sorted(self.state["records"].keys())

    def close(self):
        """Close connections and cleanup."""
        if self.backend == "sqlite" and hasattr(self, 'conn'):
            self.conn.close()
            logger.debug("Closed SQLite connection")
