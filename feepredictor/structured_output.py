"""Structured output writer for samples and predictions.

Records are written as JSONL so they can later be loaded into relational or
analytical databases.
"""

from pathlib import Path
from typing import Dict
import json
from datetime import datetime, timezone

from .logging import get_logger

logger = get_logger(__name__)


DEFAULT_SAMPLES_FILENAME = "samples.jsonl"
DEFAULT_PREDICTIONS_FILENAME = "predictions.jsonl"


class StructuredOutputWriter:
    """Write structured JSONL records for future database rollups.

    Two record types are written:
    - samples: every sample stored into a fee record
    - predictions: every scaled or floor prediction served
    """

    def __init__(
        self,
        base_dir: str,
        samples_filename: str = DEFAULT_SAMPLES_FILENAME,
        predictions_filename: str = DEFAULT_PREDICTIONS_FILENAME,
    ) -> None:
        self.base_path = Path(base_dir)
        self.base_path.mkdir(parents=True, exist_ok=True)

        self.samples_path = self.base_path / samples_filename
        self.predictions_path = self.base_path / predictions_filename

    def _append_line(self, path: Path, record: Dict) -> None:
        """Append a single JSON record to the given file as one line."""
        try:
            if "timestamp" not in record and "ts" not in record:
                record["ts"] = datetime.now(timezone.utc).isoformat()

            with path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(record, ensure_ascii=False) + "\n")
        except (OSError, TypeError, ValueError) as exc:
            # Output failures must not break ingestion or prediction.
            logger.error("Failed to append structured record to %s: %s", path, exc, exc_info=True)

    def record_sample(self, payload: Dict) -> None:
        """Record a stored sample along with its record id."""
        self._append_line(self.samples_path, payload)

    def record_prediction(self, payload: Dict) -> None:
        self._append_line(self.predictions_path, payload)
