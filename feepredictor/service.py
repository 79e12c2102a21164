"""Host operations over persisted fee records."""

import threading
from typing import Callable, Optional
from .errors import AuthorizationError, RecordExistsError, RecordNotFoundError
from .gateway import IngestionGateway, unix_clock
from .predictor import PredictionRequest, PredictionResult, Urgency, predict_floor, predict_scaled
from .record import FeeRecord, record_id_for
from .state_manager import StateManager
from .structured_output import StructuredOutputWriter
from .window import Sample
from .logging import get_logger

logger = get_logger(__name__)


class FeeService:
    """Initialize records, store samples and serve predictions.

    Each operation loads the record, runs to completion and saves it under a
    single lock, so writers to the same store are serialized.
    """

    def __init__(
        self,
        state_manager: StateManager,
        clock: Optional[Callable[[], int]] = None,
        min_samples: int = 0,
        structured_writer: Optional[StructuredOutputWriter] = None,
    ):
        """
        Args:
            state_manager: Persistent record store
            clock: Source of the current unix timestamp
            min_samples: Samples required before predicting (0 degrades to defaults)
            structured_writer: Optional JSONL writer for samples and predictions
        """
        self.state_manager = state_manager
        self.clock = clock or unix_clock
        self.gateway = IngestionGateway(self.clock)
        self.min_samples = min_samples
        self._structured_writer = structured_writer
        self._lock = threading.Lock()

    def _load(self, record_id: str) -> FeeRecord:
        record = self.state_manager.load_record(record_id)
        if record is None:
            raise RecordNotFoundError(f"Fee record not found: {record_id}")
        return record

    def initialize(self, payer: str) -> FeeRecord:
        """
        Create an empty fee record owned by ``payer``.

        Raises:
            RecordExistsError: If the payer already has a record
        """
        record_id = record_id_for(payer)
        with self._lock:
            if self.state_manager.record_exists(record_id):
                raise RecordExistsError(f"Fee record already exists: {record_id}")
            record = FeeRecord(record_id=record_id, authority=payer, last_updated=self.clock())
            self.state_manager.save_record(record)
        logger.info(f"Fee data record {record_id} initialized")
        return record

    def store_fee_data(
        self,
        record_id: str,
        signer: str,
        fee: int,
        throughput: int,
        compute_units: int,
        sequence: int = 0,
    ) -> Sample:
        """
        Store a sample in the record if ``signer`` is its authority.

        Raises:
            RecordNotFoundError: If the record does not exist
            AuthorizationError: If the signer is not the record authority
            ValidationError: If a field is out of range; nothing is stored
        """
        with self._lock:
            record = self._load(record_id)
            if signer != record.authority:
                raise AuthorizationError(record_id, signer)

            sample = self.gateway.ingest(record.window, fee, throughput, compute_units, sequence)
            record.last_updated = sample.timestamp
            self.state_manager.save_record(record)

        logger.info(f"Stored new fee data in {record_id} at sequence {sequence} (fee={fee})")
        if self._structured_writer is not None:
            self._structured_writer.record_sample({
                "type": "sample",
                "record_id": record_id,
                **sample.to_dict(),
            })
        return sample

    def predict_fee(self, record_id: str, compute_units_estimate: int, urgency=Urgency.MEDIUM) -> PredictionResult:
        """Scaled-average prediction for the record's current window."""
        snapshot = self._load(record_id).window.snapshot()
        request = PredictionRequest(compute_units_estimate, Urgency.parse(urgency))
        result = predict_scaled(snapshot, request, self.min_samples)

        if not snapshot:
            logger.info(f"No historical data in {record_id}; returning default prediction")
        if self._structured_writer is not None:
            self._structured_writer.record_prediction({
                "type": "scaled",
                "record_id": record_id,
                "compute_units_estimate": compute_units_estimate,
                "samples": len(snapshot),
                **result.to_dict(),
            })
        return result

    def predict_floor(self, record_id: str) -> int:
        """Cheapest fee currently retained in the record's window."""
        snapshot = self._load(record_id).window.snapshot()
        fee = predict_floor(snapshot, self.min_samples)

        if self._structured_writer is not None:
            self._structured_writer.record_prediction({
                "type": "floor",
                "record_id": record_id,
                "samples": len(snapshot),
                "estimated_fee": fee,
            })
        return fee
