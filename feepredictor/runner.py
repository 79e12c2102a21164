"""Main runner loop for sampling and prediction."""

import sys
import time
from datetime import datetime, timezone
from typing import Dict, Optional
from .config import Config
from .errors import RecordExistsError
from .predictor import Urgency
from .record import record_id_for
from .rpc import RPCClient
from .sampler import sample_network
from .service import FeeService
from .state_manager import StateManager
from .structured_output import StructuredOutputWriter
from .logging import get_logger

logger = get_logger(__name__)


class FeePredictorRunner:
    """Polls the node, stores samples and logs predictions."""

    def __init__(
        self,
        config: Config,
        structured_writer: Optional[StructuredOutputWriter] = None,
        rpc_client: Optional[RPCClient] = None,
        state_manager: Optional[StateManager] = None,
    ):
        """
        Initialize runner with configuration.

        Args:
            config: Configuration instance
            structured_writer: Optional JSONL writer
            rpc_client: RPC client, built from config when omitted
            state_manager: Record store, built from config when omitted
        """
        self.config = config
        self.rpc_client = rpc_client or RPCClient(config.rpc_url)
        self.state_manager = state_manager or StateManager(
            backend=config.state_backend,
            db_path=config.state_db_path,
            json_path=config.state_json_path,
        )
        self.service = FeeService(
            self.state_manager,
            min_samples=config.min_samples,
            structured_writer=structured_writer,
        )
        self.payer = config.payer
        self.record_id = record_id_for(self.payer)
        self.urgency = Urgency.parse(config.urgency)

        try:
            self.service.initialize(self.payer)
        except RecordExistsError:
            logger.debug(f"Using existing fee record {self.record_id}")

    def run_once(self) -> Dict:
        """
        Run one sampling iteration.

        Returns:
            Dictionary with the stored sample, scaled prediction and floor
        """
        fields = sample_network(self.rpc_client, self.config.sample_compute_units)
        sample = self.service.store_fee_data(self.record_id, self.payer, **fields)
        prediction = self.service.predict_fee(
            self.record_id, self.config.compute_units_estimate, self.urgency
        )
        floor = self.service.predict_floor(self.record_id)

        return {
            "record_id": self.record_id,
            "sample": sample.to_dict(),
            "prediction": prediction.to_dict(),
            "floor": floor,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    def run_continuous(self, poll_secs: int):
        """
        Run continuous sampling loop.

        Args:
            poll_secs: Seconds between polls
        """
        while True:
            try:
                result = self.run_once()
                sample = result["sample"]
                prediction = result["prediction"]
                logger.info(
                    f"slot={sample['sequence']} fee={sample['fee']} tps={sample['throughput']} | "
                    f"predicted={prediction['estimated_fee']} [{prediction['urgency']}] "
                    f"confidence={prediction['confidence']} floor={result['floor']}"
                )
            except KeyboardInterrupt:
                logger.info("Exiting.")
                sys.exit(0)
            except Exception as e:
                logger.error(f"Error in sampling loop: {e}", exc_info=True)

            time.sleep(poll_secs)
