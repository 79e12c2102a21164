"""Command-line interface for the fee predictor."""

import sys
import json
import logging
import argparse
from .config import Config
from .errors import FeePredictorError
from .record import record_id_for
from .runner import FeePredictorRunner
from .service import FeeService
from .state_manager import StateManager
from .logging import setup_logging, get_logger
from .structured_output import StructuredOutputWriter

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Predict transaction fees from a rolling window of observed fee samples."
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config.yaml (default: search for config.yaml)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Pretty-print JSON output"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # Commands that act on one payer's fee record
    record_args = argparse.ArgumentParser(add_help=False)
    record_args.add_argument(
        "--payer",
        type=str,
        default=None,
        help="Owner of the fee record (default: sampling.payer from config)"
    )

    sub.add_parser("init", parents=[record_args], help="Create an empty fee record for the payer")

    ingest = sub.add_parser("ingest", parents=[record_args], help="Store one fee sample")
    ingest.add_argument("--signer", type=str, default=None, help="Signer (default: payer)")
    ingest.add_argument("--fee", type=int, required=True)
    ingest.add_argument("--throughput", type=int, required=True, help="Transactions per second")
    ingest.add_argument("--compute-units", type=int, required=True)
    ingest.add_argument("--sequence", type=int, default=0, help="Ledger slot of the sample")

    predict = sub.add_parser("predict", parents=[record_args], help="Scaled-average fee prediction")
    predict.add_argument("--compute-units", type=int, default=None)
    predict.add_argument("--urgency", choices=["low", "medium", "high"], default=None)

    sub.add_parser("floor", parents=[record_args], help="Cheapest fee in the current window")

    sub.add_parser("records", help="List stored fee record ids")

    watch = sub.add_parser("watch", help="Sample the network and predict continuously")
    watch.add_argument("--once", action="store_true", help="Run one iteration then exit (cron-friendly)")

    return parser


def _emit(output, verbose: bool) -> None:
    if verbose:
        print(json.dumps(output, indent=2))
    else:
        print(json.dumps(output))


def main(argv=None):
    """Main CLI entrypoint."""
    args = build_parser().parse_args(argv)

    try:
        config = Config(args.config)
    except FileNotFoundError as e:
        logging.basicConfig(level=logging.ERROR, format='[%(levelname)s] %(message)s')
        logger.error(f"Config file not found: {e}")
        sys.exit(1)
    except (ValueError, OSError) as e:
        logging.basicConfig(level=logging.ERROR, format='[%(levelname)s] %(message)s')
        logger.error(f"Error loading config: {e}")
        sys.exit(1)

    setup_logging(config)

    structured_writer = None
    structured_cfg = config.structured_output_config
    if structured_cfg.get("enabled"):
        structured_writer = StructuredOutputWriter(
            base_dir=structured_cfg["base_dir"],
            samples_filename=structured_cfg["samples_filename"],
            predictions_filename=structured_cfg["predictions_filename"],
        )

    payer = getattr(args, "payer", None) or config.payer

    if args.command == "watch":
        runner = FeePredictorRunner(config, structured_writer=structured_writer)
        if args.once:
            try:
                _emit(runner.run_once(), args.verbose)
            except Exception as e:
                logger.error(f"Error in one-shot run: {e}", exc_info=True)
                print(f"Error: {e}", file=sys.stderr)
                sys.exit(1)
        else:
            runner.run_continuous(config.poll_secs)
        return

    state_manager = StateManager(
        backend=config.state_backend,
        db_path=config.state_db_path,
        json_path=config.state_json_path,
    )
    service = FeeService(
        state_manager,
        min_samples=config.min_samples,
        structured_writer=structured_writer,
    )
    record_id = record_id_for(payer)

    try:
        if args.command == "init":
            record = service.initialize(payer)
            output = {"record_id": record.record_id, "authority": record.authority}
        elif args.command == "ingest":
            sample = service.store_fee_data(
                record_id,
                args.signer or payer,
                fee=args.fee,
                throughput=args.throughput,
                compute_units=args.compute_units,
                sequence=args.sequence,
            )
            output = {"record_id": record_id, "sample": sample.to_dict()}
        elif args.command == "predict":
            estimate = args.compute_units if args.compute_units is not None else config.compute_units_estimate
            result = service.predict_fee(record_id, estimate, args.urgency or config.urgency)
            output = {"record_id": record_id, "prediction": result.to_dict()}
        elif args.command == "floor":
            output = {"record_id": record_id, "floor": service.predict_floor(record_id)}
        else:
            output = {"records": state_manager.list_record_ids()}
    except FeePredictorError as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        state_manager.close()

    _emit(output, args.verbose)


if __name__ == "__main__":
    main()
