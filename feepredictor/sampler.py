"""Build fee samples from live network data."""

from typing import Dict, List
from .rpc import RPCClient
from .logging import get_logger

logger = get_logger(__name__)


def median(values: List[int]) -> int:
    """Lower median of the values, 0 if empty."""
    if not values:
        return 0
    ordered = sorted(values)
    return ordered[(len(ordered) - 1) // 2]


def recent_throughput(rpc_client: RPCClient) -> int:
    """
    Transactions per second over the most recent performance sample.

    Returns:
        Whole transactions per second, 0 if the node reports no samples
    """
    samples = rpc_client.call("getRecentPerformanceSamples", 1)
    if not samples:
        return 0
    sample = samples[0]
    period = sample.get("samplePeriodSecs") or 0
    if period <= 0:
        return 0
    return int(sample.get("numTransactions", 0)) // int(period)


def recent_priority_fee(rpc_client: RPCClient) -> int:
    """Median prioritization fee reported over recent slots."""
    entries = rpc_client.call("getRecentPrioritizationFees") or []
    fees = []
    for entry in entries:
        try:
            fees.append(int(entry["prioritizationFee"]))
        except (KeyError, TypeError, ValueError):
            continue
    return median(fees)


def sample_network(rpc_client: RPCClient, compute_units: int) -> Dict[str, int]:
    """
    Collect one sample's worth of fields from the node.

    Args:
        rpc_client: RPC client instance
        compute_units: Compute units to attribute to the sample

    Returns:
        Dictionary with fee, throughput, compute_units and sequence keys
    """
    sequence = int(rpc_client.call("getSlot"))
    sample = {
        "fee": recent_priority_fee(rpc_client),
        "throughput": recent_throughput(rpc_client),
        "compute_units": compute_units,
        "sequence": sequence,
    }
    logger.debug(f"Sampled network at slot {sequence}: {sample}")
    return sample
