"""Statistics over a sample window snapshot.

All functions are pure and operate on an already captured snapshot, so they
need no locking.
"""

import math
from operator import attrgetter
from typing import Callable, Sequence, Union
from .window import Sample
from .constants import MAX_CONFIDENCE, MIN_CONFIDENCE_SAMPLES

Selector = Union[str, Callable[[Sample], int]]


def _accessor(selector: Selector) -> Callable[[Sample], int]:
    """Turn a field name like ``"fee"`` into a getter; pass callables through."""
    if isinstance(selector, str):
        return attrgetter(selector)
    return selector


def average(snapshot: Sequence[Sample], selector: Selector) -> int:
    """
    Integer mean of the selected field.

    Uses floor division, so the result is truncated toward zero for the
    non-negative fields a window holds.

    Args:
        snapshot: Window snapshot
        selector: Field name (e.g. "fee", "compute_units") or getter

    Returns:
        Truncated mean, or 0 for an empty snapshot
    """
    if not snapshot:
        return 0
    get = _accessor(selector)
    return sum(get(s) for s in snapshot) // len(snapshot)


def minimum(snapshot: Sequence[Sample], selector: Selector, default: int = 0) -> int:
    """Smallest observed value of the selected field, or ``default`` if empty."""
    if not snapshot:
        return default
    get = _accessor(selector)
    return min(get(s) for s in snapshot)


def fee_variance(snapshot: Sequence[Sample]) -> float:
    """Population variance of fees, 0.0 for an empty snapshot."""
    if not snapshot:
        return 0.0
    mean = sum(s.fee for s in snapshot) / len(snapshot)
    return sum((s.fee - mean) ** 2 for s in snapshot) / len(snapshot)


def confidence(snapshot: Sequence[Sample]) -> int:
    """
    Inverse-dispersion confidence score in [0, 100].

    This is a heuristic, not a statistical confidence interval:
    ``floor(min(100, 100 / (1 + sqrt(variance))))`` over the fee values.
    Identical fees score 100; the score falls toward 0 as fees spread out.

    Args:
        snapshot: Window snapshot

    Returns:
        Confidence score, 0 when fewer than two samples are available
    """
    if len(snapshot) < MIN_CONFIDENCE_SAMPLES:
        return 0
    score = MAX_CONFIDENCE / (1.0 + math.sqrt(fee_variance(snapshot)))
    return int(min(float(MAX_CONFIDENCE), score))
