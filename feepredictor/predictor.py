"""Fee prediction strategies over a sample window snapshot."""

import math
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Any, Dict, Optional, Sequence
from . import stats
from .window import Sample
from .errors import InsufficientDataError, ValidationError
from .constants import (
    U64_MAX,
    LOW_URGENCY_MULTIPLIER,
    MEDIUM_URGENCY_MULTIPLIER,
    HIGH_URGENCY_MULTIPLIER,
)


class Urgency(Enum):
    """How quickly the caller needs the transaction included."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def multiplier(self) -> float:
        return _URGENCY_MULTIPLIERS[self]

    @classmethod
    def parse(cls, value: Any) -> "Urgency":
        """Accept an Urgency or a case-insensitive name such as "High"."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown urgency {value!r}; expected one of "
                f"{', '.join(u.value for u in cls)}"
            ) from None


_URGENCY_MULTIPLIERS = {
    Urgency.LOW: LOW_URGENCY_MULTIPLIER,
    Urgency.MEDIUM: MEDIUM_URGENCY_MULTIPLIER,
    Urgency.HIGH: HIGH_URGENCY_MULTIPLIER,
}


@dataclass(frozen=True)
class PredictionRequest:
    compute_units_estimate: int
    urgency: Urgency = Urgency.MEDIUM


@dataclass(frozen=True)
class PredictionResult:
    estimated_fee: int
    as_of: Optional[int]  # timestamp of the newest sample
    confidence: int       # 0-100
    urgency: Urgency

    def to_dict(self) -> Dict[str, Any]:
        return {
            "estimated_fee": self.estimated_fee,
            "as_of": self.as_of,
            "confidence": self.confidence,
            "urgency": self.urgency.value,
        }


def _require_samples(snapshot: Sequence[Sample], min_samples: int) -> None:
    if min_samples > 0 and len(snapshot) < min_samples:
        raise InsufficientDataError(min_samples, len(snapshot))


def predict_scaled(
    snapshot: Sequence[Sample],
    request: PredictionRequest,
    min_samples: int = 0,
) -> PredictionResult:
    """
    Predict a fee from the average historical fee.

    The average fee is scaled by the urgency multiplier and by the ratio of
    the requested compute units to the average observed compute units.

    Args:
        snapshot: Window snapshot
        request: Compute unit estimate and urgency
        min_samples: Raise instead of degrading when fewer samples exist

    Returns:
        PredictionResult; a zero fee and zero confidence for an empty window

    Raises:
        ValidationError: If the estimate or resulting fee does not fit in u64
        InsufficientDataError: If ``min_samples`` is not met
    """
    estimate = request.compute_units_estimate
    if isinstance(estimate, bool) or not isinstance(estimate, int) or not 0 <= estimate <= U64_MAX:
        raise ValidationError("compute_units_estimate", estimate)

    _require_samples(snapshot, min_samples)
    urgency = Urgency.parse(request.urgency)

    if not snapshot:
        return PredictionResult(estimated_fee=0, as_of=None, confidence=0, urgency=urgency)

    avg_fee = stats.average(snapshot, "fee")
    avg_compute_units = stats.average(snapshot, "compute_units")

    # Exact arithmetic so results near u64 max are not rounded up
    if avg_compute_units > 0:
        compute_scaling = Fraction(estimate, avg_compute_units)
    else:
        compute_scaling = Fraction(1)

    estimated_fee = math.floor(Fraction(avg_fee) * Fraction(str(urgency.multiplier)) * compute_scaling)
    if estimated_fee > U64_MAX:
        raise ValidationError(
            "estimated_fee", estimated_fee, f"Estimated fee overflows u64: {estimated_fee}"
        )

    return PredictionResult(
        estimated_fee=estimated_fee,
        as_of=snapshot[-1].timestamp,
        confidence=stats.confidence(snapshot),
        urgency=urgency,
    )


def predict_floor(snapshot: Sequence[Sample], min_samples: int = 0) -> int:
    """
    Cheapest fee still present in the window.

    Ignores urgency and workload size. This is a conservative lower bound,
    not a recommended bid.
    """
    _require_samples(snapshot, min_samples)
    return stats.minimum(snapshot, "fee", default=0)
