"""Validation and ingestion of samples into a window."""

import time
from typing import Callable, Iterable, Optional
from .window import Sample, SampleWindow, SAMPLE_FIELDS
from .errors import ValidationError
from .constants import U32_MAX, U64_MAX, I64_MIN, I64_MAX
from .logging import get_logger

logger = get_logger(__name__)


def _check_range(field: str, value, low: int, high: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, value, f"{field} must be an integer, got {value!r}")
    if value < low:
        raise ValidationError(field, value, f"{field} must be >= {low}, got {value}")
    if value > high:
        raise ValidationError(field, value, f"{field} overflows (max {high}), got {value}")
    return value


def build_sample(fee, throughput, compute_units, sequence, timestamp) -> Sample:
    """
    Build a sample after checking every field fits its ledger type.

    Raises:
        ValidationError: If a field is not an integer or is out of range
    """
    return Sample(
        fee=_check_range("fee", fee, 0, U64_MAX),
        throughput=_check_range("throughput", throughput, 0, U32_MAX),
        compute_units=_check_range("compute_units", compute_units, 0, U64_MAX),
        sequence=_check_range("sequence", sequence, 0, U64_MAX),
        timestamp=_check_range("timestamp", timestamp, I64_MIN, I64_MAX),
    )


def sample_from_list(values: Iterable[int]) -> Sample:
    """Build a checked sample from a list in canonical field order."""
    values = list(values)
    if len(values) != len(SAMPLE_FIELDS):
        raise ValueError(
            f"Expected {len(SAMPLE_FIELDS)} sample fields, got {len(values)}"
        )
    return build_sample(*values)


def unix_clock() -> int:
    """Current unix time in whole seconds."""
    return int(time.time())


class IngestionGateway:
    """
    Validates incoming samples and appends them to a window.

    Callers are assumed to be authorized already; authority checks belong to
    the host that owns the window.
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None):
        """
        Args:
            clock: Source of the current logical timestamp
        """
        self.clock = clock or unix_clock

    def ingest(
        self,
        window: SampleWindow,
        fee: int,
        throughput: int,
        compute_units: int,
        sequence: int = 0,
    ) -> Sample:
        """
        Validate the fields, stamp them with the current time and append.

        Returns:
            The stored sample

        Raises:
            ValidationError: If any field is negative or out of range; the
                window is left unchanged
        """
        sample = build_sample(fee, throughput, compute_units, sequence, self.clock())
        evicted = window.append(sample)
        if evicted is not None:
            logger.debug(f"Evicted sample at sequence {evicted.sequence} (fee={evicted.fee})")
        logger.debug(f"Stored new fee data at sequence {sample.sequence}")
        return sample
