"""Fixed-capacity sample window for fee history."""

import threading
from dataclasses import dataclass, astuple, asdict
from typing import Dict, Iterable, List, Optional, Tuple
from .constants import WINDOW_CAPACITY


# Canonical serialization order
SAMPLE_FIELDS = ("fee", "throughput", "compute_units", "sequence", "timestamp")


@dataclass(frozen=True)
class Sample:
    """One observed network data point."""
    fee: int            # smallest fee unit
    throughput: int     # transactions per second
    compute_units: int  # compute units consumed by the sampled transaction
    sequence: int       # ledger slot, traceability only
    timestamp: int      # unix seconds, supplied by the host

    def to_list(self) -> List[int]:
        return list(astuple(self))

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


class SampleWindow:
    """
    Ring buffer of the most recent samples.

    Once full, each append overwrites the oldest sample. Insertion order is
    authoritative; ``sequence`` and ``timestamp`` are never used for ordering.
    """

    def __init__(self, capacity: int = WINDOW_CAPACITY):
        """
        Initialize an empty window.

        Args:
            capacity: Maximum number of retained samples
        """
        if capacity <= 0:
            raise ValueError(f"Window capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._buffer: List[Optional[Sample]] = [None] * capacity
        self._head = 0  # index of the oldest sample
        self._length = 0
        self._lock = threading.Lock()

    @classmethod
    def from_samples(cls, samples: Iterable[Sample], capacity: int = WINDOW_CAPACITY) -> "SampleWindow":
        """
        Rebuild a window from an ordered sequence of samples, oldest first.

        Only the newest ``capacity`` samples are kept.
        """
        window = cls(capacity)
        for sample in samples:
            window.append(sample)
        return window

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, sample: Sample) -> Optional[Sample]:
        """
        Append a sample, evicting the oldest one if the window is full.

        Args:
            sample: Sample to append

        Returns:
            The evicted sample, or None if nothing was evicted
        """
        with self._lock:
            if self._length == self._capacity:
                evicted = self._buffer[self._head]
                self._buffer[self._head] = sample
                self._head = (self._head + 1) % self._capacity
                return evicted

            self._buffer[(self._head + self._length) % self._capacity] = sample
            self._length += 1
            return None

    def snapshot(self) -> Tuple[Sample, ...]:
        """Return the current contents, oldest first, as an immutable tuple."""
        with self._lock:
            return tuple(
                self._buffer[(self._head + i) % self._capacity]
                for i in range(self._length)
            )

    def last(self) -> Optional[Sample]:
        """Return the most recently appended sample."""
        with self._lock:
            if self._length == 0:
                return None
            return self._buffer[(self._head + self._length - 1) % self._capacity]

    def is_empty(self) -> bool:
        return self._length == 0

    def __len__(self) -> int:
        return self._length

    def __iter__(self):
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"SampleWindow(len={self._length}, capacity={self._capacity})"
