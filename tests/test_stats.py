"""Tests for window statistics."""

from feepredictor import stats
from feepredictor.window import Sample


def samples(fees, compute_units=1000):
    return tuple(
        Sample(fee=fee, throughput=0, compute_units=compute_units, sequence=i, timestamp=i)
        for i, fee in enumerate(fees)
    )


def test_average_empty():
    assert stats.average((), "fee") == 0
    assert stats.average((), "compute_units") == 0


def test_average_basic():
    assert stats.average(samples([100, 200, 300]), "fee") == 200


def test_average_truncates():
    """Test that the mean uses integer division."""
    assert stats.average(samples([1, 2]), "fee") == 1
    assert stats.average(samples([10, 10, 11]), "fee") == 10


def test_average_selector_field_and_callable():
    snap = samples([100, 200], compute_units=1500)
    assert stats.average(snap, "compute_units") == 1500
    assert stats.average(snap, lambda s: s.fee * 2) == 300


def test_minimum():
    snap = samples([300, 100, 200])
    assert stats.minimum(snap, "fee") == 100
    assert stats.minimum((), "fee") == 0
    assert stats.minimum((), "fee", default=42) == 42


def test_confidence_insufficient_samples():
    assert stats.confidence(()) == 0
    assert stats.confidence(samples([500])) == 0


def test_confidence_zero_variance():
    assert stats.confidence(samples([700, 700, 700])) == 100
    assert stats.confidence(samples([0, 0])) == 100


def test_confidence_known_values():
    # variance 1 -> 100 / 2
    assert stats.confidence(samples([10, 12])) == 50
    # variance 4 -> 100 / 3
    assert stats.confidence(samples([0, 4])) == 33
    # variance 6666.67 -> 100 / 82.6
    assert stats.confidence(samples([100, 200, 300])) == 1


def test_confidence_decreases_with_outlier():
    base = samples([0, 0])
    with_outlier = samples([0, 0, 1_000_000])
    assert stats.confidence(with_outlier) < stats.confidence(base)


def test_confidence_bounds():
    for fees in ([1, 2], [5, 5, 5, 6], [0, 10**18], list(range(144))):
        score = stats.confidence(samples(fees))
        assert 0 <= score <= 100


def test_fee_variance():
    assert stats.fee_variance(()) == 0.0
    assert stats.fee_variance(samples([10, 12])) == 1.0
