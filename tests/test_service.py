"""Tests for host operations over fee records."""

import json
import pytest
from feepredictor.service import FeeService
from feepredictor.state_manager import StateManager
from feepredictor.structured_output import StructuredOutputWriter
from feepredictor.predictor import Urgency
from feepredictor.errors import (
    AuthorizationError,
    InsufficientDataError,
    RecordExistsError,
    RecordNotFoundError,
    ValidationError,
)


class FakeClock:
    def __init__(self, start=1_700_000_000):
        self.now = start

    def __call__(self):
        self.now += 1
        return self.now


@pytest.fixture
def state_manager(tmp_path):
    manager = StateManager(backend="sqlite", db_path=str(tmp_path / "state.db"))
    yield manager
    manager.close()


@pytest.fixture
def service(state_manager):
    return FeeService(state_manager, clock=FakeClock())


def test_initialize(service, state_manager):
    record = service.initialize("alice")
    assert record.record_id == "fee_data:alice"
    assert record.authority == "alice"
    assert record.window.is_empty()
    assert state_manager.record_exists("fee_data:alice")


def test_initialize_twice(service):
    service.initialize("alice")
    with pytest.raises(RecordExistsError):
        service.initialize("alice")


def test_store_requires_authority(service):
    service.initialize("alice")
    with pytest.raises(AuthorizationError):
        service.store_fee_data("fee_data:alice", "mallory", fee=1, throughput=1, compute_units=1)
    assert service.predict_floor("fee_data:alice") == 0


def test_store_unknown_record(service):
    with pytest.raises(RecordNotFoundError):
        service.store_fee_data("fee_data:bob", "bob", fee=1, throughput=1, compute_units=1)


def test_store_invalid_sample_leaves_record_unchanged(service, state_manager):
    service.initialize("alice")
    service.store_fee_data("fee_data:alice", "alice", fee=10, throughput=1, compute_units=1)
    with pytest.raises(ValidationError):
        service.store_fee_data("fee_data:alice", "alice", fee=-1, throughput=1, compute_units=1)
    assert len(state_manager.load_record("fee_data:alice").window) == 1


def test_store_updates_last_updated(service, state_manager):
    service.initialize("alice")
    sample = service.store_fee_data("fee_data:alice", "alice", fee=5, throughput=1, compute_units=1, sequence=9)
    record = state_manager.load_record("fee_data:alice")
    assert record.last_updated == sample.timestamp
    assert record.window.last() == sample


def test_predictions_scenario(service):
    """Test the fees [100, 200, 300] scenario end to end through persistence."""
    service.initialize("alice")
    for slot, fee in enumerate([100, 200, 300]):
        service.store_fee_data("fee_data:alice", "alice", fee=fee, throughput=2000,
                               compute_units=1000, sequence=slot)

    medium = service.predict_fee("fee_data:alice", 1000, Urgency.MEDIUM)
    high = service.predict_fee("fee_data:alice", 1000, "high")
    assert medium.estimated_fee == 200
    assert high.estimated_fee == 300
    assert medium.as_of is not None
    assert service.predict_floor("fee_data:alice") == 100


def test_eviction_through_service(service, state_manager):
    service.initialize("alice")
    for fee in range(1, 146):
        service.store_fee_data("fee_data:alice", "alice", fee=fee, throughput=1, compute_units=1, sequence=fee)

    window = state_manager.load_record("fee_data:alice").window
    assert [s.fee for s in window] == list(range(2, 146))
    assert service.predict_floor("fee_data:alice") == 2


def test_empty_record_default_prediction(service):
    service.initialize("alice")
    result = service.predict_fee("fee_data:alice", 5000, Urgency.HIGH)
    assert result.estimated_fee == 0
    assert result.confidence == 0
    assert result.as_of is None


def test_min_samples(state_manager):
    service = FeeService(state_manager, clock=FakeClock(), min_samples=2)
    service.initialize("alice")
    service.store_fee_data("fee_data:alice", "alice", fee=100, throughput=1, compute_units=1)
    with pytest.raises(InsufficientDataError):
        service.predict_fee("fee_data:alice", 1)
    with pytest.raises(InsufficientDataError):
        service.predict_floor("fee_data:alice")


def test_structured_output(state_manager, tmp_path):
    writer = StructuredOutputWriter(str(tmp_path / "structured"))
    service = FeeService(state_manager, clock=FakeClock(), structured_writer=writer)
    service.initialize("alice")
    service.store_fee_data("fee_data:alice", "alice", fee=100, throughput=1, compute_units=1000)
    service.predict_fee("fee_data:alice", 1000)
    service.predict_floor("fee_data:alice")

    samples = [json.loads(line) for line in writer.samples_path.read_text().splitlines()]
    predictions = [json.loads(line) for line in writer.predictions_path.read_text().splitlines()]
    assert samples[0]["type"] == "sample"
    assert samples[0]["fee"] == 100
    assert samples[0]["record_id"] == "fee_data:alice"
    assert [p["type"] for p in predictions] == ["scaled", "floor"]
    assert predictions[0]["estimated_fee"] == 100
    assert predictions[1]["estimated_fee"] == 100
