"""Tests for fee record persistence."""

import json
import pytest
from feepredictor.record import FeeRecord, record_id_for
from feepredictor.state_manager import StateManager
from feepredictor.window import Sample, SampleWindow
from feepredictor.errors import ValidationError


def make_record(fees):
    window = SampleWindow.from_samples(
        Sample(fee=fee, throughput=100, compute_units=1000, sequence=i, timestamp=1_700_000_000 + i)
        for i, fee in enumerate(fees)
    )
    return FeeRecord(record_id=record_id_for("alice"), authority="alice",
                     last_updated=1_700_000_100, window=window)


@pytest.fixture(params=["sqlite", "json"])
def state_manager(request, tmp_path):
    manager = StateManager(
        backend=request.param,
        db_path=str(tmp_path / "state.db"),
        json_path=str(tmp_path / "state.json"),
    )
    yield manager
    manager.close()


def test_record_round_trip(state_manager):
    record = make_record([300, 100, 200])
    state_manager.save_record(record)

    loaded = state_manager.load_record(record.record_id)
    assert loaded.record_id == "fee_data:alice"
    assert loaded.authority == "alice"
    assert loaded.last_updated == 1_700_000_100
    assert loaded.window.snapshot() == record.window.snapshot()


def test_missing_record(state_manager):
    assert state_manager.load_record("fee_data:nobody") is None
    assert not state_manager.record_exists("fee_data:nobody")


def test_record_exists_and_list(state_manager):
    state_manager.save_record(make_record([1]))
    assert state_manager.record_exists("fee_data:alice")
    assert state_manager.list_record_ids() == ["fee_data:alice"]


def test_save_replaces(state_manager):
    state_manager.save_record(make_record([1, 2]))
    state_manager.save_record(make_record([5]))
    loaded = state_manager.load_record("fee_data:alice")
    assert [s.fee for s in loaded.window] == [5]


def test_json_samples_in_canonical_order(tmp_path):
    """Test that samples persist as [fee, throughput, compute_units, sequence, timestamp]."""
    json_path = tmp_path / "state.json"
    manager = StateManager(backend="json", json_path=str(json_path))
    manager.save_record(make_record([250]))

    with open(json_path) as f:
        data = json.load(f)
    assert data["records"]["fee_data:alice"]["samples"] == [[250, 100, 1000, 0, 1_700_000_000]]


def test_json_state_reloads(tmp_path):
    json_path = str(tmp_path / "state.json")
    StateManager(backend="json", json_path=json_path).save_record(make_record([7, 8]))

    reopened = StateManager(backend="json", json_path=json_path)
    assert [s.fee for s in reopened.load_record("fee_data:alice").window] == [7, 8]


def test_unknown_backend():
    with pytest.raises(ValueError):
        StateManager(backend="redis")


def test_load_rejects_out_of_range_samples(tmp_path):
    """Test that a hand-edited state file cannot smuggle invalid samples into a window."""
    json_path = tmp_path / "state.json"
    manager = StateManager(backend="json", json_path=str(json_path))
    manager.save_record(make_record([250]))

    with open(json_path) as f:
        data = json.load(f)
    data["records"]["fee_data:alice"]["samples"].append([-1, 100, 1000, 1, 1_700_000_001])
    with open(json_path, "w") as f:
        json.dump(data, f)

    reopened = StateManager(backend="json", json_path=str(json_path))
    with pytest.raises(ValidationError):
        reopened.load_record("fee_data:alice")
