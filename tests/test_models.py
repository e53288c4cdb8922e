"""Tests for the pydantic report models."""

from __future__ import annotations

import dataclasses

import pytest
from pydantic import ValidationError

from fuelstation.models import (
    ClosingReason,
    StationReport,
    StationSnapshot,
    Vehicle,
    VehicleOutcome,
    VehicleReport,
)
from fuelstation.shutdown import ShutdownSignal
from fuelstation.state import StationState


class TestVehicle:
    def test_is_immutable(self) -> None:
        vehicle = Vehicle(id=1, shutdown=ShutdownSignal())
        with pytest.raises(dataclasses.FrozenInstanceError):
            vehicle.id = 2  # type: ignore[misc]

    def test_shares_the_station_signal(self) -> None:
        signal = ShutdownSignal()
        first, second = Vehicle(id=1, shutdown=signal), Vehicle(id=2, shutdown=signal)

        signal.cancel()

        assert first.shutdown.is_cancelled and second.shutdown.is_cancelled


class TestVehicleReport:
    def test_negative_grant_rejected(self) -> None:
        with pytest.raises(ValidationError):
            VehicleReport(vehicle_id=1, outcome=VehicleOutcome.SERVED, fuel_granted=-1)

    def test_outcome_parsed_from_string(self) -> None:
        report = VehicleReport.model_validate({"vehicle_id": 4, "outcome": "cancelled_while_waiting"})
        assert report.outcome is VehicleOutcome.CANCELLED_WHILE_WAITING
        assert report.fuel_granted == 0


class TestStationReport:
    def _report(self, **overrides: object) -> StationReport:
        values: dict[str, object] = {
            "vehicle_count": 3,
            "closing_reason": ClosingReason.DEPLETION,
            "initial_fuel": 100,
            "remaining_fuel": 0,
            "fuel_dispensed": 100,
            "vehicles": [
                VehicleReport(vehicle_id=1, outcome=VehicleOutcome.SERVED, fuel_granted=60),
                VehicleReport(vehicle_id=2, outcome=VehicleOutcome.SERVED, fuel_granted=40),
                VehicleReport(vehicle_id=3, outcome=VehicleOutcome.CANCELLED_WHILE_WAITING),
            ],
        }
        values.update(overrides)
        return StationReport.model_validate(values)

    def test_outcome_counts(self) -> None:
        counts = self._report().outcome_counts()
        assert counts == {VehicleOutcome.SERVED: 2, VehicleOutcome.CANCELLED_WHILE_WAITING: 1}

    def test_accounting_mismatch_rejected(self) -> None:
        with pytest.raises(ValidationError):
            self._report(fuel_dispensed=90)

    def test_json_round_trip_keeps_enums(self) -> None:
        report = self._report()
        restored = StationReport.model_validate_json(report.model_dump_json())
        assert restored.closing_reason is ClosingReason.DEPLETION
        assert restored == report


def test_state_snapshot_reflects_flags() -> None:
    state = StationState(initial_fuel=50, capacity=2)
    with state.lock:
        state.withdraw(50)
        state.mark_fuel_depleted()

    snapshot = state.snapshot()

    assert snapshot == StationSnapshot(remaining_fuel=0, capacity=2, fuel_depleted=True, timeout_reached=False)


def test_state_flags_are_monotonic() -> None:
    state = StationState(initial_fuel=10, capacity=1)
    with state.lock:
        assert state.mark_timeout_reached() is True
        assert state.mark_timeout_reached() is False
    assert state.timeout_reached


def test_state_refuses_overdraw() -> None:
    state = StationState(initial_fuel=10, capacity=1)
    with state.lock, pytest.raises(ValueError):
        state.withdraw(11)
    assert state.remaining_fuel == 10
