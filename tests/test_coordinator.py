from __future__ import annotations

import asyncio
import threading

import pytest

from fuelstation.coordinator import ShutdownCoordinator
from fuelstation.exceptions import StationError
from fuelstation.models.station import ClosingReason, StationPhase
from fuelstation.shutdown import ShutdownSignal
from fuelstation.state import StationState


def _coordinator() -> tuple[StationState, ShutdownSignal, ShutdownCoordinator, list[str]]:
    state = StationState(initial_fuel=100, capacity=2)
    signal = ShutdownSignal()
    coordinator = ShutdownCoordinator(state, signal, closing_timeout_ms=50)
    stops: list[str] = []
    coordinator.attach(
        stop_spawner=lambda: stops.append("spawner"),
        stop_timer=lambda: stops.append("timer"),
    )
    return state, signal, coordinator, stops


def test_starts_open() -> None:
    state, signal, coordinator, stops = _coordinator()

    assert coordinator.phase is StationPhase.OPEN
    assert coordinator.closing_reason is None
    assert not signal.is_cancelled
    assert not state.timeout_reached
    assert not state.fuel_depleted
    assert stops == []


def test_timeout_first_closes_and_stops_spawner_only() -> None:
    state, signal, coordinator, stops = _coordinator()

    coordinator.on_timeout_elapsed()

    assert state.timeout_reached
    assert not state.fuel_depleted
    assert signal.is_cancelled
    assert stops == ["spawner"]
    assert coordinator.closing_reason is ClosingReason.TIMEOUT
    assert coordinator.phase is StationPhase.CLOSING_BY_TIMEOUT


def test_depletion_first_sets_both_flags_and_stops_timer() -> None:
    state, signal, coordinator, stops = _coordinator()

    coordinator.on_fuel_depleted()

    assert state.fuel_depleted
    assert state.timeout_reached
    assert signal.is_cancelled
    assert stops == ["spawner", "timer"]
    assert coordinator.closing_reason is ClosingReason.DEPLETION
    assert coordinator.phase is StationPhase.CLOSING_BY_DEPLETION


def test_timeout_after_depletion_is_noop() -> None:
    _, _, coordinator, stops = _coordinator()
    coordinator.on_fuel_depleted()

    coordinator.on_timeout_elapsed()

    assert stops == ["spawner", "timer"]
    assert coordinator.closing_reason is ClosingReason.DEPLETION


def test_depletion_after_timeout_only_records_flag() -> None:
    state, signal, coordinator, stops = _coordinator()
    coordinator.on_timeout_elapsed()

    coordinator.on_fuel_depleted()

    assert state.fuel_depleted
    assert signal.is_cancelled
    assert stops == ["spawner"]
    assert coordinator.closing_reason is ClosingReason.TIMEOUT
    assert coordinator.phase is StationPhase.CLOSING_BY_TIMEOUT


def test_repeated_triggers_are_idempotent() -> None:
    state, _, coordinator, stops = _coordinator()

    coordinator.on_timeout_elapsed()
    coordinator.on_timeout_elapsed()
    coordinator.on_fuel_depleted()
    coordinator.on_fuel_depleted()

    assert stops == ["spawner"]
    assert state.timeout_reached and state.fuel_depleted


def test_mark_closed_requires_a_trigger() -> None:
    _, _, coordinator, _ = _coordinator()

    with pytest.raises(StationError):
        coordinator.mark_closed()

    coordinator.on_timeout_elapsed()
    coordinator.mark_closed()
    assert coordinator.phase is StationPhase.CLOSED


def test_racing_triggers_close_exactly_once() -> None:
    for _ in range(50):
        state, signal, coordinator, stops = _coordinator()
        barrier = threading.Barrier(8)

        def fire(index: int) -> None:
            barrier.wait()
            if index % 2:
                coordinator.on_timeout_elapsed()
            else:
                coordinator.on_fuel_depleted()

        threads = [threading.Thread(target=fire, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert signal.is_cancelled
        assert state.fuel_depleted and state.timeout_reached
        assert stops.count("spawner") == 1
        if coordinator.closing_reason is ClosingReason.DEPLETION:
            assert stops == ["spawner", "timer"]
        else:
            assert stops == ["spawner"]


@pytest.mark.asyncio
async def test_wait_shutdown_resolves_on_trigger() -> None:
    _, _, coordinator, _ = _coordinator()

    waiter = asyncio.create_task(coordinator.wait_shutdown())
    await asyncio.sleep(0)
    assert not waiter.done()

    coordinator.on_fuel_depleted()
    await asyncio.wait_for(waiter, 1.0)
    assert coordinator.is_shutdown
