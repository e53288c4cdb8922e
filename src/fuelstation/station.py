"""Station controller wiring the gate, pool, coordinator and spawner."""

from __future__ import annotations

import asyncio
import logging

from fuelstation._constants import ms_to_seconds
from fuelstation.config import StationConfig
from fuelstation.coordinator import ShutdownCoordinator
from fuelstation.exceptions import StationError
from fuelstation.gate import AdmissionGate
from fuelstation.models.station import StationReport, StationSnapshot
from fuelstation.models.vehicle import Vehicle, VehicleReport
from fuelstation.pool import FuelPool
from fuelstation.random_source import IntSource, default_source
from fuelstation.shutdown import ShutdownSignal
from fuelstation.spawner import VehicleSpawner
from fuelstation.state import StationState
from fuelstation.worker import service_vehicle

_logger = logging.getLogger(__name__)


class GasStation:
    """Runs one station from opening until every vehicle has left.

    Usage::

        station = GasStation(StationConfig(capacity=4))
        report = await station.run()

    The station is closed by whichever comes first: the closing timeout or
    an empty fuel pool.  :meth:`run` returns only after shutdown has been
    triggered *and* no vehicle holds an admission slot.
    """

    def __init__(self, config: StationConfig | None = None, *, rng: IntSource | None = None) -> None:
        self._config = config if config is not None else StationConfig()
        self._rng = rng if rng is not None else default_source()

        self._state = StationState(
            initial_fuel=self._config.initial_fuel,
            capacity=self._config.capacity,
        )
        self._signal = ShutdownSignal()
        self._coordinator = ShutdownCoordinator(
            self._state,
            self._signal,
            closing_timeout_ms=self._config.closing_timeout_ms,
        )
        self._pool = FuelPool(self._state, self._coordinator.on_fuel_depleted)
        self._gate = AdmissionGate(self._config.capacity)
        self._spawner = VehicleSpawner(self._signal, self._launch, config=self._config, rng=self._rng)

        self._workers: list[asyncio.Task[VehicleReport]] = []
        self._timer: asyncio.TimerHandle | None = None
        self._started = False

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    @property
    def config(self) -> StationConfig:
        return self._config

    @property
    def state(self) -> StationState:
        return self._state

    @property
    def signal(self) -> ShutdownSignal:
        return self._signal

    @property
    def coordinator(self) -> ShutdownCoordinator:
        return self._coordinator

    @property
    def pool(self) -> FuelPool:
        return self._pool

    @property
    def gate(self) -> AdmissionGate:
        return self._gate

    @property
    def spawner(self) -> VehicleSpawner:
        return self._spawner

    def snapshot(self) -> StationSnapshot:
        return self._state.snapshot()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def run(self) -> StationReport:
        """Open the station, wait for it to close and drain, and report."""
        if self._started:
            raise StationError("GasStation.run() may only be called once")
        self._started = True

        loop = asyncio.get_running_loop()
        _logger.info("Total fuel: %d", self._state.initial_fuel)

        self._timer = loop.call_later(
            ms_to_seconds(self._config.closing_timeout_ms),
            self._coordinator.on_timeout_elapsed,
        )
        self._coordinator.attach(stop_spawner=self._spawner.stop, stop_timer=self._timer.cancel)
        self._spawner.start()

        try:
            await self._coordinator.wait_shutdown()
            await self._gate.wait_drained()
            _logger.debug("Gate drained; waiting for remaining vehicles")
            await self._spawner.wait_stopped()
            # Vehicles still queued at shutdown leave without a slot.
            reports = await asyncio.gather(*self._workers)
        finally:
            self._teardown()

        self._coordinator.mark_closed()
        report = StationReport(
            vehicle_count=self._spawner.vehicle_count,
            closing_reason=self._coordinator.closing_reason,
            initial_fuel=self._state.initial_fuel,
            remaining_fuel=self._pool.remaining,
            fuel_dispensed=self._pool.dispensed,
            peak_occupancy=self._gate.peak_occupancy,
            vehicles=list(reports),
        )
        _logger.info("Vehicles count: %d", report.vehicle_count)
        return report

    def _launch(self, vehicle: Vehicle) -> None:
        task = asyncio.get_running_loop().create_task(
            service_vehicle(
                vehicle,
                gate=self._gate,
                pool=self._pool,
                state=self._state,
                config=self._config,
                rng=self._rng,
            ),
            name=f"vehicle-{vehicle.id}",
        )
        self._workers.append(task)

    def _teardown(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._spawner.stop()
        for task in self._workers:
            if not task.done():
                task.cancel()


async def run_station(config: StationConfig | None = None, *, rng: IntSource | None = None) -> StationReport:
    """Run a station with *config* and return its report."""
    return await GasStation(config, rng=rng).run()
