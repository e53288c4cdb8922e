"""Periodic vehicle arrivals."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable

from fuelstation._constants import ms_to_seconds
from fuelstation.config import StationConfig
from fuelstation.exceptions import StationError
from fuelstation.models.vehicle import Vehicle
from fuelstation.random_source import IntSource
from fuelstation.shutdown import ShutdownSignal

_logger = logging.getLogger(__name__)


class VehicleSpawner:
    """Creates a vehicle after every randomized interval until shutdown.

    The interval is re-drawn after each arrival.  ``launch`` receives every
    new vehicle and is responsible for starting its worker.
    """

    def __init__(
        self,
        signal: ShutdownSignal,
        launch: Callable[[Vehicle], None],
        *,
        config: StationConfig,
        rng: IntSource,
    ) -> None:
        self._signal = signal
        self._launch = launch
        self._config = config
        self._rng = rng
        self._id_lock = threading.Lock()
        self._next_id = 1
        self._vehicle_count = 0
        self._task: asyncio.Task[None] | None = None
        self._stop_requested = False
        self._stopped = asyncio.Event()

    @property
    def vehicle_count(self) -> int:
        """Vehicles created so far."""
        return self._vehicle_count

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is not None:
            raise StationError("spawner already started")
        if self._stop_requested:
            self._stopped.set()
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="vehicle-spawner")

    def stop(self) -> None:
        """Stop spawning permanently.  Safe to call more than once."""
        self._stop_requested = True
        task = self._task
        if task is None:
            self._stopped.set()
            return
        if not task.done():
            task.cancel()

    async def wait_stopped(self) -> None:
        await self._stopped.wait()

    def _allocate_id(self) -> int:
        with self._id_lock:
            vehicle_id = self._next_id
            self._next_id += 1
            return vehicle_id

    async def _run(self) -> None:
        try:
            while True:
                interval_ms = self._rng.randint(
                    self._config.spawn_interval_min_ms,
                    self._config.spawn_interval_max_ms,
                )
                await asyncio.sleep(ms_to_seconds(interval_ms))
                if self._signal.is_cancelled:
                    _logger.debug("Spawner observed shutdown; stopping")
                    return

                vehicle = Vehicle(id=self._allocate_id(), shutdown=self._signal)
                self._vehicle_count += 1
                _logger.info("Vehicle %d created", vehicle.id)
                self._launch(vehicle)
        finally:
            self._stopped.set()
