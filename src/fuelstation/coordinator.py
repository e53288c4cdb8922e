"""Shutdown coordination between the closing timeout and fuel depletion.

Either trigger may fire first, from any vehicle's unit or from the timer.
Both transitions run under the station state lock, so the pair of flags,
the cancellation broadcast and the stop requests are one atomic step.

Transitions:

- timeout first: ``timeout_reached`` is set, the signal fires and spawning
  stops.  Vehicles already fueling finish; if one of them then empties the
  pool, ``fuel_depleted`` is recorded as well but nothing else happens.
- depletion first: both flags are set together, the signal fires, spawning
  stops and the closing timer is cancelled.  A later timeout is a no-op.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from fuelstation.exceptions import StationError
from fuelstation.models.station import ClosingReason, StationPhase
from fuelstation.shutdown import ShutdownSignal
from fuelstation.state import StationState

_logger = logging.getLogger(__name__)


def _call_stopper(stopper: Callable[[], None] | None, name: str) -> None:
    if stopper is None:
        return
    _logger.debug("Stopping %s", name)
    stopper()


class ShutdownCoordinator:
    def __init__(
        self,
        state: StationState,
        signal: ShutdownSignal,
        *,
        closing_timeout_ms: int | None = None,
    ) -> None:
        self._state = state
        self._signal = signal
        self._closing_timeout_ms = closing_timeout_ms
        self._stop_spawner: Callable[[], None] | None = None
        self._stop_timer: Callable[[], None] | None = None
        self._closing_reason: ClosingReason | None = None
        self._closed = False
        self._shutdown = asyncio.Event()

    def attach(
        self,
        *,
        stop_spawner: Callable[[], None] | None = None,
        stop_timer: Callable[[], None] | None = None,
    ) -> None:
        """Register the routines that halt spawning and the closing timer."""
        if stop_spawner is not None:
            self._stop_spawner = stop_spawner
        if stop_timer is not None:
            self._stop_timer = stop_timer

    @property
    def closing_reason(self) -> ClosingReason | None:
        """The trigger that closed the station first, if any."""
        with self._state.lock:
            return self._closing_reason

    @property
    def is_shutdown(self) -> bool:
        return self._signal.is_cancelled

    @property
    def phase(self) -> StationPhase:
        with self._state.lock:
            if self._closed:
                return StationPhase.CLOSED
            if self._closing_reason is ClosingReason.DEPLETION:
                return StationPhase.CLOSING_BY_DEPLETION
            if self._closing_reason is ClosingReason.TIMEOUT:
                return StationPhase.CLOSING_BY_TIMEOUT
            return StationPhase.OPEN

    def on_timeout_elapsed(self) -> None:
        with self._state.lock:
            if self._state.fuel_depleted:
                # Depletion already closed the station.
                return
            if not self._state.mark_timeout_reached():
                return

            if self._closing_timeout_ms is not None:
                _logger.info("Gas station closing timeout of %d ms elapsed", self._closing_timeout_ms)
            else:
                _logger.info("Gas station closing: timeout elapsed")
            self._closing_reason = ClosingReason.TIMEOUT
            self._broadcast()
            _call_stopper(self._stop_spawner, "spawner")

    def on_fuel_depleted(self) -> None:
        with self._state.lock:
            if self._state.fuel_depleted:
                return

            if self._state.timeout_reached:
                # Already closing by timeout; record depletion only.
                _logger.info("Gas station closing: fuel depleted")
                self._state.mark_fuel_depleted()
                self._broadcast()
                return

            _logger.info("Gas station closing: fuel depleted")
            self._state.mark_fuel_depleted()
            self._state.mark_timeout_reached()
            self._closing_reason = ClosingReason.DEPLETION
            self._broadcast()
            _call_stopper(self._stop_spawner, "spawner")
            _call_stopper(self._stop_timer, "closing timer")

    async def wait_shutdown(self) -> None:
        """Block until either trigger has fired."""
        await self._shutdown.wait()

    def mark_closed(self) -> None:
        """Enter the terminal phase once every admitted vehicle has left."""
        with self._state.lock:
            if self._closing_reason is None:
                raise StationError("station cannot close before a shutdown trigger fired")
            self._closed = True

    def _broadcast(self) -> None:
        if self._signal.cancel():
            _logger.debug("Shutdown signal fired")
        self._shutdown.set()
