"""Finite fuel pool shared by every vehicle."""

from __future__ import annotations

import logging
from collections.abc import Callable

from fuelstation.state import StationState

_logger = logging.getLogger(__name__)


class FuelPool:
    """Serializes all fuel withdrawals against the shared station state.

    ``on_depleted`` is invoked exactly when a withdrawal brings the remaining
    fuel to zero, while the state lock is still held, so no consumer can see
    an empty pool that has not been flagged yet.
    """

    def __init__(self, state: StationState, on_depleted: Callable[[], None]) -> None:
        self._state = state
        self._on_depleted = on_depleted
        self._dispensed = 0

    @property
    def remaining(self) -> int:
        return self._state.remaining_fuel

    @property
    def dispensed(self) -> int:
        with self._state.lock:
            return self._dispensed

    def try_consume(self, requested: int, *, vehicle_id: int | None = None) -> int:
        """Withdraw up to *requested* units and return the amount granted.

        The request is clamped to what is left.  An empty (or already
        depleted) pool grants ``0`` and changes nothing.
        """
        with self._state.lock:
            remaining = self._state.remaining_fuel
            if remaining == 0 or self._state.fuel_depleted or requested <= 0:
                return 0

            granted = min(requested, remaining)
            self._state.withdraw(granted)
            self._dispensed += granted

            who = f"Vehicle {vehicle_id}" if vehicle_id is not None else "Consumer"
            _logger.info("%s fueled %d", who, granted)
            _logger.info("Total fuel: %d", remaining - granted)

            if remaining - granted == 0:
                self._on_depleted()
            return granted
