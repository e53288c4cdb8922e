"""Shared station state.

The remaining fuel and both closing flags form one aggregate guarded by one
lock.  The pool and the shutdown coordinator both mutate it, and every
"decrement then detect depletion" sequence runs inside a single critical
section.
"""

from __future__ import annotations

import threading

from fuelstation.models.station import StationSnapshot


class StationState:
    """Remaining fuel, capacity and the two monotonic closing flags.

    ``lock`` is re-entrant: the pool holds it while notifying the
    coordinator about depletion, and the coordinator takes it again.
    Mutators assume the caller already holds ``lock``.
    """

    def __init__(self, *, initial_fuel: int, capacity: int) -> None:
        self.lock = threading.RLock()
        self._initial_fuel = initial_fuel
        self._capacity = capacity
        self._remaining_fuel = initial_fuel
        self._fuel_depleted = False
        self._timeout_reached = False

    @property
    def initial_fuel(self) -> int:
        return self._initial_fuel

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def remaining_fuel(self) -> int:
        with self.lock:
            return self._remaining_fuel

    @property
    def fuel_depleted(self) -> bool:
        with self.lock:
            return self._fuel_depleted

    @property
    def timeout_reached(self) -> bool:
        with self.lock:
            return self._timeout_reached

    def withdraw(self, amount: int) -> None:
        if amount < 0 or amount > self._remaining_fuel:
            raise ValueError(f"cannot withdraw {amount} from {self._remaining_fuel}")
        self._remaining_fuel -= amount

    def mark_fuel_depleted(self) -> bool:
        """Flip ``fuel_depleted`` to true.  Returns ``False`` if it already was."""
        if self._fuel_depleted:
            return False
        self._fuel_depleted = True
        return True

    def mark_timeout_reached(self) -> bool:
        """Flip ``timeout_reached`` to true.  Returns ``False`` if it already was."""
        if self._timeout_reached:
            return False
        self._timeout_reached = True
        return True

    def snapshot(self) -> StationSnapshot:
        with self.lock:
            return StationSnapshot(
                remaining_fuel=self._remaining_fuel,
                capacity=self._capacity,
                fuel_depleted=self._fuel_depleted,
                timeout_reached=self._timeout_reached,
            )
