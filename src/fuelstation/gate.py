"""Admission gate bounding how many vehicles are inside the station."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator

from fuelstation.exceptions import GateInvariantError
from fuelstation.shutdown import ShutdownSignal

_logger = logging.getLogger(__name__)


class AdmissionGate:
    """Counting semaphore with cancellable waits.

    The gate only counts slots; it knows nothing about fuel or why the
    station is closing.  Waiters are not admitted in any guaranteed order.

    Usage::

        async with gate.admission(vehicle.shutdown) as admitted:
            if admitted:
                ...
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._slots = asyncio.Semaphore(capacity)
        self._occupied = 0
        self._waiting = 0
        self._peak = 0
        self._drained = asyncio.Event()
        self._drained.set()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def occupied(self) -> int:
        return self._occupied

    @property
    def available(self) -> int:
        return self._capacity - self._occupied

    @property
    def waiting(self) -> int:
        """Number of callers currently blocked in :meth:`acquire`."""
        return self._waiting

    @property
    def peak_occupancy(self) -> int:
        """Highest number of slots held at the same time so far."""
        return self._peak

    @property
    def is_drained(self) -> bool:
        return self._occupied == 0

    async def acquire(self, signal: ShutdownSignal) -> bool:
        """Wait for a free slot or for *signal* to fire.

        Returns ``True`` when a slot is now held by the caller and ``False``
        when the wait was cancelled.  A cancelled wait never consumes a slot.
        If the grant and the cancellation race, the grant wins; the caller
        is expected to re-check the shutdown state after admission.
        """
        if signal.is_cancelled:
            return False

        if not self._slots.locked():
            # Free slot and nobody queued: acquire() returns without suspending.
            await self._slots.acquire()
            self._mark_acquired()
            return True

        self._waiting += 1
        slot = asyncio.ensure_future(self._slots.acquire())
        shutdown = asyncio.ensure_future(signal.wait())
        try:
            await asyncio.wait((slot, shutdown), return_when=asyncio.FIRST_COMPLETED)
            if not slot.done():
                slot.cancel()
                # The semaphore hands a pending wake-up on to the next waiter
                # when the acquiring task is cancelled.
                await asyncio.wait((slot,))
        except BaseException:
            self._abandon(slot)
            raise
        finally:
            shutdown.cancel()
            self._waiting -= 1

        if slot.cancelled():
            _logger.debug("Gate wait cancelled (occupied=%d)", self._occupied)
            return False
        slot.result()
        self._mark_acquired()
        return True

    def release(self) -> None:
        """Return one slot.  Must be called exactly once per successful acquire."""
        if self._occupied == 0:
            raise GateInvariantError("release() called without a held slot")
        self._occupied -= 1
        self._slots.release()
        if self._occupied == 0:
            self._drained.set()

    @contextlib.asynccontextmanager
    async def admission(self, signal: ShutdownSignal) -> AsyncIterator[bool]:
        """Acquire on entry and release on every exit path if a slot was held."""
        admitted = await self.acquire(signal)
        try:
            yield admitted
        finally:
            if admitted:
                self.release()

    async def wait_drained(self) -> None:
        """Block until no slot is held."""
        while self._occupied:
            await self._drained.wait()

    def _mark_acquired(self) -> None:
        self._occupied += 1
        self._peak = max(self._peak, self._occupied)
        self._drained.clear()

    def _abandon(self, slot: asyncio.Future[bool]) -> None:
        # Caller is unwinding; a slot granted in the meantime must go back.
        if not slot.done():
            slot.cancel()
        elif not slot.cancelled() and slot.exception() is None:
            self._slots.release()
