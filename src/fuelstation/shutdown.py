"""Shared shutdown signal observed by every vehicle and gate waiter."""

from __future__ import annotations

import asyncio


class ShutdownSignal:
    """Broadcast cancellation context scoped to one station run.

    Cancelling is idempotent; only the first :meth:`cancel` call changes
    state.  Must be created and cancelled on the station's event loop.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> bool:
        """Fire the signal.  Returns ``True`` only for the call that fired it."""
        if self._event.is_set():
            return False
        self._event.set()
        return True

    async def wait(self) -> None:
        """Block until the signal has fired."""
        await self._event.wait()

    def __repr__(self) -> str:
        state = "cancelled" if self.is_cancelled else "open"
        return f"<ShutdownSignal {state}>"
