"""Injected source of random integers."""

from __future__ import annotations

import random
from typing import Protocol


class IntSource(Protocol):
    """Structural interface for the station's randomness.

    ``random.Random`` satisfies it.  Having a protocol here makes it easy to
    pass scripted doubles in tests while the station itself stays unaware of
    the generation policy.
    """

    def randint(self, a: int, b: int) -> int:
        """Return an integer N such that ``a <= N <= b``."""
        ...


def default_source(seed: int | None = None) -> IntSource:
    return random.Random(seed)
