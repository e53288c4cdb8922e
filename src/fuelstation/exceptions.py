"""Custom exception hierarchy for fuelstation."""

from __future__ import annotations


class StationError(Exception):
    """Base exception for all fuelstation errors."""


class StationConfigError(StationError):
    """Invalid or missing configuration."""

    def __init__(self, message: str, *, field: str = "") -> None:
        self.field = field
        super().__init__(message)


class GateInvariantError(StationError):
    """Admission gate used in a way no correct caller can produce.

    Raised when a slot is released that was never acquired.  This is a
    programming error on the caller's side; the station never catches it.
    """
