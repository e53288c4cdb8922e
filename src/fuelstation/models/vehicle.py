"""Vehicle identity and per-vehicle outcome models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from fuelstation.shutdown import ShutdownSignal


@dataclass(frozen=True, slots=True)
class Vehicle:
    """A vehicle arriving at the station.

    ``id`` is allocated by the spawner and strictly increasing.  ``shutdown``
    is the station-wide cancellation context the vehicle waits under.
    """

    id: int
    shutdown: ShutdownSignal


class VehicleOutcome(StrEnum):
    """Terminal state a vehicle's visit ended in."""

    REJECTED = "rejected"
    """Station was already closed when the vehicle arrived."""
    CANCELLED_WHILE_WAITING = "cancelled_while_waiting"
    """Shutdown fired while the vehicle waited for a slot."""
    LEFT_WITHOUT_SERVICE = "left_without_service"
    """Admitted, but the station closed or ran dry before fueling."""
    SERVED = "served"
    FAILED = "failed"
    """Unexpected error inside the vehicle's own unit."""


class VehicleReport(BaseModel):
    """What happened to one vehicle."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    vehicle_id: int = Field(..., ge=1)
    outcome: VehicleOutcome
    fuel_granted: int = Field(default=0, ge=0)
    error: str | None = None
