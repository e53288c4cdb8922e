"""Station-level state snapshots and the final run report."""

from __future__ import annotations

from collections import Counter
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from fuelstation.models.vehicle import VehicleOutcome, VehicleReport


class ClosingReason(StrEnum):
    TIMEOUT = "timeout"
    DEPLETION = "depletion"


class StationPhase(StrEnum):
    """Shutdown state machine.

    ``OPEN`` moves to one of the two closing phases on the first trigger.
    ``CLOSED`` is reached from either once every admitted vehicle has left.
    """

    OPEN = "open"
    CLOSING_BY_TIMEOUT = "closing_by_timeout"
    CLOSING_BY_DEPLETION = "closing_by_depletion"
    CLOSED = "closed"


class StationSnapshot(BaseModel):
    """Consistent view of the shared fuel/flag aggregate."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    remaining_fuel: int = Field(..., ge=0)
    capacity: int = Field(..., ge=1)
    fuel_depleted: bool = False
    timeout_reached: bool = False


class StationReport(BaseModel):
    """Summary returned by the controller once the station is closed."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    vehicle_count: int = Field(..., ge=0)
    closing_reason: ClosingReason | None = None
    initial_fuel: int = Field(..., ge=1)
    remaining_fuel: int = Field(..., ge=0)
    fuel_dispensed: int = Field(..., ge=0)
    peak_occupancy: int = Field(default=0, ge=0)
    vehicles: list[VehicleReport] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_accounting(self) -> StationReport:
        if self.fuel_dispensed != self.initial_fuel - self.remaining_fuel:
            raise ValueError(
                f"fuel accounting mismatch: dispensed={self.fuel_dispensed} "
                f"initial={self.initial_fuel} remaining={self.remaining_fuel}"
            )
        return self

    def outcome_counts(self) -> dict[VehicleOutcome, int]:
        """Number of vehicles per terminal outcome."""
        return dict(Counter(report.outcome for report in self.vehicles))
