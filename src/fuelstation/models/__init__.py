"""Data models for fuelstation."""

from fuelstation.models.station import ClosingReason, StationPhase, StationReport, StationSnapshot
from fuelstation.models.vehicle import Vehicle, VehicleOutcome, VehicleReport

__all__ = [
    "ClosingReason",
    "StationPhase",
    "StationReport",
    "StationSnapshot",
    "Vehicle",
    "VehicleOutcome",
    "VehicleReport",
]
