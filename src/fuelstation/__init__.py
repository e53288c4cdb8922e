"""fuelstation - Async simulation of a capacity-limited fuel station."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fuelstation")
except PackageNotFoundError:
    __version__ = "0+local"
from fuelstation.config import StationConfig
from fuelstation.coordinator import ShutdownCoordinator
from fuelstation.exceptions import GateInvariantError, StationConfigError, StationError
from fuelstation.gate import AdmissionGate
from fuelstation.models import (
    ClosingReason,
    StationPhase,
    StationReport,
    StationSnapshot,
    Vehicle,
    VehicleOutcome,
    VehicleReport,
)
from fuelstation.pool import FuelPool
from fuelstation.random_source import IntSource
from fuelstation.shutdown import ShutdownSignal
from fuelstation.spawner import VehicleSpawner
from fuelstation.state import StationState
from fuelstation.station import GasStation, run_station
from fuelstation.worker import service_vehicle

__all__ = [
    "__version__",
    "AdmissionGate",
    "ClosingReason",
    "FuelPool",
    "GasStation",
    "GateInvariantError",
    "IntSource",
    "ShutdownCoordinator",
    "ShutdownSignal",
    "StationConfig",
    "StationConfigError",
    "StationError",
    "StationPhase",
    "StationReport",
    "StationSnapshot",
    "StationState",
    "Vehicle",
    "VehicleOutcome",
    "VehicleReport",
    "VehicleSpawner",
    "run_station",
    "service_vehicle",
]
