"""Per-vehicle execution unit.

A vehicle's visit goes::

    created -> waiting -> admitted -> servicing -> done

with early exits when the station is already closed on arrival, when the
shutdown signal fires while the vehicle waits for a slot, or when the
station closes or runs dry after admission.  The gate slot is released by
the gate's scoped admission context, so every exit path returns it.
"""

from __future__ import annotations

import asyncio
import logging

from fuelstation._constants import ms_to_seconds
from fuelstation.config import StationConfig
from fuelstation.gate import AdmissionGate
from fuelstation.models.vehicle import Vehicle, VehicleOutcome, VehicleReport
from fuelstation.pool import FuelPool
from fuelstation.random_source import IntSource
from fuelstation.state import StationState

_logger = logging.getLogger(__name__)


async def service_vehicle(
    vehicle: Vehicle,
    *,
    gate: AdmissionGate,
    pool: FuelPool,
    state: StationState,
    config: StationConfig,
    rng: IntSource,
) -> VehicleReport:
    """Run one vehicle's visit and report how it ended.

    Never raises for anything happening inside the visit: unexpected errors
    are logged and reported as :attr:`VehicleOutcome.FAILED`.
    """
    if vehicle.shutdown.is_cancelled:
        _logger.info("Vehicle %d aborted: gas station closed", vehicle.id)
        return VehicleReport(vehicle_id=vehicle.id, outcome=VehicleOutcome.REJECTED)

    try:
        async with gate.admission(vehicle.shutdown) as admitted:
            if not admitted:
                _logger.info(
                    "Vehicle %d received cancellation request while waiting to enter the gas station",
                    vehicle.id,
                )
                return VehicleReport(vehicle_id=vehicle.id, outcome=VehicleOutcome.CANCELLED_WHILE_WAITING)
            return await _service_admitted(vehicle, pool=pool, state=state, config=config, rng=rng)
    except Exception as exc:
        _logger.exception("Vehicle %d error: %s", vehicle.id, exc)
        return VehicleReport(vehicle_id=vehicle.id, outcome=VehicleOutcome.FAILED, error=str(exc))


async def _service_admitted(
    vehicle: Vehicle,
    *,
    pool: FuelPool,
    state: StationState,
    config: StationConfig,
    rng: IntSource,
) -> VehicleReport:
    # The signal may have fired between queueing and the grant.
    if vehicle.shutdown.is_cancelled:
        _logger.info("Vehicle %d left the gas station", vehicle.id)
        return VehicleReport(vehicle_id=vehicle.id, outcome=VehicleOutcome.LEFT_WITHOUT_SERVICE)

    _logger.info("Vehicle %d entered the gas station", vehicle.id)

    delay_ms = rng.randint(config.service_delay_min_ms, config.service_delay_max_ms)
    await asyncio.sleep(ms_to_seconds(delay_ms))

    # Admitted vehicles are not aborted by a timeout, only by an empty pool.
    if state.fuel_depleted:
        _logger.info("Vehicle %d left the gas station", vehicle.id)
        return VehicleReport(vehicle_id=vehicle.id, outcome=VehicleOutcome.LEFT_WITHOUT_SERVICE)

    requested = rng.randint(config.consumption_min, config.consumption_max)
    granted = pool.try_consume(requested, vehicle_id=vehicle.id)

    _logger.info("Vehicle %d left the gas station", vehicle.id)
    if granted == 0:
        return VehicleReport(vehicle_id=vehicle.id, outcome=VehicleOutcome.LEFT_WITHOUT_SERVICE)
    return VehicleReport(vehicle_id=vehicle.id, outcome=VehicleOutcome.SERVED, fuel_granted=granted)
