"""Station configuration for fuelstation."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from fuelstation._constants import (
    DEFAULT_CAPACITY,
    DEFAULT_CLOSING_TIMEOUT_MS,
    DEFAULT_CONSUMPTION_MAX,
    DEFAULT_CONSUMPTION_MIN,
    DEFAULT_INITIAL_FUEL,
    DEFAULT_SERVICE_DELAY_MAX_MS,
    DEFAULT_SERVICE_DELAY_MIN_MS,
    DEFAULT_SPAWN_INTERVAL_MAX_MS,
    DEFAULT_SPAWN_INTERVAL_MIN_MS,
    ENV_PREFIX,
)
from fuelstation.exceptions import StationConfigError


def _env_int(env_key: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError as exc:
        raise StationConfigError(f"{env_key} must be an integer, got {value!r}", field=env_key) from exc


def _check_range(name: str, low: int, high: int) -> None:
    if low > high:
        raise StationConfigError(f"{name}: min ({low}) must not exceed max ({high})", field=name)


@dataclasses.dataclass(frozen=True)
class StationConfig:
    """Station configuration.

    All durations are integer milliseconds; all ranges are inclusive.

    Parameters
    ----------
    initial_fuel : int
        Fuel in the pool when the station opens.
    capacity : int
        Number of admission slots (vehicles served concurrently).
    closing_timeout_ms : int
        Time budget after which the station closes.  ``0`` closes the
        station immediately.
    spawn_interval_min_ms, spawn_interval_max_ms : int
        Bounds for the arrival interval, re-drawn after every vehicle.
    service_delay_min_ms, service_delay_max_ms : int
        Bounds for the simulated time a vehicle spends at the pump.
    consumption_min, consumption_max : int
        Bounds for the amount of fuel a vehicle requests.  The pool clamps
        the request to what is left.
    """

    initial_fuel: int = DEFAULT_INITIAL_FUEL
    capacity: int = DEFAULT_CAPACITY
    closing_timeout_ms: int = DEFAULT_CLOSING_TIMEOUT_MS
    spawn_interval_min_ms: int = DEFAULT_SPAWN_INTERVAL_MIN_MS
    spawn_interval_max_ms: int = DEFAULT_SPAWN_INTERVAL_MAX_MS
    service_delay_min_ms: int = DEFAULT_SERVICE_DELAY_MIN_MS
    service_delay_max_ms: int = DEFAULT_SERVICE_DELAY_MAX_MS
    consumption_min: int = DEFAULT_CONSUMPTION_MIN
    consumption_max: int = DEFAULT_CONSUMPTION_MAX

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Raise :class:`StationConfigError` if any bound is violated."""
        for field in dataclasses.fields(self):
            value = getattr(self, field.name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise StationConfigError(f"{field.name} must be an int, got {value!r}", field=field.name)

        if self.initial_fuel <= 0:
            raise StationConfigError("initial_fuel must be positive", field="initial_fuel")
        if self.capacity <= 0:
            raise StationConfigError("capacity must be positive", field="capacity")
        if self.closing_timeout_ms < 0:
            raise StationConfigError("closing_timeout_ms must not be negative", field="closing_timeout_ms")
        if self.spawn_interval_min_ms <= 0:
            raise StationConfigError("spawn_interval_min_ms must be positive", field="spawn_interval_min_ms")
        if self.service_delay_min_ms < 0:
            raise StationConfigError("service_delay_min_ms must not be negative", field="service_delay_min_ms")
        if self.consumption_min <= 0:
            raise StationConfigError("consumption_min must be positive", field="consumption_min")

        _check_range("spawn_interval", self.spawn_interval_min_ms, self.spawn_interval_max_ms)
        _check_range("service_delay", self.service_delay_min_ms, self.service_delay_max_ms)
        _check_range("consumption", self.consumption_min, self.consumption_max)

    @classmethod
    def from_env(cls, **overrides: Any) -> StationConfig:
        """Create configuration from environment variables.

        Every field can be set through ``FUELSTATION_<FIELD_NAME>`` (upper
        case), e.g. ``FUELSTATION_CAPACITY=4``.  Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        StationConfig
            Populated and validated configuration.
        """
        env = os.environ

        config_kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(cls):
            if field.name in overrides:
                continue
            env_key = f"{ENV_PREFIX}{field.name.upper()}"
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field.name] = _env_int(env_key, val)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
