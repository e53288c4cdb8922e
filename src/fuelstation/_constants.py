"""Internal constants shared across the library."""

# ------------------------------------------------------------------
# Station defaults
# ------------------------------------------------------------------

DEFAULT_INITIAL_FUEL = 15000
DEFAULT_CAPACITY = 10
DEFAULT_CLOSING_TIMEOUT_MS = 5000

# Spawn interval is re-drawn after every vehicle.
DEFAULT_SPAWN_INTERVAL_MIN_MS = 5
DEFAULT_SPAWN_INTERVAL_MAX_MS = 25

DEFAULT_SERVICE_DELAY_MIN_MS = 100
DEFAULT_SERVICE_DELAY_MAX_MS = 499

DEFAULT_CONSUMPTION_MIN = 1
DEFAULT_CONSUMPTION_MAX = 199

ENV_PREFIX = "FUELSTATION_"


def ms_to_seconds(value_ms: int) -> float:
    """Convert integer milliseconds to the float seconds asyncio expects."""
    return max(0, value_ms) / 1000.0
