from dataclasses import dataclass
from typing import Sequence
import enum


class FuelType(str, enum.Enum):
    """Fuels the dashboard can stamp onto a telemetry packet."""
    COAL = "Coal"
    GAS = "Gas"
    OIL = "Oil"
    BIOMASS = "Biomass"


@dataclass(frozen=True)
class TelemetrySample:
    """One boiler telemetry packet. Never mutated after creation."""
    timestamp: str
    steam_pressure: float  # bar
    steam_flow: float  # t/h
    stack_temp: float  # °C
    o2_level: float  # % by volume
    efficiency: float  # %
    fuel_flow: float  # kg/h
    fuel_type: FuelType = FuelType.COAL


# Chronological, most recent last.
TelemetryWindow = Sequence[TelemetrySample]


# Column name -> sample attribute, in the order the anomaly scorer reads them
FEATURE_FIELDS = {
    "steamPressure": "steam_pressure",
    "stackTemp": "stack_temp",
    "o2Level": "o2_level",
    "steamFlow": "steam_flow",
    "efficiency": "efficiency",
}


def series(window: TelemetryWindow, attribute: str) -> list:
    """Extract one numeric channel from a window."""
    return [getattr(sample, attribute) for sample in window]
