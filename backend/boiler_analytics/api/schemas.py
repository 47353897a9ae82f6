"""
API Request/Response Schemas

Pydantic models used across API endpoints for request validation.
Telemetry packets use the dashboard's camelCase field names.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional

from ..models.telemetry import FuelType, TelemetrySample


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ─── Telemetry Schemas ───────────────────────────────────────────────

class TelemetrySampleIn(CamelModel):
    timestamp: str
    steam_pressure: float
    steam_flow: float
    stack_temp: float
    o2_level: float
    efficiency: float = Field(ge=0, le=100)
    fuel_flow: float
    fuel_type: FuelType = FuelType.COAL

    def to_sample(self) -> TelemetrySample:
        return TelemetrySample(
            timestamp=self.timestamp,
            steam_pressure=self.steam_pressure,
            steam_flow=self.steam_flow,
            stack_temp=self.stack_temp,
            o2_level=self.o2_level,
            efficiency=self.efficiency,
            fuel_flow=self.fuel_flow,
            fuel_type=self.fuel_type,
        )


class TelemetryReplace(CamelModel):
    window: List[TelemetrySampleIn] = Field(default_factory=list)
    fuel_type: Optional[FuelType] = None


# ─── Analysis Schemas ────────────────────────────────────────────────

class WindowAnalysisRequest(CamelModel):
    window: List[TelemetrySampleIn] = Field(default_factory=list)
    fuel_type: Optional[FuelType] = None
    baseline_efficiency: Optional[float] = Field(default=None, gt=0, le=100)

    def samples(self) -> List[TelemetrySample]:
        return [s.to_sample() for s in self.window]


class TelemetrySnapshotResponse(CamelModel):
    boiler_id: str
    fuel_type: FuelType
    count: int
    window: List[TelemetrySampleIn]
