"""
Boiler Telemetry API Endpoints

Feeds each boiler's rolling window and analyses its current snapshot.
The window lives in memory only.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ..models.telemetry import FuelType
from ..services.analysis_engine import analytics_engine
from ..services.telemetry_buffer import TelemetryBuffer, telemetry_registry
from ..utils import result_to_dict
from .schemas import TelemetryReplace, TelemetrySampleIn, TelemetrySnapshotResponse

logger = logging.getLogger("boiler_analytics.api.boilers")

router = APIRouter(prefix="/boilers", tags=["Boilers"])


def _require_buffer(boiler_id: str) -> TelemetryBuffer:
    buffer = telemetry_registry.get(boiler_id)
    if buffer is None:
        raise HTTPException(status_code=404, detail="Boiler not found")
    return buffer


def _snapshot_response(boiler_id: str, buffer: TelemetryBuffer) -> TelemetrySnapshotResponse:
    window = buffer.snapshot()
    return TelemetrySnapshotResponse(
        boiler_id=boiler_id,
        fuel_type=buffer.fuel_type,
        count=len(window),
        window=[
            TelemetrySampleIn(
                timestamp=s.timestamp,
                steam_pressure=s.steam_pressure,
                steam_flow=s.steam_flow,
                stack_temp=s.stack_temp,
                o2_level=s.o2_level,
                efficiency=s.efficiency,
                fuel_flow=s.fuel_flow,
                fuel_type=s.fuel_type,
            )
            for s in window
        ],
    )


@router.get("/")
async def list_boilers():
    """Boilers that currently hold a telemetry window."""
    return {"boilers": telemetry_registry.boiler_ids()}


@router.post("/{boiler_id}/telemetry", response_model=TelemetrySnapshotResponse)
async def append_telemetry(boiler_id: str, sample: TelemetrySampleIn):
    """Append one packet to the boiler's window, dropping the oldest when full."""
    buffer = telemetry_registry.get_or_create(boiler_id, sample.fuel_type)
    buffer.append(sample.to_sample())
    logger.debug("Boiler %s: appended sample %s (%d in window)", boiler_id, sample.timestamp, len(buffer))
    return _snapshot_response(boiler_id, buffer)


@router.put("/{boiler_id}/telemetry", response_model=TelemetrySnapshotResponse)
async def replace_telemetry(boiler_id: str, body: TelemetryReplace):
    """Replace the boiler's window, e.g. after a boiler or fuel switch."""
    fuel_type = body.fuel_type or (body.window[-1].fuel_type if body.window else FuelType.COAL)
    buffer = telemetry_registry.get_or_create(boiler_id, fuel_type)
    buffer.reset([s.to_sample() for s in body.window], fuel_type=fuel_type)
    logger.info("Boiler %s: window replaced with %d samples (fuel=%s)", boiler_id, len(buffer), fuel_type.value)
    return _snapshot_response(boiler_id, buffer)


@router.get("/{boiler_id}/telemetry", response_model=TelemetrySnapshotResponse)
async def get_telemetry(boiler_id: str):
    """Current window snapshot, oldest first."""
    return _snapshot_response(boiler_id, _require_buffer(boiler_id))


@router.get("/{boiler_id}/analysis")
async def analyze_boiler(
    boiler_id: str,
    baseline_efficiency: Optional[float] = Query(None, gt=0, le=100, alias="baselineEfficiency"),
):
    """Run every analytic on the boiler's current snapshot."""
    buffer = _require_buffer(boiler_id)
    report = analytics_engine.analyze(buffer.snapshot(), buffer.fuel_type, baseline_efficiency)
    return result_to_dict(report)


@router.delete("/{boiler_id}")
async def delete_boiler(boiler_id: str):
    """Drop the boiler's telemetry window."""
    if not telemetry_registry.remove(boiler_id):
        raise HTTPException(status_code=404, detail="Boiler not found")
    return {"status": "deleted", "boiler_id": boiler_id}
