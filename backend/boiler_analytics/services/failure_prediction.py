"""
Component Failure Prediction

Rule-based estimators for the components that fail first on a fired
boiler: superheater tubes, economizer, combustion controls and the feed
water pump. Each rule looks at deviations of the latest sample from the
window averages and only reports when its probability clears a
rule-specific threshold.

The economizer rule carries a deliberate random term so repeated calls on a
quiet window still surface occasional fouling warnings. Pass a seeded
``numpy.random.Generator`` (or ``noise_amplitude=0``) for reproducible output.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np

from ..core.config import OperatingEnvelope
from ..models.analysis import ConfidenceLevel, FailurePrediction
from ..models.telemetry import FuelType, TelemetrySample, TelemetryWindow

logger = logging.getLogger("boiler_analytics.failure")

RECENT_SAMPLES = 5
DEFAULT_NOISE_AMPLITUDE = 20.0


@dataclass
class FailureContext:
    """Window aggregates shared by every failure rule."""
    window: List[TelemetrySample]
    latest: TelemetrySample
    avg_pressure: float
    avg_temp: float
    avg_efficiency: float
    envelope: OperatingEnvelope
    rng: np.random.Generator
    noise_amplitude: float

    @classmethod
    def build(
        cls,
        window: TelemetryWindow,
        envelope: OperatingEnvelope,
        rng: np.random.Generator,
        noise_amplitude: float,
    ) -> "FailureContext":
        samples = list(window)
        return cls(
            window=samples,
            latest=samples[-1],
            avg_pressure=float(np.mean([s.steam_pressure for s in samples])),
            avg_temp=float(np.mean([s.stack_temp for s in samples])),
            avg_efficiency=float(np.mean([s.efficiency for s in samples])),
            envelope=envelope,
            rng=rng,
            noise_amplitude=noise_amplitude,
        )


# ─── Rules ──────────────────────────────────────────────────────────


def superheater_tubes(ctx: FailureContext) -> Optional[FailurePrediction]:
    """Creep/thermal-cycling stress from over-pressure and hot flue gas."""
    latest = ctx.latest
    pressure_stress = max(0.0, (latest.steam_pressure - ctx.envelope.pressure_setpoint) / 5) * 30
    temp_stress = max(0.0, (latest.stack_temp - ctx.envelope.superheater_temp_onset) / 20) * 40
    risk = min(pressure_stress + temp_stress, 100.0)

    if risk <= 30:
        return None

    if risk > 70:
        confidence = ConfidenceLevel.HIGH
    elif risk > 50:
        confidence = ConfidenceLevel.MEDIUM
    else:
        confidence = ConfidenceLevel.LOW

    return FailurePrediction(
        component="Superheater Tubes",
        failure_probability=risk,
        days_until_failure=math.floor(max(7.0, 60 - risk)),
        confidence_level=confidence,
        indicators=[
            f"Pressure: {latest.steam_pressure:.1f} bar (avg: {ctx.avg_pressure:.1f})",
            f"Stack Temp: {latest.stack_temp:g}°C (avg: {ctx.avg_temp:.0f})",
            "Thermal cycling stress detected",
        ],
    )


def economizer(ctx: FailureContext) -> Optional[FailurePrediction]:
    """Fouling inferred from recent stack temperature running above the window mean."""
    recent = ctx.window[-RECENT_SAMPLES:]
    temp_trend = float(np.mean([s.stack_temp for s in recent])) - ctx.avg_temp
    noise = float(ctx.rng.random()) * ctx.noise_amplitude
    risk = max(0.0, temp_trend * 8 + noise)

    if risk <= 25:
        return None

    return FailurePrediction(
        component="Economizer",
        failure_probability=risk,
        days_until_failure=math.floor(max(14.0, 90 - risk * 1.5)),
        confidence_level=ConfidenceLevel.HIGH if risk > 60 else ConfidenceLevel.MEDIUM,
        indicators=[
            f"Rising stack temperature trend: +{temp_trend:.1f}°C",
            f"Current efficiency: {ctx.latest.efficiency:.1f}% (baseline: {ctx.avg_efficiency:.1f}%)",
            "Soot accumulation likely",
        ],
    )


def combustion_control(ctx: FailureContext) -> Optional[FailurePrediction]:
    """Largest O₂ step between consecutive recent samples, ×10."""
    recent = [s.o2_level for s in ctx.window[-RECENT_SAMPLES:]]
    steps = np.abs(np.diff(recent)) if len(recent) > 1 else np.zeros(1)
    oscillation = float(steps.max()) * 10

    if oscillation <= 15:
        return None

    return FailurePrediction(
        component="Combustion Control System",
        failure_probability=oscillation,
        days_until_failure=30,
        confidence_level=ConfidenceLevel.HIGH,
        indicators=[
            f"High O₂ oscillation detected: {oscillation:.1f}%",
            "Burner control valve sticking suspected",
            "Fuel-air ratio unstable",
        ],
    )


def feed_water_pump(ctx: FailureContext) -> Optional[FailurePrediction]:
    """Latest pressure sagging below the window average."""
    pressure_drop = ctx.avg_pressure - ctx.latest.steam_pressure
    degradation = max(0.0, pressure_drop * 15)

    if degradation <= 20:
        return None

    return FailurePrediction(
        component="Feed Water Pump",
        failure_probability=degradation,
        days_until_failure=45,
        confidence_level=ConfidenceLevel.MEDIUM,
        indicators=[
            f"Pressure drop detected: {pressure_drop:.1f} bar",
            "Pump efficiency declining",
        ],
    )


FAILURE_RULES: List[Callable[[FailureContext], Optional[FailurePrediction]]] = [
    superheater_tubes,
    economizer,
    combustion_control,
    feed_water_pump,
]


def predict_component_failures(
    window: TelemetryWindow,
    fuel_type: Optional[FuelType] = None,
    envelope: Optional[OperatingEnvelope] = None,
    rng: Optional[np.random.Generator] = None,
    noise_amplitude: float = DEFAULT_NOISE_AMPLITUDE,
) -> List[FailurePrediction]:
    """
    Run every failure rule over a window, most probable failure first.

    ``fuel_type`` is accepted for interface compatibility; none of the rules
    branch on it.
    """
    if len(window) == 0:
        return []

    ctx = FailureContext.build(
        window,
        envelope or OperatingEnvelope(),
        rng if rng is not None else np.random.default_rng(),
        noise_amplitude,
    )

    predictions = []
    for rule in FAILURE_RULES:
        prediction = rule(ctx)
        if prediction is not None:
            predictions.append(prediction)

    logger.debug(
        "predict_component_failures: fuel=%s samples=%d -> %s",
        fuel_type.value if isinstance(fuel_type, FuelType) else fuel_type,
        len(window),
        [p.component for p in predictions],
    )
    return sorted(predictions, key=lambda p: p.failure_probability, reverse=True)
