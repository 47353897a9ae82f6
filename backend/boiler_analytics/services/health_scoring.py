"""
Boiler Health Scoring

Deducts penalties from a 100-point baseline for pressure, stack temperature,
efficiency and O₂ excursions from their target bands, labels the recent
trend of each channel and annotates recognisable degradation patterns.
"""

import logging
from typing import List, Optional, Tuple

from ..core.config import OperatingEnvelope
from ..models.analysis import BoilerHealthScore, CombustionState, HealthTrends, TrendDirection
from ..models.telemetry import TelemetrySample, TelemetryWindow, series
from .statistics import trend

logger = logging.getLogger("boiler_analytics.health")

DEFAULT_SCORE = 75.0
TREND_WINDOW = 10


# ─── Penalties ──────────────────────────────────────────────────────


def pressure_penalty(sample: TelemetrySample, envelope: OperatingEnvelope) -> float:
    offset = abs(sample.steam_pressure - envelope.pressure_setpoint)
    if offset > envelope.pressure_alarm_band:
        return 15.0
    if offset > envelope.pressure_tolerance:
        return 5.0
    return 0.0


def stack_temp_penalty(sample: TelemetrySample, envelope: OperatingEnvelope) -> float:
    if sample.stack_temp > envelope.stack_temp_critical:
        return 20.0
    if sample.stack_temp > envelope.stack_temp_warning:
        return 10.0
    if sample.stack_temp > envelope.stack_temp_watch:
        return 3.0
    return 0.0


def efficiency_penalty(sample: TelemetrySample, envelope: OperatingEnvelope) -> float:
    return max(0.0, (envelope.baseline_efficiency - sample.efficiency) * 2)


def o2_penalty(sample: TelemetrySample, envelope: OperatingEnvelope) -> float:
    o2 = sample.o2_level
    if o2 < envelope.o2_limit_low or o2 > envelope.o2_limit_high:
        return 10.0
    if o2 < envelope.o2_optimal_low or o2 > envelope.o2_optimal_high:
        return 5.0
    return 0.0


# ─── Patterns ───────────────────────────────────────────────────────


def _combustion_state(
    latest: TelemetrySample,
    o2_trend: TrendDirection,
    envelope: OperatingEnvelope,
) -> CombustionState:
    o2 = latest.o2_level
    if (
        o2_trend == TrendDirection.VOLATILE
        or o2 < envelope.o2_limit_low
        or o2 > envelope.o2_limit_high
    ):
        return CombustionState.DEGRADING
    if (
        latest.efficiency > envelope.baseline_efficiency
        and envelope.o2_optimal_low < o2 < envelope.o2_optimal_high
    ):
        return CombustionState.OPTIMAL
    return CombustionState.SUBOPTIMAL


def _latent_patterns(
    recent: List[TelemetrySample],
    latest: TelemetrySample,
    trends: HealthTrends,
    envelope: OperatingEnvelope,
) -> Tuple[List[str], List[str]]:
    patterns: List[str] = []
    risks: List[str] = []

    if trends.temperature == TrendDirection.RISING:
        patterns.append("Progressive fouling detected in economizer")
        risks.append("Soot layer buildup reducing heat transfer efficiency")

    if (
        any(s.o2_level < envelope.o2_limit_low for s in recent)
        and any(s.efficiency < 80 for s in recent)
    ):
        patterns.append("Combustion instability with incomplete fuel burn")
        risks.append("Unburned carbon loss exceeding 3%")

    if (
        abs(latest.steam_pressure - envelope.pressure_setpoint) > 3
        and trends.pressure == TrendDirection.VOLATILE
    ):
        patterns.append("Drum level control system oscillation")
        risks.append("Feedwater control valve hunt cycle detected")

    if latest.efficiency < 82:
        risks.append("Heat rate degrading: schedule tube cleaning")

    return patterns, risks


def calculate_boiler_health_score(
    window: TelemetryWindow,
    envelope: Optional[OperatingEnvelope] = None,
    trend_window: int = TREND_WINDOW,
) -> BoilerHealthScore:
    """
    Score the boiler 0-100 from its latest sample and recent trends.

    Windows with fewer than two samples get a neutral 75 with stable trends.
    """
    if len(window) < 2:
        return BoilerHealthScore(overall_score=DEFAULT_SCORE)

    envelope = envelope or OperatingEnvelope()
    latest = window[-1]
    recent = list(window)[-trend_window:]

    penalties = {
        "pressure": pressure_penalty(latest, envelope),
        "stack_temp": stack_temp_penalty(latest, envelope),
        "efficiency": efficiency_penalty(latest, envelope),
        "o2": o2_penalty(latest, envelope),
    }
    score = max(0.0, min(100.0, 100.0 - sum(penalties.values())))

    trends = HealthTrends(
        pressure=trend(series(recent, "steam_pressure")),
        temperature=trend(series(recent, "stack_temp")),
        efficiency=trend(series(recent, "efficiency")),
    )
    trends.combustion = _combustion_state(latest, trend(series(recent, "o2_level")), envelope)

    patterns, risks = _latent_patterns(recent, latest, trends, envelope)

    logger.debug("health score %.1f penalties=%s", score, penalties)
    return BoilerHealthScore(
        overall_score=score,
        trends=trends,
        latent_patterns=patterns,
        risk_factors=risks,
    )
