"""
Latent Space Analysis: Deep Pattern Recognition

Discovers hidden damage indicators, hazards, failure precursors and
improvement opportunities from a rolling telemetry window. Signals are the
statistics and rates of change of the last 10 samples plus the latest
absolute readings; each rule is an independent trigger/builder pair in
``LATENT_RULES`` and is evaluated in table order.

Runs entirely locally, no API calls.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ..models.insight import (
    CATEGORY_PRIORITY,
    RISK_CATEGORIES,
    SEVERITY_PRIORITY,
    SEVERITY_WEIGHT,
    InsightCategory,
    InsightSeverity,
    LatentSpaceAnalysis,
    LatentSpaceInsight,
)
from ..models.telemetry import FuelType, TelemetrySample, TelemetryWindow, series
from .statistics import SeriesStats, rate_of_change, stats

logger = logging.getLogger("boiler_analytics.latent")

MIN_SAMPLES = 5
SIGNAL_WINDOW = 10
OPPORTUNITY_WEIGHT = 0.4


@dataclass(frozen=True)
class WindowSignals:
    """Everything the latent rules are allowed to look at."""
    latest: TelemetrySample
    pressure: SeriesStats
    temp: SeriesStats
    o2: SeriesStats
    efficiency: SeriesStats
    flow: SeriesStats
    pressure_roc: float
    temp_roc: float
    efficiency_roc: float
    o2_roc: float
    flow_roc: float
    fuel_roc: float

    @classmethod
    def from_window(cls, window: TelemetryWindow, span: int = SIGNAL_WINDOW) -> "WindowSignals":
        recent = list(window)[-span:]
        pressure = series(recent, "steam_pressure")
        temp = series(recent, "stack_temp")
        o2 = series(recent, "o2_level")
        efficiency = series(recent, "efficiency")
        flow = series(recent, "steam_flow")
        return cls(
            latest=recent[-1],
            pressure=stats(pressure),
            temp=stats(temp),
            o2=stats(o2),
            efficiency=stats(efficiency),
            flow=stats(flow),
            pressure_roc=rate_of_change(pressure),
            temp_roc=rate_of_change(temp),
            efficiency_roc=rate_of_change(efficiency),
            o2_roc=rate_of_change(o2),
            flow_roc=rate_of_change(flow),
            fuel_roc=rate_of_change(series(recent, "fuel_flow")),
        )


@dataclass(frozen=True)
class LatentRule:
    rule_id: str
    trigger: Callable[[WindowSignals], bool]
    build: Callable[[WindowSignals], LatentSpaceInsight]


# ─── Damage ─────────────────────────────────────────────────────────


def _tube_thinning_trigger(s: WindowSignals) -> bool:
    # Pressure decays while steam flow holds: internal tube erosion/corrosion
    return s.pressure_roc < -0.15 and abs(s.flow_roc) < 0.3


def _tube_thinning(s: WindowSignals) -> LatentSpaceInsight:
    return LatentSpaceInsight(
        category=InsightCategory.DAMAGE,
        severity=InsightSeverity.HIGH if s.pressure_roc < -0.3 else InsightSeverity.MEDIUM,
        title="Tube Wall Thinning Detected",
        description=(
            "Consistent pressure decline without flow reduction suggests internal tube "
            "erosion or corrosion, potentially from fly ash or chemical attack."
        ),
        evidence=[
            f"Pressure declining at {abs(s.pressure_roc):.2f} bar/reading",
            f"Steam flow stable (variance: {s.flow.std_dev:.2f} TPH)",
            f"Current pressure: {s.latest.steam_pressure:.1f} bar",
        ],
        action_required="Schedule ultrasonic thickness testing within 7 days",
        potential_impact="Tube rupture risk - potential forced outage of 3-5 days",
        confidence=min(85.0, 60 + abs(s.pressure_roc) * 50),
    )


def _refractory_trigger(s: WindowSignals) -> bool:
    return s.latest.stack_temp > 175 and s.efficiency_roc < -0.1 and abs(s.o2_roc) < 0.1


def _refractory(s: WindowSignals) -> LatentSpaceInsight:
    return LatentSpaceInsight(
        category=InsightCategory.DAMAGE,
        severity=InsightSeverity.HIGH if s.latest.stack_temp > 185 else InsightSeverity.MEDIUM,
        title="Refractory Degradation Suspected",
        description=(
            "Elevated flue gas temperature with efficiency loss despite stable combustion "
            "indicates refractory lining damage allowing heat escape."
        ),
        evidence=[
            f"Stack temperature: {s.latest.stack_temp:g}°C (elevated)",
            f"Efficiency declining: {abs(s.efficiency_roc):.2f}%/reading",
            f"O₂ stable at {s.latest.o2_level:.1f}% (combustion normal)",
        ],
        action_required="Visual inspection of furnace refractory during next shutdown",
        potential_impact="Energy loss ₹15-25 lakhs/month, structural integrity risk",
        confidence=72.0,
    )


def _soot_blower_trigger(s: WindowSignals) -> bool:
    return s.temp_roc > 0.3 and s.efficiency_roc < -0.05


def _soot_blower(s: WindowSignals) -> LatentSpaceInsight:
    return LatentSpaceInsight(
        category=InsightCategory.DAMAGE,
        severity=InsightSeverity.HIGH if s.temp_roc > 0.6 else InsightSeverity.MEDIUM,
        title="Accelerated Fouling - Soot Blower Issue",
        description=(
            "Rapid heat transfer degradation pattern indicates soot blower system may be "
            "malfunctioning or fouling rate exceeds cleaning capacity."
        ),
        evidence=[
            f"Stack temp rising at {s.temp_roc:.2f}°C/reading",
            f"Efficiency dropping at {abs(s.efficiency_roc):.2f}%/reading",
            f"Current efficiency: {s.latest.efficiency:.1f}%",
        ],
        action_required="Verify soot blower operation, check steam supply pressure",
        potential_impact="Reduced heat transfer, tube overheating risk",
        confidence=78.0,
    )


# ─── Hazards ────────────────────────────────────────────────────────


def _flame_instability_trigger(s: WindowSignals) -> bool:
    return s.o2.std_dev > 0.8 and s.o2.mean < 3.5


def _flame_instability(s: WindowSignals) -> LatentSpaceInsight:
    return LatentSpaceInsight(
        category=InsightCategory.HAZARD,
        severity=InsightSeverity.CRITICAL if s.o2.std_dev > 1.2 else InsightSeverity.HIGH,
        title="Combustion Instability - Flame-out Risk",
        description=(
            "Erratic O₂ levels with low average indicate unstable flame conditions. "
            "Risk of flame-out followed by explosive re-ignition."
        ),
        evidence=[
            f"O₂ volatility: ±{s.o2.std_dev:.2f}% (high)",
            f"Average O₂: {s.o2.mean:.1f}% (below optimal 3.5-4.5%)",
            f"O₂ range: {s.o2.min:.1f}% - {s.o2.max:.1f}%",
        ],
        action_required="IMMEDIATE: Check burner igniter, flame scanner, fuel supply stability",
        potential_impact="Furnace explosion risk - critical safety hazard",
        confidence=88.0,
    )


def _over_firing_trigger(s: WindowSignals) -> bool:
    return s.latest.fuel_flow > 6000 and s.pressure.mean > 66 and s.temp.mean > 170


def _over_firing(s: WindowSignals) -> LatentSpaceInsight:
    return LatentSpaceInsight(
        category=InsightCategory.HAZARD,
        severity=InsightSeverity.HIGH,
        title="Over-firing Condition Detected",
        description=(
            "Boiler operating above design parameters. Sustained over-firing causes "
            "accelerated creep damage and safety valve lifting."
        ),
        evidence=[
            f"Fuel flow: {s.latest.fuel_flow:g} kg/hr (high)",
            f"Average pressure: {s.pressure.mean:.1f} bar",
            f"Average stack temp: {s.temp.mean:.0f}°C",
        ],
        action_required="Reduce firing rate, verify load demand, check pressure transmitters",
        potential_impact="Safety valve damage, tube failure risk",
        confidence=82.0,
    )


def _low_water_trigger(s: WindowSignals) -> bool:
    # Pressure up while flow drops: drum level / feedwater problem
    return s.pressure_roc > 0.2 and s.flow_roc < -0.3


def _low_water(s: WindowSignals) -> LatentSpaceInsight:
    return LatentSpaceInsight(
        category=InsightCategory.HAZARD,
        severity=InsightSeverity.CRITICAL,
        title="Drum Level Anomaly - Low Water Risk",
        description=(
            "Inverse relationship between pressure and flow suggests potential drum level "
            "control issue. Low water condition can cause catastrophic tube failure."
        ),
        evidence=[
            f"Pressure rising: +{s.pressure_roc:.2f} bar/reading",
            f"Steam flow declining: {s.flow_roc:.2f} TPH/reading",
            "Pattern indicates possible feedwater interruption",
        ],
        action_required="IMMEDIATE: Verify drum level indication, check feedwater pumps",
        potential_impact="Catastrophic tube failure if water level drops below safe limit",
        confidence=75.0,
    )


# ─── Failure precursors ─────────────────────────────────────────────


def _economizer_failure_trigger(s: WindowSignals) -> bool:
    return s.temp.mean > 178 and s.latest.efficiency < s.efficiency.mean - 2


def _economizer_failure(s: WindowSignals) -> LatentSpaceInsight:
    return LatentSpaceInsight(
        category=InsightCategory.FAILURE,
        severity=InsightSeverity.HIGH,
        title="Economizer Approaching Failure Point",
        description=(
            "Severe fouling pattern indicates economizer tubes experiencing thermal stress. "
            "Continued operation risks tube leak or rupture."
        ),
        evidence=[
            f"Average stack temp: {s.temp.mean:.0f}°C (critically high)",
            f"Efficiency below baseline by {s.efficiency.mean - s.latest.efficiency:.1f}%",
            f"Estimated fouling factor: {(s.temp.mean - 160) / 5:.1f}x normal",
        ],
        action_required="Schedule chemical cleaning or mechanical tube cleaning within 14 days",
        potential_impact="Economizer leak causing forced outage 5-10 days, repair cost ₹5-15 lakhs",
        confidence=80.0,
    )


def _id_fan_trigger(s: WindowSignals) -> bool:
    return s.temp.std_dev > 3 and s.fuel_roc < 0.5


def _id_fan(s: WindowSignals) -> LatentSpaceInsight:
    return LatentSpaceInsight(
        category=InsightCategory.FAILURE,
        severity=InsightSeverity.MEDIUM,
        title="ID Fan Performance Degradation",
        description=(
            "Draft fluctuations without fuel changes suggest ID fan bearing wear or damper "
            "malfunction affecting flue gas flow."
        ),
        evidence=[
            f"Stack temp volatility: ±{s.temp.std_dev:.1f}°C",
            f"Fuel flow stable (change: {s.fuel_roc:.1f} kg/hr)",
            "Draft imbalance suspected",
        ],
        action_required="Check ID fan vibration levels, bearing temperature",
        potential_impact="Fan failure causes boiler trip - 24-72 hour outage",
        confidence=65.0,
    )


def _valve_hunting_trigger(s: WindowSignals) -> bool:
    return s.o2.std_dev > 0.6 and s.pressure.std_dev > 1


def _valve_hunting(s: WindowSignals) -> LatentSpaceInsight:
    return LatentSpaceInsight(
        category=InsightCategory.FAILURE,
        severity=InsightSeverity.MEDIUM,
        title="Control Valve Hunting Detected",
        description=(
            "Coupled oscillation in O₂ and pressure indicates control valve sticking or "
            "actuator failure. Valve may fail in current position."
        ),
        evidence=[
            f"O₂ oscillation: ±{s.o2.std_dev:.2f}%",
            f"Pressure oscillation: ±{s.pressure.std_dev:.2f} bar",
            "Control loop instability confirmed",
        ],
        action_required="Inspect FD fan damper actuator and fuel control valve",
        potential_impact="Loss of combustion control, potential trip on high/low fuel-air ratio",
        confidence=70.0,
    )


# ─── Opportunities ──────────────────────────────────────────────────


def _excess_air_trigger(s: WindowSignals) -> bool:
    return s.o2.mean > 4.2 and s.o2.std_dev < 0.5


def _excess_air(s: WindowSignals) -> LatentSpaceInsight:
    excess_air_pct = (s.o2.mean - 3.5) * 5  # rough O₂ -> excess air conversion
    saving_lakhs = excess_air_pct * 0.3
    return LatentSpaceInsight(
        category=InsightCategory.OPPORTUNITY,
        severity=InsightSeverity.LOW,
        title="Excess Air Reduction Opportunity",
        description=(
            "O₂ levels consistently above optimal indicate excess combustion air. Reducing "
            f"to 3.5-4% can improve efficiency by {excess_air_pct * 0.5:.1f}%."
        ),
        evidence=[
            f"Average O₂: {s.o2.mean:.1f}% (optimal: 3.5-4%)",
            f"O₂ stable (std dev: {s.o2.std_dev:.2f}%) - good for tuning",
            f"Estimated excess air: {excess_air_pct:.0f}%",
        ],
        action_required="Perform combustion tuning - adjust FD fan/damper setpoints",
        potential_impact=f"Fuel savings: ₹{saving_lakhs:.1f} lakhs/month",
        confidence=85.0,
    )


def _heat_recovery_trigger(s: WindowSignals) -> bool:
    return s.latest.stack_temp > 170 and 3 < s.o2.mean < 4.5


def _heat_recovery(s: WindowSignals) -> LatentSpaceInsight:
    excess_temp = s.latest.stack_temp - 150
    saving_lakhs = excess_temp * 5000 / 100000
    return LatentSpaceInsight(
        category=InsightCategory.OPPORTUNITY,
        severity=InsightSeverity.LOW,
        title="Flue Gas Heat Recovery Potential",
        description=(
            "Stack temperature above 170°C with optimal combustion indicates significant "
            "recoverable heat. Consider air preheater upgrade or economizer enhancement."
        ),
        evidence=[
            f"Stack temperature: {s.latest.stack_temp:g}°C (150°C is benchmark)",
            f"Combustion quality: Good (O₂ at {s.o2.mean:.1f}%)",
            f"Recoverable heat: ~{excess_temp * 0.8:.0f} kW",
        ],
        action_required="Evaluate air preheater retrofit or economizer surface addition",
        potential_impact=f"Fuel savings: ₹{saving_lakhs:.1f} lakhs/month, ROI: 18-24 months",
        confidence=75.0,
    )


def _load_point_trigger(s: WindowSignals) -> bool:
    return s.latest.efficiency < 83 and s.flow.mean < 45


def _load_point(s: WindowSignals) -> LatentSpaceInsight:
    return LatentSpaceInsight(
        category=InsightCategory.OPPORTUNITY,
        severity=InsightSeverity.MEDIUM,
        title="Suboptimal Load Point Operation",
        description=(
            "Current operating load is below boiler efficiency sweet spot. Consider load "
            "consolidation or scheduling optimization."
        ),
        evidence=[
            f"Current efficiency: {s.latest.efficiency:.1f}%",
            f"Average steam flow: {s.flow.mean:.1f} TPH",
            "Optimal load range typically 70-90% MCR",
        ],
        action_required="Review plant load scheduling, consider load shifting",
        potential_impact="Efficiency gain of 2-4% possible by operating at optimal load",
        confidence=68.0,
    )


def _blowdown_trigger(s: WindowSignals) -> bool:
    return s.pressure.mean > 63


def _blowdown(s: WindowSignals) -> LatentSpaceInsight:
    return LatentSpaceInsight(
        category=InsightCategory.OPPORTUNITY,
        severity=InsightSeverity.LOW,
        title="Blowdown Heat Recovery System",
        description=(
            "High-pressure operation means significant energy in blowdown water. Flash tank "
            "or heat exchanger can recover this energy."
        ),
        evidence=[
            f"Operating pressure: {s.pressure.mean:.1f} bar",
            "Assumed blowdown: 3-5% of feedwater",
            "Blowdown enthalpy: ~300 kcal/kg recoverable",
        ],
        action_required="Install or verify blowdown heat recovery system",
        potential_impact="Energy recovery: 1-2% efficiency improvement",
        confidence=60.0,
    )


LATENT_RULES: List[LatentRule] = [
    LatentRule("tube_wall_thinning", _tube_thinning_trigger, _tube_thinning),
    LatentRule("refractory_degradation", _refractory_trigger, _refractory),
    LatentRule("soot_blower_fouling", _soot_blower_trigger, _soot_blower),
    LatentRule("combustion_instability", _flame_instability_trigger, _flame_instability),
    LatentRule("over_firing", _over_firing_trigger, _over_firing),
    LatentRule("drum_low_water", _low_water_trigger, _low_water),
    LatentRule("economizer_failure", _economizer_failure_trigger, _economizer_failure),
    LatentRule("id_fan_degradation", _id_fan_trigger, _id_fan),
    LatentRule("control_valve_hunting", _valve_hunting_trigger, _valve_hunting),
    LatentRule("excess_air", _excess_air_trigger, _excess_air),
    LatentRule("flue_gas_heat_recovery", _heat_recovery_trigger, _heat_recovery),
    LatentRule("suboptimal_load", _load_point_trigger, _load_point),
    LatentRule("blowdown_heat_recovery", _blowdown_trigger, _blowdown),
]

RULES_BY_ID = {rule.rule_id: rule for rule in LATENT_RULES}


# ─── Aggregation ────────────────────────────────────────────────────


def overall_risk_score(insights: List[LatentSpaceInsight]) -> float:
    total = sum(
        SEVERITY_WEIGHT[i.severity] * (i.confidence / 100)
        for i in insights
        if i.category in RISK_CATEGORIES
    )
    return min(100.0, float(total))


def opportunity_score(insights: List[LatentSpaceInsight]) -> float:
    total = sum(
        i.confidence * OPPORTUNITY_WEIGHT
        for i in insights
        if i.category == InsightCategory.OPPORTUNITY
    )
    return min(100.0, float(total))


def prioritize(insights: List[LatentSpaceInsight]) -> List[LatentSpaceInsight]:
    """Hazards first, then damage, failure, opportunity; critical before low. Stable."""
    return sorted(
        insights,
        key=lambda i: (CATEGORY_PRIORITY[i.category], SEVERITY_PRIORITY[i.severity]),
    )


def analyze_latent_spaces(
    window: TelemetryWindow,
    fuel_type: Optional[FuelType] = None,
    analyzed_at: Optional[datetime] = None,
    min_samples: int = MIN_SAMPLES,
) -> LatentSpaceAnalysis:
    """
    Evaluate every latent rule over the window and aggregate the result.

    ``fuel_type`` is accepted for interface compatibility; the rules are
    fuel-agnostic.
    """
    timestamp = analyzed_at or datetime.now(timezone.utc)

    if len(window) < max(min_samples, 1):
        logger.debug("analyze_latent_spaces: %d samples < %d, skipping", len(window), min_samples)
        return LatentSpaceAnalysis(timestamp=timestamp)

    signals = WindowSignals.from_window(window)
    insights = [rule.build(signals) for rule in LATENT_RULES if rule.trigger(signals)]

    logger.debug(
        "analyze_latent_spaces: fuel=%s triggered=%s",
        fuel_type.value if isinstance(fuel_type, FuelType) else fuel_type,
        [i.title for i in insights],
    )

    return LatentSpaceAnalysis(
        insights=prioritize(insights),
        overall_risk_score=overall_risk_score(insights),
        opportunity_score=opportunity_score(insights),
        timestamp=timestamp,
    )
