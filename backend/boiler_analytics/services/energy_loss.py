"""
Energy Loss Analysis

Compares the latest thermal loss with the design baseline, names the most
likely loss driver and prices the recoverable energy per month.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np

from ..core.config import OperatingEnvelope
from ..models.analysis import EnergyLossAnalysis, LossSeverity
from ..models.telemetry import TelemetrySample, TelemetryWindow

logger = logging.getLogger("boiler_analytics.energy")

RECENT_SAMPLES = 10
UNKNOWN_DRIVER = "Unknown"


@dataclass(frozen=True)
class LossDriverRule:
    """One loss attribution, tried in priority order."""
    driver: str
    matches: Callable[[TelemetrySample, float], bool]
    severity: Callable[[TelemetrySample], LossSeverity]


LOSS_DRIVERS: List[LossDriverRule] = [
    LossDriverRule(
        driver="Flue gas heat loss (High stack temp + excess air)",
        matches=lambda s, _: s.stack_temp > 180 and s.o2_level > 4,
        severity=lambda s: LossSeverity.CRITICAL if s.stack_temp > 190 else LossSeverity.WARNING,
    ),
    LossDriverRule(
        driver="Incomplete combustion (Low O₂ causing unburned fuel)",
        matches=lambda s, _: s.o2_level < 2.5,
        severity=lambda s: LossSeverity.CRITICAL,
    ),
    LossDriverRule(
        driver="Tube fouling reducing heat transfer",
        matches=lambda s, recent_avg: s.efficiency < recent_avg - 5,
        severity=lambda s: LossSeverity.WARNING,
    ),
]


def recovery_potential(excess_loss_pct: float, envelope: OperatingEnvelope) -> float:
    """Monthly cost of the loss above baseline; never negative."""
    energy_wasted_mwh = (
        excess_loss_pct / 100
        * envelope.capacity_mw
        * envelope.operating_hours_per_month
    )
    return max(0.0, energy_wasted_mwh * envelope.fuel_cost_per_mwh)


def analyze_energy_loss(
    window: TelemetryWindow,
    baseline_efficiency: Optional[float] = None,
    envelope: Optional[OperatingEnvelope] = None,
) -> EnergyLossAnalysis:
    """
    Attribute the current energy loss of the boiler.

    The first matching driver wins: flue gas loss, then incomplete
    combustion, then tube fouling. Capacity, hours and fuel cost come from
    the envelope, not from the boiler's nameplate.
    """
    envelope = envelope or OperatingEnvelope()
    if baseline_efficiency is None:
        baseline_efficiency = envelope.baseline_efficiency
    normal_loss = 100 - baseline_efficiency

    if len(window) == 0:
        logger.warning("analyze_energy_loss: empty window, returning baseline loss")
        return EnergyLossAnalysis(
            normal_energy_loss=normal_loss,
            catastrophic_energy_loss=normal_loss,
            loss_driver=UNKNOWN_DRIVER,
            severity=LossSeverity.NORMAL,
            recovery_potential=0.0,
        )

    latest = window[-1]
    recent = list(window)[-RECENT_SAMPLES:]
    recent_avg = float(np.mean([s.efficiency for s in recent]))
    current_loss = 100 - latest.efficiency

    driver = UNKNOWN_DRIVER
    severity = LossSeverity.NORMAL
    for rule in LOSS_DRIVERS:
        if rule.matches(latest, recent_avg):
            driver = rule.driver
            severity = rule.severity(latest)
            break

    return EnergyLossAnalysis(
        normal_energy_loss=normal_loss,
        catastrophic_energy_loss=current_loss,
        loss_driver=driver,
        severity=severity,
        recovery_potential=recovery_potential(current_loss - normal_loss, envelope),
    )
