"""
Boiler Analytics Engine

Runs every telemetry analytic over the same window snapshot and bundles the
results. Each analytic stays independent; the engine only supplies the
shared configuration (operating envelope, window sizes, fouling noise).
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

import numpy as np

from ..core.config import OperatingEnvelope, Settings, settings as default_settings
from ..models.analysis import BoilerHealthScore, EnergyLossAnalysis, FailurePrediction
from ..models.anomaly import AnomalyScore, AnomalyType
from ..models.insight import LatentSpaceAnalysis
from ..models.telemetry import FuelType, TelemetryWindow
from .anomaly_detection import detect_anomalies
from .energy_loss import analyze_energy_loss
from .failure_prediction import predict_component_failures
from .health_scoring import calculate_boiler_health_score
from .latent_insights import analyze_latent_spaces

logger = logging.getLogger("boiler_analytics.engine")


@dataclass
class AnalyticsReport:
    sample_count: int
    fuel_type: Optional[FuelType]
    anomalies: List[AnomalyScore]
    failure_predictions: List[FailurePrediction]
    energy_loss: EnergyLossAnalysis
    health: BoilerHealthScore
    latent: LatentSpaceAnalysis
    analyzed_at: str
    summary: str = ""
    flagged_samples: int = field(default=0)


class AnalyticsEngine:
    """
    Facade over the stateless analytics.
    Holds configuration and the random generator, never telemetry.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.config = config or default_settings
        self.envelope: OperatingEnvelope = self.config.envelope()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.RANDOM_SEED)

    def anomalies(self, window: TelemetryWindow) -> List[AnomalyScore]:
        return detect_anomalies(
            window,
            min_samples=self.config.ANOMALY_MIN_SAMPLES,
            span=self.config.ANOMALY_ANALYSIS_SPAN,
        )

    def failures(self, window: TelemetryWindow, fuel_type: Optional[FuelType] = None) -> List[FailurePrediction]:
        return predict_component_failures(
            window,
            fuel_type,
            envelope=self.envelope,
            rng=self.rng,
            noise_amplitude=self.config.FOULING_NOISE_AMPLITUDE,
        )

    def energy_loss(self, window: TelemetryWindow, baseline_efficiency: Optional[float] = None) -> EnergyLossAnalysis:
        return analyze_energy_loss(window, baseline_efficiency, envelope=self.envelope)

    def health(self, window: TelemetryWindow) -> BoilerHealthScore:
        return calculate_boiler_health_score(
            window,
            envelope=self.envelope,
            trend_window=self.config.TREND_WINDOW,
        )

    def latent(
        self,
        window: TelemetryWindow,
        fuel_type: Optional[FuelType] = None,
        analyzed_at: Optional[datetime] = None,
    ) -> LatentSpaceAnalysis:
        return analyze_latent_spaces(
            window,
            fuel_type,
            analyzed_at=analyzed_at,
            min_samples=self.config.LATENT_MIN_SAMPLES,
        )

    def analyze(
        self,
        window: TelemetryWindow,
        fuel_type: Optional[FuelType] = None,
        baseline_efficiency: Optional[float] = None,
    ) -> AnalyticsReport:
        """Run all analytics on one snapshot of the window."""
        snapshot = tuple(window)
        if fuel_type is None and snapshot:
            fuel_type = snapshot[-1].fuel_type

        now = datetime.now(timezone.utc)
        anomalies = self.anomalies(snapshot)
        report = AnalyticsReport(
            sample_count=len(snapshot),
            fuel_type=fuel_type,
            anomalies=anomalies,
            failure_predictions=self.failures(snapshot, fuel_type),
            energy_loss=self.energy_loss(snapshot, baseline_efficiency),
            health=self.health(snapshot),
            latent=self.latent(snapshot, fuel_type, analyzed_at=now),
            analyzed_at=now.isoformat(),
            flagged_samples=sum(1 for a in anomalies if a.anomaly_type != AnomalyType.NORMAL),
        )
        report.summary = self._generate_summary(report)

        logger.info(
            "Analyzed %d samples: health=%.1f failures=%d insights=%d risk=%.1f",
            report.sample_count,
            report.health.overall_score,
            len(report.failure_predictions),
            len(report.latent.insights),
            report.latent.overall_risk_score,
        )
        return report

    def _generate_summary(self, report: AnalyticsReport) -> str:
        if report.sample_count == 0:
            return "No telemetry received yet."

        parts = [f"Health score {report.health.overall_score:.0f}/100"]
        if report.failure_predictions:
            top = report.failure_predictions[0]
            parts.append(
                f"highest failure risk: {top.component} "
                f"({top.failure_probability:.0f}%, ~{top.days_until_failure} days)"
            )
        if report.energy_loss.severity.value != "normal":
            parts.append(f"energy loss {report.energy_loss.severity.value}: {report.energy_loss.loss_driver}")
        if report.latent.insights:
            parts.append(f"{len(report.latent.insights)} latent insight(s), lead: {report.latent.insights[0].title}")
        if report.flagged_samples:
            parts.append(f"{report.flagged_samples} anomalous sample(s)")
        return "; ".join(parts) + "."


analytics_engine = AnalyticsEngine()
