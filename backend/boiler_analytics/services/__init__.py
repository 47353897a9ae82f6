from .statistics import SeriesStats, stats, rate_of_change, trend
from .anomaly_detection import classify_anomaly_risk, detect_anomalies, isolation_score, z_score_deviation
from .failure_prediction import FAILURE_RULES, predict_component_failures
from .energy_loss import analyze_energy_loss
from .health_scoring import calculate_boiler_health_score
from .latent_insights import LATENT_RULES, WindowSignals, analyze_latent_spaces
from .analysis_engine import AnalyticsEngine, AnalyticsReport, analytics_engine
from .telemetry_buffer import TelemetryBuffer, TelemetryRegistry, telemetry_registry

__all__ = [
    "SeriesStats",
    "stats",
    "rate_of_change",
    "trend",
    "classify_anomaly_risk",
    "detect_anomalies",
    "isolation_score",
    "z_score_deviation",
    "FAILURE_RULES",
    "predict_component_failures",
    "analyze_energy_loss",
    "calculate_boiler_health_score",
    "LATENT_RULES",
    "WindowSignals",
    "analyze_latent_spaces",
    "AnalyticsEngine",
    "AnalyticsReport",
    "analytics_engine",
    "TelemetryBuffer",
    "TelemetryRegistry",
    "telemetry_registry",
]
