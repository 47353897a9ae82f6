from .telemetry import FuelType, TelemetrySample, TelemetryWindow
from .anomaly import AnomalyScore, AnomalyType
from .analysis import (
    BoilerHealthScore,
    CombustionState,
    ConfidenceLevel,
    EnergyLossAnalysis,
    FailurePrediction,
    HealthTrends,
    LossSeverity,
    TrendDirection,
)
from .insight import InsightCategory, InsightSeverity, LatentSpaceAnalysis, LatentSpaceInsight

__all__ = [
    "FuelType",
    "TelemetrySample",
    "TelemetryWindow",
    "AnomalyScore",
    "AnomalyType",
    "BoilerHealthScore",
    "CombustionState",
    "ConfidenceLevel",
    "EnergyLossAnalysis",
    "FailurePrediction",
    "HealthTrends",
    "LossSeverity",
    "TrendDirection",
    "InsightCategory",
    "InsightSeverity",
    "LatentSpaceAnalysis",
    "LatentSpaceInsight",
]
