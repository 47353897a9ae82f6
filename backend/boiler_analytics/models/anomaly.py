from dataclasses import dataclass
import enum


class AnomalyType(str, enum.Enum):
    """Banded anomaly risk."""
    NORMAL = "normal"
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"
    CRITICAL = "critical"


@dataclass
class AnomalyScore:
    """Anomaly assessment of one telemetry sample against its window."""
    timestamp: str
    isolation_score: float  # 0-100
    z_score_deviation: float  # 0-100
    overall_anomaly_risk: float  # mean of the two scores
    anomaly_type: AnomalyType
