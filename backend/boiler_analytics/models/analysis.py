from dataclasses import dataclass, field
from typing import List
import enum


class ConfidenceLevel(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class LossSeverity(str, enum.Enum):
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


class TrendDirection(str, enum.Enum):
    STABLE = "stable"
    RISING = "rising"
    FALLING = "falling"
    VOLATILE = "volatile"


class CombustionState(str, enum.Enum):
    OPTIMAL = "optimal"
    SUBOPTIMAL = "suboptimal"
    DEGRADING = "degrading"


@dataclass
class FailurePrediction:
    """Predicted failure of one boiler component."""
    component: str
    failure_probability: float  # 0-100
    days_until_failure: int
    confidence_level: ConfidenceLevel
    indicators: List[str] = field(default_factory=list)


@dataclass
class EnergyLossAnalysis:
    """Thermal loss of the latest sample compared with the design baseline."""
    normal_energy_loss: float  # % lost at baseline efficiency
    catastrophic_energy_loss: float  # % lost right now
    loss_driver: str
    severity: LossSeverity
    recovery_potential: float  # currency per month if fixed


@dataclass
class HealthTrends:
    pressure: TrendDirection = TrendDirection.STABLE
    temperature: TrendDirection = TrendDirection.STABLE
    efficiency: TrendDirection = TrendDirection.STABLE
    combustion: CombustionState = CombustionState.OPTIMAL


@dataclass
class BoilerHealthScore:
    """Multi-dimensional health assessment."""
    overall_score: float  # 0-100
    trends: HealthTrends = field(default_factory=HealthTrends)
    latent_patterns: List[str] = field(default_factory=list)
    risk_factors: List[str] = field(default_factory=list)
