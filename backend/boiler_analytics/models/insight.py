from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
import enum


class InsightCategory(str, enum.Enum):
    """What a latent insight is about."""
    DAMAGE = "damage"
    HAZARD = "hazard"
    FAILURE = "failure"
    OPPORTUNITY = "opportunity"


class InsightSeverity(str, enum.Enum):
    """Severity levels for insights."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# Display order: hazards first, then damage, failure, opportunity
CATEGORY_PRIORITY = {
    InsightCategory.HAZARD: 0,
    InsightCategory.DAMAGE: 1,
    InsightCategory.FAILURE: 2,
    InsightCategory.OPPORTUNITY: 3,
}

SEVERITY_PRIORITY = {
    InsightSeverity.CRITICAL: 0,
    InsightSeverity.HIGH: 1,
    InsightSeverity.MEDIUM: 2,
    InsightSeverity.LOW: 3,
}

SEVERITY_WEIGHT = {
    InsightSeverity.LOW: 15,
    InsightSeverity.MEDIUM: 30,
    InsightSeverity.HIGH: 50,
    InsightSeverity.CRITICAL: 75,
}

RISK_CATEGORIES = (
    InsightCategory.DAMAGE,
    InsightCategory.HAZARD,
    InsightCategory.FAILURE,
)


@dataclass
class LatentSpaceInsight:
    """A hidden damage, hazard, failure precursor or improvement opportunity."""
    category: InsightCategory
    severity: InsightSeverity
    title: str
    description: str
    evidence: List[str]
    action_required: str
    potential_impact: str
    confidence: float  # 0-100


@dataclass
class LatentSpaceAnalysis:
    insights: List[LatentSpaceInsight] = field(default_factory=list)
    overall_risk_score: float = 0.0
    opportunity_score: float = 0.0
    timestamp: Optional[datetime] = None
