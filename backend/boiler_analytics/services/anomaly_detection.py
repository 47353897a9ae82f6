"""
Telemetry Anomaly Scoring

Scores each sample of a rolling window against the window itself using two
lightweight detectors:
  - isolation depth: multi-feature sigma distance, only beyond 2σ counts
  - z-score deviation: univariate on efficiency

Both are heuristics on a fixed 0-100 scale that dashboards and alarm
thresholds are calibrated against; keep the arithmetic as is.
"""

import logging
from typing import List, Tuple

import numpy as np
import pandas as pd

from ..models.anomaly import AnomalyScore, AnomalyType
from ..models.telemetry import FEATURE_FIELDS, TelemetrySample, TelemetryWindow

logger = logging.getLogger("boiler_analytics.anomaly")

STD_EPSILON = 0.001
SIGMA_CUTOFF = 2.0
ISOLATION_WEIGHT = 0.15
Z_SCORE_SCALE = 25.0
MAX_SCORE = 100.0

# Upper bounds (exclusive) of each band, checked in order
RISK_BANDS = [
    (25.0, AnomalyType.NORMAL),
    (40.0, AnomalyType.MILD),
    (60.0, AnomalyType.MODERATE),
    (80.0, AnomalyType.SEVERE),
]


def window_frame(window: TelemetryWindow) -> pd.DataFrame:
    """Numeric feature columns of a window, one row per sample."""
    return pd.DataFrame(
        [{col: getattr(s, attr) for col, attr in FEATURE_FIELDS.items()} for s in window],
        columns=list(FEATURE_FIELDS),
        dtype=float,
    )


def _baseline(frame: pd.DataFrame) -> Tuple[pd.Series, pd.Series]:
    """Per-feature population mean and standard deviation."""
    return frame.mean(), frame.std(ddof=0)


def _isolation_depth(point: TelemetrySample, means: pd.Series, stds: pd.Series) -> float:
    depth = 0.0
    for col, attr in FEATURE_FIELDS.items():
        deviation = abs(getattr(point, attr) - means[col]) / (stds[col] + STD_EPSILON)
        if deviation > SIGMA_CUTOFF:
            depth += deviation * ISOLATION_WEIGHT
    return float(min(depth, MAX_SCORE))


def _efficiency_z(point: TelemetrySample, mean: float, std: float) -> float:
    z = abs(point.efficiency - mean) / (std + STD_EPSILON)
    return float(min(z * Z_SCORE_SCALE, MAX_SCORE))


def isolation_score(point: TelemetrySample, history: TelemetryWindow) -> float:
    """
    Multivariate isolation depth of a sample, 0-100.

    Each of pressure, stack temperature, O₂, steam flow and efficiency adds
    ``deviation * 0.15`` once it lies more than 2σ from the history mean.
    """
    if len(history) == 0:
        return 0.0
    means, stds = _baseline(window_frame(history))
    return _isolation_depth(point, means, stds)


def z_score_deviation(point: TelemetrySample, history: TelemetryWindow) -> float:
    """Efficiency z-score of a sample scaled by 25 and capped at 100."""
    if len(history) == 0:
        return 0.0
    values = np.asarray([s.efficiency for s in history], dtype=float)
    return _efficiency_z(point, float(values.mean()), float(values.std()))


def classify_anomaly_risk(risk: float) -> AnomalyType:
    """Map an overall risk onto the half-open bands [0,25) [25,40) [40,60) [60,80) [80,∞)."""
    for upper, label in RISK_BANDS:
        if risk < upper:
            return label
    return AnomalyType.CRITICAL


def detect_anomalies(
    window: TelemetryWindow,
    min_samples: int = 5,
    span: int = 20,
) -> List[AnomalyScore]:
    """
    Score the trailing ``span`` samples of a window.

    Every sample is compared against the *whole* window passed in, not only
    the trailing subset. Windows shorter than ``min_samples`` yield no scores.
    """
    if len(window) < min_samples:
        logger.debug("detect_anomalies: %d samples < %d, skipping", len(window), min_samples)
        return []

    means, stds = _baseline(window_frame(window))
    results: List[AnomalyScore] = []

    for point in list(window)[-span:]:
        iso = _isolation_depth(point, means, stds)
        z = _efficiency_z(point, means["efficiency"], stds["efficiency"])
        overall = (iso + z) / 2
        results.append(AnomalyScore(
            timestamp=point.timestamp,
            isolation_score=iso,
            z_score_deviation=z,
            overall_anomaly_risk=overall,
            anomaly_type=classify_anomaly_risk(overall),
        ))

    flagged = sum(1 for r in results if r.anomaly_type != AnomalyType.NORMAL)
    logger.debug("detect_anomalies: scored %d samples, %d above normal", len(results), flagged)
    return results
