"""
Statistics helpers for rolling telemetry windows.

Population statistics, mean first differences and a coarse trend label.
Runs entirely locally on small windows (a few dozen samples at most).
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ..models.analysis import TrendDirection

VOLATILITY_LIMIT = 1.5
DIRECTION_THRESHOLD = 0.5


@dataclass(frozen=True)
class SeriesStats:
    mean: float
    std_dev: float
    min: float
    max: float
    range: float


def stats(values: Sequence[float]) -> SeriesStats:
    """
    Population mean, standard deviation, min, max and range.

    Raises ValueError for an empty sequence.
    """
    if len(values) == 0:
        raise ValueError("stats() requires at least one value")

    arr = np.asarray(values, dtype=float)
    lo = float(arr.min())
    hi = float(arr.max())
    return SeriesStats(
        mean=float(arr.mean()),
        std_dev=float(arr.std()),  # ddof=0
        min=lo,
        max=hi,
        range=hi - lo,
    )


def rate_of_change(values: Sequence[float]) -> float:
    """Mean of successive differences; 0.0 when there are fewer than two values."""
    if len(values) < 2:
        return 0.0
    return float(np.diff(np.asarray(values, dtype=float)).mean())


def trend(values: Sequence[float]) -> TrendDirection:
    """
    Classify a series as stable, rising, falling or volatile.

    Volatility (spread of the first differences) wins over direction.
    """
    if len(values) < 2:
        return TrendDirection.STABLE

    diffs = np.diff(np.asarray(values, dtype=float))
    avg_diff = float(diffs.mean())
    spread = float(np.sqrt(((diffs - avg_diff) ** 2).mean()))

    if spread > VOLATILITY_LIMIT:
        return TrendDirection.VOLATILE
    if avg_diff > DIRECTION_THRESHOLD:
        return TrendDirection.RISING
    if avg_diff < -DIRECTION_THRESHOLD:
        return TrendDirection.FALLING
    return TrendDirection.STABLE
