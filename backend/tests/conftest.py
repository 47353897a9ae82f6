"""Shared fixtures for analytics tests."""

from typing import List

import numpy as np
import pytest

from boiler_analytics.models.telemetry import TelemetrySample
from factories import make_window


@pytest.fixture
def nominal_window() -> List[TelemetrySample]:
    return make_window(10)


@pytest.fixture
def seeded_rng() -> np.random.Generator:
    return np.random.default_rng(42)
