"""
Analytics API Endpoints

Stateless analytics over a window supplied in the request body. Responses
use the camelCase result field names the dashboard renders.
"""

import logging

from fastapi import APIRouter

from ..services.analysis_engine import analytics_engine
from ..utils import result_to_dict
from .schemas import WindowAnalysisRequest

logger = logging.getLogger("boiler_analytics.api.analytics")

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.post("/anomalies")
async def detect_window_anomalies(request: WindowAnalysisRequest):
    """Per-sample anomaly scores for the trailing samples of the window."""
    return result_to_dict(analytics_engine.anomalies(request.samples()))


@router.post("/failures")
async def predict_window_failures(request: WindowAnalysisRequest):
    """Component failure predictions, most probable first."""
    return result_to_dict(analytics_engine.failures(request.samples(), request.fuel_type))


@router.post("/energy-loss")
async def analyze_window_energy_loss(request: WindowAnalysisRequest):
    """Energy loss driver, severity and monthly recovery potential."""
    return result_to_dict(
        analytics_engine.energy_loss(request.samples(), request.baseline_efficiency)
    )


@router.post("/health")
async def score_window_health(request: WindowAnalysisRequest):
    """Boiler health score with trends and latent patterns."""
    return result_to_dict(analytics_engine.health(request.samples()))


@router.post("/latent-insights")
async def analyze_window_latent_spaces(request: WindowAnalysisRequest):
    """Damage, hazard, failure and opportunity insights with aggregate scores."""
    return result_to_dict(analytics_engine.latent(request.samples(), request.fuel_type))


@router.post("/report")
async def analyze_window(request: WindowAnalysisRequest):
    """All analytics over the same window snapshot."""
    samples = request.samples()
    logger.info("Full analytics report requested for %d samples", len(samples))
    report = analytics_engine.analyze(samples, request.fuel_type, request.baseline_efficiency)
    return result_to_dict(report)
