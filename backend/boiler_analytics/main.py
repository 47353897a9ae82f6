"""
Lumen Boiler Analytics

Main FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from .core.config import settings
from .api.analytics import router as analytics_router
from .api.boilers import router as boilers_router
from .services.telemetry_buffer import telemetry_registry

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("boiler_analytics.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("Starting %s v%s", settings.APP_NAME, settings.APP_VERSION)
    yield
    logger.info("Shutting down (%d boiler windows in memory)", len(telemetry_registry.boiler_ids()))


app = FastAPI(
    title=settings.APP_NAME,
    description="""
    ## Lumen Boiler Analytics

    Telemetry analytics for industrial boilers.

    ### Core Capabilities:
    - **Anomaly Scoring**: isolation depth and efficiency z-score per sample
    - **Failure Prediction**: superheater, economizer, combustion control, feed water pump
    - **Energy Loss**: loss driver, severity and monthly recovery potential
    - **Health Scoring**: penalties, trends and latent degradation patterns
    - **Latent Insights**: damage, hazard, failure and opportunity rules
    """,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.CORS_ORIGINS.split(",") if origin.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(analytics_router, prefix=settings.API_PREFIX)
app.include_router(boilers_router, prefix=settings.API_PREFIX)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "boilers": len(telemetry_registry.boiler_ids()),
    }


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    uvicorn.run(
        "boiler_analytics.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
