from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


@dataclass(frozen=True)
class OperatingEnvelope:
    """
    Reference operating assumptions for a boiler class.

    Defaults describe the generic high-pressure coal unit the dashboard
    was tuned against. Different boiler classes pass their own envelope
    to the analytics instead of editing the rules.
    """

    # Drum / steam pressure (bar)
    pressure_setpoint: float = 65.0
    pressure_tolerance: float = 2.0
    pressure_alarm_band: float = 5.0

    # Stack temperature onsets (°C)
    superheater_temp_onset: float = 170.0
    stack_temp_watch: float = 175.0
    stack_temp_warning: float = 180.0
    stack_temp_critical: float = 185.0

    # Combustion O₂ bands (% vol)
    o2_optimal_low: float = 3.0
    o2_optimal_high: float = 4.5
    o2_limit_low: float = 2.5
    o2_limit_high: float = 5.0

    # Efficiency (%)
    baseline_efficiency: float = 85.0

    # Cost model for energy-loss recovery
    capacity_mw: float = 50.0
    fuel_cost_per_mwh: float = 3000.0
    operating_hours_per_month: float = 720.0


class Settings(BaseSettings):
    """Application configuration settings."""

    # Application
    APP_NAME: str = "Lumen Boiler Analytics"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    API_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    CORS_ORIGINS: str = "*"

    # Telemetry window
    TELEMETRY_WINDOW_SIZE: int = 20
    TREND_WINDOW: int = 10

    # Anomaly Detection
    ANOMALY_MIN_SAMPLES: int = 5
    ANOMALY_ANALYSIS_SPAN: int = 20

    # Latent insights
    LATENT_MIN_SAMPLES: int = 5

    # Operating envelope overrides
    PRESSURE_SETPOINT_BAR: float = 65.0
    BASELINE_EFFICIENCY: float = 85.0
    BOILER_CAPACITY_MW: float = 50.0
    FUEL_COST_PER_MWH: float = 3000.0
    OPERATING_HOURS_PER_MONTH: float = 720.0

    # Economizer fouling noise (0 disables the random term)
    FOULING_NOISE_AMPLITUDE: float = 20.0
    RANDOM_SEED: Optional[int] = None

    class Config:
        env_file = ".env"
        case_sensitive = True

    def envelope(self) -> OperatingEnvelope:
        """Build the operating envelope used by the analytics."""
        return OperatingEnvelope(
            pressure_setpoint=self.PRESSURE_SETPOINT_BAR,
            baseline_efficiency=self.BASELINE_EFFICIENCY,
            capacity_mw=self.BOILER_CAPACITY_MW,
            fuel_cost_per_mwh=self.FUEL_COST_PER_MWH,
            operating_hours_per_month=self.OPERATING_HOURS_PER_MONTH,
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
