"""
Telemetry Buffer Service

Owns the rolling telemetry window of each boiler. Analytics never see the
mutable buffer: they get an immutable snapshot per call.
In-memory only; samples are not persisted.
"""

import logging
import threading
from collections import deque
from typing import Deque, Dict, Iterable, List, Optional, Tuple

from ..core.config import settings
from ..models.telemetry import FuelType, TelemetrySample

logger = logging.getLogger("boiler_analytics.buffer")


class TelemetryBuffer:
    """
    Bounded, chronological window of telemetry samples.
    Thread-safe; the oldest sample is dropped once ``max_size`` is reached.
    """

    def __init__(self, max_size: int = 20, fuel_type: FuelType = FuelType.COAL):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._fuel_type = fuel_type
        self._samples: Deque[TelemetrySample] = deque(maxlen=max_size)
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)

    @property
    def fuel_type(self) -> FuelType:
        """Fuel of the latest packet, or the configured fuel when empty."""
        with self._lock:
            if self._samples:
                return self._samples[-1].fuel_type
            return self._fuel_type

    def append(self, sample: TelemetrySample) -> None:
        with self._lock:
            self._samples.append(sample)

    def extend(self, samples: Iterable[TelemetrySample]) -> None:
        with self._lock:
            self._samples.extend(samples)

    def reset(self, samples: Iterable[TelemetrySample] = (), fuel_type: Optional[FuelType] = None) -> None:
        """Replace the whole window, e.g. when the operator switches boiler or fuel."""
        with self._lock:
            self._samples.clear()
            self._samples.extend(samples)
            if fuel_type is not None:
                self._fuel_type = fuel_type

    def clear(self) -> None:
        self.reset()

    def latest(self) -> Optional[TelemetrySample]:
        with self._lock:
            return self._samples[-1] if self._samples else None

    def snapshot(self) -> Tuple[TelemetrySample, ...]:
        """Immutable copy of the current window, oldest first."""
        with self._lock:
            return tuple(self._samples)


class TelemetryRegistry:
    """Per-boiler telemetry buffers keyed by boiler id."""

    def __init__(self, window_size: Optional[int] = None):
        self.window_size = window_size or settings.TELEMETRY_WINDOW_SIZE
        self._buffers: Dict[str, TelemetryBuffer] = {}
        self._lock = threading.RLock()

    def get(self, boiler_id: str) -> Optional[TelemetryBuffer]:
        with self._lock:
            return self._buffers.get(boiler_id)

    def get_or_create(self, boiler_id: str, fuel_type: FuelType = FuelType.COAL) -> TelemetryBuffer:
        with self._lock:
            buffer = self._buffers.get(boiler_id)
            if buffer is None:
                buffer = TelemetryBuffer(self.window_size, fuel_type)
                self._buffers[boiler_id] = buffer
                logger.info("Created telemetry buffer for boiler %s (fuel=%s)", boiler_id, fuel_type.value)
            return buffer

    def remove(self, boiler_id: str) -> bool:
        with self._lock:
            removed = self._buffers.pop(boiler_id, None) is not None
        if removed:
            logger.info("Removed telemetry buffer for boiler %s", boiler_id)
        return removed

    def boiler_ids(self) -> List[str]:
        with self._lock:
            return sorted(self._buffers)


telemetry_registry = TelemetryRegistry()
