"""
Engine Telemetry.

Two small pieces of instrumentation:
- DegradationMonitor: counts criteria that fell back to a neutral score
  so degraded rankings are diagnosable instead of silently absorbed.
- RunningStats: online mean/variance accumulator (Welford) for selection
  latency.
"""

from __future__ import annotations

import math
import threading
from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable, Optional

from loguru import logger

# =============================================================================
# Degradation Monitor
# =============================================================================

DegradationSink = Callable[[str, BaseException, dict[str, Any]], None]


class DegradationMonitor:
    """
    Observability hook for degraded scoring.

    Every call to ``record`` logs a warning and bumps a per-criterion
    counter. An optional sink receives the same event so callers can
    forward it to their own metrics system.
    """

    def __init__(self, sink: Optional[DegradationSink] = None):
        self._sink = sink
        self._counts: Counter[str] = Counter()
        self._lock = threading.Lock()

    def record(self, criterion: str, error: BaseException, **context: Any) -> None:
        with self._lock:
            self._counts[criterion] += 1

        details = " ".join(f"{key}={value}" for key, value in context.items())
        logger.warning(f"Degraded {criterion} scoring ({type(error).__name__}: {error}) {details}".rstrip())

        if self._sink is not None:
            try:
                self._sink(criterion, error, context)
            except Exception as sink_error:
                logger.error(f"Degradation sink failed: {sink_error}")

    def count(self, criterion: str) -> int:
        with self._lock:
            return self._counts[criterion]

    @property
    def total(self) -> int:
        with self._lock:
            return sum(self._counts.values())

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return dict(self._counts)

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()


# =============================================================================
# Running Statistics
# =============================================================================


@dataclass
class RunningStats:
    """Welford online accumulator; O(1) memory per series."""

    count: int = 0
    mean: float = 0.0
    _m2: float = 0.0
    minimum: float = math.inf
    maximum: float = -math.inf

    def add(self, value: float) -> None:
        self.count += 1
        delta = value - self.mean
        self.mean += delta / self.count
        self._m2 += delta * (value - self.mean)
        self.minimum = min(self.minimum, value)
        self.maximum = max(self.maximum, value)

    @property
    def variance(self) -> float:
        """Sample variance (0.0 until two observations exist)."""
        if self.count < 2:
            return 0.0
        return self._m2 / (self.count - 1)

    @property
    def stddev(self) -> float:
        return math.sqrt(self.variance)

    def as_dict(self) -> dict[str, float]:
        return {
            "count": self.count,
            "mean": round(self.mean, 3),
            "stddev": round(self.stddev, 3),
            "min": round(self.minimum, 3) if self.count else 0.0,
            "max": round(self.maximum, 3) if self.count else 0.0,
        }
