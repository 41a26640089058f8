"""
Vibrant Palette Metrics Collection
In-process counters and distributions for extraction calls.
"""
import time
from collections import Counter, defaultdict
from threading import Lock
from typing import Any, Dict, List, Optional

import numpy as np


def describe(values: List[float]) -> Dict[str, float]:
    """Count, mean, min, max and linear-interpolated p50/p95 of a sample."""
    if not values:
        return {}
    data = np.asarray(values, dtype=float)
    p50, p95 = np.percentile(data, [50, 95])
    return {
        "count": int(data.size),
        "mean": float(data.mean()),
        "min": float(data.min()),
        "max": float(data.max()),
        "p50": float(p50),
        "p95": float(p95)
    }


class MetricsCollector:
    """Thread-safe collector shared by all extraction calls in the process."""

    def __init__(self):
        self._lock = Lock()
        self._counters: Counter = Counter()
        self._distributions: Dict[str, List[float]] = defaultdict(list)
        self._started_at = time.monotonic()

    def increment(self, name: str, amount: int = 1):
        with self._lock:
            self._counters[name] += amount

    def observe(self, name: str, value: float):
        with self._lock:
            self._distributions[name].append(float(value))

    def record_request(self):
        self.increment("extract_requests_total")

    def record_success(self, color_format: str, duration_ms: float,
                       palette_size: int, skip_tiles_changed: bool):
        """Record a completed extraction."""
        with self._lock:
            self._counters[f"extract_format_total_{color_format}"] += 1
            if skip_tiles_changed:
                self._counters["extract_skip_tiles_suggested_total"] += 1
            self._distributions["extract_duration_ms"].append(duration_ms)
            self._distributions["palette_size"].append(float(palette_size))

    def record_failure(self, error_code: str, duration_ms: float):
        """Record a failed extraction by error code."""
        with self._lock:
            self._counters[f"extract_failed_total_{error_code}"] += 1
            self._distributions["failed_duration_ms"].append(duration_ms)

    def get_counters(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counters)

    def get_distribution(self, name: str) -> Dict[str, float]:
        """Summary statistics for one observed series; empty if never observed."""
        with self._lock:
            values = list(self._distributions.get(name, ()))
        return describe(values)

    def get_summary(self) -> Dict[str, Any]:
        with self._lock:
            names = list(self._distributions)
        return {
            "uptime_seconds": time.monotonic() - self._started_at,
            "counters": self.get_counters(),
            "distributions": {name: self.get_distribution(name) for name in names}
        }

    def reset(self):
        """Clear everything (for testing)."""
        with self._lock:
            self._counters.clear()
            self._distributions.clear()
            self._started_at = time.monotonic()


# Global metrics instance
_metrics: Optional[MetricsCollector] = None


def get_metrics() -> MetricsCollector:
    """Get or create global metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def reset_metrics():
    """Reset global metrics (for testing)."""
    if _metrics is not None:
        _metrics.reset()
