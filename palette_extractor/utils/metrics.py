"""
Palette Extractor Metrics Collection
In-process request counters and extraction timings served by ``/metrics``.
"""
from collections import defaultdict, Counter
from typing import Any, Dict, List, Optional
from threading import Lock


class MetricsCollector:
    """Thread-safe counters and per-operation timings."""

    def __init__(self):
        self._lock = Lock()
        self._counters: Dict[str, int] = Counter()
        self._timings: Dict[str, List[float]] = defaultdict(list)

    def increment_counter(self, name: str, amount: int = 1):
        with self._lock:
            self._counters[name] += amount

    def increment_failure_count(self, error_type: str):
        """Count a failed extraction under ``palette_failed_total_<error_type>``."""
        self.increment_counter(f"palette_failed_total_{error_type}")

    def record_timing(self, operation: str, duration_ms: float):
        with self._lock:
            self._timings[operation].append(duration_ms)

    def get_summary(self) -> Dict[str, Any]:
        """
        Snapshot of all counters and, per timed operation, the number of
        samples with their mean and max in milliseconds.
        """
        with self._lock:
            return {
                "counters": dict(self._counters),
                "timing_stats": {
                    operation: {
                        "count": len(timings),
                        "mean_ms": sum(timings) / len(timings),
                        "max_ms": max(timings)
                    }
                    for operation, timings in self._timings.items()
                }
            }

    def reset(self):
        with self._lock:
            self._counters.clear()
            self._timings.clear()


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
    global _metrics
    if _metrics is not None:
        _metrics.reset()
