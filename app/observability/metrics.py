"""Prometheus-style metrics collector. Thread-safe, in-memory. No real Prometheus dependency."""

import threading
from typing import Any


class MetricsCollector:
    """
    In-memory Prometheus-style registry. Tracks counters and latency histograms, optionally
    labelled by event category. Exposes increment, observe_latency, export_metrics.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[str, float] = {}
        self._counters_by_labels: dict[str, dict[str, float]] = {}
        self._histograms: dict[str, list[float]] = {}

    def increment(
        self,
        name: str,
        value: float = 1.0,
        *,
        category: str | None = None,
    ) -> None:
        """Increment a counter. Labelled counters also roll up into the unlabelled total."""
        with self._lock:
            self._counters[name] = self._counters.get(name, 0) + value
            if category is not None:
                key = f"{name}:category={category}"
                labels = self._counters_by_labels.setdefault(name, {})
                labels[key] = labels.get(key, 0) + value

    def observe_latency(
        self,
        name: str,
        latency_ms: float,
        *,
        category: str | None = None,
    ) -> None:
        """Record a latency observation (histogram-style)."""
        with self._lock:
            bucket = name if category is None else f"{name}:category={category}"
            self._histograms.setdefault(bucket, []).append(latency_ms)

    def counter(self, name: str, *, category: str | None = None) -> float:
        with self._lock:
            if category is None:
                return self._counters.get(name, 0)
            return self._counters_by_labels.get(name, {}).get(f"{name}:category={category}", 0)

    def export_metrics(self) -> dict[str, Any]:
        """Export all metrics as a dict (simulated Prometheus-style)."""
        with self._lock:
            return {
                "counters": dict(self._counters),
                "counters_by_labels": {
                    k: dict(v) for k, v in self._counters_by_labels.items()
                },
                "histograms": {
                    k: {
                        "count": len(v),
                        "sum": sum(v),
                        "max": max(v) if v else 0.0,
                    }
                    for k, v in self._histograms.items()
                },
            }

    def reset(self) -> None:
        """Reset all metrics (for tests)."""
        with self._lock:
            self._counters.clear()
            self._counters_by_labels.clear()
            self._histograms.clear()
