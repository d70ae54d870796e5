"""MetricsCollector tests: counters, category labels, histogram, thread safety."""

import threading

from app.observability.metrics import MetricsCollector


def test_metrics_counter_increment():
    """Counter increments correctly."""
    m = MetricsCollector()
    m.increment("events_ingested")
    m.increment("events_ingested", 2)
    out = m.export_metrics()
    assert out["counters"]["events_ingested"] == 3


def test_metrics_histogram_tracks_latency():
    """Histogram tracks count, sum and max."""
    m = MetricsCollector()
    m.observe_latency("event_dispatch_latency", 10.5)
    m.observe_latency("event_dispatch_latency", 20.0)
    h = m.export_metrics()["histograms"]["event_dispatch_latency"]
    assert h["count"] == 2
    assert h["sum"] == 30.5
    assert h["max"] == 20.0


def test_metrics_category_labels_separated():
    """Per-category counters are labelled and roll up into the total."""
    m = MetricsCollector()
    m.increment("events_processed", category="stripe")
    m.increment("events_processed", 2, category="mollie")
    out = m.export_metrics()
    labels = out["counters_by_labels"]["events_processed"]
    assert labels == {
        "events_processed:category=stripe": 1,
        "events_processed:category=mollie": 2,
    }
    assert out["counters"]["events_processed"] == 3
    assert m.counter("events_processed", category="mollie") == 2
    assert m.counter("events_processed") == 3
    assert m.counter("never_seen", category="stripe") == 0


def test_metrics_latency_keyed_by_category():
    m = MetricsCollector()
    m.observe_latency("event_dispatch_latency", 5.0, category="stripe")
    m.observe_latency("event_dispatch_latency", 10.0, category="mollie")
    histograms = m.export_metrics()["histograms"]
    assert "event_dispatch_latency:category=stripe" in histograms
    assert "event_dispatch_latency:category=mollie" in histograms


def test_metrics_thread_safe():
    """Concurrent increments are safe."""
    m = MetricsCollector()

    def inc():
        for _ in range(100):
            m.increment("events_processed")

    threads = [threading.Thread(target=inc) for _ in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert m.export_metrics()["counters"]["events_processed"] == 1000


def test_metrics_reset():
    """Reset clears all metrics."""
    m = MetricsCollector()
    m.increment("x")
    m.observe_latency("y", 1.0)
    m.reset()
    out = m.export_metrics()
    assert out["counters"] == {}
    assert out["histograms"] == {}
