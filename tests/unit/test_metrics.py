# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.
"""Unit tests for Metrics."""

from mise_os.core.metrics import Metrics


class TestMetrics:
    def test_counter_increment(self):
        m = Metrics()
        m.inc("tenant_resolution:header")
        m.inc("tenant_resolution:header")
        assert m.get_counter("tenant_resolution:header") == 2

    def test_counter_default_zero(self):
        m = Metrics()
        assert m.get_counter("nonexistent") == 0

    def test_gauge(self):
        m = Metrics()
        m.set_gauge("restaurants_active", 3.0)
        assert m.get_gauge("restaurants_active") == 3.0

    def test_observe(self):
        m = Metrics()
        m.observe("reorder_ms", 100)
        m.observe("reorder_ms", 200)
        snap = m.snapshot()
        assert snap["histogram_reorder_ms"]["avg"] == 150.0
        assert snap["histogram_reorder_ms"]["count"] == 2

    def test_observe_window_bounded(self):
        m = Metrics()
        for i in range(1500):
            m.observe("latency_ms", i)
        assert m.snapshot()["histogram_latency_ms"]["count"] == 1000

    def test_reset(self):
        m = Metrics()
        m.inc("storage_failure")
        m.reset()
        assert m.snapshot()["counters"] == {}

    def test_snapshot_has_uptime(self):
        m = Metrics()
        snap = m.snapshot()
        assert snap["uptime_seconds"] >= 0
