"""Tests for run telemetry."""

import math

import pytest

from feed_eater.telemetry.metrics import Metrics, latency_stats


def test_latency_stats_empty_is_nan():
    stats = latency_stats([])
    assert stats["count"] == 0
    assert math.isnan(stats["median"])
    assert math.isnan(stats["p95"])


def test_latency_stats_single_sample():
    stats = latency_stats([0.2])
    assert stats["median"] == stats["p95"] == stats["max"] == 0.2


def test_latency_stats_interpolates():
    stats = latency_stats([4.0, 1.0, 3.0, 2.0])
    assert stats["min"] == 1.0
    assert stats["max"] == 4.0
    assert stats["median"] == 2.5
    assert stats["p95"] == pytest.approx(3.85)


def test_summary_reports_counters_and_errors():
    metrics = Metrics()
    metrics.inc("requests_total", 2)
    metrics.inc("requests_succeeded")
    metrics.inc("requests_failed")
    metrics.add_bytes(2048)
    metrics.observe_stage("fetch", 0.25)
    metrics.record_error(TimeoutError())

    text, res = metrics.summary()

    assert res["requests_total"] == 2
    assert res["bytes_received"] == 2048
    assert res["stage_stats"]["fetch"]["count"] == 1
    assert res["errors_by_type"] == {"TimeoutError": 1}
    assert "ok=1" in text and "fail=1" in text
    assert "median=0.2500" in text
    assert "TimeoutError: 1" in text
