"""Test metrics collector."""

import pytest
import time

from ffbatch.shared.metrics import MetricsCollector


def test_metrics_timer():
    """Test timer functionality."""
    metrics = MetricsCollector()

    metrics.start_timer('job')
    time.sleep(0.05)
    elapsed = metrics.stop_timer('job')

    assert elapsed >= 0.05
    assert metrics.get_summary()['metrics']['job_duration']['count'] == 1


def test_metrics_timer_not_started():
    """Test stopping an unknown timer."""
    with pytest.raises(KeyError):
        MetricsCollector().stop_timer('missing')


def test_metrics_counter():
    """Test counter functionality."""
    metrics = MetricsCollector()

    metrics.increment_counter('succeeded')
    metrics.increment_counter('succeeded')
    metrics.increment_counter('failed', amount=3)

    assert metrics.get_summary()['counters'] == {'succeeded': 2, 'failed': 3}


def test_metrics_summary():
    """Test summary generation."""
    metrics = MetricsCollector()

    metrics.record_metric('job_seconds', 1.0)
    metrics.record_metric('job_seconds', 2.0)
    metrics.record_metric('job_seconds', 3.0)
    metrics.increment_counter('succeeded')

    summary = metrics.get_summary()

    assert summary['metrics']['job_seconds']['count'] == 3
    assert summary['metrics']['job_seconds']['avg'] == 2.0
    assert summary['metrics']['job_seconds']['max'] == 3.0
    assert summary['counters'] == {'succeeded': 1}
    assert summary['total_elapsed'] >= 0
