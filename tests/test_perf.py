from __future__ import annotations

import pytest

from zonaldrill.perf import MetricsRecorder, RunMetrics


def test_recorder_accumulates_bytes_and_times() -> None:
    with MetricsRecorder() as recorder:
        recorder.add_bytes(100)
        recorder.add_bytes(28)
        sum(range(10_000))

    metrics = recorder.metrics()
    assert metrics.bytes_read == 128
    assert metrics.user_time_ns >= 0
    assert metrics.sys_time_ns >= 0
    assert metrics.wall_time_ns > 0


def test_recorder_without_session_is_zero() -> None:
    recorder = MetricsRecorder()
    recorder.stop()
    assert recorder.metrics() == RunMetrics()


def test_stop_is_idempotent() -> None:
    recorder = MetricsRecorder()
    recorder.start()
    recorder.stop()
    first = recorder.metrics()
    recorder.stop()
    assert recorder.metrics() == first


def test_negative_bytes_rejected() -> None:
    with pytest.raises(ValueError):
        MetricsRecorder().add_bytes(-1)


def test_metrics_as_dict() -> None:
    payload = RunMetrics(bytes_read=4, user_time_ns=1, sys_time_ns=2, wall_time_ns=3).as_dict()
    assert payload == {"bytes_read": 4, "user_time_ns": 1, "sys_time_ns": 2, "wall_time_ns": 3}
