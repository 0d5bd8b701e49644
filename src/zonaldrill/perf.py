"""Resource accounting for a single drill request."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from time import perf_counter_ns
from typing import Any

_NANOS = 1_000_000_000


@dataclass(frozen=True)
class RunMetrics:
    """Bytes read and CPU/wall time consumed by one request."""

    bytes_read: int = 0
    user_time_ns: int = 0
    sys_time_ns: int = 0
    wall_time_ns: int = 0

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def _cpu_times_ns() -> tuple[int, int]:
    """Return process user and system CPU time in nanoseconds."""
    times = os.times()
    return int(times.user * _NANOS), int(times.system * _NANOS)


class MetricsRecorder:
    """Accumulate bytes read and measure CPU time between start and stop."""

    def __init__(self) -> None:
        self._bytes_read = 0
        self._start_cpu: tuple[int, int] | None = None
        self._start_wall: int | None = None
        self._elapsed_cpu = (0, 0)
        self._elapsed_wall = 0

    def start(self) -> None:
        """Start a timing session."""
        self._start_cpu = _cpu_times_ns()
        self._start_wall = perf_counter_ns()

    def stop(self) -> None:
        """Stop the timing session; repeated calls are ignored."""
        if self._start_cpu is None or self._start_wall is None:
            return
        user, system = _cpu_times_ns()
        self._elapsed_cpu = (
            max(0, user - self._start_cpu[0]),
            max(0, system - self._start_cpu[1]),
        )
        self._elapsed_wall = max(0, perf_counter_ns() - self._start_wall)
        self._start_cpu = None
        self._start_wall = None

    def add_bytes(self, count: int) -> None:
        """Record bytes transferred from the raster source."""
        if count < 0:
            raise ValueError("Byte count must be non-negative.")
        self._bytes_read += count

    @property
    def bytes_read(self) -> int:
        return self._bytes_read

    def metrics(self) -> RunMetrics:
        """Return the accumulated metrics."""
        return RunMetrics(
            bytes_read=self._bytes_read,
            user_time_ns=self._elapsed_cpu[0],
            sys_time_ns=self._elapsed_cpu[1],
            wall_time_ns=self._elapsed_wall,
        )

    def __enter__(self) -> MetricsRecorder:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
