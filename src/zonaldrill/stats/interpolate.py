"""Linear interpolation of statistics for bands skipped by stride sampling."""

from __future__ import annotations

import math
from typing import Sequence

from zonaldrill.stats.models import StatPoint


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def interpolate_stride(
    start: Sequence[StatPoint],
    end: Sequence[StatPoint],
    span: int,
) -> list[tuple[StatPoint, ...]]:
    """Return the interior rows between two sampled endpoint rows.

    ``span`` is the number of bands in the stride group including both
    endpoints; ``span - 2`` rows are produced. Counts are the rounded mean
    of the endpoint counts.
    """
    if len(start) != len(end):
        raise ValueError("Endpoint rows must have the same number of columns.")
    if span < 3:
        return []
    betas = [(e.value - s.value) / (span - 1) for s, e in zip(start, end)]
    counts = [_round_half_up((s.count + e.count) / 2) for s, e in zip(start, end)]
    rows = []
    for ip in range(1, span - 1):
        rows.append(
            tuple(
                StatPoint(s.value + ip * beta, count)
                for s, beta, count in zip(start, betas, counts)
            )
        )
    return rows
