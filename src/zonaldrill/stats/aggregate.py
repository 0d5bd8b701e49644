"""Masked per-band mean and coverage-fraction aggregation."""

from __future__ import annotations

import numpy as np

from zonaldrill.raster.window import INSIDE
from zonaldrill.stats.models import EMPTY_POINT, StatMode, StatPoint


def nodata_mask(data: np.ndarray, nodata: float | None) -> np.ndarray:
    """Return a boolean mask where nodata values are present."""
    if nodata is None:
        return np.zeros(data.shape, dtype=bool)
    if np.isnan(nodata):
        return np.isnan(data)
    return data == np.float32(nodata)


def valid_values(values: np.ndarray, mask: np.ndarray, nodata: float | None) -> np.ndarray:
    """Return the flat values inside the zone that are not nodata."""
    flat = np.ravel(values)
    inside = np.ravel(mask) == INSIDE
    if flat.shape != inside.shape:
        raise ValueError("Band values and membership mask must share a shape.")
    return flat[inside & ~nodata_mask(flat, nodata)]


def aggregate_band(
    values: np.ndarray,
    mask: np.ndarray,
    nodata: float | None,
    clip_lower: float,
    clip_upper: float,
    mode: StatMode = StatMode.MEAN,
) -> StatPoint:
    """Aggregate one band's zone pixels into a StatPoint.

    ``MEAN`` averages the valid pixels inside ``[clip_lower, clip_upper]``
    and counts only those. ``COVERAGE_FRACTION`` counts every valid pixel
    and reports the fraction of them that fall inside the clip range.
    """
    valid = valid_values(values, mask, nodata)
    in_range = valid[(valid >= clip_lower) & (valid <= clip_upper)]

    if mode is StatMode.COVERAGE_FRACTION:
        total = int(valid.size)
        accum = float(in_range.size)
    else:
        total = int(in_range.size)
        accum = float(in_range.sum(dtype=np.float64))

    if total == 0:
        return EMPTY_POINT
    return StatPoint(accum / total, total)
