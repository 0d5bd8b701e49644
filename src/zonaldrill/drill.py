"""Zonal drill over a raster band stack.

A drill resolves the zone into a pixel window and membership mask once,
then walks the requested bands in stride groups. Each group reads only its
first and last band, aggregates them, and (for strides above two) fills the
interior bands by linear interpolation between the two endpoint rows.
"""

from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Sequence

import numpy as np
from shapely.geometry.base import BaseGeometry

from zonaldrill.contracts import SCHEMA_VERSION
from zonaldrill.perf import MetricsRecorder, RunMetrics
from zonaldrill.raster.geometry import parse_zone
from zonaldrill.raster.models import PixelWindow
from zonaldrill.raster.source import RasterSource, open_raster, vrt_source
from zonaldrill.raster.window import resolve_window
from zonaldrill.request import DrillRequest
from zonaldrill.stats.aggregate import aggregate_band
from zonaldrill.stats.deciles import compute_deciles
from zonaldrill.stats.interpolate import interpolate_stride
from zonaldrill.stats.models import EMPTY_POINT, ResultTable, StatMode, StatPoint
from zonaldrill.stats.sampler import StrideGroup, read_group, stride_groups

LOGGER = logging.getLogger(__name__)


def json_nodata(nodata: float | None) -> float | None:
    """Return nodata as a JSON number, or None when it is unset or not finite."""
    if nodata is None or not math.isfinite(nodata):
        return None
    return nodata


@dataclass(frozen=True)
class DrillResult:
    """Result table, echoed nodata value, and run metrics of one drill."""

    table: ResultTable
    nodata: float | None
    metrics: RunMetrics
    window: PixelWindow | None = None

    @property
    def shape(self) -> tuple[int, int]:
        return self.table.shape

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable payload."""
        return {
            "schema_version": SCHEMA_VERSION,
            "timeseries": [point.as_dict() for point in self.table.flat()],
            "shape": list(self.table.shape),
            "nodata": json_nodata(self.nodata),
            "metrics": self.metrics.as_dict(),
            "error": "OK",
        }


def band_row(
    values: np.ndarray,
    mask: np.ndarray,
    nodata: float | None,
    *,
    clip_lower: float,
    clip_upper: float,
    mode: StatMode,
    decile_count: int,
) -> tuple[StatPoint, ...]:
    """Compute the central statistic and deciles for one band."""
    central = aggregate_band(values, mask, nodata, clip_lower, clip_upper, mode)
    if decile_count == 0:
        return (central,)
    if central.count == 0:
        return (central, *([EMPTY_POINT] * decile_count))
    deciles = compute_deciles(values, mask, nodata, decile_count)
    return (central, *(StatPoint(value, 1) for value in deciles))


def drill_group(
    data: np.ndarray,
    group: StrideGroup,
    mask: np.ndarray,
    nodata: float | None,
    request: DrillRequest,
) -> list[tuple[StatPoint, ...]]:
    """Turn one group's endpoint buffer into a row per band of the group."""
    endpoints = [
        band_row(
            band,
            mask,
            nodata,
            clip_lower=request.clip_lower,
            clip_upper=request.clip_upper,
            mode=request.mode,
            decile_count=request.decile_count,
        )
        for band in data
    ]
    if len(endpoints) == 1:
        return endpoints
    start, end = endpoints
    interior: list[tuple[StatPoint, ...]] = []
    if request.band_strides > 2:
        interior = interpolate_stride(start, end, group.span)
    return [start, *interior, end]


def _resolve_bands(source: RasterSource, bands: Sequence[int]) -> list[int]:
    if bands:
        return list(bands)
    return list(range(1, source.count + 1))


def read_data(
    source: RasterSource,
    geometry: BaseGeometry,
    request: DrillRequest,
) -> DrillResult:
    """Run the drill for an open raster source."""
    table = ResultTable(columns=request.columns)
    bands = _resolve_bands(source, request.bands)
    # All bands are assumed to share the first band's type and nodata value.
    info = source.band_info(1)

    with MetricsRecorder() as recorder:
        window, mask = resolve_window(
            source.georeference(),
            geometry,
            request.geometry_crs,
            buffer_distance=request.buffer_distance,
        )
        for group in stride_groups(bands, request.band_strides):
            data = read_group(source, window, group, info.bytes_per_sample, recorder)
            rows = drill_group(data, group, mask, info.nodata, request)
            table.extend(rows)
            LOGGER.debug("Group %s produced %s row(s)", list(group.bands), len(rows))
            del data

    metrics = recorder.metrics()
    LOGGER.info(
        "Drilled %s band(s) over %sx%s window, %s bytes read",
        len(table),
        window.count_x,
        window.count_y,
        metrics.bytes_read,
    )
    return DrillResult(table=table, nodata=info.nodata, metrics=metrics, window=window)


@contextmanager
def _open_source(request: DrillRequest) -> Iterator[RasterSource]:
    if request.vrt:
        with vrt_source(request.vrt) as source:
            yield source
        return
    with open_raster(request.path) as source:  # type: ignore[arg-type]
        yield source


def drill_dataset(request: DrillRequest) -> DrillResult:
    """Open the request's raster and drill its zone.

    Raises ``DrillError`` subclasses on failure; no partial table is
    returned.
    """
    geometry = parse_zone(request.geometry)
    with _open_source(request) as source:
        return read_data(source, geometry, request)
