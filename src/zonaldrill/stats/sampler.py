"""Stride grouping and endpoint reads for requested bands."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np

from zonaldrill.errors import UnsupportedFormat
from zonaldrill.perf import MetricsRecorder
from zonaldrill.raster.models import PixelWindow
from zonaldrill.raster.source import RasterSource

LOGGER = logging.getLogger(__name__)


def coerce_band_strides(value: int | None) -> int:
    """Clamp a stride setting to at least 1."""
    if value is None:
        return 1
    strides = int(value)
    return strides if strides > 0 else 1


@dataclass(frozen=True)
class StrideGroup:
    """Contiguous run of requested bands sampled at its endpoints."""

    bands: tuple[int, ...]

    @property
    def span(self) -> int:
        return len(self.bands)

    @property
    def sampled(self) -> tuple[int, ...]:
        """Bands physically read: the first and last, or the single member."""
        if len(self.bands) == 1:
            return self.bands
        return (self.bands[0], self.bands[-1])


def stride_groups(bands: Sequence[int], band_strides: int) -> Iterator[StrideGroup]:
    """Partition bands into groups of ``band_strides``; the last may be shorter."""
    strides = coerce_band_strides(band_strides)
    for start in range(0, len(bands), strides):
        yield StrideGroup(tuple(bands[start : start + strides]))


def read_group(
    source: RasterSource,
    window: PixelWindow,
    group: StrideGroup,
    bytes_per_sample: int,
    recorder: MetricsRecorder,
) -> np.ndarray:
    """Read a group's sampled bands and account for the bytes transferred."""
    if bytes_per_sample <= 0:
        raise UnsupportedFormat("Raster data type not implemented.")
    data = source.read_window(window, group.sampled)
    recorder.add_bytes(int(data.size) * bytes_per_sample)
    LOGGER.debug("Read bands %s (%s samples)", list(group.sampled), data.size)
    return data
