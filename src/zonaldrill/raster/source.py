"""Raster access through rasterio: georeference, band metadata, window reads."""

from __future__ import annotations

import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Sequence

import numpy as np
import rasterio
from rasterio.errors import RasterioError, RasterioIOError

from zonaldrill.errors import GeoOpFailure, InputError, UnsupportedFormat
from zonaldrill.raster.models import BandInfo, Georeference, PixelWindow

LOGGER = logging.getLogger(__name__)


def sample_size(dtype: str) -> int:
    """Return the byte size of a raster sample type."""
    try:
        size = np.dtype(dtype).itemsize
    except TypeError:
        size = 0
    if size == 0:
        raise UnsupportedFormat(f"Raster data type not implemented: {dtype}")
    return size


class RasterSource:
    """Read-only view over an open rasterio dataset."""

    def __init__(self, dataset: Any) -> None:
        self.dataset = dataset

    @property
    def count(self) -> int:
        return self.dataset.count

    def georeference(self) -> Georeference:
        """Return the geotransform, CRS, and pixel dimensions."""
        return Georeference(
            transform=self.dataset.transform,
            crs=self.dataset.crs or None,
            width=self.dataset.width,
            height=self.dataset.height,
        )

    def band_info(self, index: int = 1) -> BandInfo:
        """Return sample type and nodata value for a 1-based band index."""
        if index < 1 or index > self.dataset.count:
            raise InputError(f"Band {index} out of range 1..{self.dataset.count}.")
        dtype = self.dataset.dtypes[index - 1]
        nodata = self.dataset.nodatavals[index - 1]
        return BandInfo(
            index=index,
            dtype=dtype,
            nodata=float(nodata) if nodata is not None else None,
            bytes_per_sample=sample_size(dtype),
        )

    def read_window(self, window: PixelWindow, bands: Sequence[int]) -> np.ndarray:
        """Read bands over a window as float32, shaped (bands, rows, cols)."""
        for index in bands:
            if index < 1 or index > self.dataset.count:
                raise InputError(f"Band {index} out of range 1..{self.dataset.count}.")
        try:
            data = self.dataset.read(
                indexes=list(bands),
                window=window.to_rasterio(),
                out_dtype="float32",
                boundless=self._exceeds_bounds(window),
                fill_value=self._fill_value(),
            )
        except RasterioError as exc:
            raise GeoOpFailure(f"Window read failed: {exc}") from exc
        return data

    def _exceeds_bounds(self, window: PixelWindow) -> bool:
        return (
            window.offset_x + window.count_x > self.dataset.width
            or window.offset_y + window.count_y > self.dataset.height
        )

    def _fill_value(self) -> float:
        nodata = self.dataset.nodata
        return float(nodata) if nodata is not None else 0.0

    def close(self) -> None:
        self.dataset.close()

    def __enter__(self) -> RasterSource:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def open_raster(path: str | Path) -> RasterSource:
    """Open a raster dataset read-only."""
    try:
        dataset = rasterio.open(path)
    except RasterioIOError as exc:
        raise GeoOpFailure(f"Could not open dataset: {path}") from exc
    LOGGER.debug("Opened %s (%sx%s, %s bands)", path, dataset.width, dataset.height, dataset.count)
    return RasterSource(dataset)


@contextmanager
def vrt_source(xml: str) -> Iterator[RasterSource]:
    """Open an inline VRT document through a temporary file."""
    handle = tempfile.NamedTemporaryFile(
        suffix=".vrt", delete=False, mode="w", encoding="utf-8"
    )
    try:
        handle.write(xml)
        handle.close()
        with open_raster(handle.name) as source:
            yield source
    finally:
        os.remove(handle.name)
