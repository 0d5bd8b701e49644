"""Data models shared by the raster access and window resolution helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from rasterio.transform import Affine
from rasterio.windows import Window

Bounds = Tuple[float, float, float, float]


@dataclass(frozen=True)
class PixelWindow:
    """Pixel-space rectangle read for a drill request."""

    offset_x: int
    offset_y: int
    count_x: int
    count_y: int

    def __post_init__(self) -> None:
        if self.offset_x < 0 or self.offset_y < 0:
            raise ValueError("Pixel window offsets must be non-negative.")
        if self.count_x < 1 or self.count_y < 1:
            raise ValueError("Pixel window extents must be at least 1.")

    @property
    def shape(self) -> tuple[int, int]:
        """Return the (rows, cols) shape of the window."""
        return (self.count_y, self.count_x)

    @property
    def size(self) -> int:
        return self.count_x * self.count_y

    def to_rasterio(self) -> Window:
        """Return the equivalent rasterio window."""
        return Window(self.offset_x, self.offset_y, self.count_x, self.count_y)


@dataclass(frozen=True)
class Georeference:
    """Geotransform, spatial reference, and pixel size of a raster."""

    transform: Affine
    crs: object | None
    width: int
    height: int

    def window_transform(self, window: PixelWindow) -> Affine:
        """Return the geotransform shifted to the window origin."""
        return self.transform @ Affine.translation(window.offset_x, window.offset_y)


@dataclass(frozen=True)
class BandInfo:
    """Sample type and nodata metadata for one band."""

    index: int
    dtype: str
    nodata: float | None
    bytes_per_sample: int
