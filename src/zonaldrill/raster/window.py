"""Resolve a zone geometry into a pixel window and membership mask."""

from __future__ import annotations

import logging

import numpy as np
import shapely
from rasterio.errors import RasterioError
from rasterio.features import rasterize
from shapely.geometry.base import BaseGeometry

from zonaldrill.errors import GeoOpFailure
from zonaldrill.raster.crs import WGS84
from zonaldrill.raster.geometry import (
    buffer_geometry,
    envelope_of,
    intersect_geometry,
    raster_envelope,
    reproject_geometry,
)
from zonaldrill.raster.models import Georeference, PixelWindow

LOGGER = logging.getLogger(__name__)

INSIDE = 255


def window_from_envelope(
    georef: Georeference,
    envelope: tuple[float, float, float, float] | None,
) -> PixelWindow:
    """Map a georeferenced envelope to a pixel window.

    Corners are passed through the inverse geotransform and the min/max of
    the results taken, so flipped axes still produce positive extents.
    Coordinates are truncated toward zero. A missing envelope (empty
    intersection) yields a single pixel at the origin.
    """
    if envelope is None:
        return PixelWindow(0, 0, 1, 1)
    min_x, min_y, max_x, max_y = envelope
    inverse = ~georef.transform
    col_a, row_a = inverse @ (min_x, min_y)
    col_b, row_b = inverse @ (max_x, max_y)

    offset_x = int(min(col_a, col_b))
    offset_y = int(min(row_a, row_b))
    count_x = int(max(col_a, col_b)) - offset_x
    count_y = int(max(row_a, row_b)) - offset_y
    if count_x == 0:
        count_x += 1
    if count_y == 0:
        count_y += 1
    # A zone lying on the far edge maps one past the last pixel.
    offset_x = min(max(offset_x, 0), georef.width - 1)
    offset_y = min(max(offset_y, 0), georef.height - 1)
    return PixelWindow(offset_x, offset_y, count_x, count_y)


def rasterize_mask(
    georef: Georeference,
    window: PixelWindow,
    geometry: BaseGeometry,
) -> np.ndarray:
    """Burn a geometry into a uint8 canvas aligned with the window."""
    if geometry.is_empty:
        return np.zeros(window.shape, dtype=np.uint8)
    try:
        mask = rasterize(
            [(geometry, INSIDE)],
            out_shape=window.shape,
            transform=georef.window_transform(window),
            fill=0,
            all_touched=True,
            dtype="uint8",
        )
    except (RasterioError, ValueError) as exc:
        raise GeoOpFailure(f"Zone rasterization failed: {exc}") from exc
    return mask


def touched_pixels(
    georef: Georeference,
    window: PixelWindow,
    geometry: BaseGeometry,
) -> np.ndarray:
    """Mark window pixels whose footprint intersects the geometry, boundary included."""
    rows, cols = (axis.ravel() for axis in np.indices(window.shape))
    ring_cols = np.stack([cols, cols + 1, cols + 1, cols, cols], axis=1)
    ring_rows = np.stack([rows, rows, rows + 1, rows + 1, rows], axis=1)
    tr = georef.window_transform(window)
    xs = tr.a * ring_cols + tr.b * ring_rows + tr.c
    ys = tr.d * ring_cols + tr.e * ring_rows + tr.f
    footprints = shapely.polygons(np.stack([xs, ys], axis=-1))
    touched = shapely.intersects(footprints, geometry)
    return np.where(touched, INSIDE, 0).astype(np.uint8).reshape(window.shape)


def resolve_window(
    georef: Georeference,
    geometry: BaseGeometry,
    geometry_crs: object = WGS84,
    *,
    buffer_distance: float = 0.0,
) -> tuple[PixelWindow, np.ndarray]:
    """Return the pixel window and read-only membership mask for a zone."""
    zone = geometry
    if georef.crs is not None:
        zone = reproject_geometry(zone, geometry_crs, georef.crs)
    zone = buffer_geometry(zone, buffer_distance)

    inters = intersect_geometry(zone, raster_envelope(georef))
    window = window_from_envelope(georef, envelope_of(inters))
    mask = rasterize_mask(georef, window, zone)
    if not inters.is_empty and not mask.any():
        # Points and lines on the far raster edge fall outside the burn canvas.
        mask = touched_pixels(georef, window, inters)
    mask.setflags(write=False)
    LOGGER.debug(
        "Resolved window off=(%s, %s) size=(%s, %s), %s pixels inside",
        window.offset_x,
        window.offset_y,
        window.count_x,
        window.count_y,
        int(np.count_nonzero(mask == INSIDE)),
    )
    return window, mask
