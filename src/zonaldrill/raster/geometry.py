"""Zone geometry parsing and vector operations backed by shapely."""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Mapping

from pyproj.exceptions import ProjError
from shapely import ops
from shapely.errors import GEOSException, ShapelyError
from shapely.geometry import Polygon, shape
from shapely.geometry.base import BaseGeometry

from zonaldrill.errors import GeoOpFailure, InputError
from zonaldrill.raster.crs import crs_equal, transformer
from zonaldrill.raster.models import Bounds, Georeference

ZONE_TYPES = {
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
    "GeometryCollection",
}


def _extract_geometries(data: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    geometries: list[Mapping[str, Any]] = []
    kind = data.get("type")
    if kind == "FeatureCollection":
        for feature in data.get("features", []):
            if isinstance(feature, Mapping) and feature.get("geometry"):
                geometries.append(feature["geometry"])
    elif kind == "Feature":
        geometry = data.get("geometry")
        if geometry:
            geometries.append(geometry)
    elif kind in ZONE_TYPES:
        geometries.append(data)
    return geometries


def parse_zone(data: Mapping[str, Any] | str) -> BaseGeometry:
    """Parse a GeoJSON geometry, Feature, or FeatureCollection into one zone."""
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as exc:
            raise InputError(f"Zone geometry is not valid JSON: {exc}") from exc
    if not isinstance(data, Mapping):
        raise InputError("Zone geometry must be a GeoJSON object.")
    geometries = _extract_geometries(data)
    if not geometries:
        raise InputError(f"No geometry found in GeoJSON of type {data.get('type')!r}.")
    try:
        shapes = [shape(geometry) for geometry in geometries]
    except (GEOSException, ShapelyError, IndexError, KeyError, TypeError, ValueError) as exc:
        raise InputError(f"Zone geometry could not be parsed: {exc}") from exc
    if len(shapes) == 1:
        return shapes[0]
    return ops.unary_union(shapes)


def load_zone(path: Path) -> BaseGeometry:
    """Load a zone geometry from a GeoJSON file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InputError(f"Zone geometry file could not be read: {path}") from exc
    return parse_zone(text)


def reproject_geometry(geometry: BaseGeometry, src_crs: object, dst_crs: object) -> BaseGeometry:
    """Reproject a geometry between spatial references."""
    if crs_equal(src_crs, dst_crs):
        return geometry
    try:
        tx = transformer(src_crs, dst_crs)
        projected = ops.transform(tx.transform, geometry)
    except (ProjError, TypeError, ValueError) as exc:
        raise GeoOpFailure(f"Zone reprojection failed: {exc}") from exc
    if not projected.is_empty and not all(map(math.isfinite, projected.bounds)):
        raise GeoOpFailure("Zone reprojection produced non-finite coordinates.")
    return projected


def buffer_geometry(geometry: BaseGeometry, distance: float) -> BaseGeometry:
    """Buffer a geometry, keeping the original when the buffer collapses."""
    buffered = geometry.buffer(distance, quad_segs=30)
    if buffered.is_empty:
        return geometry
    return buffered


def intersect_geometry(left: BaseGeometry, right: BaseGeometry) -> BaseGeometry:
    """Return the intersection of two geometries."""
    try:
        return left.intersection(right)
    except (GEOSException, ShapelyError) as exc:
        raise GeoOpFailure(f"Zone intersection failed: {exc}") from exc


def envelope_of(geometry: BaseGeometry) -> Bounds | None:
    """Return (minx, miny, maxx, maxy), or None for empty geometries."""
    if geometry.is_empty:
        return None
    return tuple(geometry.bounds)  # type: ignore[return-value]


def raster_envelope(georef: Georeference) -> Polygon:
    """Return the raster footprint polygon from its geotransform."""
    ul_x, ul_y = georef.transform @ (0, 0)
    lr_x, lr_y = georef.transform @ (georef.width, georef.height)
    return Polygon(
        [
            (ul_x, ul_y),
            (ul_x, lr_y),
            (lr_x, lr_y),
            (lr_x, ul_y),
            (ul_x, ul_y),
        ]
    )
