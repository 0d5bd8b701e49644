"""CRS normalization and transformation helpers."""

from __future__ import annotations

from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError

from zonaldrill.errors import GeoOpFailure

# Zones arrive in geographic coordinates unless a request says otherwise.
WGS84 = CRS.from_epsg(4326)


def normalize_crs(value: str | CRS | object) -> CRS:
    """Normalize CRS input (strings, pyproj or rasterio CRS) into a pyproj CRS."""
    if isinstance(value, CRS):
        return value
    try:
        if hasattr(value, "to_epsg") and hasattr(value, "to_wkt"):
            code = value.to_epsg()
            return CRS.from_epsg(code) if code else CRS.from_wkt(value.to_wkt())
        return CRS.from_user_input(value)
    except CRSError as exc:
        raise GeoOpFailure(f"Unknown spatial reference: {value}") from exc


def crs_equal(left: str | CRS | object, right: str | CRS | object) -> bool:
    """Return True when two CRS inputs describe the same reference."""
    return normalize_crs(left) == normalize_crs(right)


def transformer(src: str | CRS | object, dst: str | CRS | object) -> Transformer:
    """Return a transformer that respects lon/lat axis order."""
    return Transformer.from_crs(normalize_crs(src), normalize_crs(dst), always_xy=True)
