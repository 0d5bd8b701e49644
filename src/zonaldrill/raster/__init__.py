"""Raster access, zone geometry, and window resolution helpers."""

from zonaldrill.raster.crs import WGS84, crs_equal, normalize_crs, transformer
from zonaldrill.raster.geometry import load_zone, parse_zone, reproject_geometry
from zonaldrill.raster.models import BandInfo, Georeference, PixelWindow
from zonaldrill.raster.source import RasterSource, open_raster, sample_size, vrt_source
from zonaldrill.raster.window import INSIDE, resolve_window

__all__ = [
    "BandInfo",
    "Georeference",
    "INSIDE",
    "PixelWindow",
    "RasterSource",
    "WGS84",
    "crs_equal",
    "load_zone",
    "normalize_crs",
    "open_raster",
    "parse_zone",
    "reproject_geometry",
    "resolve_window",
    "sample_size",
    "transformer",
    "vrt_source",
]
