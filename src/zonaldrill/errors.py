"""Request-fatal error types raised by the drill engine."""

from __future__ import annotations


class DrillError(Exception):
    """Base class for errors that abort a drill request."""


class InputError(DrillError, ValueError):
    """Malformed zone geometry or request payload."""


class UnsupportedFormat(DrillError):
    """Raster sample type has no known byte size."""


class GeoOpFailure(DrillError):
    """Reprojection, intersection, rasterization, or dataset access failed."""
