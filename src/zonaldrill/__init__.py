"""Zonal band statistics for polygon drills over raster stacks."""

__version__ = "0.1.0"
