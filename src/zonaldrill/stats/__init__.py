"""Zonal aggregation, decile estimation, and stride interpolation."""

from zonaldrill.stats.aggregate import aggregate_band, nodata_mask, valid_values
from zonaldrill.stats.deciles import compute_deciles, decile_values
from zonaldrill.stats.interpolate import interpolate_stride
from zonaldrill.stats.models import EMPTY_POINT, ResultTable, StatMode, StatPoint
from zonaldrill.stats.sampler import StrideGroup, coerce_band_strides, read_group, stride_groups

__all__ = [
    "EMPTY_POINT",
    "ResultTable",
    "StatMode",
    "StatPoint",
    "StrideGroup",
    "aggregate_band",
    "coerce_band_strides",
    "compute_deciles",
    "decile_values",
    "interpolate_stride",
    "nodata_mask",
    "read_group",
    "stride_groups",
]
