"""Drill request loading and normalization helpers."""

from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import jsonschema

from zonaldrill.contracts import validate_drill_request
from zonaldrill.errors import InputError
from zonaldrill.stats.models import StatMode
from zonaldrill.stats.sampler import coerce_band_strides

ENV_BAND_STRIDES = "ZONALDRILL_BAND_STRIDES"
DEFAULT_GEOMETRY_CRS = "EPSG:4326"


@dataclass(frozen=True)
class DrillRequest:
    """Normalized drill request.

    ``band_strides`` controls the I/O versus precision tradeoff: 1 computes
    every band exactly; k > 1 reads only the first and last band of each run
    of k and linearly interpolates the bands in between.
    """

    geometry: Mapping[str, Any] | str
    path: str | None = None
    vrt: str | None = None
    geometry_crs: str = DEFAULT_GEOMETRY_CRS
    bands: tuple[int, ...] = field(default_factory=tuple)
    band_strides: int = 1
    decile_count: int = 0
    mode: StatMode = StatMode.MEAN
    clip_lower: float = -math.inf
    clip_upper: float = math.inf
    buffer_distance: float = 0.0

    def __post_init__(self) -> None:
        if not self.path and not self.vrt:
            raise InputError("Drill request requires a raster path or VRT document.")
        if self.decile_count < 0:
            raise InputError("decile_count must be >= 0.")
        if self.clip_lower > self.clip_upper:
            raise InputError("clip_lower must not exceed clip_upper.")

    @property
    def columns(self) -> int:
        return 1 + self.decile_count

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "geometry": self.geometry,
            "geometry_crs": self.geometry_crs,
            "bands": list(self.bands),
            "band_strides": self.band_strides,
            "decile_count": self.decile_count,
            "mode": self.mode.value,
            "buffer_distance": self.buffer_distance,
        }
        if self.path:
            payload["path"] = self.path
        if self.vrt:
            payload["vrt"] = self.vrt
        if math.isfinite(self.clip_lower):
            payload["clip_lower"] = self.clip_lower
        if math.isfinite(self.clip_upper):
            payload["clip_upper"] = self.clip_upper
        return payload


def default_band_strides() -> int:
    """Return the stride default, honouring the environment override."""
    raw = os.environ.get(ENV_BAND_STRIDES)
    if not raw:
        return 1
    try:
        return coerce_band_strides(int(raw))
    except ValueError as exc:
        raise InputError(f"{ENV_BAND_STRIDES} must be an integer, got {raw!r}.") from exc


def _resolve_mode(payload: Mapping[str, Any]) -> StatMode:
    mode = payload.get("mode")
    if mode is not None:
        return StatMode(mode)
    if payload.get("pixel_count"):
        return StatMode.COVERAGE_FRACTION
    return StatMode.MEAN


def _float_or(value: object, default: float) -> float:
    if value is None:
        return default
    return float(value)  # type: ignore[arg-type]


def normalize_drill_request(payload: Mapping[str, Any]) -> DrillRequest:
    """Validate and normalize a raw request payload."""
    try:
        validate_drill_request(payload)
    except jsonschema.ValidationError as exc:
        raise InputError(f"Invalid drill request: {exc.message}") from exc

    strides = payload.get("band_strides")
    return DrillRequest(
        geometry=payload["geometry"],
        path=str(payload["path"]) if payload.get("path") else None,
        vrt=payload.get("vrt") or None,
        geometry_crs=str(payload.get("geometry_crs") or DEFAULT_GEOMETRY_CRS),
        bands=tuple(int(band) for band in payload.get("bands") or ()),
        band_strides=(
            coerce_band_strides(strides) if strides is not None else default_band_strides()
        ),
        decile_count=int(payload.get("decile_count") or 0),
        mode=_resolve_mode(payload),
        clip_lower=_float_or(payload.get("clip_lower"), -math.inf),
        clip_upper=_float_or(payload.get("clip_upper"), math.inf),
        buffer_distance=_float_or(payload.get("buffer_distance"), 0.0),
    )


def load_drill_request(path: Path) -> DrillRequest:
    """Load a drill request JSON file from disk."""
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise InputError(f"Drill request could not be read: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise InputError("Drill request must be a JSON object.")
    return normalize_drill_request(payload)
