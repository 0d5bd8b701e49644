from __future__ import annotations

import os
from pathlib import Path
from typing import Tuple

import numpy as np
import rasterio
from rasterio.transform import from_bounds


def write_raster(
    path: Path,
    data: np.ndarray,
    *,
    bounds: Tuple[float, float, float, float],
    crs: str | None = "EPSG:4326",
    nodata: float | None = None,
) -> Path:
    """Write a single- or multi-band GeoTIFF; 2-D data becomes one band."""
    if data.ndim == 2:
        data = data[np.newaxis, ...]
    count, height, width = data.shape
    transform = from_bounds(*bounds, width=width, height=height)
    path.parent.mkdir(parents=True, exist_ok=True)
    with rasterio.open(
        path,
        "w",
        driver="GTiff",
        height=height,
        width=width,
        count=count,
        dtype=data.dtype,
        crs=crs,
        transform=transform,
        nodata=nodata,
    ) as dataset:
        dataset.write(data)
    return path


def square(minx: float, miny: float, maxx: float, maxy: float) -> dict[str, object]:
    """Return a GeoJSON polygon for an axis-aligned box."""
    return {
        "type": "Polygon",
        "coordinates": [
            [
                [minx, miny],
                [maxx, miny],
                [maxx, maxy],
                [minx, maxy],
                [minx, miny],
            ]
        ],
    }


def band_stack(values: list[float], shape: tuple[int, int] = (2, 2)) -> np.ndarray:
    """Return a float32 stack with one constant band per value."""
    return np.stack([np.full(shape, value, dtype=np.float32) for value in values])


def with_src_env(base_env: dict[str, str] | None = None) -> dict[str, str]:
    """Return an environment with repo src/ on PYTHONPATH."""
    env = dict(base_env or os.environ)
    src_path = Path(__file__).resolve().parents[1] / "src"
    entries = [entry for entry in env.get("PYTHONPATH", "").split(os.pathsep) if entry]
    if str(src_path) not in entries:
        entries.insert(0, str(src_path))
    env["PYTHONPATH"] = os.pathsep.join(entries)
    return env
