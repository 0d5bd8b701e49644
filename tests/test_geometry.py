from __future__ import annotations

import json
from pathlib import Path

import pytest
from pyproj.exceptions import ProjError
from rasterio.transform import from_bounds
from shapely.geometry import LineString, box

from zonaldrill.errors import GeoOpFailure, InputError
from zonaldrill.raster import geometry as geometry_ops
from zonaldrill.raster.geometry import (
    buffer_geometry,
    envelope_of,
    intersect_geometry,
    load_zone,
    parse_zone,
    raster_envelope,
    reproject_geometry,
)
from zonaldrill.raster.models import Georeference
from tests.utils import square


def test_parse_zone_accepts_feature_and_collection() -> None:
    polygon = square(0.0, 0.0, 1.0, 1.0)
    feature = {"type": "Feature", "geometry": polygon, "properties": {}}
    collection = {"type": "FeatureCollection", "features": [feature]}

    for payload in (polygon, feature, collection, json.dumps(feature)):
        zone = parse_zone(payload)
        assert zone.bounds == (0.0, 0.0, 1.0, 1.0)


def test_parse_zone_unions_multiple_features() -> None:
    collection = {
        "type": "FeatureCollection",
        "features": [
            {"type": "Feature", "geometry": square(0.0, 0.0, 1.0, 1.0)},
            {"type": "Feature", "geometry": square(2.0, 2.0, 3.0, 3.0)},
        ],
    }
    assert parse_zone(collection).bounds == (0.0, 0.0, 3.0, 3.0)


@pytest.mark.parametrize(
    "payload",
    ["{not json", ["list"], {"type": "Topology"}, {"type": "Polygon", "coordinates": [[[0, 0], [1, 1]]]}],
)
def test_parse_zone_rejects_malformed_input(payload) -> None:
    with pytest.raises(InputError):
        parse_zone(payload)


def test_load_zone_missing_file(tmp_path: Path) -> None:
    with pytest.raises(InputError, match="could not be read"):
        load_zone(tmp_path / "missing.geojson")


def test_buffer_falls_back_when_geometry_collapses() -> None:
    line = LineString([(0.0, 0.0), (1.0, 1.0)])
    assert buffer_geometry(line, 0.0).equals(line)
    assert buffer_geometry(line, 0.1).area > 0


def test_reproject_same_crs_is_identity() -> None:
    zone = box(0.0, 0.0, 1.0, 1.0)
    assert reproject_geometry(zone, "EPSG:4326", "EPSG:4326") is zone


def test_reproject_to_web_mercator() -> None:
    zone = reproject_geometry(box(0.0, 0.0, 1.0, 1.0), "EPSG:4326", "EPSG:3857")
    minx, miny, maxx, maxy = zone.bounds
    assert minx == pytest.approx(0.0, abs=1e-6)
    assert 100000 < maxx < 120000
    assert 100000 < maxy < 120000


def test_reproject_wraps_transformer_errors(monkeypatch) -> None:
    def _fail(src, dst):
        raise ProjError("no operation between CRSs")

    monkeypatch.setattr(geometry_ops, "transformer", _fail)
    with pytest.raises(GeoOpFailure, match="reprojection failed"):
        reproject_geometry(box(0.0, 0.0, 1.0, 1.0), "EPSG:4326", "EPSG:3857")


def test_envelope_of_empty_intersection() -> None:
    empty = intersect_geometry(box(0, 0, 1, 1), box(5, 5, 6, 6))
    assert envelope_of(empty) is None


def test_raster_envelope_from_transform() -> None:
    georef = Georeference(
        transform=from_bounds(10.0, 20.0, 14.0, 22.0, width=4, height=2),
        crs=None,
        width=4,
        height=2,
    )
    assert raster_envelope(georef).bounds == (10.0, 20.0, 14.0, 22.0)
