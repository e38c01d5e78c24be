import json
from datetime import date

import pytest

from journeyviz.errors import DataError
from journeyviz.models import RegionCount
from journeyviz.regions import count_points_per_region, load_regions


def _square(x0, y0, size=10):
    return [[[x0, y0], [x0 + size, y0], [x0 + size, y0 + size], [x0, y0 + size], [x0, y0]]]


@pytest.fixture
def regions_geojson(tmp_path):
    path = tmp_path / "regions.geojson"
    path.write_text(json.dumps({
        "type": "FeatureCollection",
        "features": [
            {"type": "Feature", "properties": {"name": "West"}, "geometry": {"type": "Polygon", "coordinates": _square(0, 0)}},
            {"type": "Feature", "properties": {"name": "Islands"},
             "geometry": {"type": "MultiPolygon", "coordinates": [_square(20, 0, 2), _square(30, 0, 2)]}},
            {"type": "Feature", "properties": {"name": "Empty"}, "geometry": {"type": "Polygon", "coordinates": _square(50, 50)}},
        ],
    }), encoding="utf-8")
    return path


def test_counts_end_points_per_region(make_record, regions_geojson):
    records = [
        make_record(end_lon=5.0, end_lat=5.0, start_lon=21.0, start_lat=1.0),
        make_record(end_lon=2.0, end_lat=8.0, start_lon=21.0, start_lat=1.0),
        make_record(end_lon=31.0, end_lat=1.0, start_lon=5.0, start_lat=5.0),
        make_record(end_lon=-40.0, end_lat=-40.0, start_lon=5.0, start_lat=5.0),
    ]
    regions = load_regions(regions_geojson)

    assert count_points_per_region(records, regions) == [
        RegionCount("West", 2),
        RegionCount("Islands", 1),
        RegionCount("Empty", 0),
    ]
    assert count_points_per_region(records, regions, endpoint="start") == [
        RegionCount("West", 2),
        RegionCount("Islands", 2),
        RegionCount("Empty", 0),
    ]


def test_missing_coordinates_raise(make_record, regions_geojson):
    regions = load_regions(regions_geojson)
    records = [make_record(end_lon=5.0, end_lat=5.0), make_record(day=date(1862, 1, 1))]

    with pytest.raises(DataError) as excinfo:
        count_points_per_region(records, regions)

    assert excinfo.value.row == 2


def test_custom_name_property(tmp_path):
    path = tmp_path / "states.geojson"
    path.write_text(json.dumps({
        "type": "FeatureCollection",
        "features": [{"type": "Feature", "properties": {"NAME_1": "Virginia"},
                      "geometry": {"type": "Polygon", "coordinates": _square(0, 0)}}],
    }), encoding="utf-8")

    assert list(load_regions(path, name_property="NAME_1")) == ["Virginia"]


def test_unsupported_geometry(tmp_path):
    path = tmp_path / "points.geojson"
    path.write_text(json.dumps({
        "type": "FeatureCollection",
        "features": [{"type": "Feature", "properties": {"name": "P"}, "geometry": {"type": "Point", "coordinates": [0, 0]}}],
    }), encoding="utf-8")

    with pytest.raises(DataError, match="Unsupported geometry type"):
        load_regions(path)


@pytest.mark.parametrize("ring", [[], [[0, 0], [1, 1]], [[0, 0], ["east", 1], [1, 1]]])
def test_malformed_ring_raises_data_error(tmp_path, ring):
    path = tmp_path / "broken.geojson"
    path.write_text(json.dumps({
        "type": "FeatureCollection",
        "features": [{"type": "Feature", "properties": {"name": "Broken"}, "geometry": {"type": "Polygon", "coordinates": [ring]}}],
    }), encoding="utf-8")

    with pytest.raises(DataError, match="Broken"):
        load_regions(path)


def test_empty_feature_collection(tmp_path):
    path = tmp_path / "empty.geojson"
    path.write_text(json.dumps({"type": "FeatureCollection", "features": []}), encoding="utf-8")

    with pytest.raises(DataError, match="no features"):
        load_regions(path)
