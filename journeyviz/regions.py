"""Count journey endpoints per boundary polygon, the input of a choropleth.

Point-in-polygon tests are delegated to matplotlib's Path. Only exterior rings are
used; holes are ignored, which is fine for administrative boundaries at this scale.
"""
import json
import logging
from pathlib import Path
from typing import Literal, Sequence

import numpy as np
from matplotlib.path import Path as MplPath

from .errors import DataError
from .models import JourneyRecord, RegionCount
from .processing.base import record_ref

Endpoint = Literal["start", "end"]
Regions = dict[str, list[MplPath]]


def _geometry_paths(geom: dict, region: str) -> list[MplPath]:
    gtype = geom.get("type")
    coords = geom.get("coordinates") or []
    if gtype == "Polygon":
        polygons = [coords]
    elif gtype == "MultiPolygon":
        polygons = coords
    else:
        raise DataError(f"Unsupported geometry type {gtype!r} for region '{region}'. Expected Polygon or MultiPolygon.")
    paths = []
    for poly in polygons:
        # poly: [exterior_ring, hole1, ...], ring points are [lon, lat]
        exterior = poly[0] if poly else []
        if len(exterior) < 3:
            raise DataError(f"Polygon ring of region '{region}' needs at least 3 points, got {len(exterior)}")
        try:
            verts = [(float(x), float(y)) for x, y, *_ in exterior]
        except (TypeError, ValueError) as exc:
            raise DataError(f"Malformed coordinates in region '{region}': {exc}") from exc
        paths.append(MplPath(verts))
    return paths


def load_regions(geojson_path: Path, name_property: str = "name") -> Regions:
    """Load a GeoJSON FeatureCollection into region name -> list of polygon paths (file order kept)."""
    if not geojson_path.exists():
        raise FileNotFoundError(f"Could not find regions GeoJSON at: {geojson_path}")

    with geojson_path.open("r", encoding="utf-8") as f:
        gj = json.load(f)

    if gj.get("type") == "FeatureCollection":
        features = gj.get("features") or []
    elif gj.get("type") == "Feature":
        features = [gj]
    else:
        raise DataError(f"Expected a GeoJSON Feature or FeatureCollection, got {gj.get('type')!r}")
    if not features:
        raise DataError("GeoJSON FeatureCollection has no features.")

    regions: Regions = {}
    for index, feature in enumerate(features):
        properties = feature.get("properties") or {}
        name = str(properties.get(name_property, f"region_{index}"))
        geom = feature.get("geometry")
        if not geom:
            raise DataError(f"Feature '{name}' has no geometry.")
        regions.setdefault(name, []).extend(_geometry_paths(geom, name))
    logging.info(f"Loaded {len(regions)} regions from {geojson_path}")
    return regions


def _endpoint_coordinates(records: Sequence[JourneyRecord], endpoint: Endpoint) -> np.ndarray:
    lon_field, lat_field = f"{endpoint}_lon", f"{endpoint}_lat"
    points = []
    for position, record in enumerate(records):
        lon, lat = getattr(record, lon_field), getattr(record, lat_field)
        if lon is None or lat is None:
            raise DataError(f"Missing {endpoint} coordinates", row=record_ref(record, position), field=lat_field)
        points.append((lon, lat))
    return np.array(points, dtype=float).reshape(-1, 2)


def count_points_per_region(
        records: Sequence[JourneyRecord], regions: Regions, endpoint: Endpoint = "end"
) -> list[RegionCount]:
    """Number of journeys whose start or end point lies in each region; empty regions count 0."""
    pts = _endpoint_coordinates(records, endpoint)
    counts = []
    for name, paths in regions.items():
        hit = np.zeros(len(pts), dtype=bool)
        for p in paths:
            if len(pts):
                hit |= p.contains_points(pts)
        counts.append(RegionCount(region=name, count=int(hit.sum())))
    logging.debug("Counted %d %s points over %d regions", len(pts), endpoint, len(regions))
    return counts
