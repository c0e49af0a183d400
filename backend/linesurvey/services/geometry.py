# backend/linesurvey/services/geometry.py
from __future__ import annotations
from typing import Any

from pyproj import Geod
from shapely.errors import ShapelyError
from shapely.geometry import shape

_GEOD = Geod(ellps="WGS84")


def line_geometry(obj: Any) -> dict:
    """Return the geometry dict of a Feature, or `obj` itself when it already is one."""
    if not isinstance(obj, dict):
        raise ValueError("geometry must be a JSON object")
    if obj.get("type") == "Feature":
        geom = obj.get("geometry")
        if not isinstance(geom, dict):
            raise ValueError("feature has no geometry")
        return geom
    return obj


def line_coordinates(obj: Any) -> list:
    coords = line_geometry(obj).get("coordinates")
    return list(coords) if isinstance(coords, list) else []


def geodesic_length_m(obj: Any) -> float:
    """Length on the WGS84 ellipsoid; 0.0 for anything that is not a drawable line."""
    geom = line_geometry(obj)
    if geom.get("type") != "LineString" or len(geom.get("coordinates") or []) < 2:
        return 0.0
    try:
        line = shape(geom)  # EPSG:4326
    except (ValueError, TypeError, ShapelyError):
        return 0.0
    return float(_GEOD.geometry_length(line))
