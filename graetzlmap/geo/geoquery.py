"""
Geo queries over the in-memory POI and Grätzl (neighborhood) collections.

POIs are GeoJSON Point features, neighborhoods are Polygon/MultiPolygon features.
Coordinates follow GeoJSON order ``[lng, lat]`` unless a function says otherwise;
the map frontend (Leaflet) wants ``[lat, lng]``, see ``to_leaflet``/``to_geojson``.

Geometry predicates are delegated to shapely. Distances use the haversine formula.
"""

import json
import logging
import math
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from shapely.geometry import Point, shape
from shapely.geometry.base import BaseGeometry
from shapely.prepared import prep
import shapely

from graetzlmap.core.exceptions import (
    GeoDataLoadError,
    GraetzlmapException,
    InvalidCoordinateError,
)
from graetzlmap.i18n import all_text_values, resolve_text

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0088

Feature = Dict[str, Any]


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def read_feature_file(path: Path) -> List[Feature]:
    """
    Read features from a GeoJSON FeatureCollection or a bare JSON array of features.

    Raises:
        GeoDataLoadError: file missing, unreadable or not feature shaped
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except FileNotFoundError:
        raise GeoDataLoadError(str(path), "file not found")
    except (OSError, json.JSONDecodeError) as e:
        raise GeoDataLoadError(str(path), str(e)) from e

    if isinstance(payload, dict) and isinstance(payload.get("features"), list):
        return payload["features"]
    if isinstance(payload, list):
        return payload
    raise GeoDataLoadError(str(path), "expected a FeatureCollection or an array of features")


@dataclass
class GeoData:
    pois: List[Feature] = field(default_factory=list)
    neighborhoods: List[Feature] = field(default_factory=list)


class GeoContext:
    """
    Holds the loaded POI and neighborhood collections for query functions.

    ``load_data()`` is memoized until ``invalidate()`` is called. Writers of POI
    data call ``invalidate()`` so the next query sees the change.
    """

    def __init__(self, poi_loader: Callable[[], Iterable[Feature]], neighborhoods_path: Path):
        self._poi_loader = poi_loader
        self.neighborhoods_path = Path(neighborhoods_path)
        self._data: Optional[GeoData] = None
        self._lock = threading.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._data is not None

    def load_data(self) -> GeoData:
        with self._lock:
            if self._data is not None:
                return self._data

            try:
                pois = list(self._poi_loader())
            except GeoDataLoadError:
                raise
            except (GraetzlmapException, OSError, ValueError) as e:
                raise GeoDataLoadError("POI store", str(e)) from e
            neighborhoods = read_feature_file(self.neighborhoods_path)

            self._data = GeoData(pois=pois, neighborhoods=neighborhoods)
            logger.info(
                f"Geodata loaded: {len(pois)} POIs, {len(neighborhoods)} neighborhoods",
                extra={"poi_count": len(pois), "neighborhood_count": len(neighborhoods)},
            )
            return self._data

    def invalidate(self) -> None:
        with self._lock:
            self._data = None
        logger.debug("Geodata cache invalidated")

    def reload(self) -> GeoData:
        self.invalidate()
        return self.load_data()


# ---------------------------------------------------------------------------
# Feature accessors
# ---------------------------------------------------------------------------

def _props(feature: Feature) -> Dict[str, Any]:
    return feature.get("properties") or {}


def poi_id(feature: Feature) -> Optional[str]:
    return _props(feature).get("id")


def poi_category(feature: Feature) -> Optional[str]:
    return _props(feature).get("category")


def neighborhood_id(feature: Feature) -> Optional[int]:
    props = _props(feature)
    for key in ("Graetzl_ID", "graetzlId", "id"):
        value = props.get(key)
        if value is None:
            continue
        try:
            return int(value)
        except (TypeError, ValueError):
            return None
    return None


def neighborhood_name(feature: Feature) -> Any:
    """Raw name value; may be a string or a ``{de, en}`` map."""
    props = _props(feature)
    return props.get("Graetzl_Name", props.get("name"))


def is_active(feature: Feature) -> bool:
    return _props(feature).get("active") in (1, True, "1", "true")


def get_neighborhood(neighborhoods: Iterable[Feature], graetzl_id: Optional[int]) -> Optional[Feature]:
    if graetzl_id is None:
        return None
    for feature in neighborhoods:
        if neighborhood_id(feature) == int(graetzl_id):
            return feature
    return None


def active_neighborhoods(neighborhoods: Iterable[Feature]) -> List[Feature]:
    return [f for f in neighborhoods if is_active(f)]


def get_pois_by_ids(pois: Iterable[Feature], ids: Sequence[str]) -> List[Feature]:
    """POIs in the order of ``ids``; unknown ids are skipped."""
    by_id = {poi_id(p): p for p in pois}
    return [by_id[i] for i in ids if i in by_id]


def get_all_categories(pois: Iterable[Feature]) -> List[str]:
    return sorted({c for c in (poi_category(p) for p in pois) if c})


# ---------------------------------------------------------------------------
# Coordinates
# ---------------------------------------------------------------------------

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_pair(coords: Any) -> Sequence[float]:
    if not isinstance(coords, (list, tuple)) or len(coords) != 2:
        raise InvalidCoordinateError(coords)
    if not all(_is_number(c) and math.isfinite(c) for c in coords):
        raise InvalidCoordinateError(coords)
    return coords


def to_leaflet(coords: Sequence[float]) -> List[float]:
    """``[lng, lat]`` -> ``[lat, lng]``"""
    lng, lat = _check_pair(coords)
    return [lat, lng]


def to_geojson(coords: Sequence[float]) -> List[float]:
    """``[lat, lng]`` -> ``[lng, lat]``"""
    lat, lng = _check_pair(coords)
    return [lng, lat]


def ring_to_leaflet(ring: Sequence[Sequence[float]]) -> List[List[float]]:
    return [to_leaflet(c) for c in ring]


def ring_to_geojson(ring: Sequence[Sequence[float]]) -> List[List[float]]:
    return [to_geojson(c) for c in ring]


def feature_to_leaflet_coords(feature: Feature) -> Optional[list]:
    """
    Point -> ``[lat, lng]``; Polygon -> outer ring as ``[[lat, lng], ...]``;
    MultiPolygon -> list of outer rings. Other geometry types give None.
    """
    geometry = feature.get("geometry") or {}
    geom_type = geometry.get("type")
    coordinates = geometry.get("coordinates")
    if geom_type == "Point":
        return to_leaflet(coordinates)
    if geom_type == "Polygon":
        return ring_to_leaflet(coordinates[0])
    if geom_type == "MultiPolygon":
        return [ring_to_leaflet(polygon[0]) for polygon in coordinates]
    return None


def leaflet_coords_to_geojson(coords: Any) -> list:
    """A ``[lat, lng]`` pair or a ring of them back to GeoJSON order."""
    if isinstance(coords, (list, tuple)) and coords and isinstance(coords[0], (list, tuple)):
        return ring_to_geojson(coords)
    return to_geojson(coords)


def point_coordinates(point: Any) -> Sequence[float]:
    """``[lng, lat]`` from a pair, a Point geometry or a Point feature."""
    if isinstance(point, dict):
        geometry = point.get("geometry", point) or {}
        if geometry.get("type") != "Point":
            raise InvalidCoordinateError(geometry.get("type"))
        point = geometry.get("coordinates")
    return _check_pair(point)


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

def polygon_shape(polygon: Any) -> BaseGeometry:
    """Shapely geometry for a Polygon/MultiPolygon feature, geometry dict or shapely object."""
    if isinstance(polygon, BaseGeometry):
        return polygon
    geometry = polygon.get("geometry", polygon) if isinstance(polygon, dict) else None
    if not geometry or geometry.get("type") not in ("Polygon", "MultiPolygon"):
        raise ValueError("expected a Polygon or MultiPolygon")
    geom = shape(geometry)
    if not geom.is_valid:
        geom = shapely.make_valid(geom)
    return geom


def point_in_polygon(point: Any, polygon: Any) -> bool:
    """
    Planar point-in-polygon test; points on the boundary count as inside.

    Args:
        point: ``[lng, lat]``, Point geometry or Point feature
        polygon: Polygon/MultiPolygon feature or geometry
    """
    lng, lat = point_coordinates(point)
    return polygon_shape(polygon).covers(Point(lng, lat))


def _poi_point(feature: Feature) -> Optional[Point]:
    try:
        lng, lat = point_coordinates(feature)
    except InvalidCoordinateError:
        logger.warning(f"Skipping POI {poi_id(feature)!r} without a valid Point geometry")
        return None
    return Point(lng, lat)


def find_neighborhood_at_point(neighborhoods: Iterable[Feature], point: Any) -> Optional[Feature]:
    """First neighborhood whose polygon contains ``point`` (``[lng, lat]``)."""
    lng, lat = point_coordinates(point)
    pt = Point(lng, lat)
    for feature in neighborhoods:
        try:
            if polygon_shape(feature).covers(pt):
                return feature
        except ValueError:
            continue
    return None


def distance_km(a: Sequence[float], b: Sequence[float]) -> float:
    """Great-circle distance between two ``[lng, lat]`` points."""
    lng1, lat1 = _check_pair(a)
    lng2, lat2 = _check_pair(b)
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi, dlam = math.radians(lat2 - lat1), math.radians(lng2 - lng1)
    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlam / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def bearing_deg(a: Sequence[float], b: Sequence[float]) -> float:
    """Initial bearing from ``a`` to ``b`` in degrees clockwise from north, 0..360."""
    lng1, lat1 = _check_pair(a)
    lng2, lat2 = _check_pair(b)
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dlam = math.radians(lng2 - lng1)
    y = math.sin(dlam) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(dlam)
    return (math.degrees(math.atan2(y, x)) + 360.0) % 360.0


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

def filter_by_attributes(
    pois: Iterable[Feature],
    category: Optional[str] = None,
    categories: Optional[Iterable[str]] = None,
) -> List[Feature]:
    """
    POIs matching ``category`` and whose category is in ``categories``, in
    input order. Each filter applies only when given; an empty request
    returns all POIs.
    """
    selected = list(pois)
    if category:
        selected = [p for p in selected if poi_category(p) == category]
    wanted = set(categories or ())
    if wanted:
        selected = [p for p in selected if poi_category(p) in wanted]
    return selected


def filter_by_polygon(pois: Iterable[Feature], polygon: Any) -> List[Feature]:
    prepared = prep(polygon_shape(polygon))
    result = []
    for poi in pois:
        pt = _poi_point(poi)
        if pt is not None and prepared.covers(pt):
            result.append(poi)
    return result


def filter_by_neighborhood(
    pois: Iterable[Feature],
    neighborhoods: Iterable[Feature],
    graetzl_id: int,
) -> List[Feature]:
    """POIs geometrically inside the neighborhood; unknown ids give an empty list."""
    feature = get_neighborhood(neighborhoods, graetzl_id)
    if feature is None:
        logger.warning(f"Neighborhood {graetzl_id} not found")
        return []
    return filter_by_polygon(pois, feature)


def filter_by_neighborhood_and_category(
    pois: Iterable[Feature],
    neighborhoods: Iterable[Feature],
    graetzl_id: Optional[int] = None,
    categories: Optional[Iterable[str]] = None,
    category: Optional[str] = None,
) -> List[Feature]:
    """Restrict to the neighborhood polygon when one is selected, then by category."""
    selected = list(pois)
    if graetzl_id is not None:
        selected = filter_by_neighborhood(selected, neighborhoods, graetzl_id)
    return filter_by_attributes(selected, category=category, categories=categories)


def near_point(pois: Iterable[Feature], center: Sequence[float], radius_km: float = 0.5) -> List[Feature]:
    """POIs within ``radius_km`` of ``center`` (``[lng, lat]``), boundary inclusive."""
    _check_pair(center)
    result = []
    for poi in pois:
        pt = _poi_point(poi)
        if pt is not None and distance_km(center, [pt.x, pt.y]) <= radius_km:
            result.append(poi)
    return result


def search_pois(pois: Iterable[Feature], text: Optional[str], lang: str = "de") -> List[Feature]:
    """
    Case-insensitive substring search over the name in ``lang`` and every
    description language. Blank text returns all POIs.
    """
    pois = list(pois)
    if not text or not text.strip():
        return pois
    needle = text.strip().casefold()
    result = []
    for poi in pois:
        props = _props(poi)
        haystack = [resolve_text(props.get("name"), lang)] + all_text_values(props.get("description"))
        if any(needle in value.casefold() for value in haystack if value):
            result.append(poi)
    return result
