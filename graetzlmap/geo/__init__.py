"""Spatial and attribute queries over POIs and neighborhood polygons."""

from .geoquery import (
    GeoContext,
    GeoData,
    read_feature_file,
    poi_id,
    poi_category,
    neighborhood_id,
    neighborhood_name,
    is_active,
    get_neighborhood,
    active_neighborhoods,
    get_pois_by_ids,
    get_all_categories,
    to_leaflet,
    to_geojson,
    ring_to_leaflet,
    ring_to_geojson,
    feature_to_leaflet_coords,
    leaflet_coords_to_geojson,
    point_coordinates,
    polygon_shape,
    point_in_polygon,
    find_neighborhood_at_point,
    distance_km,
    bearing_deg,
    filter_by_attributes,
    filter_by_polygon,
    filter_by_neighborhood,
    filter_by_neighborhood_and_category,
    near_point,
    search_pois,
)
from .simplify import simplify_polygons, SimplifyReport

__all__ = [
    "GeoContext",
    "GeoData",
    "read_feature_file",
    "poi_id",
    "poi_category",
    "neighborhood_id",
    "neighborhood_name",
    "is_active",
    "get_neighborhood",
    "active_neighborhoods",
    "get_pois_by_ids",
    "get_all_categories",
    "to_leaflet",
    "to_geojson",
    "ring_to_leaflet",
    "ring_to_geojson",
    "feature_to_leaflet_coords",
    "leaflet_coords_to_geojson",
    "point_coordinates",
    "polygon_shape",
    "point_in_polygon",
    "find_neighborhood_at_point",
    "distance_km",
    "bearing_deg",
    "filter_by_attributes",
    "filter_by_polygon",
    "filter_by_neighborhood",
    "filter_by_neighborhood_and_category",
    "near_point",
    "search_pois",
    "simplify_polygons",
    "SimplifyReport",
]
