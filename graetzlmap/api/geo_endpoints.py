"""
Geo query API endpoints

Read-only queries over the loaded POI and neighborhood collections. These are
served in every mode; in the static build they read the compiled bundle.
When the geodata cannot be loaded the queries answer with empty results;
an explicit reload reports the failure.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from graetzlmap.core.dependencies import get_geo_context, get_language, get_map_service
from graetzlmap.core.exceptions import NotFoundError
from graetzlmap.geo import (
    GeoContext,
    distance_km,
    filter_by_neighborhood_and_category,
    find_neighborhood_at_point,
    get_all_categories,
    near_point,
    point_coordinates,
    search_pois,
)
from graetzlmap.services.map_service import MapService

router = APIRouter(prefix="/api/geo", tags=["geo"])


def _split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


@router.get("/pois")
def query_pois(
    neighborhood_id: Optional[int] = Query(None, description="Graetzl_ID to restrict to"),
    categories: Optional[str] = Query(None, description="Comma separated category keys"),
    category: Optional[str] = Query(None),
    map_service: MapService = Depends(get_map_service),
):
    """
    POIs filtered by neighborhood polygon and category

    - **neighborhood_id**: unknown ids give an empty result
    - **categories** / **category**: both apply when given; no category means all
    """
    data = map_service.geodata()
    return filter_by_neighborhood_and_category(
        data.pois,
        data.neighborhoods,
        graetzl_id=neighborhood_id,
        categories=_split_csv(categories),
        category=category,
    )


@router.get("/neighborhood-at")
def neighborhood_at(
    lng: float = Query(...),
    lat: float = Query(...),
    lang: str = Depends(get_language),
    map_service: MapService = Depends(get_map_service),
):
    """The neighborhood containing a point, boundary inclusive"""
    feature = find_neighborhood_at_point(map_service.geodata().neighborhoods, [lng, lat])
    if feature is None:
        raise NotFoundError("Grätzl", [lng, lat])
    return map_service.neighborhood_summary(feature, lang)


@router.get("/near")
def near(
    request: Request,
    lng: float = Query(...),
    lat: float = Query(...),
    radius_km: Optional[float] = Query(None, gt=0),
    map_service: MapService = Depends(get_map_service),
):
    """POIs within a radius, nearest first"""
    if radius_km is None:
        radius_km = request.app.state.settings.map.near_radius_km
    center = [lng, lat]
    found = near_point(map_service.geodata().pois, center, radius_km)
    results = [
        {"distance_km": round(distance_km(center, point_coordinates(poi)), 4), "poi": poi}
        for poi in found
    ]
    results.sort(key=lambda r: r["distance_km"])
    return {"center": center, "radius_km": radius_km, "results": results}


@router.get("/search")
def search(
    q: Optional[str] = Query(None),
    lang: str = Depends(get_language),
    map_service: MapService = Depends(get_map_service),
):
    """Case-insensitive substring search over names and descriptions"""
    return search_pois(map_service.geodata().pois, q, lang)


@router.get("/categories")
def categories_in_use(map_service: MapService = Depends(get_map_service)):
    return {"categories": get_all_categories(map_service.geodata().pois)}


@router.post("/reload")
def reload_geodata(geo: GeoContext = Depends(get_geo_context)):
    """Drop the cached collections and load them again; 503 when loading fails"""
    data = geo.reload()
    return {"success": True, "pois": len(data.pois), "neighborhoods": len(data.neighborhoods)}
