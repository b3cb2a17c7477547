"""
Map view API endpoints - what the map frontend renders for a given state
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from graetzlmap.core.dependencies import get_language, get_map_service
from graetzlmap.schemas.collection import WalkthroughRoute
from graetzlmap.schemas.poi import POIView
from graetzlmap.services.map_service import MapService

router = APIRouter(prefix="/api/map", tags=["map"])


@router.get("/neighborhoods")
def neighborhood_options(
    q: Optional[str] = Query(None, description="Case-insensitive name filter"),
    lang: str = Depends(get_language),
    service: MapService = Depends(get_map_service),
):
    """Active neighborhoods for the dropdown, sorted by name"""
    return service.neighborhood_options(lang, q)


@router.get("/neighborhoods/{graetzl_id}")
def neighborhood(
    graetzl_id: int,
    lang: str = Depends(get_language),
    service: MapService = Depends(get_map_service),
):
    return service.neighborhood_for(graetzl_id, lang)


@router.get("/view")
def map_view(
    path: str = Query("/", description="Map URL path: /, /g/<slug> or /l/<slug>"),
    categories: Optional[str] = Query(None, description="Comma separated category keys"),
    lang: str = Depends(get_language),
    service: MapService = Depends(get_map_service),
):
    """
    Resolve a map URL into the selected neighborhood or collection and the visible POIs.
    Unknown slugs fall back to showing everything.
    """
    selected = [c.strip() for c in (categories or "").split(",") if c.strip()]
    return service.resolve_view(path, lang, selected)


@router.get("/walkthroughs/{walkthrough_id}/route", response_model=WalkthroughRoute)
def walkthrough_route(
    walkthrough_id: str,
    lang: str = Depends(get_language),
    service: MapService = Depends(get_map_service),
):
    return service.get_walkthrough_route(walkthrough_id, lang)


@router.get("/pois/{poi_id}", response_model=POIView)
def poi_popup(
    poi_id: str,
    lang: str = Depends(get_language),
    service: MapService = Depends(get_map_service),
):
    return service.get_poi_view(poi_id, lang)
