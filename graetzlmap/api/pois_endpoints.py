"""
POI API endpoints - CRUD over the per-POI GeoJSON files
"""
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status

from graetzlmap.core.dependencies import get_poi_service
from graetzlmap.schemas.poi import POIFeature
from graetzlmap.services.poi_service import POIService

router = APIRouter(prefix="/api/pois", tags=["pois"])


@router.get("")
def list_pois(service: POIService = Depends(get_poi_service)) -> List[Dict[str, Any]]:
    """All POIs as GeoJSON features, ordered by file name"""
    return service.list_pois()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_poi(poi: POIFeature, service: POIService = Depends(get_poi_service)):
    """
    Create a POI

    - **geometry**: GeoJSON Point, `[lng, lat]`
    - **properties.name**: required
    - **properties.description**: plain string or `{de, en}` map
    """
    feature = service.create_poi(poi)
    return {"success": True, "id": feature["properties"]["id"], "poi": feature}


@router.get("/{poi_id}")
def get_poi(poi_id: str, service: POIService = Depends(get_poi_service)):
    return service.get_poi(poi_id)


@router.put("/{poi_id}")
def update_poi(poi_id: str, poi: POIFeature, service: POIService = Depends(get_poi_service)):
    """
    Replace a POI. The id in the path wins over any id in the body.
    """
    feature = service.update_poi(poi_id, poi)
    return {"success": True, "poi": feature}


@router.delete("/{poi_id}")
def delete_poi(poi_id: str, service: POIService = Depends(get_poi_service)):
    service.delete_poi(poi_id)
    return {"success": True}
