"""
POI Service - CRUD over the per-POI GeoJSON files
"""
import logging
from typing import Any, Dict, List, Optional

from graetzlmap.geo import GeoContext
from graetzlmap.schemas.poi import POIFeature
from graetzlmap.storage import PoiStore

logger = logging.getLogger(__name__)


class POIService:
    """Manages POI CRUD operations and keeps the geo cache in step with writes"""

    def __init__(self, store: PoiStore, geo_context: Optional[GeoContext] = None):
        self.store = store
        self.geo_context = geo_context

    def list_pois(self) -> List[Dict[str, Any]]:
        return self.store.list_all()

    def get_poi(self, poi_id: str) -> Dict[str, Any]:
        """
        Get a POI by id

        Raises:
            NotFoundError: no file for this id
        """
        return self.store.get(poi_id)

    def create_poi(self, poi: POIFeature) -> Dict[str, Any]:
        """
        Store a new POI under a freshly generated id

        Two identical submissions create two POIs; there is no deduplication.
        """
        feature = self.store.create(poi.to_record())
        self._invalidate()
        return feature

    def update_poi(self, poi_id: str, poi: POIFeature) -> Dict[str, Any]:
        """
        Replace a POI. The id from the path always overrides any id in the body.
        """
        feature = self.store.replace(poi_id, poi.to_record())
        self._invalidate()
        return feature

    def delete_poi(self, poi_id: str) -> None:
        self.store.delete(poi_id)
        self._invalidate()

    def _invalidate(self) -> None:
        if self.geo_context is not None:
            self.geo_context.invalidate()
