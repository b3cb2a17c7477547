"""
Dependency injection setup for FastAPI.
Builds the stores and services from settings once per application and hands
them to endpoints through ``Depends``.
"""

from fastapi import Depends, Request, HTTPException
from typing import Any, Dict, Iterable, List, Optional
import logging

from graetzlmap.config.settings import Settings
from graetzlmap.geo import GeoContext, read_feature_file
from graetzlmap.i18n import negotiate_language
from graetzlmap.storage import CollectionStore, KeyedStore, PoiStore
from graetzlmap.services import (
    CategoryService,
    CollectionService,
    MapService,
    POIService,
    TagService,
    UploadService,
)


logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Container for the application's stores and services.

    In production (static build) POIs come from the compiled bundle and no
    writable store is exposed; otherwise they are read from the per-POI files.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._geo_context: Optional[GeoContext] = None
        self._poi_service: Optional[POIService] = None
        self._list_service: Optional[CollectionService] = None
        self._walkthrough_service: Optional[CollectionService] = None
        self._category_service: Optional[CategoryService] = None
        self._tag_service: Optional[TagService] = None
        self._upload_service: Optional[UploadService] = None
        self._map_service: Optional[MapService] = None
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize_services(self) -> None:
        """Create stores and services in dependency order."""
        if self._initialized:
            return

        logger.info("Initializing service container")
        storage = self.settings.storage

        poi_store = PoiStore(storage.pois_dir)
        lists = CollectionStore(storage.data_path(storage.lists_file), "lists", "list", "List")
        walkthroughs = CollectionStore(
            storage.data_path(storage.walkthroughs_file), "walkthroughs", "walk", "Walkthrough"
        )
        categories = KeyedStore(storage.data_path(storage.categories_file), "categories")
        tags = KeyedStore(storage.data_path(storage.tags_file), "tags")

        if self.settings.serves_cms_api():
            for store in (lists, walkthroughs, categories, tags):
                store.ensure()
            poi_loader = poi_store.list_all
        else:
            bundle_path = storage.bundle_path

            def poi_loader() -> Iterable[Dict[str, Any]]:
                return read_feature_file(bundle_path)

        self._geo_context = GeoContext(poi_loader, storage.neighborhoods_path)
        self._poi_service = POIService(poi_store, self._geo_context)
        self._list_service = CollectionService(lists)
        self._walkthrough_service = CollectionService(walkthroughs)
        self._category_service = CategoryService(categories)
        self._tag_service = TagService(tags)
        self._upload_service = UploadService(
            storage.uploads_dir, storage.uploads_url_prefix, storage.max_upload_size_mb
        )
        self._map_service = MapService(
            self._geo_context,
            lists,
            walkthroughs,
            categories,
            default_center=list(self.settings.map.default_center),
            default_zoom=self.settings.map.default_zoom,
        )

        self._initialized = True
        logger.info(
            "Service container initialization completed",
            extra={"cms_api": self.settings.serves_cms_api()},
        )

    def cleanup_services(self) -> None:
        logger.info("Cleaning up service container")
        if self._geo_context is not None:
            self._geo_context.invalidate()
        self._initialized = False

    def data_files(self) -> List[Dict[str, Any]]:
        """Presence of each data file, reported on /health."""
        storage = self.settings.storage
        paths = {
            "pois": storage.pois_dir,
            "bundle": storage.bundle_path,
            "neighborhoods": storage.neighborhoods_path,
            "categories": storage.data_path(storage.categories_file),
            "tags": storage.data_path(storage.tags_file),
            "lists": storage.data_path(storage.lists_file),
            "walkthroughs": storage.data_path(storage.walkthroughs_file),
        }
        return [{"name": name, "path": str(path), "exists": path.exists()} for name, path in paths.items()]

    def _require(self, service: Any, name: str) -> Any:
        if not self._initialized or service is None:
            raise RuntimeError(f"{name} not initialized")
        return service

    def get_geo_context(self) -> GeoContext:
        return self._require(self._geo_context, "Geo context")

    def get_poi_service(self) -> POIService:
        return self._require(self._poi_service, "POI service")

    def get_list_service(self) -> CollectionService:
        return self._require(self._list_service, "List service")

    def get_walkthrough_service(self) -> CollectionService:
        return self._require(self._walkthrough_service, "Walkthrough service")

    def get_category_service(self) -> CategoryService:
        return self._require(self._category_service, "Category service")

    def get_tag_service(self) -> TagService:
        return self._require(self._tag_service, "Tag service")

    def get_upload_service(self) -> UploadService:
        return self._require(self._upload_service, "Upload service")

    def get_map_service(self) -> MapService:
        return self._require(self._map_service, "Map service")


def get_service_container(request: Request) -> ServiceContainer:
    """
    Get the service container from application state.

    Raises:
        HTTPException: If service container is not available
    """
    container = getattr(request.app.state, "service_container", None)
    if container is None:
        logger.error("Service container not initialized")
        raise HTTPException(status_code=500, detail="Service container not available")
    return container


def _provide(container: ServiceContainer, getter: str, label: str):
    try:
        return getattr(container, getter)()
    except RuntimeError as e:
        logger.error(f"{label} not available: {e}")
        raise HTTPException(status_code=500, detail=f"{label} not available")


def get_geo_context(container: ServiceContainer = Depends(get_service_container)) -> GeoContext:
    return _provide(container, "get_geo_context", "Geo context")


def get_poi_service(container: ServiceContainer = Depends(get_service_container)) -> POIService:
    return _provide(container, "get_poi_service", "POI service")


def get_list_service(container: ServiceContainer = Depends(get_service_container)) -> CollectionService:
    return _provide(container, "get_list_service", "List service")


def get_walkthrough_service(container: ServiceContainer = Depends(get_service_container)) -> CollectionService:
    return _provide(container, "get_walkthrough_service", "Walkthrough service")


def get_category_service(container: ServiceContainer = Depends(get_service_container)) -> CategoryService:
    return _provide(container, "get_category_service", "Category service")


def get_tag_service(container: ServiceContainer = Depends(get_service_container)) -> TagService:
    return _provide(container, "get_tag_service", "Tag service")


def get_upload_service(container: ServiceContainer = Depends(get_service_container)) -> UploadService:
    return _provide(container, "get_upload_service", "Upload service")


def get_map_service(container: ServiceContainer = Depends(get_service_container)) -> MapService:
    return _provide(container, "get_map_service", "Map service")


def get_language(request: Request) -> str:
    """Language from ``?lang=`` or the Accept-Language header."""
    container = getattr(request.app.state, "service_container", None)
    i18n = container.settings.i18n if container is not None else None
    return negotiate_language(
        request.query_params.get("lang"),
        request.headers.get("accept-language"),
        default=i18n.default_language if i18n else "de",
        supported=i18n.supported_languages if i18n else None,
    )
