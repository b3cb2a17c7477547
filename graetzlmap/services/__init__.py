# Business logic services

from .poi_service import POIService
from .collection_service import CollectionService
from .taxonomy_service import CategoryService, TagService
from .upload_service import UploadService
from .map_service import MapService

__all__ = [
    "POIService",
    "CollectionService",
    "CategoryService",
    "TagService",
    "UploadService",
    "MapService",
]
