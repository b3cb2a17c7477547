# API endpoints and routers

from .pois_endpoints import router as pois_router
from .collections_endpoints import lists_router, walkthroughs_router
from .taxonomy_endpoints import categories_router, tags_router
from .upload_endpoints import router as upload_router
from .geo_endpoints import router as geo_router
from .map_endpoints import router as map_router
from .i18n_endpoints import router as i18n_router

# Write surface of the local CMS; not mounted in the static build
CMS_ROUTERS = [
    pois_router,
    lists_router,
    walkthroughs_router,
    categories_router,
    tags_router,
    upload_router,
]

QUERY_ROUTERS = [
    geo_router,
    map_router,
    i18n_router,
]

__all__ = [
    "pois_router",
    "lists_router",
    "walkthroughs_router",
    "categories_router",
    "tags_router",
    "upload_router",
    "geo_router",
    "map_router",
    "i18n_router",
    "CMS_ROUTERS",
    "QUERY_ROUTERS",
]
