"""
List and walkthrough API endpoints

Both resources share one router factory; they differ only in path, storage file
and the key under which a created item is echoed back.
"""
from typing import Any, Callable, Dict, List

from fastapi import APIRouter, Depends, status

from graetzlmap.core.dependencies import get_list_service, get_walkthrough_service
from graetzlmap.schemas.collection import CollectionPayload
from graetzlmap.services.collection_service import CollectionService


def build_collection_router(prefix: str, tag: str, item_key: str, provider: Callable) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[tag])

    @router.get("")
    def list_items(service: CollectionService = Depends(provider)) -> List[Dict[str, Any]]:
        return service.list_items()

    @router.post("", status_code=status.HTTP_201_CREATED)
    def create_item(payload: CollectionPayload, service: CollectionService = Depends(provider)):
        """
        Create an item

        - **title**: plain string or `{de, en}` map
        - **pois**: ordered POI ids
        - **slug**: optional, derived from the title when missing
        """
        item = service.create_item(payload)
        return {"success": True, "id": item["id"], item_key: item}

    @router.get("/{item_id}")
    def get_item(item_id: str, service: CollectionService = Depends(provider)):
        return service.get_item(item_id)

    @router.put("/{item_id}")
    def update_item(item_id: str, payload: CollectionPayload, service: CollectionService = Depends(provider)):
        item = service.update_item(item_id, payload)
        return {"success": True, item_key: item}

    @router.delete("/{item_id}")
    def delete_item(item_id: str, service: CollectionService = Depends(provider)):
        service.delete_item(item_id)
        return {"success": True}

    return router


lists_router = build_collection_router("/api/lists", "lists", "list", get_list_service)
walkthroughs_router = build_collection_router(
    "/api/walkthroughs", "walkthroughs", "walkthrough", get_walkthrough_service
)
