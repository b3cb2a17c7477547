"""
Collection Service - curated lists and walkthroughs
"""
import logging
from typing import Any, Dict, List

from graetzlmap.schemas.collection import CollectionPayload
from graetzlmap.slugs import name_to_slug
from graetzlmap.storage import CollectionStore

logger = logging.getLogger(__name__)


class CollectionService:
    """
    CRUD for one ordered collection file (``lists.json`` or ``walkthroughs.json``).

    Both kinds share the same shape: an ordered sequence of POI ids with a localized
    title and description and a URL slug. Walkthroughs are additionally rendered as
    directed routes, see ``MapService.walkthrough_route``.
    """

    def __init__(self, store: CollectionStore):
        self.store = store

    def list_items(self) -> List[Dict[str, Any]]:
        return self.store.list_all()

    def get_item(self, item_id: str) -> Dict[str, Any]:
        return self.store.get(item_id)

    def create_item(self, payload: CollectionPayload) -> Dict[str, Any]:
        return self.store.create(self._prepare(payload))

    def update_item(self, item_id: str, payload: CollectionPayload) -> Dict[str, Any]:
        return self.store.replace(item_id, self._prepare(payload))

    def delete_item(self, item_id: str) -> None:
        self.store.delete(item_id)

    def _prepare(self, payload: CollectionPayload) -> Dict[str, Any]:
        record = payload.to_record()
        record.pop("id", None)
        if not record.get("slug"):
            record["slug"] = name_to_slug(record.get("title"))
        return record
