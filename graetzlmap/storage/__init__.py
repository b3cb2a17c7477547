"""Flat JSON file storage for POIs, lists, walkthroughs, categories and tags."""

from .json_store import (
    JsonFileStore,
    PoiStore,
    CollectionStore,
    KeyedStore,
    generate_id,
    is_safe_id,
)

__all__ = [
    "JsonFileStore",
    "PoiStore",
    "CollectionStore",
    "KeyedStore",
    "generate_id",
    "is_safe_id",
]
