"""Category and tag tables. Entries are only ever added."""
import logging
from typing import Any, Dict, Tuple

from graetzlmap.core.exceptions import AlreadyExistsError, MissingFieldError
from graetzlmap.schemas.taxonomy import KeyedEntryCreate
from graetzlmap.storage import KeyedStore

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_EMOJI = "📍"
DEFAULT_CATEGORY_ICON = (
    "<svg viewBox='0 0 24 24' fill='none' stroke='currentColor' stroke-width='2'>"
    "<circle cx='12' cy='12' r='10'/><circle cx='12' cy='12' r='3'/></svg>"
)
DEFAULT_CATEGORY_COLOR = "#6B7280"


def _require_key_and_name(entry: KeyedEntryCreate, label: str) -> Tuple[str, Any]:
    missing = [f for f in ("key", "name") if not getattr(entry, f)]
    if missing:
        raise MissingFieldError(f"{label} key and name are required", missing)
    return entry.key, entry.name


class CategoryService:
    def __init__(self, store: KeyedStore):
        self.store = store

    def get_all(self) -> Dict[str, Any]:
        return self.store.read_all()

    def add_category(self, entry: KeyedEntryCreate) -> Dict[str, Any]:
        """
        Add a category with default emoji, icon and color.

        Raises:
            MissingFieldError: key or name absent
            AlreadyExistsError: key taken; carries the existing record
        """
        key, name = _require_key_and_name(entry, "Category")
        record = {
            "name": name,
            "emoji": DEFAULT_CATEGORY_EMOJI,
            "icon": DEFAULT_CATEGORY_ICON,
            "color": DEFAULT_CATEGORY_COLOR,
        }
        existing = self.store.add(key, record)
        if existing is not None:
            raise AlreadyExistsError("Category", key, existing)
        return record


class TagService:
    def __init__(self, store: KeyedStore):
        self.store = store

    def get_all(self) -> Dict[str, Any]:
        return self.store.read_all()

    def add_tag(self, entry: KeyedEntryCreate) -> Tuple[bool, Dict[str, Any]]:
        """
        Add a tag unless it exists.

        Returns:
            (created, tag) where tag is the stored record
        """
        key, name = _require_key_and_name(entry, "Tag")
        record = {"name": name, "count": 0}
        existing = self.store.add(key, record)
        if existing is not None:
            return False, existing
        return True, record
