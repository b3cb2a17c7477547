"""
Flat JSON file storage.

Each mutation is a read-modify-write of a whole file. Writers of the same path
are serialized by a per-path lock and files are replaced atomically, so two
concurrent PUTs can no longer interleave and drop one another's update.
"""

import json
import logging
import os
import random
import re
import string
import tempfile
import threading
import time
import weakref
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar

from graetzlmap.core.exceptions import NotFoundError, StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_ID_CHARS = string.digits + string.ascii_lowercase
_SAFE_ID = re.compile(r"^[A-Za-z0-9_\-]+$")

# Entries live as long as some store instance holds the lock
_locks: "weakref.WeakValueDictionary[str, threading.RLock]" = weakref.WeakValueDictionary()
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = str(path.resolve())
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.RLock()
        return lock


def generate_id(prefix: str) -> str:
    """`<prefix>_<epoch ms>_<9 base36 chars>`, e.g. ``poi_1717000000000_k3j9x0a1b``."""
    suffix = "".join(random.choices(_ID_CHARS, k=9))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


def is_safe_id(identifier: str) -> bool:
    return bool(identifier) and bool(_SAFE_ID.match(identifier))


class JsonFileStore:
    """One JSON document on disk."""

    def __init__(self, path: Path, default: Optional[Callable[[], Any]] = None):
        self.path = Path(path)
        self._default = default
        self.lock = _lock_for(self.path)

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> Any:
        with self.lock:
            if not self.path.exists():
                if self._default is None:
                    raise StorageError(str(self.path), "file does not exist")
                return self._default()
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    return json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise StorageError(str(self.path), str(e)) from e

    def write(self, data: Any) -> None:
        with self.lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except OSError as e:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise StorageError(str(self.path), str(e)) from e

    def update(self, mutator: Callable[[Any], T]) -> T:
        """Read, apply ``mutator`` in place and write back under the file lock.

        Returns whatever ``mutator`` returns.
        """
        with self.lock:
            data = self.read()
            result = mutator(data)
            self.write(data)
            return result

    def ensure(self) -> None:
        """Create the file with its default content when missing."""
        with self.lock:
            if not self.path.exists() and self._default is not None:
                self.write(self._default())

    def delete(self) -> None:
        with self.lock:
            try:
                self.path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                raise StorageError(str(self.path), str(e)) from e


class PoiStore:
    """POIs stored as one GeoJSON Feature file per POI: ``<pois_dir>/<id>.json``."""

    id_prefix = "poi"

    def __init__(self, pois_dir: Path):
        self.pois_dir = Path(pois_dir)

    def _file(self, poi_id: str) -> JsonFileStore:
        if not is_safe_id(poi_id):
            raise NotFoundError("POI", poi_id)
        return JsonFileStore(self.pois_dir / f"{poi_id}.json")

    def list_all(self) -> List[Dict[str, Any]]:
        if not self.pois_dir.exists():
            return []
        files = sorted(p for p in self.pois_dir.iterdir() if p.suffix == ".json" and not p.name.startswith("."))
        return [JsonFileStore(p).read() for p in files]

    def get(self, poi_id: str) -> Dict[str, Any]:
        store = self._file(poi_id)
        if not store.exists():
            raise NotFoundError("POI", poi_id)
        return store.read()

    def create(self, feature: Dict[str, Any]) -> Dict[str, Any]:
        poi_id = generate_id(self.id_prefix)
        feature.setdefault("type", "Feature")
        properties = feature.get("properties") or {}
        properties["id"] = poi_id
        feature["properties"] = properties
        self._file(poi_id).write(feature)
        logger.info(f"Created POI {poi_id}", extra={"poi_id": poi_id})
        return feature

    def replace(self, poi_id: str, feature: Dict[str, Any]) -> Dict[str, Any]:
        store = self._file(poi_id)
        feature.setdefault("type", "Feature")
        properties = feature.get("properties") or {}
        properties["id"] = poi_id
        feature["properties"] = properties
        with store.lock:
            if not store.exists():
                raise NotFoundError("POI", poi_id)
            store.write(feature)
        logger.info(f"Updated POI {poi_id}", extra={"poi_id": poi_id})
        return feature

    def delete(self, poi_id: str) -> None:
        store = self._file(poi_id)
        with store.lock:
            if not store.exists():
                raise NotFoundError("POI", poi_id)
            store.delete()
        logger.info(f"Deleted POI {poi_id}", extra={"poi_id": poi_id})


class CollectionStore:
    """An ordered collection inside one file, e.g. ``{"lists": [...]}``."""

    def __init__(self, path: Path, key: str, id_prefix: str, resource: str):
        self.key = key
        self.id_prefix = id_prefix
        self.resource = resource
        self._file = JsonFileStore(path, default=lambda: {key: []})

    @property
    def path(self) -> Path:
        return self._file.path

    def _items(self, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        items = data.setdefault(self.key, [])
        if not isinstance(items, list):
            raise StorageError(str(self.path), f"'{self.key}' is not a list")
        return items

    def list_all(self) -> List[Dict[str, Any]]:
        return list(self._items(self._file.read()))

    def get(self, item_id: str) -> Dict[str, Any]:
        for item in self.list_all():
            if item.get("id") == item_id:
                return item
        raise NotFoundError(self.resource, item_id)

    def create(self, item: Dict[str, Any]) -> Dict[str, Any]:
        item["id"] = generate_id(self.id_prefix)

        def add(data):
            self._items(data).append(item)
            return item

        self._file.update(add)
        logger.info(f"Created {self.resource} {item['id']}", extra={"item_id": item["id"]})
        return item

    def replace(self, item_id: str, item: Dict[str, Any]) -> Dict[str, Any]:
        item["id"] = item_id

        def swap(data):
            items = self._items(data)
            for index, existing in enumerate(items):
                if existing.get("id") == item_id:
                    items[index] = item
                    return item
            raise NotFoundError(self.resource, item_id)

        self._file.update(swap)
        logger.info(f"Updated {self.resource} {item_id}", extra={"item_id": item_id})
        return item

    def delete(self, item_id: str) -> None:
        def remove(data):
            items = self._items(data)
            for index, existing in enumerate(items):
                if existing.get("id") == item_id:
                    del items[index]
                    return
            raise NotFoundError(self.resource, item_id)

        self._file.update(remove)
        logger.info(f"Deleted {self.resource} {item_id}", extra={"item_id": item_id})

    def ensure(self) -> None:
        self._file.ensure()


class KeyedStore:
    """A keyed table inside one file, e.g. ``{"categories": {"cafe": {...}}}``."""

    def __init__(self, path: Path, key: str):
        self.key = key
        self._file = JsonFileStore(path, default=lambda: {key: {}})

    @property
    def path(self) -> Path:
        return self._file.path

    def read_all(self) -> Dict[str, Any]:
        data = self._file.read()
        data.setdefault(self.key, {})
        return data

    def get(self, record_key: str) -> Optional[Dict[str, Any]]:
        return self.read_all()[self.key].get(record_key)

    def add(self, record_key: str, record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Insert ``record`` unless the key exists.

        Returns the existing record when the key was already taken, else None.
        """
        def insert(data):
            table = data.setdefault(self.key, {})
            if record_key in table:
                return table[record_key]
            table[record_key] = record
            return None

        existing = self._file.update(insert)
        if existing is None:
            logger.info(f"Added {self.key} entry {record_key}", extra={"record_key": record_key})
        return existing

    def ensure(self) -> None:
        self._file.ensure()
