"""
Unit tests for the flat JSON file stores
"""
import gc
import re
import threading

import pytest

from graetzlmap.core.exceptions import NotFoundError, StorageError
from graetzlmap.storage import CollectionStore, JsonFileStore, KeyedStore, generate_id
from graetzlmap.storage import json_store


def test_generate_id_format():
    assert re.match(r"^poi_\d{13}_[0-9a-z]{9}$", generate_id("poi"))
    assert generate_id("walk") != generate_id("walk")


class TestJsonFileStore:
    def test_write_is_utf8_and_leaves_no_temp_files(self, tmp_path):
        store = JsonFileStore(tmp_path / "nested" / "doc.json")
        store.write({"name": "Schönbrunn"})
        assert "Schönbrunn" in store.path.read_text(encoding="utf-8")
        assert store.read() == {"name": "Schönbrunn"}
        assert [p.name for p in store.path.parent.iterdir()] == ["doc.json"]

    def test_missing_file_without_default(self, tmp_path):
        with pytest.raises(StorageError):
            JsonFileStore(tmp_path / "nope.json").read()

    def test_missing_file_with_default(self, tmp_path):
        store = JsonFileStore(tmp_path / "nope.json", default=lambda: {"lists": []})
        assert store.read() == {"lists": []}
        assert not store.exists()
        store.ensure()
        assert store.exists()

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[1, 2", encoding="utf-8")
        with pytest.raises(StorageError):
            JsonFileStore(path).read()

    def test_stores_of_one_path_share_a_lock(self, tmp_path):
        first = JsonFileStore(tmp_path / "doc.json")
        second = JsonFileStore(tmp_path / "." / "doc.json")
        assert first.lock is second.lock
        assert JsonFileStore(tmp_path / "other.json").lock is not first.lock


class TestPoiStore:
    def test_lookups_of_missing_ids_do_not_accumulate_locks(self, poi_store):
        before = len(json_store._locks)
        for i in range(50):
            with pytest.raises(NotFoundError):
                poi_store.get(f"poi_missing_{i}")
        gc.collect()
        assert len(json_store._locks) <= before + 1

    def test_list_sorted_by_filename(self, poi_store):
        ids = [f["properties"]["id"] for f in poi_store.list_all()]
        assert ids == sorted(ids)
        assert len(ids) == 4

    def test_create_assigns_id(self, poi_store):
        feature = poi_store.create({
            "geometry": {"type": "Point", "coordinates": [16.37, 48.2]},
            "properties": {"name": "Naschmarkt"},
        })
        poi_id = feature["properties"]["id"]
        assert poi_id.startswith("poi_")
        assert feature["type"] == "Feature"
        assert (poi_store.pois_dir / f"{poi_id}.json").exists()
        assert poi_store.get(poi_id)["properties"]["name"] == "Naschmarkt"

    def test_replace_path_id_wins(self, poi_store):
        body = {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [16.37, 48.2]},
            "properties": {"id": "poi_other", "name": "Renamed"},
        }
        feature = poi_store.replace("poi_karlskirche", body)
        assert feature["properties"]["id"] == "poi_karlskirche"
        assert poi_store.get("poi_karlskirche")["properties"]["name"] == "Renamed"
        assert not (poi_store.pois_dir / "poi_other.json").exists()

    def test_replace_missing(self, poi_store):
        with pytest.raises(NotFoundError):
            poi_store.replace("poi_nope", {"properties": {"name": "x"}})

    def test_delete(self, poi_store):
        poi_store.delete("poi_votivkirche")
        with pytest.raises(NotFoundError):
            poi_store.get("poi_votivkirche")
        with pytest.raises(NotFoundError):
            poi_store.delete("poi_votivkirche")

    @pytest.mark.parametrize("bad_id", ["../lists", "a/b", "", "poi.json"])
    def test_unsafe_ids_are_not_found(self, poi_store, bad_id):
        with pytest.raises(NotFoundError):
            poi_store.get(bad_id)


class TestCollectionStore:
    def test_crud(self, list_store):
        created = list_store.create({"title": "Märkte", "pois": []})
        assert created["id"].startswith("list_")
        assert list_store.get(created["id"])["title"] == "Märkte"

        list_store.replace(created["id"], {"title": "Bauernmärkte", "pois": ["poi_karlskirche"]})
        assert list_store.get(created["id"])["pois"] == ["poi_karlskirche"]

        list_store.delete(created["id"])
        with pytest.raises(NotFoundError):
            list_store.get(created["id"])

    def test_order_is_preserved(self, list_store):
        first = list_store.create({"title": "A"})
        second = list_store.create({"title": "B"})
        ids = [item["id"] for item in list_store.list_all()]
        assert ids == ["list_churches", first["id"], second["id"]]

    def test_missing_file_is_empty_collection(self, tmp_path):
        store = CollectionStore(tmp_path / "walkthroughs.json", "walkthroughs", "walk", "Walkthrough")
        assert store.list_all() == []
        store.ensure()
        assert store.path.exists()

    def test_concurrent_creates_are_all_kept(self, list_store):
        def worker(n):
            list_store.create({"title": f"Liste {n}"})

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(20)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(list_store.list_all()) == 21


class TestKeyedStore:
    def test_add_returns_existing_record(self, tag_store):
        assert tag_store.add("market", {"name": "Markt", "count": 0}) is None
        assert tag_store.get("market") == {"name": "Markt", "count": 0}
        existing = tag_store.add("church", {"name": "Andere", "count": 0})
        assert existing == {"name": "Kirche", "count": 2}
        assert tag_store.get("church")["name"] == "Kirche"

    def test_read_all_wraps_table(self, tmp_path):
        store = KeyedStore(tmp_path / "categories.json", "categories")
        assert store.read_all() == {"categories": {}}
