"""
Shared fixtures: a throwaway data directory with a few Vienna neighborhoods and
POIs, settings pointing at it, and a client over a freshly built app.
"""
import copy
import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from graetzlmap.config.settings import Settings, StorageSettings
from graetzlmap.geo import GeoContext
from graetzlmap.main import create_app
from graetzlmap.storage import CollectionStore, KeyedStore, PoiStore


def _box(lng_min, lat_min, lng_max, lat_max):
    return [[
        [lng_min, lat_min],
        [lng_max, lat_min],
        [lng_max, lat_max],
        [lng_min, lat_max],
        [lng_min, lat_min],
    ]]


def _neighborhood(graetzl_id, name, ring, active=1):
    return {
        "type": "Feature",
        "properties": {"Graetzl_ID": graetzl_id, "Graetzl_Name": name, "active": active},
        "geometry": {"type": "Polygon", "coordinates": ring},
    }


def _poi(poi_id, name, lng, lat, category=None, description=None, tags=None):
    properties = {"id": poi_id, "name": name}
    if category:
        properties["category"] = category
    if description is not None:
        properties["description"] = description
    if tags:
        properties["tags"] = tags
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [lng, lat]},
        "properties": properties,
    }


NEIGHBORHOODS = {
    "type": "FeatureCollection",
    "features": [
        _neighborhood(4, "Wieden", _box(16.360, 48.183, 16.385, 48.200)),
        _neighborhood(9, "Alsergrund", _box(16.345, 48.210, 16.370, 48.235)),
        _neighborhood(1, "Innere Stadt", _box(16.360, 48.203, 16.385, 48.209), active=0),
        _neighborhood(13, "Hietzing Schönbrunn", _box(16.300, 48.175, 16.325, 48.195)),
    ],
}

KARLSKIRCHE = _poi(
    "poi_karlskirche", "Karlskirche", 16.3717, 48.1982,
    category="culture",
    description={"de": "Barockkirche am Karlsplatz", "en": "Baroque church on Karlsplatz"},
    tags=["church"],
)
VOTIVKIRCHE = _poi(
    "poi_votivkirche", "Votivkirche", 16.3590, 48.2153,
    category="culture", description="Neugotische Kirche", tags=["church"],
)
STEPHANSPLATZ = _poi(
    "poi_stephansplatz", "Café am Stephansplatz", 16.3727, 48.2085,
    category="cafe", description={"de": "Kaffeehaus", "en": "Coffee house"},
)
SCHOENBRUNN = _poi(
    "poi_schoenbrunn", "Schloss Schönbrunn", 16.3122, 48.1845,
    category="sight", description="Sommerresidenz",
)
ALL_POIS = [KARLSKIRCHE, VOTIVKIRCHE, STEPHANSPLATZ, SCHOENBRUNN]

CATEGORIES = {
    "categories": {
        "cafe": {"name": {"de": "Café", "en": "Coffee"}, "emoji": "☕", "icon": "<svg/>", "color": "#8B5A2B"},
        "culture": {"name": {"de": "Kultur", "en": "Culture"}, "emoji": "🏛️", "icon": "<svg/>", "color": "#1D4ED8"},
    }
}

LISTS = {
    "lists": [
        {
            "id": "list_churches",
            "title": {"de": "Die schönsten Kirchen", "en": "The most beautiful churches"},
            "description": {"de": "Sakrale Highlights", "en": "Sacred highlights"},
            "slug": "die-schoensten-kirchen",
            "pois": ["poi_votivkirche", "poi_karlskirche"],
        }
    ]
}

WALKTHROUGHS = {
    "walkthroughs": [
        {
            "id": "walk_city",
            "title": "Innenstadt Runde",
            "description": "Von der Karlskirche zum Dom",
            "pois": ["poi_karlskirche", "poi_stephansplatz", "poi_gone"],
        }
    ]
}

TAGS = {"tags": {"church": {"name": "Kirche", "count": 2}}}


def _write(path: Path, payload) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


@pytest.fixture
def data_dir(tmp_path):
    data = tmp_path / "data"
    for poi in ALL_POIS:
        _write(data / "pois" / f"{poi['properties']['id']}.json", poi)
    _write(data / "graetzl_wien2025.json", NEIGHBORHOODS)
    _write(data / "categories.json", CATEGORIES)
    _write(data / "tags.json", TAGS)
    _write(data / "lists.json", LISTS)
    _write(data / "walkthroughs.json", WALKTHROUGHS)
    _write(data / "all-pois.json", [KARLSKIRCHE, VOTIVKIRCHE])
    return data


def make_settings(tmp_path, data_dir, environment="testing") -> Settings:
    return Settings(
        environment=environment,
        storage=StorageSettings(
            data_dir=str(data_dir),
            uploads_dir=str(tmp_path / "uploads"),
            dist_dir=str(tmp_path / "dist"),
            max_upload_size_mb=1,
        ),
    )


@pytest.fixture
def settings(tmp_path, data_dir):
    return make_settings(tmp_path, data_dir)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings), raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def static_client(tmp_path, data_dir):
    static_settings = make_settings(tmp_path, data_dir, environment="production")
    with TestClient(create_app(static_settings), raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def poi_store(data_dir):
    return PoiStore(data_dir / "pois")


@pytest.fixture
def geo_context(data_dir, poi_store):
    return GeoContext(poi_store.list_all, data_dir / "graetzl_wien2025.json")


@pytest.fixture
def list_store(data_dir):
    return CollectionStore(data_dir / "lists.json", "lists", "list", "List")


@pytest.fixture
def walkthrough_store(data_dir):
    return CollectionStore(data_dir / "walkthroughs.json", "walkthroughs", "walk", "Walkthrough")


@pytest.fixture
def category_store(data_dir):
    return KeyedStore(data_dir / "categories.json", "categories")


@pytest.fixture
def tag_store(data_dir):
    return KeyedStore(data_dir / "tags.json", "tags")


@pytest.fixture
def pois():
    return copy.deepcopy(ALL_POIS)


@pytest.fixture
def neighborhoods():
    return copy.deepcopy(NEIGHBORHOODS["features"])
