"""
Integration tests for the CMS write endpoints
"""
import json

NEW_POI = {
    "type": "Feature",
    "geometry": {"type": "Point", "coordinates": [16.3633, 48.1987]},
    "properties": {"name": "Naschmarkt", "category": "market", "description": {"de": "Markt", "en": "Market"}},
}


class TestPOIEndpoints:
    def test_list(self, client):
        response = client.get("/api/pois")
        assert response.status_code == 200
        assert len(response.json()) == 4

    def test_create_get_update_delete(self, client, data_dir):
        response = client.post("/api/pois", json=NEW_POI)
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        poi_id = body["id"]
        assert poi_id.startswith("poi_")
        assert body["poi"]["properties"]["id"] == poi_id
        assert (data_dir / "pois" / f"{poi_id}.json").exists()

        assert client.get(f"/api/pois/{poi_id}").json()["properties"]["name"] == "Naschmarkt"

        updated = dict(NEW_POI, properties={"id": "poi_hijack", "name": "Naschmarkt Wien"})
        response = client.put(f"/api/pois/{poi_id}", json=updated)
        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "poi": {
                "type": "Feature",
                "geometry": NEW_POI["geometry"],
                "properties": {"id": poi_id, "name": "Naschmarkt Wien"},
            },
        }
        assert not (data_dir / "pois" / "poi_hijack.json").exists()

        assert client.delete(f"/api/pois/{poi_id}").json() == {"success": True}
        assert client.get(f"/api/pois/{poi_id}").status_code == 404

    def test_put_is_idempotent(self, client, data_dir):
        payload = dict(NEW_POI, properties={"name": "Karlskirche", "category": "culture"})
        first = client.put("/api/pois/poi_karlskirche", json=payload)
        stored_after_first = (data_dir / "pois" / "poi_karlskirche.json").read_text(encoding="utf-8")
        second = client.put("/api/pois/poi_karlskirche", json=payload)
        assert first.json() == second.json()
        assert (data_dir / "pois" / "poi_karlskirche.json").read_text(encoding="utf-8") == stored_after_first

    def test_created_poi_is_visible_to_geo_queries(self, client):
        assert len(client.get("/api/geo/pois").json()) == 4
        client.post("/api/pois", json=NEW_POI)
        assert len(client.get("/api/geo/pois").json()) == 5
        assert "market" in client.get("/api/geo/categories").json()["categories"]

    def test_double_submit_creates_two(self, client):
        first = client.post("/api/pois", json=NEW_POI).json()["id"]
        second = client.post("/api/pois", json=NEW_POI).json()["id"]
        assert first != second
        assert len(client.get("/api/pois").json()) == 6

    def test_missing_poi(self, client):
        for method in ("get", "delete"):
            response = getattr(client, method)("/api/pois/poi_nope")
            assert response.status_code == 404
            assert response.json()["error"] == "POI not found"
            assert response.json()["code"] == "NOT_FOUND"
        assert client.put("/api/pois/poi_nope", json=NEW_POI).status_code == 404

    def test_invalid_bodies(self, client):
        no_name = dict(NEW_POI, properties={"category": "market"})
        response = client.post("/api/pois", json=no_name)
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert "error" in response.json()

        line = dict(NEW_POI, geometry={"type": "LineString", "coordinates": [[0, 0], [1, 1]]})
        assert client.post("/api/pois", json=line).status_code == 400

        response = client.post("/api/pois", content="not json", headers={"Content-Type": "application/json"})
        assert response.status_code == 400


class TestCollectionEndpoints:
    def test_lists_crud(self, client, data_dir):
        assert [item["id"] for item in client.get("/api/lists").json()] == ["list_churches"]

        response = client.post("/api/lists", json={"title": {"de": "Märkte", "en": "Markets"}, "pois": ["poi_karlskirche"]})
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["id"].startswith("list_")
        assert body["list"]["slug"] == "maerkte"

        list_id = body["id"]
        response = client.put(f"/api/lists/{list_id}", json={"title": "Bauernmärkte", "slug": "bauern", "pois": []})
        assert response.json()["list"] == {"id": list_id, "title": "Bauernmärkte", "slug": "bauern", "pois": []}

        stored = json.loads((data_dir / "lists.json").read_text(encoding="utf-8"))
        assert [item["id"] for item in stored["lists"]] == ["list_churches", list_id]

        assert client.delete(f"/api/lists/{list_id}").json() == {"success": True}
        assert client.get(f"/api/lists/{list_id}").status_code == 404

    def test_walkthroughs(self, client):
        response = client.post("/api/walkthroughs", json={"title": "Ringstraße", "pois": ["poi_votivkirche"]})
        assert response.status_code == 201
        body = response.json()
        assert body["id"].startswith("walk_")
        assert body["walkthrough"]["slug"] == "ringstrasse"
        assert client.get(f"/api/walkthroughs/{body['id']}").json()["pois"] == ["poi_votivkirche"]

    def test_missing_title(self, client):
        assert client.post("/api/lists", json={"pois": []}).status_code == 400

    def test_unknown_item(self, client):
        response = client.put("/api/walkthroughs/walk_nope", json={"title": "x"})
        assert response.status_code == 404
        assert response.json()["error"] == "Walkthrough not found"


class TestTaxonomyEndpoints:
    def test_categories(self, client):
        assert set(client.get("/api/categories").json()["categories"]) == {"cafe", "culture"}

        response = client.post("/api/categories", json={"key": "bar", "name": "Bar"})
        assert response.status_code == 201
        category = response.json()["category"]
        assert category["emoji"] == "📍"
        assert category["color"] == "#6B7280"

        response = client.post("/api/categories", json={"key": "bar", "name": "Andere Bar"})
        assert response.status_code == 409
        assert response.json()["details"]["category"]["name"] == "Bar"

    def test_category_missing_fields(self, client):
        response = client.post("/api/categories", json={"key": "bar"})
        assert response.status_code == 400
        assert response.json()["error"] == "Category key and name are required"
        assert response.json()["code"] == "MISSING_FIELD"

    def test_tags(self, client):
        response = client.post("/api/tags", json={"key": "church", "name": "Kirche"})
        assert response.status_code == 200
        assert response.json() == {"exists": True, "tag": {"name": "Kirche", "count": 2}}

        response = client.post("/api/tags", json={"key": "market", "name": "Markt"})
        assert response.status_code == 201
        assert response.json() == {"success": True, "tag": {"name": "Markt", "count": 0}}
        assert "market" in client.get("/api/tags").json()["tags"]

        assert client.post("/api/tags", json={"name": "Markt"}).status_code == 400


class TestUploadEndpoint:
    def test_upload(self, client, settings):
        response = client.post("/api/upload", files={"file": ("foto.PNG", b"\x89PNG", "image/png")})
        assert response.status_code == 200
        url = response.json()["url"]
        assert url.startswith("/uploads/poi_")
        assert url.endswith(".png")
        stored = settings.storage.uploads_dir + "/" + url.rsplit("/", 1)[1]
        with open(stored, "rb") as f:
            assert f.read() == b"\x89PNG"

    def test_missing_file(self, client):
        response = client.post("/api/upload")
        assert response.status_code == 400
        assert response.json()["error"] == "No file provided"

    def test_too_large(self, client):
        big = b"x" * (1024 * 1024 + 1)
        response = client.post("/api/upload", files={"file": ("big.jpg", big, "image/jpeg")})
        assert response.status_code == 413
        assert response.json()["code"] == "UPLOAD_TOO_LARGE"
