"""
Integration tests for app wiring: modes, health, request ids and error bodies
"""
from fastapi.testclient import TestClient

from graetzlmap.config import Settings
from graetzlmap.main import create_app


class TestStaticMode:
    def test_crud_routes_are_not_served(self, static_client):
        for path in ("/api/pois", "/api/lists", "/api/walkthroughs", "/api/categories", "/api/tags"):
            assert static_client.get(path).status_code == 404
        assert static_client.post("/api/pois", json={}).status_code == 404
        assert static_client.post("/api/upload").status_code == 404

    def test_queries_read_the_bundle(self, static_client):
        ids = [f["properties"]["id"] for f in static_client.get("/api/geo/pois").json()]
        assert ids == ["poi_karlskirche", "poi_votivkirche"]
        assert static_client.get("/api/map/view", params={"path": "/g/wieden"}).status_code == 200

    def test_root_reports_mode(self, static_client, client):
        assert static_client.get("/").json()["mode"] == "static"
        assert client.get("/").json()["mode"] == "cms"


class TestHealth:
    def test_healthy(self, client):
        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["details"]["geo_cache"]["loaded"] is True
        assert body["details"]["missing"] == []

    def test_error_statistics(self, client):
        client.get("/api/pois/poi_nope")
        body = client.get("/health").json()
        assert body["errors"]["error_counts"]["NOT_FOUND"] >= 1

    def test_degraded_without_neighborhoods(self, settings, data_dir):
        (data_dir / "graetzl_wien2025.json").unlink()
        with TestClient(create_app(settings)) as test_client:
            body = test_client.get("/health").json()
            assert body["status"] == "degraded"
            assert body["details"]["missing"] == ["neighborhoods"]
            assert body["details"]["geo_cache"]["loaded"] is False


class TestErrorBodies:
    def test_request_id_is_echoed(self, client):
        response = client.get("/api/pois/poi_nope", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"
        assert response.json()["request_id"] == "req-123"

    def test_geodata_failure_degrades_queries_to_empty(self, settings, data_dir):
        (data_dir / "graetzl_wien2025.json").unlink()
        with TestClient(create_app(settings)) as test_client:
            assert test_client.get("/api/geo/pois").json() == []
            assert test_client.get("/api/geo/search", params={"q": "kirche"}).json() == []
            assert test_client.get("/api/geo/categories").json() == {"categories": []}
            near = test_client.get("/api/geo/near", params={"lng": 16.3717, "lat": 48.1982})
            assert near.json()["results"] == []
            assert test_client.get("/api/geo/neighborhood-at?lng=16.3717&lat=48.1982").status_code == 404
            assert test_client.get("/api/map/neighborhoods").json() == []

            response = test_client.post("/api/geo/reload")
            assert response.status_code == 503
            assert response.json() == {
                "error": "Service temporarily unavailable",
                "code": "GEODATA_LOAD_FAILED",
                "request_id": response.json()["request_id"],
            }

    def test_corrupt_data_file_does_not_leak_paths(self, client, data_dir):
        (data_dir / "lists.json").write_text("{broken", encoding="utf-8")
        response = client.get("/api/lists")
        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"
        assert response.json()["code"] == "STORAGE_ERROR"
        assert str(data_dir) not in response.text

    def test_unexpected_exception(self, settings):
        app = create_app(settings)

        @app.get("/boom")
        def boom():
            raise RuntimeError("secret detail")

        with TestClient(app, raise_server_exceptions=False) as test_client:
            response = test_client.get("/boom")
        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"
        assert "secret" not in response.text


def test_app_starts_with_text_logging(monkeypatch, settings):
    monkeypatch.setenv("LOG_FORMAT", "text")
    text_settings = Settings(environment="testing", storage=settings.storage)
    assert text_settings.log_format == "text"
    with TestClient(create_app(text_settings)) as client:
        assert client.get("/").status_code == 200
