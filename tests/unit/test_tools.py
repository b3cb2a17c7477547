"""
Unit tests for the build and maintenance tools
"""
import importlib.util
import json
from pathlib import Path

import pytest

from graetzlmap.core.exceptions import StorageError
from graetzlmap.geo import simplify_polygons
from graetzlmap.tools import (
    cleanup_static_build,
    compile_pois,
    migrate_descriptions,
    simplify_neighborhood_file,
)

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "graetzlmap_tools.py"


def dense_square(per_edge=10, x0=16.0, y0=48.0, size=0.01):
    step = size / per_edge
    ring = []
    ring += [[x0 + i * step, y0] for i in range(per_edge)]
    ring += [[x0 + size, y0 + i * step] for i in range(per_edge)]
    ring += [[x0 + size - i * step, y0 + size] for i in range(per_edge)]
    ring += [[x0, y0 + size - i * step] for i in range(per_edge)]
    ring.append([x0, y0])
    return ring


def collection(*rings):
    return {
        "type": "FeatureCollection",
        "features": [
            {"type": "Feature", "properties": {"name": f"n{i}"}, "geometry": {"type": "Polygon", "coordinates": [ring]}}
            for i, ring in enumerate(rings)
        ],
    }


def load_cli():
    spec = importlib.util.spec_from_file_location("graetzlmap_tools_cli", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_compile_pois_sorted_by_filename(data_dir, tmp_path):
    output = tmp_path / "bundle.json"
    assert compile_pois(data_dir / "pois", output) == 4
    bundle = json.loads(output.read_text(encoding="utf-8"))
    assert [p["properties"]["id"] for p in bundle] == [
        "poi_karlskirche", "poi_schoenbrunn", "poi_stephansplatz", "poi_votivkirche",
    ]


def test_compile_pois_missing_directory(tmp_path):
    with pytest.raises(StorageError):
        compile_pois(tmp_path / "nope", tmp_path / "bundle.json")


def test_cleanup_static_build(tmp_path):
    dist = tmp_path / "dist"
    (dist / "cms").mkdir(parents=True)
    (dist / "cms" / "index.html").write_text("cms")
    (dist / "cms.html").write_text("cms")
    (dist / "api" / "pois").mkdir(parents=True)
    (dist / "index.html").write_text("map")

    assert cleanup_static_build(dist) == ["cms", "cms.html", "api"]
    assert [p.name for p in dist.iterdir()] == ["index.html"]
    assert cleanup_static_build(dist) == []


def test_migrate_descriptions_is_idempotent(data_dir):
    pois_dir = data_dir / "pois"
    report = migrate_descriptions(pois_dir)
    assert (report.migrated, report.skipped, report.total) == (2, 2, 4)

    votiv = json.loads((pois_dir / "poi_votivkirche.json").read_text(encoding="utf-8"))
    assert votiv["properties"]["description"] == {"de": "Neugotische Kirche", "en": "Neugotische Kirche"}

    again = migrate_descriptions(pois_dir)
    assert (again.migrated, again.skipped, again.total) == (0, 4, 4)


def test_migrate_fills_missing_description(tmp_path):
    pois_dir = tmp_path / "pois"
    pois_dir.mkdir()
    (pois_dir / "poi_a.json").write_text(json.dumps({"type": "Feature", "properties": {"name": "A"}}))
    migrate_descriptions(pois_dir)
    assert json.loads((pois_dir / "poi_a.json").read_text())["properties"]["description"] == {"de": "", "en": ""}


def test_simplify_polygons_only_touches_large_rings():
    source = collection(dense_square(), dense_square(per_edge=1))
    result, report = simplify_polygons(source, tolerance=0.0001, min_nodes=20)

    simplified_ring = result["features"][0]["geometry"]["coordinates"][0]
    assert report.simplified == 1
    assert 4 <= len(simplified_ring) < 41
    assert report.nodes_removed == 41 - len(simplified_ring)
    assert result["features"][1] == source["features"][1]
    assert len(source["features"][0]["geometry"]["coordinates"][0]) == 41


def test_simplify_neighborhood_file(tmp_path):
    path = tmp_path / "graetzl.json"
    path.write_text(json.dumps(collection(dense_square())), encoding="utf-8")
    output = tmp_path / "out.json"

    report = simplify_neighborhood_file(path, output=output)
    assert report.simplified == 1
    assert len(json.loads(output.read_text())["features"][0]["geometry"]["coordinates"][0]) < 41
    assert len(json.loads(path.read_text())["features"][0]["geometry"]["coordinates"][0]) == 41


def test_cli_compile(data_dir, tmp_path):
    cli = load_cli()
    output = tmp_path / "bundle.json"
    assert cli.main(["compile", "--pois-dir", str(data_dir / "pois"), "--output", str(output)]) == 0
    assert len(json.loads(output.read_text(encoding="utf-8"))) == 4


def test_cli_reports_failure(tmp_path):
    cli = load_cli()
    assert cli.main(["compile", "--pois-dir", str(tmp_path / "nope"), "--output", str(tmp_path / "b.json")]) == 1
    assert cli.main(["simplify", "--file", str(tmp_path / "nope.json")]) == 1
