"""Rewrite the neighborhood GeoJSON file with simplified polygons."""
import logging
from pathlib import Path
from typing import Optional

from graetzlmap.geo import SimplifyReport, simplify_polygons
from graetzlmap.storage import JsonFileStore

logger = logging.getLogger(__name__)


def simplify_neighborhood_file(
    path: Path,
    tolerance: float = 0.0001,
    min_nodes: int = 20,
    output: Optional[Path] = None,
) -> SimplifyReport:
    """
    Simplify large polygons in a FeatureCollection file, in place unless
    ``output`` is given.
    """
    source = JsonFileStore(path)
    collection, report = simplify_polygons(source.read(), tolerance=tolerance, min_nodes=min_nodes)
    target = JsonFileStore(output) if output else source
    target.write(collection)
    logger.info(
        f"Simplified {report.simplified} polygons, {report.nodes_removed} nodes removed; written to {target.path}"
    )
    return report
