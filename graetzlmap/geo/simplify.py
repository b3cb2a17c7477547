"""Neighborhood polygon simplification for lighter map payloads."""

import logging
from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from shapely.geometry import mapping, shape

from graetzlmap.geo.geoquery import neighborhood_name
from graetzlmap.i18n import resolve_text

logger = logging.getLogger(__name__)


@dataclass
class SimplifyReport:
    simplified: int = 0
    nodes_removed: int = 0


def simplify_polygons(
    collection: Dict[str, Any],
    tolerance: float = 0.0001,
    min_nodes: int = 20,
) -> Tuple[Dict[str, Any], SimplifyReport]:
    """
    Simplify Polygon features whose outer ring has more than ``min_nodes`` nodes.

    Topology is preserved so rings stay valid. The input collection is not modified.
    """
    result = deepcopy(collection)
    report = SimplifyReport()

    for feature in result.get("features", []):
        geometry = feature.get("geometry") or {}
        if geometry.get("type") != "Polygon":
            continue
        node_count = len(geometry["coordinates"][0])
        if node_count <= min_nodes:
            continue

        simplified = shape(geometry).simplify(tolerance, preserve_topology=True)
        new_geometry = mapping(simplified)
        new_count = len(new_geometry["coordinates"][0])
        feature["geometry"] = {
            "type": new_geometry["type"],
            "coordinates": [[list(c) for c in ring] for ring in new_geometry["coordinates"]],
        }

        name = resolve_text(neighborhood_name(feature)) or "unnamed"
        logger.info(f"Simplified {name}: {node_count} -> {new_count} nodes")
        report.simplified += 1
        report.nodes_removed += node_count - new_count

    return result, report
