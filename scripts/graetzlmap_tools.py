#!/usr/bin/env python3
"""
Data and build maintenance commands.

    graetzlmap_tools.py compile              bundle POI files into all-pois.json
    graetzlmap_tools.py cleanup              strip CMS pages and API routes from dist/
    graetzlmap_tools.py migrate              localize plain-string POI descriptions
    graetzlmap_tools.py simplify             simplify large neighborhood polygons
"""
import argparse
import logging
import sys
from pathlib import Path

from graetzlmap.config.settings import get_settings
from graetzlmap.core.exceptions import GraetzlmapException
from graetzlmap.core.logging import configure_logging
from graetzlmap.tools import (
    cleanup_static_build,
    compile_pois,
    migrate_descriptions,
    simplify_neighborhood_file,
)

logger = logging.getLogger("graetzlmap.tools")


def build_parser(settings) -> argparse.ArgumentParser:
    storage = settings.storage
    parser = argparse.ArgumentParser(description="Grätzlmap data tools")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("compile", help="Bundle POI files into one JSON array")
    p.add_argument("--pois-dir", type=Path, default=storage.pois_dir)
    p.add_argument("--output", type=Path, default=storage.bundle_path)

    p = sub.add_parser("cleanup", help="Remove CMS pages and API routes from a static build")
    p.add_argument("--dist-dir", type=Path, default=Path(storage.dist_dir))

    p = sub.add_parser("migrate", help="Convert plain-string descriptions to {de, en}")
    p.add_argument("--pois-dir", type=Path, default=storage.pois_dir)

    p = sub.add_parser("simplify", help="Simplify neighborhood polygons")
    p.add_argument("--file", type=Path, default=storage.neighborhoods_path)
    p.add_argument("--output", type=Path, default=None)
    p.add_argument("--tolerance", type=float, default=settings.map.simplify_tolerance)
    p.add_argument("--min-nodes", type=int, default=settings.map.simplify_min_nodes)

    return parser


def run(args) -> None:
    if args.command == "compile":
        count = compile_pois(args.pois_dir, args.output)
        logger.info(f"Compiled {count} POIs into {args.output}")
    elif args.command == "cleanup":
        removed = cleanup_static_build(args.dist_dir)
        logger.info(f"Production build cleaned, removed: {', '.join(removed) or 'nothing'}")
    elif args.command == "migrate":
        report = migrate_descriptions(args.pois_dir)
        logger.info(f"Migrated: {report.migrated}, skipped: {report.skipped}, total: {report.total}")
    elif args.command == "simplify":
        report = simplify_neighborhood_file(args.file, args.tolerance, args.min_nodes, args.output)
        logger.info(f"Simplified {report.simplified} polygons, {report.nodes_removed} nodes removed")


def main(argv=None) -> int:
    settings = get_settings()
    configure_logging(settings.log_level.value, settings.log_format, "%(levelname)s %(message)s")
    args = build_parser(settings).parse_args(argv)
    try:
        run(args)
    except (GraetzlmapException, OSError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
