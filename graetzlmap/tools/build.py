"""
Static build steps: bundle the POI files and strip CMS pages from the output.
"""
import logging
import shutil
from pathlib import Path
from typing import List

from graetzlmap.core.exceptions import StorageError
from graetzlmap.storage import JsonFileStore, PoiStore

logger = logging.getLogger(__name__)

# Paths under the build output that only make sense with the local CMS running
STATIC_BUILD_EXCLUDES = ("cms", "cms.html", "api")


def compile_pois(pois_dir: Path, output_file: Path) -> int:
    """
    Bundle every POI file into one JSON array, ordered by file name.

    Returns:
        Number of POIs written
    """
    if not Path(pois_dir).is_dir():
        raise StorageError(str(pois_dir), "POI directory does not exist")
    pois = PoiStore(pois_dir).list_all()
    JsonFileStore(output_file).write(pois)
    logger.info(f"Compiled {len(pois)} POIs into {output_file}", extra={"poi_count": len(pois)})
    return len(pois)


def cleanup_static_build(dist_dir: Path) -> List[str]:
    """
    Remove CMS pages and API routes from a build output directory.

    Returns:
        Names that were present and removed
    """
    dist_dir = Path(dist_dir)
    removed = []
    for name in STATIC_BUILD_EXCLUDES:
        target = dist_dir / name
        if target.is_dir():
            shutil.rmtree(target)
        elif target.exists():
            target.unlink()
        else:
            continue
        removed.append(name)
        logger.info(f"Removed {target}")
    return removed
