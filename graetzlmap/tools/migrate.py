"""
One-off migration of POI descriptions from plain strings to ``{de, en}`` maps.
"""
import logging
from dataclasses import dataclass
from pathlib import Path

from graetzlmap.storage import JsonFileStore

logger = logging.getLogger(__name__)


@dataclass
class MigrationReport:
    migrated: int = 0
    skipped: int = 0
    total: int = 0


def _localize(feature) -> bool:
    properties = feature.setdefault("properties", {})
    description = properties.get("description")
    if isinstance(description, dict):
        return False
    text = description or ""
    properties["description"] = {"de": text, "en": text}
    return True


def migrate_descriptions(pois_dir: Path) -> MigrationReport:
    """
    Rewrite every POI whose description is not yet localized.

    The English text starts out as a copy of the German one. Files that already
    carry a map are left alone, so running this twice changes nothing.
    """
    pois_dir = Path(pois_dir)
    report = MigrationReport()
    files = sorted(p for p in pois_dir.glob("*.json") if not p.name.startswith("."))
    report.total = len(files)

    for path in files:
        store = JsonFileStore(path)
        with store.lock:
            feature = store.read()
            if _localize(feature):
                store.write(feature)
                report.migrated += 1
                logger.info(f"Migrated {path.name}")
            else:
                report.skipped += 1
                logger.debug(f"Skipping {path.name}, already multilingual")

    logger.info(
        f"Migration complete: {report.migrated} migrated, {report.skipped} skipped, {report.total} total",
        extra={"migrated": report.migrated, "skipped": report.skipped},
    )
    return report
