"""Build and maintenance tasks for the data directory and the static build."""

from .build import compile_pois, cleanup_static_build, STATIC_BUILD_EXCLUDES
from .migrate import migrate_descriptions, MigrationReport
from .neighborhoods import simplify_neighborhood_file

__all__ = [
    "compile_pois",
    "cleanup_static_build",
    "STATIC_BUILD_EXCLUDES",
    "migrate_descriptions",
    "MigrationReport",
    "simplify_neighborhood_file",
]
