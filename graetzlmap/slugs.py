"""
URL slugs and client routes.

``/g/<slug>`` selects a neighborhood, ``/l/<slug>`` selects a list or walkthrough,
everything else shows all POIs.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from graetzlmap.geo.geoquery import neighborhood_name
from graetzlmap.i18n import resolve_text

_UMLAUTS = (("ä", "ae"), ("ö", "oe"), ("ü", "ue"), ("ß", "ss"))
_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_NEIGHBORHOOD_PATH = re.compile(r"^/g/([^/]+)/?$")
_COLLECTION_PATH = re.compile(r"^/l/([^/]+)/?$")

ROUTE_ALL = "all"
ROUTE_NEIGHBORHOOD = "neighborhood"
ROUTE_COLLECTION = "collection"


def name_to_slug(name: Any) -> str:
    """
    Convert a display name to a URL slug.

    "Alservorstadt und Michelbeuern" -> "alservorstadt-und-michelbeuern"
    "Die schönsten Märkte" -> "die-schoensten-maerkte"

    Localized names are slugged from their German variant.
    """
    text = resolve_text(name, "de")
    if not text:
        return ""
    text = text.lower()
    for umlaut, replacement in _UMLAUTS:
        text = text.replace(umlaut, replacement)
    return _NON_ALNUM.sub("-", text).strip("-")


@dataclass(frozen=True)
class Route:
    kind: str
    slug: Optional[str] = None


def parse_route(path: Optional[str]) -> Route:
    if not path:
        return Route(ROUTE_ALL)
    match = _NEIGHBORHOOD_PATH.match(path)
    if match:
        return Route(ROUTE_NEIGHBORHOOD, match.group(1))
    match = _COLLECTION_PATH.match(path)
    if match:
        return Route(ROUTE_COLLECTION, match.group(1))
    return Route(ROUTE_ALL)


def find_neighborhood_by_slug(neighborhoods: Iterable[Dict[str, Any]], slug: Optional[str]) -> Optional[Dict[str, Any]]:
    if not slug:
        return None
    for feature in neighborhoods:
        if name_to_slug(neighborhood_name(feature)) == slug:
            return feature
    return None


def collection_slug(item: Dict[str, Any]) -> str:
    """Stored slug when present, otherwise derived from the title."""
    return item.get("slug") or name_to_slug(item.get("title"))


def find_collection_by_slug(items: Iterable[Dict[str, Any]], slug: Optional[str]) -> Optional[Dict[str, Any]]:
    if not slug:
        return None
    for item in items:
        if collection_slug(item) == slug:
            return item
    return None


def neighborhood_path(feature: Optional[Dict[str, Any]]) -> str:
    if feature is None:
        return "/"
    return f"/g/{name_to_slug(neighborhood_name(feature))}"


def collection_path(item: Dict[str, Any]) -> str:
    return f"/l/{collection_slug(item)}"
