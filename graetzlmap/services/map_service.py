"""
Map view service.

Composes what the map shows for a given state: the selected neighborhood, an
active list or walkthrough, the category filter and the visible POIs. Geodata
load failures are logged and degrade to empty results.
"""
import logging
import unicodedata
from typing import Any, Dict, Iterable, List, Optional, Tuple

from graetzlmap.core.exceptions import (
    GeoDataLoadError,
    InvalidCoordinateError,
    NotFoundError,
    StorageError,
)
from graetzlmap.geo import (
    GeoContext,
    GeoData,
    active_neighborhoods,
    bearing_deg,
    distance_km,
    feature_to_leaflet_coords,
    filter_by_neighborhood_and_category,
    get_neighborhood,
    get_pois_by_ids,
    neighborhood_id,
    neighborhood_name,
    point_coordinates,
    poi_category,
    poi_id,
    to_leaflet,
)
from graetzlmap.i18n import resolve_text
from graetzlmap.schemas.collection import RouteSegment, RouteStop, WalkthroughRoute
from graetzlmap.schemas.poi import POIView
from graetzlmap.slugs import (
    ROUTE_COLLECTION,
    ROUTE_NEIGHBORHOOD,
    collection_slug,
    find_collection_by_slug,
    find_neighborhood_by_slug,
    name_to_slug,
    neighborhood_path,
    parse_route,
)
from graetzlmap.storage import CollectionStore, KeyedStore

logger = logging.getLogger(__name__)

DIRECTIONS_URL = "https://www.google.com/maps/dir/?api=1&destination={lat},{lng}"


def _sort_key(name: str) -> str:
    # "Ä" sorts with "A", matching German collation closely enough for a dropdown
    return unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode().casefold()


def _bounds(positions: List[List[float]]) -> Optional[List[List[float]]]:
    if not positions:
        return None
    lats = [p[0] for p in positions]
    lngs = [p[1] for p in positions]
    return [[min(lats), min(lngs)], [max(lats), max(lngs)]]


class MapService:
    """Server-side state composition for the map frontend"""

    def __init__(
        self,
        geo_context: GeoContext,
        lists: CollectionStore,
        walkthroughs: CollectionStore,
        categories: KeyedStore,
        default_center: Optional[List[float]] = None,
        default_zoom: int = 14,
    ):
        self.geo_context = geo_context
        self.lists = lists
        self.walkthroughs = walkthroughs
        self.categories = categories
        self.default_center = default_center or [16.3738, 48.2082]
        self.default_zoom = default_zoom

    def geodata(self) -> GeoData:
        try:
            return self.geo_context.load_data()
        except GeoDataLoadError as e:
            logger.error(f"Geodata unavailable, showing nothing: {e.message}")
            return GeoData()

    # -- neighborhoods -----------------------------------------------------

    def neighborhood_summary(self, feature: Dict[str, Any], lang: str, with_polygon: bool = False) -> Dict[str, Any]:
        raw_name = neighborhood_name(feature)
        summary = {
            "id": neighborhood_id(feature),
            "name": resolve_text(raw_name, lang),
            "slug": name_to_slug(raw_name),
            "path": neighborhood_path(feature),
        }
        if with_polygon:
            summary["polygon"] = feature_to_leaflet_coords(feature)
        return summary

    def neighborhood_options(self, lang: str = "de", term: Optional[str] = None) -> List[Dict[str, Any]]:
        """Active neighborhoods for the searchable dropdown, sorted by name."""
        options = [self.neighborhood_summary(f, lang) for f in active_neighborhoods(self.geodata().neighborhoods)]
        options.sort(key=lambda o: _sort_key(o["name"]))
        if term and term.strip():
            needle = term.strip().casefold()
            options = [o for o in options if needle in o["name"].casefold()]
        return options

    # -- POIs --------------------------------------------------------------

    def category_label(self, category: Optional[str], lang: str) -> Optional[str]:
        if not category:
            return None
        try:
            record = self.categories.get(category)
        except StorageError as e:
            logger.warning(f"Category table unavailable: {e.message}")
            return category
        if not record:
            return category
        return f"{record.get('emoji', '')} {resolve_text(record.get('name'), lang)}".strip()

    def poi_view(self, feature: Dict[str, Any], lang: str = "de") -> POIView:
        props = feature.get("properties") or {}
        lng, lat = point_coordinates(feature)
        return POIView(
            id=poi_id(feature),
            name=resolve_text(props.get("name"), lang),
            category=poi_category(feature),
            category_label=self.category_label(poi_category(feature), lang),
            description=resolve_text(props.get("description"), lang),
            tags=list(props.get("tags") or []),
            link=props.get("link"),
            instagram=props.get("instagram"),
            photo=props.get("photo"),
            position=[lat, lng],
            directions_url=DIRECTIONS_URL.format(lat=lat, lng=lng),
        )

    def _views(self, pois: Iterable[Dict[str, Any]], lang: str) -> List[Dict[str, Any]]:
        views = []
        for feature in pois:
            try:
                views.append(self.poi_view(feature, lang).model_dump())
            except InvalidCoordinateError:
                logger.warning(f"Skipping POI {poi_id(feature)!r} without a valid position")
        return views

    def get_poi_view(self, poi_identifier: str, lang: str = "de") -> POIView:
        for feature in self.geodata().pois:
            if poi_id(feature) == poi_identifier:
                return self.poi_view(feature, lang)
        raise NotFoundError("POI", poi_identifier)

    def visible_pois(
        self,
        graetzl_id: Optional[int] = None,
        categories: Optional[Iterable[str]] = None,
        collection: Optional[Dict[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """
        POIs the map shows. An active list or walkthrough with stops overrides
        the neighborhood and category filters and keeps its own order.
        """
        data = self.geodata()
        if collection and collection.get("pois"):
            return get_pois_by_ids(data.pois, collection["pois"])
        return filter_by_neighborhood_and_category(
            data.pois, data.neighborhoods, graetzl_id=graetzl_id, categories=categories
        )

    # -- collections -------------------------------------------------------

    def find_collection(self, slug: str) -> Optional[Tuple[str, Dict[str, Any]]]:
        """Look a slug up in lists first, then walkthroughs."""
        for kind, store in (("list", self.lists), ("walkthrough", self.walkthroughs)):
            item = find_collection_by_slug(store.list_all(), slug)
            if item is not None:
                return kind, item
        return None

    def walkthrough_route(self, walkthrough: Dict[str, Any], lang: str = "de") -> WalkthroughRoute:
        """Numbered stops and directed segments between consecutive stops."""
        data = self.geodata()
        by_id = {poi_id(p): p for p in data.pois}

        stops: List[RouteStop] = []
        missing: List[str] = []
        for identifier in walkthrough.get("pois") or []:
            feature = by_id.get(identifier)
            try:
                position = to_leaflet(point_coordinates(feature)) if feature else None
            except InvalidCoordinateError:
                position = None
            if position is None:
                missing.append(identifier)
                continue
            stops.append(RouteStop(
                number=len(stops) + 1,
                poi_id=identifier,
                name=resolve_text((feature.get("properties") or {}).get("name"), lang),
                position=position,
            ))
        if missing:
            logger.warning(
                f"Walkthrough {walkthrough.get('id')} references unknown POIs: {missing}",
                extra={"walkthrough_id": walkthrough.get("id")},
            )

        segments: List[RouteSegment] = []
        for start, end in zip(stops, stops[1:]):
            a = [start.position[1], start.position[0]]
            b = [end.position[1], end.position[0]]
            segments.append(RouteSegment(
                from_stop=start.number,
                to_stop=end.number,
                start=start.position,
                end=end.position,
                distance_km=round(distance_km(a, b), 4),
                bearing_deg=round(bearing_deg(a, b), 1),
            ))

        return WalkthroughRoute(
            id=walkthrough.get("id", ""),
            title=resolve_text(walkthrough.get("title"), lang),
            description=resolve_text(walkthrough.get("description"), lang),
            stops=stops,
            segments=segments,
            total_distance_km=round(sum(s.distance_km for s in segments), 4),
            bounds=_bounds([s.position for s in stops]),
            missing_poi_ids=missing,
        )

    def get_walkthrough_route(self, walkthrough_id: str, lang: str = "de") -> WalkthroughRoute:
        return self.walkthrough_route(self.walkthroughs.get(walkthrough_id), lang)

    # -- whole view --------------------------------------------------------

    def resolve_view(
        self,
        path: Optional[str] = None,
        lang: str = "de",
        categories: Optional[Iterable[str]] = None,
    ) -> Dict[str, Any]:
        """
        Everything the map needs for a URL path: ``/``, ``/g/<slug>`` or ``/l/<slug>``.
        Unknown slugs fall back to showing all POIs.
        """
        route = parse_route(path)
        view: Dict[str, Any] = {
            "route": {"kind": route.kind, "slug": route.slug},
            "neighborhood": None,
            "collection": None,
            "walkthrough_route": None,
            "center": [self.default_center[1], self.default_center[0]],
            "zoom": self.default_zoom,
            "bounds": None,
            "unresolved_slug": None,
        }

        graetzl_id = None
        collection = None
        if route.kind == ROUTE_NEIGHBORHOOD:
            feature = find_neighborhood_by_slug(self.geodata().neighborhoods, route.slug)
            if feature is None:
                logger.warning(f"Grätzl not found for slug: {route.slug}")
                view["unresolved_slug"] = route.slug
            else:
                graetzl_id = neighborhood_id(feature)
                summary = self.neighborhood_summary(feature, lang, with_polygon=True)
                view["neighborhood"] = summary
                polygon = summary["polygon"]
                if polygon and isinstance(polygon[0][0], list):
                    polygon = [pt for ring in polygon for pt in ring]
                view["bounds"] = _bounds(polygon or [])
        elif route.kind == ROUTE_COLLECTION:
            found = self.find_collection(route.slug)
            if found is None:
                logger.warning(f"List not found for slug: {route.slug}")
                view["unresolved_slug"] = route.slug
            else:
                kind, collection = found
                view["collection"] = {
                    "kind": kind,
                    "id": collection.get("id"),
                    "title": resolve_text(collection.get("title"), lang),
                    "description": resolve_text(collection.get("description"), lang),
                    "slug": collection_slug(collection),
                    "pois": list(collection.get("pois") or []),
                }
                if kind == "walkthrough":
                    route_data = self.walkthrough_route(collection, lang)
                    view["walkthrough_route"] = route_data.model_dump()
                    view["bounds"] = route_data.bounds

        pois = self.visible_pois(graetzl_id=graetzl_id, categories=categories, collection=collection)
        view["pois"] = self._views(pois, lang)
        if view["bounds"] is None and collection is not None:
            view["bounds"] = _bounds([p["position"] for p in view["pois"]])
        return view

    def neighborhood_for(self, graetzl_id: int, lang: str = "de") -> Dict[str, Any]:
        feature = get_neighborhood(self.geodata().neighborhoods, graetzl_id)
        if feature is None:
            raise NotFoundError("Grätzl", graetzl_id)
        return self.neighborhood_summary(feature, lang, with_polygon=True)
