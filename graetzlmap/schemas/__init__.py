from .poi import PointGeometry, POIProperties, POIFeature, POIView
from .collection import CollectionPayload, RouteStop, RouteSegment, WalkthroughRoute
from .taxonomy import KeyedEntryCreate

__all__ = [
    "PointGeometry",
    "POIProperties",
    "POIFeature",
    "POIView",
    "CollectionPayload",
    "RouteStop",
    "RouteSegment",
    "WalkthroughRoute",
    "KeyedEntryCreate",
]
