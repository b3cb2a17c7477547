"""
List and walkthrough schemas for API requests/responses
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional, Union

LocalizedValue = Union[str, Dict[str, str]]


class CollectionPayload(BaseModel):
    """Body for creating or replacing a list or walkthrough"""
    model_config = ConfigDict(extra="allow")

    title: LocalizedValue
    description: Optional[LocalizedValue] = None
    slug: Optional[str] = None
    pois: List[str] = Field(default_factory=list, description="Ordered POI ids")

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class RouteStop(BaseModel):
    number: int
    poi_id: str
    name: str
    position: List[float] = Field(..., description="[lat, lng]")


class RouteSegment(BaseModel):
    """Directed leg between two consecutive stops"""
    from_stop: int
    to_stop: int
    start: List[float]
    end: List[float]
    distance_km: float
    bearing_deg: float


class WalkthroughRoute(BaseModel):
    id: str
    title: str
    description: str = ""
    stops: List[RouteStop]
    segments: List[RouteSegment]
    total_distance_km: float
    bounds: Optional[List[List[float]]] = Field(None, description="[[south, west], [north, east]]")
    missing_poi_ids: List[str] = []
