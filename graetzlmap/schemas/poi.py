from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Literal, Optional, Union

LocalizedValue = Union[str, Dict[str, str]]


class PointGeometry(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: List[float] = Field(..., description="[lng, lat]")

    @field_validator("coordinates")
    @classmethod
    def check_pair(cls, v):
        if len(v) != 2:
            raise ValueError("coordinates must be [lng, lat]")
        return v


class POIProperties(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    name: str = Field(..., min_length=1)
    category: Optional[str] = None
    description: Optional[LocalizedValue] = None
    link: Optional[str] = None
    instagram: Optional[str] = None
    photo: Optional[str] = None
    tags: Optional[List[str]] = None


class POIFeature(BaseModel):
    """A POI as stored on disk: one GeoJSON Point feature."""
    model_config = ConfigDict(extra="allow")

    type: Literal["Feature"] = "Feature"
    geometry: PointGeometry
    properties: POIProperties

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class POIView(BaseModel):
    """POI prepared for a map popup in one language."""
    id: Optional[str]
    name: str
    category: Optional[str]
    category_label: Optional[str] = None
    description: str = ""
    tags: List[str] = []
    link: Optional[str] = None
    instagram: Optional[str] = None
    photo: Optional[str] = None
    position: List[float] = Field(..., description="[lat, lng]")
    directions_url: str
