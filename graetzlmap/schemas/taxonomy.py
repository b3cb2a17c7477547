from pydantic import BaseModel, ConfigDict
from typing import Dict, Optional, Union


class KeyedEntryCreate(BaseModel):
    """Body for adding a category or tag; presence of both fields is checked by the service"""
    model_config = ConfigDict(extra="ignore")

    key: Optional[str] = None
    name: Optional[Union[str, Dict[str, str]]] = None
