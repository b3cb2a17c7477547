"""
Category and tag API endpoints
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from graetzlmap.core.dependencies import get_category_service, get_tag_service
from graetzlmap.schemas.taxonomy import KeyedEntryCreate
from graetzlmap.services.taxonomy_service import CategoryService, TagService

categories_router = APIRouter(prefix="/api/categories", tags=["categories"])
tags_router = APIRouter(prefix="/api/tags", tags=["tags"])


@categories_router.get("")
def get_categories(service: CategoryService = Depends(get_category_service)):
    return service.get_all()


@categories_router.post("", status_code=status.HTTP_201_CREATED)
def add_category(entry: KeyedEntryCreate, service: CategoryService = Depends(get_category_service)):
    """
    Add a category with default emoji, icon and color

    Returns 409 with the existing record when the key is taken.
    """
    category = service.add_category(entry)
    return {"success": True, "category": category}


@tags_router.get("")
def get_tags(service: TagService = Depends(get_tag_service)):
    return service.get_all()


@tags_router.post("", status_code=status.HTTP_201_CREATED)
def add_tag(entry: KeyedEntryCreate, service: TagService = Depends(get_tag_service)):
    """
    Add a tag. An existing tag is returned with 200 and `exists: true`.
    """
    created, tag = service.add_tag(entry)
    if not created:
        return JSONResponse(status_code=status.HTTP_200_OK, content={"exists": True, "tag": tag})
    return {"success": True, "tag": tag}
