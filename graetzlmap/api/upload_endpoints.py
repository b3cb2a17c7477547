"""
Upload API endpoint - POI photos
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from graetzlmap.core.dependencies import get_upload_service
from graetzlmap.core.exceptions import UploadError
from graetzlmap.services.upload_service import UploadService

router = APIRouter(prefix="/api/upload", tags=["upload"])


@router.post("")
def upload_file(
    file: Optional[UploadFile] = File(None),
    service: UploadService = Depends(get_upload_service),
):
    """
    Store an uploaded image and return its public URL

    - **file**: multipart form field
    """
    if file is None:
        raise UploadError("No file provided")
    url = service.save(file.filename or "", file.file, declared_size=file.size)
    return {"url": url}
