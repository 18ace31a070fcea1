"""Image upload endpoints (admin only).

Uploads go straight to the object store; nothing links an image to a
product or service until the client saves the returned URL on a record.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile

from storefront.dependencies import get_image_storage, require_admin
from storefront.errors import StorageError, ValidationError
from storefront.services.image_storage import (
    MAX_IMAGE_BYTES,
    ImageStorage,
    build_object_name,
    validate_image,
)
from storefront.services.token_service import TokenClaims

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["upload"])

NOT_CONFIGURED = "File upload service is not properly configured"


def _require_storage(storage: Optional[ImageStorage]) -> ImageStorage:
    if storage is None:
        logger.error("Image storage is not configured - check STORAGE_* environment variables")
        raise StorageError(NOT_CONFIGURED)
    return storage


@router.post("")
async def upload_image(
    file: Optional[UploadFile] = File(None),
    admin: TokenClaims = Depends(require_admin),
    storage: Optional[ImageStorage] = Depends(get_image_storage),
):
    """Validate an image and store it, returning its public URL"""
    if file is None:
        raise ValidationError("No file provided")

    # Read one byte past the limit so oversize files are caught without loading them whole
    data = await file.read(MAX_IMAGE_BYTES + 1)
    validate_image(file.content_type, len(data))

    bucket = _require_storage(storage)
    key = build_object_name(file.filename, file.content_type, bucket.folder)
    url = bucket.upload(data, key, file.content_type)
    logger.info(f"{admin.username} uploaded {key}")
    return {"success": True, "url": url}


@router.delete("")
def delete_image(
    url: str = Query(..., min_length=1),
    admin: TokenClaims = Depends(require_admin),
    storage: Optional[ImageStorage] = Depends(get_image_storage),
):
    """Remove a previously uploaded image by its public URL"""
    bucket = _require_storage(storage)
    bucket.delete(url)
    logger.info(f"{admin.username} deleted image {url}")
    return {"success": True}
