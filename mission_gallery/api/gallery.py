"""Gallery listing endpoints."""

import logging
from typing import Any
from typing import Optional

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Query
from fastapi.responses import JSONResponse
from starlette import status

from mission_gallery.config import Config
from mission_gallery.dependencies import get_config
from mission_gallery.dependencies import get_gallery_service
from mission_gallery.errors import GalleryError
from mission_gallery.services.gallery_service import GalleryService
from mission_gallery.services.gallery_service import paginate


logger = logging.getLogger(__name__)
router = APIRouter(tags=["gallery"])


def _page_response(items: list[Any], page: Optional[int], per_page: Optional[int], default_size: int) -> JSONResponse:
    if page is None and per_page is None:
        return JSONResponse(items)

    total = len(items)
    page = page or 1
    size = per_page or default_size
    sliced = paginate(items, page, size)
    return JSONResponse({"images": sliced, "count": len(sliced), "total": total, "page": page, "per_page": size})


@router.get("/images")
async def list_admin_images(
    page: Optional[int] = Query(None, ge=1, description="1-based page number; omit for the full listing"),
    per_page: Optional[int] = Query(None, ge=1, le=200),
    gallery: GalleryService = Depends(get_gallery_service),
    config: Config = Depends(get_config),
) -> JSONResponse:
    """Admin gallery, newest first."""
    try:
        urls = await gallery.list_admin_gallery()
    except GalleryError:
        raise
    except Exception as e:
        logger.exception(f"Error listing admin gallery: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list images",
        ) from e

    return _page_response(urls, page, per_page, config.gallery_page_size)


@router.get("/guest-images")
async def list_guest_images(
    page: Optional[int] = Query(None, ge=1, description="1-based page number; omit for the full listing"),
    per_page: Optional[int] = Query(None, ge=1, le=200),
    gallery: GalleryService = Depends(get_gallery_service),
    config: Config = Depends(get_config),
) -> JSONResponse:
    """Guest gallery with owners, newest first."""
    try:
        images = await gallery.list_guest_gallery()
    except GalleryError:
        raise
    except Exception as e:
        logger.exception(f"Error listing guest gallery: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list guest images",
        ) from e

    return _page_response([image.model_dump() for image in images], page, per_page, config.gallery_page_size)
