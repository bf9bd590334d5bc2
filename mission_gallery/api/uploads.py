"""Upload protocol endpoints: presign, finalize and delete."""

import logging
from typing import Optional

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from starlette import status

from mission_gallery.dependencies import get_upload_coordinator
from mission_gallery.errors import GalleryError
from mission_gallery.models.media import UploadClass
from mission_gallery.services.upload_coordinator import UploadCoordinator


logger = logging.getLogger(__name__)
router = APIRouter(tags=["uploads"])


class PresignRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    filename: str = Field(..., min_length=1)
    content_type: Optional[str] = Field(default=None, alias="contentType")
    upload_class: Optional[str] = Field(default=None, alias="type")


class FinalizeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    key: str = Field(..., min_length=1)
    owner: Optional[str] = None
    upload_class: Optional[str] = Field(default=None, alias="type")


@router.post("/generate-presigned-url")
async def generate_presigned_url(
    body: PresignRequest,
    coordinator: UploadCoordinator = Depends(get_upload_coordinator),
) -> JSONResponse:
    upload_class = UploadClass.parse(body.upload_class, default=UploadClass.GUEST)
    try:
        presigned = await coordinator.request_upload_url(body.filename, body.content_type, upload_class)
    except GalleryError:
        raise
    except Exception as e:
        logger.exception(f"Error issuing upload URL for {body.filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to issue upload URL",
        ) from e

    return JSONResponse(
        {
            "uploadUrl": presigned.upload_url,
            "key": presigned.key,
            "publicUrl": presigned.public_url,
            "contentType": presigned.content_type,
            "headers": presigned.headers,
            "expiresIn": presigned.expires_in,
        }
    )


async def _finalize(coordinator: UploadCoordinator, key: str, upload_class: UploadClass, owner: Optional[str]):
    try:
        return await coordinator.finalize_upload(key, upload_class, owner=owner)
    except GalleryError:
        raise
    except Exception as e:
        logger.exception(f"Error finalizing {key}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to finalize upload",
        ) from e


@router.post("/finalize-upload")
async def finalize_upload(
    body: FinalizeRequest,
    coordinator: UploadCoordinator = Depends(get_upload_coordinator),
) -> JSONResponse:
    upload_class = UploadClass.parse(body.upload_class, default=UploadClass.ADMIN)
    finalized = await _finalize(coordinator, body.key, upload_class, body.owner)
    return JSONResponse(
        {
            "success": True,
            "url": finalized.url,
            "key": finalized.key,
            "filename": finalized.filename,
            "owner": finalized.owner,
        }
    )


@router.post("/finalize-guest-upload")
async def finalize_guest_upload(
    body: FinalizeRequest,
    coordinator: UploadCoordinator = Depends(get_upload_coordinator),
) -> JSONResponse:
    finalized = await _finalize(coordinator, body.key, UploadClass.GUEST, body.owner)
    return JSONResponse(
        {
            "success": True,
            "image": {"url": finalized.url, "filename": finalized.filename, "owner": finalized.owner},
        }
    )


@router.delete("/images/{upload_class}/{filename}")
async def delete_image(
    upload_class: str,
    filename: str,
    coordinator: UploadCoordinator = Depends(get_upload_coordinator),
) -> JSONResponse:
    resolved = UploadClass.parse(upload_class)
    try:
        await coordinator.delete_image(resolved, filename)
    except GalleryError:
        raise
    except Exception as e:
        logger.exception(f"Error deleting {upload_class}/{filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete file",
        ) from e

    return JSONResponse({"message": "Deleted successfully", "filename": filename})
