"""Editable site copy used by the marketing pages."""

import logging

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette import status

from mission_gallery.dependencies import get_metadata_index
from mission_gallery.metadata.index import MetadataIndex


logger = logging.getLogger(__name__)
router = APIRouter(tags=["content"])


class ContentUpdate(BaseModel):
    key: str
    value: str


@router.get("/content")
async def get_content(index: MetadataIndex = Depends(get_metadata_index)) -> JSONResponse:
    return JSONResponse(await index.site_content())


@router.post("/content")
async def update_content(body: ContentUpdate, index: MetadataIndex = Depends(get_metadata_index)) -> JSONResponse:
    key = body.key.strip()
    if not key:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Content key is required")

    await index.set_site_content(key, body.value)
    logger.info(f"Site content updated: {key}")
    return JSONResponse({"success": True, "content": await index.site_content()})
