"""Volunteer story videos (YouTube links) shown on the volunteer page."""

import logging

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette import status

from mission_gallery.dependencies import get_metadata_index
from mission_gallery.media_types import youtube_video_id
from mission_gallery.metadata.index import MetadataIndex


logger = logging.getLogger(__name__)
router = APIRouter(tags=["videos"])


class VideoCreate(BaseModel):
    url: str = ""
    title: str = ""


@router.get("/videos")
async def list_videos(index: MetadataIndex = Depends(get_metadata_index)) -> JSONResponse:
    return JSONResponse([video.model_dump() for video in await index.volunteer_videos()])


@router.post("/videos")
async def add_video(body: VideoCreate, index: MetadataIndex = Depends(get_metadata_index)) -> JSONResponse:
    url = body.url.strip()
    title = body.title.strip()
    if not url or not title:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Both a title and a URL are required")
    if youtube_video_id(url) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Not a YouTube video URL")

    video = await index.add_volunteer_video(url, title)
    logger.info(f"Volunteer video added: {video.id}")
    return JSONResponse({"success": True, "video": video.model_dump()})


@router.delete("/videos/{video_id}")
async def delete_video(video_id: str, index: MetadataIndex = Depends(get_metadata_index)) -> JSONResponse:
    if not await index.remove_volunteer_video(video_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Video not found")

    logger.info(f"Volunteer video removed: {video_id}")
    return JSONResponse({"success": True})
