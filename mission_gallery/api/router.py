from __future__ import annotations

from fastapi import APIRouter

from mission_gallery.api.auth import router as auth_router
from mission_gallery.api.content import router as content_router
from mission_gallery.api.gallery import router as gallery_router
from mission_gallery.api.uploads import router as uploads_router
from mission_gallery.api.videos import router as videos_router


# Mounted under /api by the app factory
router = APIRouter()
router.include_router(uploads_router, prefix="")
router.include_router(gallery_router, prefix="")
router.include_router(auth_router, prefix="")
router.include_router(content_router, prefix="")
router.include_router(videos_router, prefix="")
