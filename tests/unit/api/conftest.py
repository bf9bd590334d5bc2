from typing import Any
from unittest.mock import Mock

import pytest
import pytest_asyncio
from fakeredis.aioredis import FakeRedis
from fastapi import FastAPI
from httpx import ASGITransport
from httpx import AsyncClient

from mission_gallery.api.router import router as api_router
from mission_gallery.cache.listing_cache import ListingCache
from mission_gallery.errors import GalleryError
from mission_gallery.errors import gallery_error_handler
from mission_gallery.metadata.index import MetadataIndex
from tests.unit.mocks.fake_object_store import FakeObjectStore


@pytest.fixture
def gallery_app() -> FastAPI:
    app = FastAPI()
    app.include_router(api_router, prefix="/api")
    app.add_exception_handler(GalleryError, gallery_error_handler)

    config = Mock()
    config.presigned_url_ttl_seconds = 3600
    config.gallery_page_size = 12

    redis = FakeRedis()
    app.state.config = config
    app.state.redis_client = redis
    app.state.object_store = FakeObjectStore()
    app.state.listing_cache = ListingCache(MetadataIndex(redis), ttl_seconds=3600)

    return app


@pytest_asyncio.fixture
async def client(gallery_app: FastAPI) -> Any:
    async with AsyncClient(transport=ASGITransport(app=gallery_app), base_url="http://test") as http:
        yield http
