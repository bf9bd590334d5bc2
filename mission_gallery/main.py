"""Main application module for the Mission Gallery API."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import redis.asyncio as async_redis
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from mission_gallery.api.middlewares.cors import make_cors_middleware
from mission_gallery.api.middlewares.ray_id import ray_id_middleware
from mission_gallery.api.router import router as api_router
from mission_gallery.cache.listing_cache import ListingCache
from mission_gallery.config import get_config
from mission_gallery.errors import GalleryError
from mission_gallery.errors import gallery_error_handler
from mission_gallery.logging_config import setup_loki_logging
from mission_gallery.metadata.index import MetadataIndex
from mission_gallery.storage.object_store import ObjectStore


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """FastAPI application lifespan handler."""
    try:
        app.state.config = get_config()
        config = app.state.config

        app.state.redis_client = async_redis.from_url(config.redis_url)
        logger.info("Redis client initialized")

        app.state.object_store = ObjectStore.from_config(config)
        logger.info(f"Object store client initialized for bucket {config.s3_bucket}")

        app.state.listing_cache = ListingCache(
            MetadataIndex(app.state.redis_client),
            ttl_seconds=config.gallery_cache_ttl_seconds,
        )
        logger.info(f"Listing cache initialized (TTL={config.gallery_cache_ttl_seconds}s)")

        yield

    finally:
        try:
            if hasattr(app.state, "object_store"):
                await app.state.object_store.close()
                logger.info("Object store client closed")
        except Exception:
            logger.exception("Error shutting down object store client")

        try:
            if hasattr(app.state, "redis_client"):
                await app.state.redis_client.close()
                logger.info("Redis client closed")
        except Exception:
            logger.exception("Error shutting down Redis client")


def factory() -> FastAPI:
    """Factory function to create and configure the FastAPI application."""
    load_dotenv()
    config = get_config()
    setup_loki_logging(config, "api")

    app = FastAPI(
        title="Mission Gallery",
        description="Media gallery and site content API",
        docs_url="/docs" if config.enable_api_docs else None,
        redoc_url="/redoc" if config.enable_api_docs else None,
        lifespan=lifespan,
        debug=config.debug,
    )

    # middleware("http") executes in REVERSE order; ray_id must run first
    app.middleware("http")(make_cors_middleware(config.cors_origins))
    app.middleware("http")(ray_id_middleware)

    app.add_exception_handler(GalleryError, gallery_error_handler)

    @app.get("/health", include_in_schema=False, response_class=JSONResponse)
    async def health():
        """Health check endpoint for monitoring."""
        return JSONResponse(content={"status": "healthy"})

    app.include_router(api_router, prefix="/api")

    return app


app = factory()
