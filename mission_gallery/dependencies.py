import redis.asyncio as async_redis
from fastapi import Request

from mission_gallery.cache.listing_cache import ListingCache
from mission_gallery.config import Config
from mission_gallery.metadata.index import MetadataIndex
from mission_gallery.services.auth_service import AuthService
from mission_gallery.services.gallery_service import GalleryService
from mission_gallery.services.upload_coordinator import UploadCoordinator
from mission_gallery.storage.object_store import ObjectStore


def get_config(request: Request) -> Config:
    """Extract the application Config from the request."""
    config: Config = request.app.state.config
    return config


def get_redis(request: Request) -> async_redis.Redis:
    """Extract the Redis client from the request."""
    redis_client: async_redis.Redis = request.app.state.redis_client
    return redis_client


def get_object_store(request: Request) -> ObjectStore:
    store: ObjectStore = request.app.state.object_store
    return store


def get_metadata_index(request: Request) -> MetadataIndex:
    return MetadataIndex(get_redis(request))


def get_listing_cache(request: Request) -> ListingCache:
    cache: ListingCache = request.app.state.listing_cache
    return cache


def get_upload_coordinator(request: Request) -> UploadCoordinator:
    config = get_config(request)
    return UploadCoordinator(
        get_object_store(request),
        get_metadata_index(request),
        get_listing_cache(request),
        presign_ttl_seconds=config.presigned_url_ttl_seconds,
    )


def get_gallery_service(request: Request) -> GalleryService:
    return GalleryService(get_object_store(request), get_metadata_index(request), get_listing_cache(request))


def get_auth_service(request: Request) -> AuthService:
    return AuthService(get_metadata_index(request))
