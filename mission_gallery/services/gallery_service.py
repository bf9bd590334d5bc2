import logging
from typing import Any

from mission_gallery.cache.listing_cache import Listing
from mission_gallery.cache.listing_cache import ListingCache
from mission_gallery.metadata.index import MetadataIndex
from mission_gallery.models.media import UNKNOWN_OWNER
from mission_gallery.models.media import GuestImage
from mission_gallery.models.media import StoredObject
from mission_gallery.models.media import UploadClass
from mission_gallery.storage.object_store import ObjectStore


logger = logging.getLogger(__name__)


def newest_first(objects: list[StoredObject], prefix: str) -> list[StoredObject]:
    """Drop the directory placeholder and sort by last-modified, newest first."""
    placeholder = f"{prefix}/"
    files = [obj for obj in objects if obj.key != placeholder and not obj.key.endswith("/")]
    return sorted(files, key=lambda obj: obj.last_modified, reverse=True)


def paginate(items: list[Any], page: int, per_page: int) -> list[Any]:
    start = (max(page, 1) - 1) * per_page
    return items[start : start + per_page]


class GalleryService:
    def __init__(self, store: ObjectStore, index: MetadataIndex, cache: ListingCache):
        self.store = store
        self.index = index
        self.cache = cache

    async def list_admin_gallery(self) -> list[str]:
        cached = await self.cache.get(Listing.ADMIN)
        if cached is not None:
            return list(cached)

        prefix = UploadClass.ADMIN.prefix
        objects = newest_first(await self.store.list_objects(f"{prefix}/"), prefix)
        urls = [self.store.public_url(obj.key) for obj in objects]

        await self.cache.set(Listing.ADMIN, urls)
        logger.info(f"Recomputed admin gallery listing ({len(urls)} items)")
        return urls

    async def list_guest_gallery(self) -> list[GuestImage]:
        cached = await self.cache.get(Listing.GUEST)
        if cached is not None:
            return [GuestImage.model_validate(item) for item in cached]

        prefix = UploadClass.GUEST.prefix
        objects = newest_first(await self.store.list_objects(f"{prefix}/"), prefix)
        owners: dict[str, str] = {}
        for record in await self.index.guest_records():
            owners.setdefault(record.filename, record.owner)

        images = [
            GuestImage(
                url=self.store.public_url(obj.key),
                filename=obj.filename,
                owner=owners.get(obj.filename, UNKNOWN_OWNER),
            )
            for obj in objects
        ]

        await self.cache.set(Listing.GUEST, [image.model_dump() for image in images])
        logger.info(f"Recomputed guest gallery listing ({len(images)} items)")
        return images
