"""Direct-to-storage upload protocol.

1. request_upload_url: allocate a fresh key and sign a PUT for it.
2. The client PUTs the bytes straight to the object store.
3. finalize_upload: confirm the object exists, record guest ownership and
   invalidate the affected gallery listing.
"""

import logging
import uuid
from typing import Optional

from mission_gallery.cache.listing_cache import Listing
from mission_gallery.cache.listing_cache import ListingCache
from mission_gallery.errors import InvalidMediaType
from mission_gallery.errors import InvalidUploadKey
from mission_gallery.errors import ObjectNotFound
from mission_gallery.errors import UploadNotVerified
from mission_gallery.media_types import CONTENT_TYPE_EXTENSIONS
from mission_gallery.media_types import extension_of
from mission_gallery.media_types import guess_content_type
from mission_gallery.media_types import is_allowed_content_type
from mission_gallery.media_types import normalize_content_type
from mission_gallery.metadata.index import MetadataIndex
from mission_gallery.models.media import FinalizedUpload
from mission_gallery.models.media import GuestImageRecord
from mission_gallery.models.media import PresignedUpload
from mission_gallery.models.media import UploadClass
from mission_gallery.models.media import filename_from_key
from mission_gallery.storage.object_store import ObjectStore


logger = logging.getLogger(__name__)

PUBLIC_READ_ACL = "public-read"

# the browser sends x-amz-acl on these, so the signature must include it
PUBLIC_READ_CLASSES = (UploadClass.ADMIN, UploadClass.SITE_ASSET)

LISTING_FOR_CLASS = {
    UploadClass.ADMIN: Listing.ADMIN,
    UploadClass.GUEST: Listing.GUEST,
}


class UploadCoordinator:
    def __init__(
        self,
        store: ObjectStore,
        index: MetadataIndex,
        cache: ListingCache,
        presign_ttl_seconds: int = 3600,
    ):
        self.store = store
        self.index = index
        self.cache = cache
        self.presign_ttl = presign_ttl_seconds

    async def request_upload_url(
        self,
        filename: str,
        content_type: Optional[str],
        upload_class: UploadClass,
    ) -> PresignedUpload:
        normalized = normalize_content_type(content_type)
        if normalized is not None and not is_allowed_content_type(normalized):
            logger.info(f"Rejected presign for {filename!r}: content type {normalized!r}")
            raise InvalidMediaType(f"Content type {normalized} is not an image or video")

        resolved_type = normalized or guess_content_type(filename)
        ext = extension_of(filename) or CONTENT_TYPE_EXTENSIONS.get(resolved_type, "bin")
        key = f"{upload_class.prefix}/{uuid.uuid4()}.{ext}"

        acl = PUBLIC_READ_ACL if upload_class in PUBLIC_READ_CLASSES else None
        upload_url = await self.store.presign_put(key, resolved_type, self.presign_ttl, acl=acl)

        headers = {"Content-Type": resolved_type}
        if acl:
            headers["x-amz-acl"] = acl

        logger.info(f"Issued upload URL for {key} ({resolved_type}, class={upload_class.value})")
        return PresignedUpload(
            upload_url=upload_url,
            key=key,
            public_url=self.store.public_url(key),
            content_type=resolved_type,
            headers=headers,
            expires_in=self.presign_ttl,
        )

    async def finalize_upload(
        self,
        key: str,
        upload_class: UploadClass,
        owner: Optional[str] = None,
    ) -> FinalizedUpload:
        filename = filename_from_key(key)
        if not key.startswith(f"{upload_class.prefix}/") or not filename or key.count("/") != 1:
            raise InvalidUploadKey(f"Key {key} is not a {upload_class.value} upload")

        if not await self.store.head_exists(key):
            logger.warning(f"Finalize for {key} rejected: object not present")
            raise UploadNotVerified(f"Upload did not complete for {key}")

        resolved_owner = None
        if upload_class is UploadClass.GUEST:
            record = GuestImageRecord(filename=filename, owner=owner)
            resolved_owner = record.owner
            existing = await self.index.guest_records()
            if any(r.filename == filename for r in existing):
                logger.info(f"Guest record for {filename} already present; finalize is a no-op")
            else:
                await self.index.append_guest_record(record)
                logger.info(f"Recorded guest upload {filename} by {record.owner}")

        listing = LISTING_FOR_CLASS.get(upload_class)
        if listing is not None:
            await self.cache.invalidate(listing)

        return FinalizedUpload(
            url=self.store.public_url(key),
            key=key,
            filename=filename,
            owner=resolved_owner,
        )

    async def delete_image(self, upload_class: UploadClass, filename: str) -> None:
        if not filename or "/" in filename or filename in (".", ".."):
            raise ObjectNotFound(f"Invalid filename {filename!r}")

        key = f"{upload_class.prefix}/{filename}"
        if not await self.store.head_exists(key):
            raise ObjectNotFound(f"{key} does not exist")

        # a failed delete leaves metadata untouched
        await self.store.delete(key)

        if upload_class is UploadClass.GUEST:
            removed = await self.index.remove_guest_records(filename)
            logger.info(f"Removed {removed} guest record(s) for {filename}")

        await self.cache.invalidate(Listing.ADMIN, Listing.GUEST)

