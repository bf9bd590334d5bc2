import logging
import time
from enum import Enum
from typing import Any
from typing import Callable
from typing import Optional

from redis.exceptions import RedisError

from mission_gallery.metadata.index import MetadataIndex


logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class Listing(str, Enum):
    ADMIN = "admin"
    GUEST = "guest"


class ListingCache:
    """Read-through cache for gallery listings with explicit invalidation.

    Entries are stored as ``{"stored_at": ts, "value": ...}`` and judged
    stale against the injected clock, so expiry does not depend on the
    Redis server's own TTL. The Redis TTL is still set so abandoned entries
    are evicted.
    """

    PREFIX = "gallery_cache:"

    def __init__(self, index: MetadataIndex, ttl_seconds: int = 3600, clock: Clock = time.time):
        self.index = index
        self.ttl = ttl_seconds
        self.clock = clock

    def _key(self, listing: Listing) -> str:
        return f"{self.PREFIX}{listing.value}"

    async def get(self, listing: Listing) -> Optional[Any]:
        entry = await self.index.get_json(self._key(listing))
        if not isinstance(entry, dict) or "value" not in entry:
            logger.debug(f"Listing cache MISS for {listing.value}")
            return None

        age = self.clock() - float(entry.get("stored_at", 0))
        if age >= self.ttl or age < 0:
            logger.debug(f"Listing cache STALE for {listing.value} (age={age:.0f}s)")
            return None

        logger.debug(f"Listing cache HIT for {listing.value}")
        return entry["value"]

    async def set(self, listing: Listing, value: Any) -> None:
        entry = {"stored_at": self.clock(), "value": value}
        try:
            await self.index.set_json(self._key(listing), entry, ttl=self.ttl)
        except RedisError as e:
            logger.warning(f"Failed to cache {listing.value} listing: {e}")
            return
        logger.debug(f"Listing cached for {listing.value} (TTL={self.ttl}s)")

    async def invalidate(self, *listings: Listing) -> None:
        if not listings:
            return
        deleted = await self.index.delete(*(self._key(listing) for listing in listings))
        if deleted:
            logger.info(f"Invalidated listing cache for {', '.join(listing.value for listing in listings)}")
