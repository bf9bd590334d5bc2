import pytest
from fakeredis.aioredis import FakeRedis

from mission_gallery.cache.listing_cache import Listing
from mission_gallery.cache.listing_cache import ListingCache
from mission_gallery.metadata.index import MetadataIndex


class ManualClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def cache(clock: ManualClock) -> ListingCache:
    return ListingCache(MetadataIndex(FakeRedis()), ttl_seconds=3600, clock=clock)


@pytest.mark.asyncio
async def test_miss_then_hit(cache: ListingCache) -> None:
    assert await cache.get(Listing.ADMIN) is None

    await cache.set(Listing.ADMIN, ["u1", "u2"])

    assert await cache.get(Listing.ADMIN) == ["u1", "u2"]


@pytest.mark.asyncio
async def test_empty_listing_is_a_hit(cache: ListingCache) -> None:
    await cache.set(Listing.GUEST, [])

    assert await cache.get(Listing.GUEST) == []


@pytest.mark.asyncio
async def test_entry_goes_stale_at_ttl(cache: ListingCache, clock: ManualClock) -> None:
    await cache.set(Listing.ADMIN, ["u1"])

    clock.now += 3599
    assert await cache.get(Listing.ADMIN) == ["u1"]

    clock.now += 1
    assert await cache.get(Listing.ADMIN) is None


@pytest.mark.asyncio
async def test_entry_from_the_future_is_stale(cache: ListingCache, clock: ManualClock) -> None:
    await cache.set(Listing.ADMIN, ["u1"])

    clock.now -= 10

    assert await cache.get(Listing.ADMIN) is None


@pytest.mark.asyncio
async def test_invalidate_is_per_listing(cache: ListingCache) -> None:
    await cache.set(Listing.ADMIN, ["a"])
    await cache.set(Listing.GUEST, ["g"])

    await cache.invalidate(Listing.GUEST)

    assert await cache.get(Listing.ADMIN) == ["a"]
    assert await cache.get(Listing.GUEST) is None


@pytest.mark.asyncio
async def test_keys_are_namespaced(cache: ListingCache) -> None:
    await cache.set(Listing.ADMIN, ["a"])

    assert await cache.index.redis.exists("gallery_cache:admin") == 1
