"""Redis-backed metadata index.

Holds the guest image records, guest passwords, admin credentials, the
site-content map, the volunteer story videos and (through ListingCache) the gallery listing cache.

Reads never fail a request: a Redis or decoding error is logged and the
empty default is returned. Writes propagate.
"""

import json
import logging
import uuid
from typing import Any
from typing import Optional
from typing import Union

import redis.asyncio as async_redis
from pydantic import ValidationError
from redis.exceptions import RedisError

from mission_gallery.models.media import GuestImageRecord
from mission_gallery.models.media import VolunteerVideo


logger = logging.getLogger(__name__)

GUEST_METADATA_KEY = "guest_metadata"
GUEST_PASSWORDS_KEY = "guest_passwords"
ADMIN_AUTH_KEY = "admin_auth"
SITE_CONTENT_KEY = "site_content"
VOLUNTEER_VIDEOS_KEY = "volunteer_videos"


def _decode(value: Union[bytes, str]) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else value


class MetadataIndex:
    def __init__(self, redis_client: async_redis.Redis):
        self.redis = redis_client

    # Generic key/value access

    async def get_json(self, key: str, default: Any = None) -> Any:
        try:
            raw = await self.redis.get(key)
        except RedisError as e:
            logger.warning(f"Metadata read failed for {key}: {e}")
            return default
        if raw is None:
            return default
        try:
            return json.loads(_decode(raw))
        except (ValueError, UnicodeDecodeError) as e:
            logger.warning(f"Discarding undecodable value at {key}: {e}")
            return default

    async def set_json(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        payload = json.dumps(value)
        if ttl:
            await self.redis.setex(key, ttl, payload)
        else:
            await self.redis.set(key, payload)

    async def delete(self, *keys: str) -> int:
        return int(await self.redis.delete(*keys))

    async def list_append(self, key: str, item: dict[str, Any]) -> None:
        await self.redis.rpush(key, json.dumps(item))

    async def list_range(self, key: str) -> list[bytes]:
        """Raw list items, undecoded, so they can be passed back to LREM unchanged."""
        try:
            raw_items = await self.redis.lrange(key, 0, -1)
        except RedisError as e:
            logger.warning(f"Metadata list read failed for {key}: {e}")
            return []
        return list(raw_items)

    async def list_remove(self, key: str, raw_item: Union[bytes, str]) -> int:
        return int(await self.redis.lrem(key, 0, raw_item))

    # Guest image records

    async def _guest_entries(self) -> list[tuple[bytes, GuestImageRecord]]:
        entries = []
        for raw in await self.list_range(GUEST_METADATA_KEY):
            record = parse_guest_record(raw)
            if record is not None:
                entries.append((raw, record))
        return entries

    async def guest_records(self) -> list[GuestImageRecord]:
        return [record for _, record in await self._guest_entries()]

    async def append_guest_record(self, record: GuestImageRecord) -> None:
        await self.list_append(GUEST_METADATA_KEY, record.model_dump())

    async def remove_guest_records(self, filename: str) -> int:
        """Remove every stored entry for filename, matching the raw stored value."""
        removed = 0
        for raw, record in await self._guest_entries():
            if record.filename == filename:
                removed += await self.list_remove(GUEST_METADATA_KEY, raw)
        return removed

    # Guest passwords

    async def guest_passwords(self) -> list[str]:
        try:
            members = await self.redis.smembers(GUEST_PASSWORDS_KEY)
        except RedisError as e:
            logger.warning(f"Guest password read failed: {e}")
            return []
        return sorted(_decode(member) for member in members)

    async def is_guest_password(self, password: str) -> bool:
        try:
            return bool(await self.redis.sismember(GUEST_PASSWORDS_KEY, password))
        except RedisError as e:
            logger.warning(f"Guest password lookup failed: {e}")
            return False

    async def add_guest_password(self, password: str) -> bool:
        return bool(await self.redis.sadd(GUEST_PASSWORDS_KEY, password))

    async def remove_guest_password(self, password: str) -> bool:
        return bool(await self.redis.srem(GUEST_PASSWORDS_KEY, password))

    # Admin credentials

    async def admin_users(self) -> list[dict[str, str]]:
        data = await self.get_json(ADMIN_AUTH_KEY, default={})
        users = data.get("users", []) if isinstance(data, dict) else []
        return [
            {"username": str(user.get("username", "")), "password": str(user.get("password", ""))}
            for user in users
            if isinstance(user, dict)
        ]

    # Site content

    async def site_content(self) -> dict[str, str]:
        try:
            raw = await self.redis.hgetall(SITE_CONTENT_KEY)
        except RedisError as e:
            logger.warning(f"Site content read failed: {e}")
            return {}
        return {_decode(key): _decode(value) for key, value in raw.items()}

    async def set_site_content(self, key: str, value: str) -> None:
        await self.redis.hset(SITE_CONTENT_KEY, key, value)

    # Volunteer story videos, newest first

    async def _video_entries(self) -> list[tuple[bytes, VolunteerVideo]]:
        entries = []
        for raw in await self.list_range(VOLUNTEER_VIDEOS_KEY):
            try:
                entries.append((raw, VolunteerVideo.model_validate_json(raw)))
            except ValidationError:
                logger.warning(f"Dropping malformed volunteer video entry: {raw[:80]!r}")
        return entries

    async def volunteer_videos(self) -> list[VolunteerVideo]:
        return [video for _, video in await self._video_entries()]

    async def add_volunteer_video(self, url: str, title: str) -> VolunteerVideo:
        video = VolunteerVideo(id=uuid.uuid4().hex, url=url, title=title)
        await self.redis.lpush(VOLUNTEER_VIDEOS_KEY, video.model_dump_json())
        return video

    async def remove_volunteer_video(self, video_id: str) -> bool:
        removed = 0
        for raw, video in await self._video_entries():
            if video.id == video_id:
                removed += await self.list_remove(VOLUNTEER_VIDEOS_KEY, raw)
        return removed > 0


def parse_guest_record(raw: Union[bytes, str]) -> Optional[GuestImageRecord]:
    """Coerce one stored entry into a GuestImageRecord, or None if unusable."""
    try:
        data = json.loads(_decode(raw))
    except UnicodeDecodeError:
        logger.warning(f"Dropping undecodable guest metadata entry: {raw[:80]!r}")
        return None
    except ValueError:
        logger.warning(f"Dropping non-JSON guest metadata entry: {raw[:80]!r}")
        return None
    if not isinstance(data, dict):
        logger.warning(f"Dropping malformed guest metadata entry: {raw[:80]!r}")
        return None
    try:
        return GuestImageRecord(filename=data.get("filename") or "", owner=data.get("owner"))
    except ValidationError:
        logger.warning(f"Dropping guest metadata entry without filename: {raw[:80]!r}")
        return None
