from datetime import datetime
from datetime import timedelta
from datetime import timezone
from typing import Optional

from mission_gallery.models.media import StoredObject


BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeObjectStore:
    """In-memory stand-in for ObjectStore used in unit tests.

    Every put advances a logical clock by one second unless an explicit
    last_modified is given, so upload order maps to listing order.
    """

    def __init__(
        self,
        public_base_url: str = "https://cdn.test",
        fail_list: Optional[Exception] = None,
        fail_delete: Optional[Exception] = None,
        fail_head: Optional[Exception] = None,
    ) -> None:
        self.public_base_url = public_base_url
        self.objects: dict[str, datetime] = {}
        self.fail_list = fail_list
        self.fail_delete = fail_delete
        self.fail_head = fail_head
        self.list_calls: list[str] = []
        self.head_calls: list[str] = []
        self.delete_calls: list[str] = []
        self.presign_calls: list[tuple[str, str, int, Optional[str]]] = []
        self._tick = 0

    def put(self, key: str, last_modified: Optional[datetime] = None) -> None:
        self._tick += 1
        self.objects[key] = last_modified or BASE_TIME + timedelta(seconds=self._tick)

    async def list_objects(self, prefix: str) -> list[StoredObject]:
        self.list_calls.append(prefix)
        if self.fail_list is not None:
            raise self.fail_list
        return [StoredObject(key=key, last_modified=ts) for key, ts in self.objects.items() if key.startswith(prefix)]

    async def delete(self, key: str) -> None:
        self.delete_calls.append(key)
        if self.fail_delete is not None:
            raise self.fail_delete
        self.objects.pop(key, None)

    async def presign_put(self, key: str, content_type: str, ttl: int, acl: Optional[str] = None) -> str:
        self.presign_calls.append((key, content_type, ttl, acl))
        return f"https://store.test/{key}?X-Amz-Signature=fake&X-Amz-Expires={ttl}"

    async def head_exists(self, key: str) -> bool:
        self.head_calls.append(key)
        if self.fail_head is not None:
            raise self.fail_head
        return key in self.objects

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    async def close(self) -> None:
        pass
