"""Async wrapper around a boto3 S3 client scoped to one bucket.

boto3 is blocking, so every call runs on a dedicated thread pool and the
event loop only awaits the future.
"""

import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any
from typing import Callable
from typing import Optional
from typing import TypeVar
from urllib.parse import quote

import boto3
from botocore.client import Config as BotoConfig
from botocore.exceptions import BotoCoreError
from botocore.exceptions import ClientError

from mission_gallery.config import Config
from mission_gallery.errors import StoreUnavailable
from mission_gallery.models.media import StoredObject
from mission_gallery.storage.retry import with_store_retry


logger = logging.getLogger(__name__)

T = TypeVar("T")

NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


class ObjectStore:
    def __init__(
        self,
        client: Any,
        bucket: str,
        *,
        public_base_url: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        region: str = "auto",
        executor: Optional[ThreadPoolExecutor] = None,
        max_retries: int = 3,
        retry_base_ms: int = 200,
        retry_max_ms: int = 2000,
    ) -> None:
        self.client = client
        self.bucket = bucket
        self.public_base_url = public_base_url
        self.endpoint_url = endpoint_url
        self.region = region
        self.max_retries = max_retries
        self.retry_base_ms = retry_base_ms
        self.retry_max_ms = retry_max_ms
        self.executor = executor or ThreadPoolExecutor(max_workers=8, thread_name_prefix="object-store")

    @classmethod
    def from_config(cls, config: Config) -> "ObjectStore":
        session = boto3.Session(
            aws_access_key_id=config.aws_access_key_id,
            aws_secret_access_key=config.aws_secret_access_key,
            region_name=config.s3_region,
        )
        client_kwargs: dict[str, Any] = {
            "config": BotoConfig(signature_version="s3v4", retries={"max_attempts": 1, "mode": "standard"}),
        }
        if config.s3_endpoint_url:
            client_kwargs["endpoint_url"] = config.s3_endpoint_url

        return cls(
            session.client("s3", **client_kwargs),
            config.s3_bucket,
            public_base_url=config.public_base_url,
            endpoint_url=config.s3_endpoint_url,
            region=config.s3_region,
            executor=ThreadPoolExecutor(max_workers=config.store_executor_workers, thread_name_prefix="object-store"),
            max_retries=config.store_max_retries,
            retry_base_ms=config.store_retry_base_ms,
            retry_max_ms=config.store_retry_max_ms,
        )

    async def _run(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, functools.partial(func, *args, **kwargs))

    def _list_sync(self, prefix: str) -> list[StoredObject]:
        paginator = self.client.get_paginator("list_objects_v2")
        objects = []
        for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
            for item in page.get("Contents", []):
                objects.append(StoredObject(key=item["Key"], last_modified=item["LastModified"]))
        return objects

    async def list_objects(self, prefix: str) -> list[StoredObject]:
        """List every object under prefix, retrying transient failures."""
        try:
            return await with_store_retry(
                lambda: self._run(self._list_sync, prefix),
                operation_name=f"list {prefix}",
                max_retries=self.max_retries,
                base_ms=self.retry_base_ms,
                max_ms=self.retry_max_ms,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to list objects under {prefix}: {e}")
            raise StoreUnavailable(f"Could not list {prefix}") from e

    async def delete(self, key: str) -> None:
        try:
            await self._run(self.client.delete_object, Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete {key}: {e}")
            raise StoreUnavailable(f"Could not delete {key}") from e
        logger.info(f"Deleted object {key}")

    async def presign_put(self, key: str, content_type: str, ttl: int, acl: Optional[str] = None) -> str:
        params = {"Bucket": self.bucket, "Key": key, "ContentType": content_type}
        if acl:
            params["ACL"] = acl
        try:
            return await self._run(
                self.client.generate_presigned_url,
                "put_object",
                Params=params,
                ExpiresIn=ttl,
                HttpMethod="PUT",
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to presign {key}: {e}")
            raise StoreUnavailable(f"Could not sign upload for {key}") from e

    async def head_exists(self, key: str) -> bool:
        """HEAD a single key; never retried."""
        try:
            await self._run(self.client.head_object, Bucket=self.bucket, Key=key)
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in NOT_FOUND_CODES:
                return False
            logger.error(f"HEAD {key} failed: {e}")
            raise StoreUnavailable(f"Could not verify {key}") from e
        except BotoCoreError as e:
            logger.error(f"HEAD {key} failed: {e}")
            raise StoreUnavailable(f"Could not verify {key}") from e
        return True

    def public_url(self, key: str) -> str:
        quoted = quote(key)
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{quoted}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{quoted}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{quoted}"

    async def close(self) -> None:
        self.executor.shutdown(wait=False)
