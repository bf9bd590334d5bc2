"""Batch uploader driving the presign → PUT → finalize protocol.

Files go straight to object storage through presigned URLs; the API only
sees the small JSON calls on either side of the PUT.
"""

import asyncio
import logging
from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Callable
from typing import Optional
from typing import Sequence

import httpx

from mission_gallery.client.files import LocalFile
from mission_gallery.client.heic import convert_heic_to_jpeg
from mission_gallery.client.pool import TaskOutcome
from mission_gallery.client.pool import bounded_map
from mission_gallery.models.media import UploadClass


logger = logging.getLogger(__name__)

MIB = 1024 * 1024

MAX_FILE_SIZE_BYTES = {
    UploadClass.ADMIN: 20 * MIB,
    UploadClass.SITE_ASSET: 20 * MIB,
    UploadClass.GUEST: 15 * MIB,
}

DEFAULT_CONCURRENCY = 2

ProgressCallback = Callable[[int, int], None]
Transcoder = Callable[[LocalFile], LocalFile]


class FileTooLargeError(Exception):
    """Raised before any network call when a file exceeds its class ceiling."""

    def __init__(self, filename: str, limit_bytes: int):
        self.filename = filename
        self.limit_bytes = limit_bytes
        super().__init__(f'File "{filename}" is too large (>{limit_bytes // MIB}MB).')


class UploadStepError(Exception):
    def __init__(self, step: str, filename: str, detail: str):
        self.step = step
        self.filename = filename
        super().__init__(f"{step} failed for {filename}: {detail}")


@dataclass
class UploadedFile:
    source_name: str
    key: str
    url: str
    filename: str
    owner: Optional[str] = None


@dataclass
class BatchResult:
    total: int
    succeeded: list[UploadedFile] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def status(self) -> str:
        if not self.failed:
            return "complete"
        if self.succeeded:
            return "partial"
        return "failed"

    @property
    def urls(self) -> list[str]:
        return [uploaded.url for uploaded in self.succeeded]

    def summary(self) -> str:
        if self.status == "complete":
            return f"Successfully uploaded all {len(self.succeeded)} files."
        if self.status == "partial":
            return (
                f"Uploaded {len(self.succeeded)} files, but {len(self.failed)} failed. "
                f"Try uploading those again: {', '.join(self.failed)}"
            )
        return "All uploads failed. Please check your connection and try again."


def check_file_sizes(files: Sequence[LocalFile], upload_class: UploadClass) -> None:
    limit = MAX_FILE_SIZE_BYTES[upload_class]
    for file in files:
        if file.size > limit:
            raise FileTooLargeError(file.name, limit)


class GalleryUploader:
    def __init__(
        self,
        api_base_url: str,
        *,
        client: Optional[httpx.AsyncClient] = None,
        concurrency: int = DEFAULT_CONCURRENCY,
        transcoder: Optional[Transcoder] = convert_heic_to_jpeg,
        on_progress: Optional[ProgressCallback] = None,
    ):
        self.api_base_url = api_base_url.rstrip("/")
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=httpx.Timeout(60.0, connect=10.0, write=300.0))
        self.concurrency = concurrency
        self.transcoder = transcoder
        self.on_progress = on_progress

    async def __aenter__(self) -> "GalleryUploader":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    def _api(self, path: str) -> str:
        return f"{self.api_base_url}/api/{path}"

    async def _prepare(self, file: LocalFile) -> LocalFile:
        if self.transcoder is None:
            return file
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.transcoder, file)

    async def _call(self, step: str, filename: str, request: Any) -> httpx.Response:
        try:
            response = await request
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UploadStepError(step, filename, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise UploadStepError(step, filename, str(e) or type(e).__name__) from e
        return response

    async def upload_file(
        self,
        file: LocalFile,
        upload_class: UploadClass = UploadClass.GUEST,
        owner: Optional[str] = None,
    ) -> UploadedFile:
        prepared = await self._prepare(file)

        presign_body: dict[str, Any] = {"filename": prepared.name, "type": upload_class.value}
        if prepared.content_type:
            presign_body["contentType"] = prepared.content_type
        response = await self._call(
            "presign", file.name, self.client.post(self._api("generate-presigned-url"), json=presign_body)
        )
        presigned = response.json()

        await self._call(
            "upload",
            file.name,
            self.client.put(presigned["uploadUrl"], content=prepared.data, headers=presigned.get("headers") or {}),
        )

        if upload_class is UploadClass.GUEST:
            response = await self._call(
                "finalize",
                file.name,
                self.client.post(self._api("finalize-guest-upload"), json={"key": presigned["key"], "owner": owner}),
            )
            image = response.json()["image"]
            return UploadedFile(
                source_name=file.name,
                key=presigned["key"],
                url=image["url"],
                filename=image["filename"],
                owner=image["owner"],
            )

        response = await self._call(
            "finalize",
            file.name,
            self.client.post(self._api("finalize-upload"), json={"key": presigned["key"], "type": upload_class.value}),
        )
        body = response.json()
        return UploadedFile(source_name=file.name, key=body["key"], url=body["url"], filename=body["filename"])

    async def upload_batch(
        self,
        files: Sequence[LocalFile],
        upload_class: UploadClass = UploadClass.GUEST,
        owner: Optional[str] = None,
    ) -> BatchResult:
        """Upload files with a bounded worker pool; one failure never stops the rest.

        Raises:
            FileTooLargeError: if any file exceeds the class ceiling; nothing is sent.
        """
        check_file_sizes(files, upload_class)

        result = BatchResult(total=len(files))
        completed = 0

        def _on_complete(outcome: TaskOutcome[LocalFile, UploadedFile]) -> None:
            nonlocal completed
            completed += 1
            if outcome.ok:
                logger.info(f"Uploaded {outcome.item.name} ({completed}/{result.total})")
            else:
                logger.error(f"Failed to upload {outcome.item.name} ({completed}/{result.total}): {outcome.error}")
            if self.on_progress is not None:
                self.on_progress(completed, result.total)

        outcomes = await bounded_map(
            lambda file: self.upload_file(file, upload_class, owner),
            files,
            pool_size=self.concurrency,
            on_complete=_on_complete,
        )

        for outcome in outcomes:
            if outcome.ok and outcome.result is not None:
                result.succeeded.append(outcome.result)
            else:
                result.failed.append(outcome.item.name)

        logger.info(f"Batch finished: {len(result.succeeded)} succeeded, {len(result.failed)} failed")
        return result
