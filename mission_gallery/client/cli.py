#!/usr/bin/env python3
"""Command-line batch uploader.

Usage:
    mission-gallery-upload upload --class guest --owner "Jane" IMG_0001.HEIC IMG_0002.jpg
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path
from typing import Optional
from typing import Sequence

from mission_gallery.client.files import LocalFile
from mission_gallery.client.heic import convert_heic_to_jpeg
from mission_gallery.client.uploader import BatchResult
from mission_gallery.client.uploader import FileTooLargeError
from mission_gallery.client.uploader import GalleryUploader
from mission_gallery.errors import InvalidUploadClass
from mission_gallery.logging_config import StandaloneLoggingConfig
from mission_gallery.logging_config import setup_loki_logging
from mission_gallery.models.media import UploadClass


EXIT_OK = 0
EXIT_UPLOAD_FAILURES = 1
EXIT_REJECTED = 2


def _print_progress(completed: int, total: int) -> None:
    print(f"Uploading {completed}/{total}...", file=sys.stderr)


async def _run_upload(args: argparse.Namespace, files: list[LocalFile], upload_class: UploadClass) -> BatchResult:
    async with GalleryUploader(
        args.api_url,
        concurrency=args.concurrency,
        transcoder=None if args.no_convert else convert_heic_to_jpeg,
        on_progress=_print_progress,
    ) as uploader:
        return await uploader.upload_batch(files, upload_class=upload_class, owner=args.owner)


def upload_command(args: argparse.Namespace) -> int:
    try:
        upload_class = UploadClass.parse(args.upload_class)
    except InvalidUploadClass as e:
        print(f"error: {e.message}", file=sys.stderr)
        return EXIT_REJECTED

    files: list[LocalFile] = []
    for raw_path in args.files:
        path = Path(raw_path)
        if not path.is_file():
            print(f"error: {raw_path} is not a file", file=sys.stderr)
            return EXIT_REJECTED
        files.append(LocalFile.from_path(path))

    try:
        result = asyncio.run(_run_upload(args, files, upload_class))
    except FileTooLargeError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_REJECTED

    for uploaded in result.succeeded:
        print(uploaded.url)
    print(result.summary(), file=sys.stderr)

    return EXIT_OK if result.status == "complete" else EXIT_UPLOAD_FAILURES


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="mission-gallery-upload", description="Upload media to the mission gallery")
    ap.add_argument("--log-level", default=os.environ.get("LOG_LEVEL", "WARNING"))
    sub = ap.add_subparsers(dest="command", required=True)

    up = sub.add_parser("upload", help="Upload one or more files")
    up.add_argument(
        "--api-url",
        default=os.environ.get("GALLERY_API_URL", "http://localhost:8000"),
        help="Base URL of the gallery API",
    )
    up.add_argument("--class", dest="upload_class", default="guest", help="admin, guest or site-asset")
    up.add_argument("--owner", default=None, help="Display name recorded for guest uploads")
    up.add_argument("--concurrency", type=int, default=2)
    up.add_argument("--no-convert", action="store_true", help="Upload HEIC files without converting to JPEG")
    up.add_argument("files", nargs="+")
    up.set_defaults(func=upload_command)

    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_loki_logging(StandaloneLoggingConfig(log_level=args.log_level), "uploader", include_ray_id=False)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
