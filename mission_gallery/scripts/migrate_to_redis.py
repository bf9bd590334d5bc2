#!/usr/bin/env python3
"""One-off import of the legacy JSON files into Redis.

Reads from --source-dir:
    auth.json            {"users": [{"username", "password"}]}  -> admin_auth
    guests.json          {"users": [{"username", "password"}]}  -> guest_passwords set
    guest_metadata.json  {"images": [{"filename", "owner"}]}    -> guest_metadata list

Missing files are skipped. Guest records already present in Redis are not
duplicated, so the script can be re-run safely.
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any
from typing import Optional

import redis.asyncio as async_redis
from dotenv import load_dotenv

from mission_gallery.logging_config import StandaloneLoggingConfig
from mission_gallery.logging_config import setup_loki_logging
from mission_gallery.metadata.index import ADMIN_AUTH_KEY
from mission_gallery.metadata.index import MetadataIndex
from mission_gallery.metadata.index import parse_guest_record


logger = logging.getLogger("migrate_to_redis")


def _load(path: Path) -> Optional[dict[str, Any]]:
    if not path.exists():
        logger.info(f"{path.name} not found, skipping")
        return None
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path.name}: expected a JSON object at top level")
    return data


async def migrate_admin_auth(index: MetadataIndex, source_dir: Path, dry_run: bool) -> int:
    data = _load(source_dir / "auth.json")
    if data is None:
        return 0
    users = [user for user in data.get("users", []) if isinstance(user, dict)]
    logger.info(f"auth.json: {len(users)} admin users")
    if not dry_run:
        await index.set_json(ADMIN_AUTH_KEY, {"users": users})
    return len(users)


async def migrate_guest_passwords(index: MetadataIndex, source_dir: Path, dry_run: bool) -> int:
    data = _load(source_dir / "guests.json")
    if data is None:
        return 0
    added = 0
    for user in data.get("users", []):
        password = str(user.get("password", "")).strip() if isinstance(user, dict) else ""
        if not password:
            continue
        if dry_run or await index.add_guest_password(password):
            added += 1
    logger.info(f"guests.json: {added} guest passwords added")
    return added


async def migrate_guest_metadata(index: MetadataIndex, source_dir: Path, dry_run: bool) -> int:
    data = _load(source_dir / "guest_metadata.json")
    if data is None:
        return 0
    known = {record.filename for record in await index.guest_records()}
    added = 0
    for entry in data.get("images", []):
        record = parse_guest_record(json.dumps(entry))
        if record is None or record.filename in known:
            continue
        known.add(record.filename)
        if not dry_run:
            await index.append_guest_record(record)
        added += 1
    logger.info(f"guest_metadata.json: {added} records added")
    return added


async def run(redis_url: str, source_dir: Path, dry_run: bool) -> dict[str, int]:
    redis_client = async_redis.from_url(redis_url)
    try:
        index = MetadataIndex(redis_client)
        return {
            "admin_users": await migrate_admin_auth(index, source_dir, dry_run),
            "guest_passwords": await migrate_guest_passwords(index, source_dir, dry_run),
            "guest_records": await migrate_guest_metadata(index, source_dir, dry_run),
        }
    finally:
        await redis_client.close()


def main() -> None:
    load_dotenv()

    ap = argparse.ArgumentParser(description="Migrate legacy gallery JSON files into Redis")
    ap.add_argument("--source-dir", default="server", help="Directory holding auth.json, guests.json, ...")
    ap.add_argument("--redis-url", default=os.environ.get("REDIS_URL", ""))
    ap.add_argument("--dry-run", action="store_true", help="Report what would be written without writing")
    args = ap.parse_args()

    setup_loki_logging(StandaloneLoggingConfig(log_level="INFO"), "migrator", include_ray_id=False)

    if not args.redis_url:
        logger.error("REDIS_URL must be set (environment or --redis-url)")
        sys.exit(2)

    source_dir = Path(args.source_dir)
    if not source_dir.is_dir():
        logger.error(f"Source directory {source_dir} does not exist")
        sys.exit(2)

    try:
        counts = asyncio.run(run(args.redis_url, source_dir, args.dry_run))
    except Exception:
        logger.exception("Migration failed")
        sys.exit(1)

    prefix = "[dry-run] " if args.dry_run else ""
    logger.info(f"{prefix}Migration completed: {counts}")


if __name__ == "__main__":
    main()
