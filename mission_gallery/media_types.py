"""Static extension and MIME tables for gallery media."""

from typing import Optional
from urllib.parse import parse_qs
from urllib.parse import urlparse


DEFAULT_CONTENT_TYPE = "application/octet-stream"

EXTENSION_CONTENT_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "heic": "image/heic",
    "heif": "image/heif",
    "mp4": "video/mp4",
    "webm": "video/webm",
    "mov": "video/quicktime",
    "m4v": "video/x-m4v",
    "mkv": "video/x-matroska",
}

ALLOWED_CONTENT_TYPES = frozenset(EXTENSION_CONTENT_TYPES.values()) | {"image/jpg"}

# used when the filename carries no extension
CONTENT_TYPE_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/heic": "heic",
    "image/heif": "heif",
    "video/mp4": "mp4",
    "video/webm": "webm",
    "video/quicktime": "mov",
    "video/x-m4v": "m4v",
    "video/x-matroska": "mkv",
}

HEIC_EXTENSIONS = ("heic", "heif")
HEIC_CONTENT_TYPES = ("image/heic", "image/heif")


def extension_of(filename: str) -> str:
    name = filename.rsplit("/", 1)[-1]
    if "." not in name.strip("."):
        return ""
    return name.rsplit(".", 1)[-1].lower()


def guess_content_type(filename: str, fallback: str = DEFAULT_CONTENT_TYPE) -> str:
    return EXTENSION_CONTENT_TYPES.get(extension_of(filename), fallback)


def normalize_content_type(content_type: Optional[str]) -> Optional[str]:
    """Strip parameters and case; returns None for an empty value."""
    if content_type is None:
        return None
    normalized = content_type.split(";", 1)[0].strip().lower()
    return normalized or None


def is_allowed_content_type(content_type: str) -> bool:
    return content_type in ALLOWED_CONTENT_TYPES


def is_heic(filename: str, content_type: Optional[str] = None) -> bool:
    return extension_of(filename) in HEIC_EXTENSIONS or normalize_content_type(content_type) in HEIC_CONTENT_TYPES


def youtube_video_id(url: str) -> Optional[str]:
    """Video id from a youtu.be share link, a watch?v= link or an /embed/ link."""
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return None
    host = (parsed.hostname or "").lower()
    if host == "youtu.be":
        video_id = parsed.path.lstrip("/").split("/", 1)[0]
    elif host == "youtube.com" or host.endswith(".youtube.com"):
        video_id = parse_qs(parsed.query).get("v", [""])[0]
        if not video_id and parsed.path.startswith("/embed/"):
            video_id = parsed.path.split("/")[2]
    else:
        return None
    return video_id or None
