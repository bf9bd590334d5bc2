from typing import Optional

import pytest

from mission_gallery.errors import InvalidUploadClass
from mission_gallery.media_types import extension_of
from mission_gallery.media_types import guess_content_type
from mission_gallery.media_types import is_allowed_content_type
from mission_gallery.media_types import is_heic
from mission_gallery.media_types import normalize_content_type
from mission_gallery.media_types import youtube_video_id
from mission_gallery.models.media import GuestImageRecord
from mission_gallery.models.media import UploadClass


@pytest.mark.parametrize(
    "filename,ext",
    [("IMG_0001.HEIC", "heic"), ("clip.tar.mp4", "mp4"), ("noext", ""), (".hidden", ""), ("a/b/c.PNG", "png")],
)
def test_extension_of(filename: str, ext: str) -> None:
    assert extension_of(filename) == ext


def test_guess_content_type() -> None:
    assert guess_content_type("a.jpeg") == "image/jpeg"
    assert guess_content_type("a.mov") == "video/quicktime"
    assert guess_content_type("a.txt") == "application/octet-stream"


def test_normalize_and_allow() -> None:
    assert normalize_content_type("Image/JPEG; charset=binary") == "image/jpeg"
    assert normalize_content_type("  ") is None
    assert normalize_content_type(None) is None
    assert is_allowed_content_type("image/jpg")
    assert is_allowed_content_type("video/webm")
    assert not is_allowed_content_type("application/pdf")
    assert not is_allowed_content_type("text/html")


def test_is_heic() -> None:
    assert is_heic("photo.HEIC")
    assert is_heic("photo.heif")
    assert is_heic("photo", "image/heic")
    assert not is_heic("photo.jpg", "image/jpeg")


@pytest.mark.parametrize(
    "url,video_id",
    [
        ("https://youtu.be/abc123", "abc123"),
        ("https://www.youtube.com/watch?v=abc123&t=30s", "abc123"),
        ("https://m.youtube.com/watch?v=abc123", "abc123"),
        ("https://www.youtube.com/embed/abc123", "abc123"),
        ("https://www.youtube.com/channel/xyz", None),
        ("https://notyoutube.com/watch?v=abc123", None),
        ("https://vimeo.com/12345", None),
        ("not a url", None),
    ],
)
def test_youtube_video_id(url: str, video_id: Optional[str]) -> None:
    assert youtube_video_id(url) == video_id


@pytest.mark.parametrize(
    "raw,expected",
    [("admin", UploadClass.ADMIN), ("GUEST", UploadClass.GUEST), ("site_asset", UploadClass.SITE_ASSET)],
)
def test_upload_class_parse(raw: str, expected: UploadClass) -> None:
    assert UploadClass.parse(raw) is expected


def test_upload_class_parse_default_and_unknown() -> None:
    assert UploadClass.parse(None, default=UploadClass.GUEST) is UploadClass.GUEST
    with pytest.raises(InvalidUploadClass):
        UploadClass.parse("root")
    with pytest.raises(InvalidUploadClass):
        UploadClass.parse("")


def test_upload_class_prefixes() -> None:
    assert [c.prefix for c in UploadClass] == ["admin-uploads", "guest-uploads", "site-assets"]


def test_guest_record_owner_default() -> None:
    assert GuestImageRecord(filename="a.jpg").owner == "anonymous"
    assert GuestImageRecord(filename="a.jpg", owner=None).owner == "anonymous"
