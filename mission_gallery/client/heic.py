"""HEIC/HEIF to JPEG conversion before upload.

Browsers outside Safari cannot render HEIC, so guest photos straight from
a phone are converted. Conversion is best-effort.
"""

import io
import logging
import re

from PIL import Image
from PIL import ImageOps
from pillow_heif import register_heif_opener

from mission_gallery.client.files import LocalFile
from mission_gallery.media_types import is_heic


logger = logging.getLogger(__name__)

register_heif_opener()

JPEG_QUALITY = 80
_HEIC_SUFFIX = re.compile(r"\.(heic|heif)$", re.IGNORECASE)


def jpeg_name(name: str) -> str:
    if _HEIC_SUFFIX.search(name):
        return _HEIC_SUFFIX.sub(".jpg", name)
    return f"{name}.jpg"


def convert_heic_to_jpeg(file: LocalFile, quality: int = JPEG_QUALITY) -> LocalFile:
    """Return a JPEG copy of a HEIC/HEIF file, or the file unchanged.

    Non-HEIC input is returned as-is. When decoding or encoding fails the
    original file is returned so the upload can still go ahead.
    """
    if not is_heic(file.name, file.content_type):
        return file

    try:
        with Image.open(io.BytesIO(file.data)) as im:
            im = ImageOps.exif_transpose(im)
            if im.mode != "RGB":
                im = im.convert("RGB")
            buf = io.BytesIO()
            im.save(buf, format="JPEG", quality=quality, optimize=True)
    except Exception as e:
        logger.warning(f"HEIC conversion failed for {file.name}, uploading original: {e}")
        return file

    converted = LocalFile(name=jpeg_name(file.name), data=buf.getvalue(), content_type="image/jpeg")
    logger.debug(f"Converted {file.name} -> {converted.name} ({file.size} -> {converted.size} bytes)")
    return converted
