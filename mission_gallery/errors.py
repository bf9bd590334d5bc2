"""Error taxonomy for the gallery upload and listing paths."""

from fastapi import Request
from fastapi.responses import JSONResponse


class GalleryError(Exception):
    """Base error carrying a machine-readable code and an HTTP status."""

    code = "GalleryError"
    status_code = 400
    default_message = "Gallery request failed"

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidMediaType(GalleryError):
    code = "InvalidMediaType"
    status_code = 415
    default_message = "Only image and video uploads are allowed"


class InvalidUploadClass(GalleryError):
    code = "InvalidUploadClass"
    status_code = 400
    default_message = "Unknown upload class"


class InvalidUploadKey(GalleryError):
    code = "InvalidUploadKey"
    status_code = 400
    default_message = "Object key does not belong to this upload class"


class UploadNotVerified(GalleryError):
    code = "UploadNotVerified"
    status_code = 409
    default_message = "Upload did not complete"


class ObjectNotFound(GalleryError):
    code = "ObjectNotFound"
    status_code = 404
    default_message = "File not found"


class StoreUnavailable(GalleryError):
    code = "StoreUnavailable"
    status_code = 503
    default_message = "Object store request failed"


def gallery_error_response(exc: GalleryError) -> JSONResponse:
    return JSONResponse(
        {"error": exc.code, "message": exc.message},
        status_code=exc.status_code,
    )


async def gallery_error_handler(request: Request, exc: GalleryError) -> JSONResponse:
    return gallery_error_response(exc)
