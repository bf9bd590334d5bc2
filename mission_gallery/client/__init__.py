from mission_gallery.client.files import LocalFile
from mission_gallery.client.uploader import BatchResult
from mission_gallery.client.uploader import FileTooLargeError
from mission_gallery.client.uploader import GalleryUploader
from mission_gallery.client.uploader import UploadedFile


__all__ = [
    "BatchResult",
    "FileTooLargeError",
    "GalleryUploader",
    "LocalFile",
    "UploadedFile",
]
