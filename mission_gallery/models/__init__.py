from mission_gallery.models.media import ANONYMOUS_OWNER
from mission_gallery.models.media import UNKNOWN_OWNER
from mission_gallery.models.media import FinalizedUpload
from mission_gallery.models.media import GuestImage
from mission_gallery.models.media import GuestImageRecord
from mission_gallery.models.media import PresignedUpload
from mission_gallery.models.media import StoredObject
from mission_gallery.models.media import UploadClass
from mission_gallery.models.media import VolunteerVideo
from mission_gallery.models.media import filename_from_key


__all__ = [
    "ANONYMOUS_OWNER",
    "UNKNOWN_OWNER",
    "FinalizedUpload",
    "GuestImage",
    "GuestImageRecord",
    "PresignedUpload",
    "StoredObject",
    "UploadClass",
    "VolunteerVideo",
    "filename_from_key",
]
