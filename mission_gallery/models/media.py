from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel
from pydantic import field_validator

from mission_gallery.errors import InvalidUploadClass


ANONYMOUS_OWNER = "anonymous"
UNKNOWN_OWNER = "unknown"


class UploadClass(str, Enum):
    ADMIN = "admin"
    GUEST = "guest"
    SITE_ASSET = "site-asset"

    @property
    def prefix(self) -> str:
        return _PREFIXES[self]

    @classmethod
    def parse(cls, value: Optional[str], default: Optional["UploadClass"] = None) -> "UploadClass":
        """Parse a wire value; the browser client sends ``site_asset``."""
        if not value:
            if default is None:
                raise InvalidUploadClass()
            return default
        normalized = value.strip().lower().replace("_", "-")
        for member in cls:
            if member.value == normalized:
                return member
        raise InvalidUploadClass(f"Unknown upload class: {value}")


_PREFIXES = {
    UploadClass.ADMIN: "admin-uploads",
    UploadClass.GUEST: "guest-uploads",
    UploadClass.SITE_ASSET: "site-assets",
}


@dataclass(frozen=True)
class StoredObject:
    key: str
    last_modified: datetime

    @property
    def filename(self) -> str:
        return filename_from_key(self.key)


def filename_from_key(key: str) -> str:
    return key.rsplit("/", 1)[-1]


class GuestImageRecord(BaseModel):
    filename: str
    owner: str = ANONYMOUS_OWNER

    @field_validator("filename")
    @classmethod
    def _filename_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("filename must not be empty")
        return value

    @field_validator("owner", mode="before")
    @classmethod
    def _default_owner(cls, value: Optional[str]) -> str:
        if value is None or not str(value).strip():
            return ANONYMOUS_OWNER
        return str(value).strip()


class GuestImage(BaseModel):
    url: str
    filename: str
    owner: str


class PresignedUpload(BaseModel):
    upload_url: str
    key: str
    public_url: str
    content_type: str
    headers: dict[str, str]
    expires_in: int


class FinalizedUpload(BaseModel):
    url: str
    key: str
    filename: str
    owner: Optional[str] = None


class VolunteerVideo(BaseModel):
    id: str
    url: str
    title: str
