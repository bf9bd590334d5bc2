from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from mission_gallery.media_types import EXTENSION_CONTENT_TYPES
from mission_gallery.media_types import extension_of


@dataclass(frozen=True)
class LocalFile:
    """A file selected for upload, held in memory."""

    name: str
    data: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: Path) -> "LocalFile":
        return cls(
            name=path.name,
            data=path.read_bytes(),
            content_type=EXTENSION_CONTENT_TYPES.get(extension_of(path.name)),
        )
