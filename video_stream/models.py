"""Data models for the video streaming functions.

Everything that flows between the storage trigger, Firestore and
Cloudinary passes through these dataclasses. Serialization methods
(``to_dict``) emit the camelCase field names stored on the ``videos``
documents, which the mobile client reads directly.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any


# ---------------------------------------------------------------------------
# Streaming constants
# ---------------------------------------------------------------------------

STREAMING_FORMAT = "m3u8"
THUMBNAIL_FORMAT = "jpg"

# Quality label -> Cloudinary streaming profile, highest first.
QUALITY_PROFILES: dict[str, str] = {
    "1080p": "full_hd",
    "720p": "hd",
    "480p": "sd",
}

QUALITY_URL_TEMPLATE = (
    "https://res.cloudinary.com/{cloud_name}/video/upload/"
    "sp_{profile}/{public_id}.{ext}"
)

_SOURCE_EXTENSION = re.compile(r"\.(mp4|mov|avi)$")


def replace_extension(url: str, ext: str) -> str:
    """Swap a trailing .mp4/.mov/.avi for *ext*; other URLs are returned as-is."""
    return _SOURCE_EXTENSION.sub(f".{ext}", url)


# ---------------------------------------------------------------------------
# Storage event
# ---------------------------------------------------------------------------

@dataclass
class UploadEvent:
    """A newly finalized object in the storage bucket."""

    bucket: str
    name: str
    content_type: str | None = None

    @classmethod
    def from_storage_object(cls, data: Any) -> UploadEvent:
        """Construct from a ``StorageObjectData`` payload (or anything shaped like one)."""
        return cls(
            bucket=data.bucket,
            name=data.name or "",
            content_type=getattr(data, "content_type", None),
        )

    @property
    def is_video(self) -> bool:
        return bool(self.content_type) and self.content_type.startswith("video/")


@dataclass
class VideoPath:
    """Positional parse of ``videos/{courseId}/{moduleId}/{fileName}``."""

    course_id: str
    module_id: str
    file_name: str

    @classmethod
    def parse(cls, name: str) -> VideoPath | None:
        """Return the parsed path, or ``None`` when it has fewer than 4 segments."""
        parts = name.split("/")
        if len(parts) < 4:
            return None
        return cls(course_id=parts[1], module_id=parts[2], file_name=parts[3])

    @property
    def timestamp(self) -> str:
        """File name up to the first dot; the upload flow names files by timestamp."""
        return self.file_name.split(".")[0]


# ---------------------------------------------------------------------------
# Firestore document
# ---------------------------------------------------------------------------

@dataclass
class VideoRecord:
    """The fields of a ``videos`` document that the functions read."""

    video_id: str
    course_id: str | None = None
    module_id: str | None = None
    video_url: str | None = None
    cloudinary_public_id: str | None = None
    streaming_url: str | None = None
    duration: float | None = None
    is_cloudinary_processed: bool = False

    @classmethod
    def from_dict(cls, video_id: str, data: dict[str, Any] | None) -> VideoRecord:
        data = data or {}
        return cls(
            video_id=video_id,
            course_id=data.get("courseId"),
            module_id=data.get("moduleId"),
            video_url=data.get("videoUrl"),
            cloudinary_public_id=data.get("cloudinaryPublicId"),
            streaming_url=data.get("streamingUrl"),
            duration=data.get("duration"),
            is_cloudinary_processed=bool(data.get("isCloudinaryProcessed")),
        )


# ---------------------------------------------------------------------------
# Cloudinary result
# ---------------------------------------------------------------------------

@dataclass
class StreamingResult:
    """Streaming URLs and metadata derived from one Cloudinary upload."""

    public_id: str
    cloudinary_url: str
    streaming_url: str
    thumbnail_url: str
    qualities: dict[str, str] = field(default_factory=dict)
    duration: float | None = None
    format: str | None = None    # container reported by Cloudinary, e.g. "mp4"
    width: int | None = None
    height: int | None = None

    @classmethod
    def from_upload(
        cls,
        upload_result: dict[str, Any],
        cloud_name: str,
    ) -> StreamingResult:
        """Build from the response of ``cloudinary.uploader.upload``.

        The HLS manifests only exist once the eager transformations finish
        on Cloudinary's side; the URLs are predictable, so they are written
        up front.
        """
        public_id = upload_result["public_id"]
        secure_url = upload_result["secure_url"]
        qualities = {
            label: QUALITY_URL_TEMPLATE.format(
                cloud_name=cloud_name,
                profile=profile,
                public_id=public_id,
                ext=STREAMING_FORMAT,
            )
            for label, profile in QUALITY_PROFILES.items()
        }
        return cls(
            public_id=public_id,
            cloudinary_url=secure_url,
            streaming_url=replace_extension(secure_url, STREAMING_FORMAT),
            thumbnail_url=replace_extension(secure_url, THUMBNAIL_FORMAT),
            qualities=qualities,
            duration=upload_result.get("duration"),
            format=upload_result.get("format"),
            width=upload_result.get("width"),
            height=upload_result.get("height"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to document fields. Metadata Cloudinary left out is omitted."""
        result: dict[str, Any] = {
            "cloudinaryPublicId": self.public_id,
            "cloudinaryUrl": self.cloudinary_url,
            "streamingUrl": self.streaming_url,
            "qualities": dict(self.qualities),
            "thumbnailUrl": self.thumbnail_url,
        }
        for key, value in (
            ("duration", self.duration),
            ("format", self.format),
            ("width", self.width),
            ("height", self.height),
        ):
            if value is not None:
                result[key] = value
        return result
