"""Runtime configuration, read from the environment once per cold start.

Set the Cloudinary credentials on the deployed functions, e.g. with a
``.env`` file next to ``main.py``::

    CLOUDINARY_CLOUD_NAME=your-cloud
    CLOUDINARY_API_KEY=...
    CLOUDINARY_API_SECRET=...
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping


@dataclass(frozen=True)
class VideoStreamConfig:
    """Settings shared by all three functions."""

    cloud_name: str = ""
    api_key: str = ""
    api_secret: str = ""
    folder_root: str = "hackethos4u"       # top-level Cloudinary folder
    notification_url: str | None = None    # eager transformation webhook
    collection: str = "videos"             # Firestore collection of VideoRecords
    video_prefix: str = "videos/"          # storage prefix the upload trigger watches

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> VideoStreamConfig:
        env = os.environ if environ is None else environ
        return cls(
            cloud_name=env.get("CLOUDINARY_CLOUD_NAME", ""),
            api_key=env.get("CLOUDINARY_API_KEY", ""),
            api_secret=env.get("CLOUDINARY_API_SECRET", ""),
            folder_root=env.get("CLOUDINARY_FOLDER_ROOT", "hackethos4u"),
            notification_url=env.get("APP_URL") or None,
            collection=env.get("VIDEOS_COLLECTION", "videos"),
            video_prefix=env.get("VIDEO_PATH_PREFIX", "videos/"),
        )

    @property
    def has_credentials(self) -> bool:
        return all([self.cloud_name, self.api_key, self.api_secret])

    def course_folder(self, course_id: str | None, module_id: str | None) -> str:
        """Cloudinary folder for a course module."""
        return f"{self.folder_root}/courses/{course_id}/modules/{module_id}"
