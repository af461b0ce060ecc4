"""Cloudinary upload and destroy calls.

The SDK is never configured globally: every call carries the credentials
of the ``CloudinaryClient`` it goes through, so several clients (or a
fake in tests) can coexist in one process.
"""

from __future__ import annotations

import logging
from typing import Any

import cloudinary.uploader

from .config import VideoStreamConfig
from .models import QUALITY_PROFILES, STREAMING_FORMAT

logger = logging.getLogger(__name__)


def streaming_eager() -> list[dict[str, str]]:
    """One HLS eager transformation per streaming profile."""
    return [
        {"streaming_profile": profile, "format": STREAMING_FORMAT}
        for profile in QUALITY_PROFILES.values()
    ]


class CloudinaryClient:
    """Thin wrapper around ``cloudinary.uploader`` bound to one account."""

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        *,
        notification_url: str | None = None,
    ) -> None:
        self.cloud_name = cloud_name
        self._api_key = api_key
        self._api_secret = api_secret
        self.notification_url = notification_url

    @classmethod
    def from_config(cls, config: VideoStreamConfig) -> CloudinaryClient:
        if not config.has_credentials:
            logger.warning("Cloudinary credentials not set, uploads will fail")
        return cls(
            config.cloud_name,
            config.api_key,
            config.api_secret,
            notification_url=config.notification_url,
        )

    def _credentials(self) -> dict[str, str]:
        return {
            "cloud_name": self.cloud_name,
            "api_key": self._api_key,
            "api_secret": self._api_secret,
        }

    def upload_options(self, *, folder: str, public_id: str) -> dict[str, Any]:
        """Options for a streaming upload, without credentials."""
        options: dict[str, Any] = {
            "resource_type": "video",
            "folder": folder,
            "public_id": public_id,
            "overwrite": True,
            "eager": streaming_eager(),
            "eager_async": True,
        }
        if self.notification_url:
            options["eager_notification_url"] = self.notification_url
        return options

    def upload_video(self, source_url: str, *, folder: str, public_id: str) -> dict[str, Any]:
        """Have Cloudinary fetch *source_url* and queue the HLS renditions.

        Returns the raw upload response (``public_id``, ``secure_url``,
        ``duration``, ``format``, ``width``, ``height``, ...).
        """
        options = self.upload_options(folder=folder, public_id=public_id)
        logger.info("Uploading %s to Cloudinary folder %s", source_url, folder)
        return cloudinary.uploader.upload(source_url, **options, **self._credentials())

    def destroy_video(self, public_id: str) -> dict[str, Any]:
        """Delete a video asset. Cloudinary answers ``{"result": "ok"}`` or ``"not found"``."""
        logger.info("Destroying Cloudinary video %s", public_id)
        return cloudinary.uploader.destroy(
            public_id, resource_type="video", **self._credentials(),
        )
