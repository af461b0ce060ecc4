"""Cloudinary streaming for course videos uploaded to Firebase.

Quick start::

    from video_stream import CloudinaryClient, VideoStreamConfig, process_existing_video

    config = VideoStreamConfig.from_env()
    result = process_existing_video(
        {"videoId": "abc123"},
        auth=caller,
        config=config,
        cloudinary=CloudinaryClient.from_config(config),
        videos=repository,
    )

The Firebase entry points live in ``main.py``.
"""

from .cloudinary_client import CloudinaryClient
from .config import VideoStreamConfig
from .handler import delete_video, process_existing_video, process_upload
from .models import StreamingResult, UploadEvent, VideoPath, VideoRecord

__all__ = [
    "CloudinaryClient",
    "VideoStreamConfig",
    "process_upload",
    "delete_video",
    "process_existing_video",
    "StreamingResult",
    "UploadEvent",
    "VideoPath",
    "VideoRecord",
]
