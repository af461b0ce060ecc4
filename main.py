"""Firebase Cloud Functions entry points for course video streaming.

Three functions, each a thin adapter over ``video_stream.handler``:

- ``process_video_upload`` — Storage object finalized. Forwards videos
  under ``videos/{courseId}/{moduleId}/`` to Cloudinary and writes the
  HLS URLs onto the matching ``videos`` document.
- ``delete_video_from_cloudinary`` — ``videos/{videoId}`` deleted.
  Removes the Cloudinary asset.
- ``process_existing_video`` — authenticated callable. Body
  ``{"videoId": "..."}``; backfills videos that were never processed.

Deploy with ``firebase deploy --only functions``.
"""

from __future__ import annotations

import logging
from typing import Any

from firebase_functions import firestore_fn, https_fn, options, storage_fn

from firestore_client import VideoRepository
from storage_utils import BucketStorage
from video_stream import (
    CloudinaryClient,
    UploadEvent,
    VideoStreamConfig,
    delete_video,
    process_existing_video as run_existing_video,
    process_upload,
)
from video_stream.errors import VideoProcessingError

logger = logging.getLogger()
logger.setLevel(logging.INFO)

CONFIG = VideoStreamConfig.from_env()

# Cloudinary fetches the whole source before answering, so give uploads
# the maximum event-function timeout.
TIMEOUT_SEC = 540
MEMORY = options.MemoryOption.GB_2

# Lazy-initialised clients (created once per cold start).
_cloudinary: CloudinaryClient | None = None
_videos: VideoRepository | None = None
_storage: BucketStorage | None = None


def _get_cloudinary() -> CloudinaryClient:
    global _cloudinary
    if _cloudinary is None:
        _cloudinary = CloudinaryClient.from_config(CONFIG)
    return _cloudinary


def _get_videos() -> VideoRepository:
    global _videos
    if _videos is None:
        _videos = VideoRepository(collection=CONFIG.collection)
    return _videos


def _get_storage() -> BucketStorage:
    global _storage
    if _storage is None:
        _storage = BucketStorage()
    return _storage


def to_https_error(exc: VideoProcessingError) -> https_fn.HttpsError:
    """Translate a domain error into the callable protocol's error."""
    return https_fn.HttpsError(
        code=https_fn.FunctionsErrorCode(exc.code),
        message=exc.message,
    )


# ---------------------------------------------------------------------------
# Storage trigger
# ---------------------------------------------------------------------------

@storage_fn.on_object_finalized(timeout_sec=TIMEOUT_SEC, memory=MEMORY)
def process_video_upload(
    event: storage_fn.CloudEvent[storage_fn.StorageObjectData],
) -> None:
    result = process_upload(
        UploadEvent.from_storage_object(event.data),
        config=CONFIG,
        cloudinary=_get_cloudinary(),
        videos=_get_videos(),
        storage=_get_storage(),
    )
    if result is not None and not result["success"]:
        logger.warning("processVideoUpload finished without success: %s", result["error"])


# ---------------------------------------------------------------------------
# Firestore delete trigger
# ---------------------------------------------------------------------------

@firestore_fn.on_document_deleted(document=f"{CONFIG.collection}/{{videoId}}")
def delete_video_from_cloudinary(
    event: firestore_fn.Event[firestore_fn.DocumentSnapshot | None],
) -> None:
    data = event.data.to_dict() if event.data is not None else None
    delete_video(data, event.params["videoId"], cloudinary=_get_cloudinary())


# ---------------------------------------------------------------------------
# Callable
# ---------------------------------------------------------------------------

@https_fn.on_call(timeout_sec=TIMEOUT_SEC, memory=MEMORY)
def process_existing_video(req: https_fn.CallableRequest) -> dict[str, Any]:
    try:
        return run_existing_video(
            req.data,
            req.auth,
            config=CONFIG,
            cloudinary=_get_cloudinary(),
            videos=_get_videos(),
        )
    except VideoProcessingError as e:
        raise to_https_error(e) from e
