"""Orchestration for the three video functions.

Exposes one function per trigger:

- ``process_upload(event, ...)`` — storage object finalized.
- ``delete_video(data, video_id, ...)`` — ``videos`` document deleted.
- ``process_existing_video(data, auth, ...)`` — authenticated callable.

Collaborators (Cloudinary client, video repository, bucket storage) are
passed in explicitly; ``main.py`` wires the real ones.

The event-driven functions never raise: a raised error would make the
platform retry the event, and none of the failures here are transient
enough for that to help. The callable raises ``VideoProcessingError``
subclasses so the caller gets a definite outcome.
"""

from __future__ import annotations

import logging
from typing import Any

from .cloudinary_client import CloudinaryClient
from .config import VideoStreamConfig
from .errors import (
    FailedPrecondition,
    InternalError,
    InvalidArgument,
    NotFound,
    Unauthenticated,
)
from .models import StreamingResult, UploadEvent, VideoPath

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Shared transcode step
# ---------------------------------------------------------------------------

def transcode(
    cloudinary: CloudinaryClient,
    source_url: str,
    *,
    folder: str,
    public_id: str,
) -> StreamingResult:
    """Submit *source_url* to Cloudinary and derive the streaming URLs."""
    upload_result = cloudinary.upload_video(source_url, folder=folder, public_id=public_id)
    logger.info(
        "Cloudinary upload successful: public_id=%s, secure_url=%s",
        upload_result.get("public_id"),
        upload_result.get("secure_url"),
    )
    return StreamingResult.from_upload(upload_result, cloudinary.cloud_name)


# ---------------------------------------------------------------------------
# Storage trigger
# ---------------------------------------------------------------------------

def process_upload(
    event: UploadEvent,
    *,
    config: VideoStreamConfig,
    cloudinary: CloudinaryClient,
    videos: Any,
    storage: Any,
) -> dict[str, Any] | None:
    """Stream-enable a video that just landed in the bucket.

    Returns ``None`` for objects that are not videos under the watched
    prefix, otherwise a ``{"success": ...}`` dict. Errors are logged and
    reported in the dict, never raised.
    """
    try:
        logger.info("[processVideoUpload] File uploaded: %s (%s)", event.name, event.content_type)

        if not event.name.startswith(config.video_prefix):
            logger.info("[processVideoUpload] Skipping - not in %s directory", config.video_prefix)
            return None

        if not event.is_video:
            logger.info("[processVideoUpload] Skipping - not a video file")
            return None

        path = VideoPath.parse(event.name)
        if path is None:
            logger.info("[processVideoUpload] Skipping - invalid path structure")
            return None

        logger.info(
            "[processVideoUpload] Course ID: %s, Module ID: %s",
            path.course_id, path.module_id,
        )

        fetch_url = storage.make_public(event.bucket, event.name)

        video_doc_id = videos.find_for_upload(
            path.course_id,
            path.module_id,
            storage.signed_url(event.bucket, event.name),
            path.timestamp,
        )
        if not video_doc_id:
            logger.info("[processVideoUpload] Video document not found in Firestore")

        result = transcode(
            cloudinary,
            fetch_url,
            folder=config.course_folder(path.course_id, path.module_id),
            public_id=path.timestamp,
        )

        if video_doc_id:
            streaming_data = videos.mark_processed(video_doc_id, result)
        else:
            # No queue to park this in; the data only survives in the logs.
            streaming_data = result.to_dict()
            logger.warning(
                "[processVideoUpload] No video document to update, streaming data: %s",
                streaming_data,
            )

        logger.info(
            "[processVideoUpload] Processing complete for %s, streaming URL: %s",
            path.file_name, result.streaming_url,
        )
        return {"success": True, "videoDocId": video_doc_id, "streamingData": streaming_data}

    except Exception as e:
        logger.error("[processVideoUpload] Error processing video: %s", e, exc_info=True)
        return {"success": False, "error": str(e)}


# ---------------------------------------------------------------------------
# Firestore delete trigger
# ---------------------------------------------------------------------------

def delete_video(
    data: dict[str, Any] | None,
    video_id: str,
    *,
    cloudinary: CloudinaryClient,
) -> dict[str, Any] | None:
    """Remove the Cloudinary asset of a deleted video document (best-effort)."""
    try:
        logger.info("[deleteVideoFromCloudinary] Video deleted from Firestore: %s", video_id)

        public_id = (data or {}).get("cloudinaryPublicId")
        if not public_id:
            logger.info("[deleteVideoFromCloudinary] No Cloudinary public ID, skipping deletion")
            return None

        delete_result = cloudinary.destroy_video(public_id)
        logger.info("[deleteVideoFromCloudinary] Deleted from Cloudinary: %s", delete_result)
        return {"success": True, "result": delete_result}

    except Exception as e:
        # The document is already gone; nothing to roll back.
        logger.error("[deleteVideoFromCloudinary] Error: %s", e, exc_info=True)
        return {"success": False, "error": str(e)}


# ---------------------------------------------------------------------------
# Callable
# ---------------------------------------------------------------------------

def process_existing_video(
    data: dict[str, Any] | None,
    auth: Any,
    *,
    config: VideoStreamConfig,
    cloudinary: CloudinaryClient,
    videos: Any,
) -> dict[str, Any]:
    """Backfill streaming URLs for a video that was never auto-processed.

    Raises:
        Unauthenticated: no caller identity on the request.
        InvalidArgument: ``videoId`` missing from *data*.
        NotFound: no document with that id.
        FailedPrecondition: the document has no ``videoUrl``.
        InternalError: the Cloudinary upload or the Firestore write failed.
    """
    if not auth:
        raise Unauthenticated("Must be authenticated to process videos")

    video_id = (data or {}).get("videoId")
    if not video_id:
        raise InvalidArgument("videoId is required")

    logger.info("[processExistingVideo] Processing video: %s", video_id)

    try:
        record = videos.get(video_id)
    except Exception as e:
        logger.error("[processExistingVideo] Error: %s", e, exc_info=True)
        raise InternalError(f"Error processing video: {e}") from e

    if record is None:
        raise NotFound(f"Video document {video_id} not found")

    if not record.video_url:
        raise FailedPrecondition("Video URL not found in document")

    if record.is_cloudinary_processed:
        logger.info("[processExistingVideo] Video already processed")
        return {
            "success": True,
            "message": "Video already processed",
            "streamingUrl": record.streaming_url,
        }

    try:
        logger.info("[processExistingVideo] Uploading to Cloudinary: %s", record.video_url)
        result = transcode(
            cloudinary,
            record.video_url,
            folder=config.course_folder(record.course_id, record.module_id),
            public_id=video_id,
        )
        if result.duration is None:
            result.duration = record.duration

        videos.mark_processed(video_id, result)
    except Exception as e:
        logger.error("[processExistingVideo] Error: %s", e, exc_info=True)
        raise InternalError(f"Error processing video: {e}") from e

    logger.info("[processExistingVideo] Processing complete")
    return {
        "success": True,
        "message": "Video processed successfully",
        "streamingUrl": result.streaming_url,
        "qualities": result.qualities,
    }
