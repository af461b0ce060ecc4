"""Firestore access for ``videos`` documents.

Wraps the lookups and the post-processing update the functions need.
The Firebase app and the Firestore client are created lazily, once per
cold start, using the default service account of the runtime.
"""

from __future__ import annotations

import logging
from typing import Any

import firebase_admin
from firebase_admin import firestore as firebase_firestore
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from video_stream.models import StreamingResult, VideoRecord

logger = logging.getLogger(__name__)

# Lazy-initialised Firestore client (created once per cold start).
_db = None


def get_firebase_app() -> firebase_admin.App:
    """Return the default Firebase app, initialising it on first use."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        return firebase_admin.initialize_app()


def _get_db():
    global _db
    if _db is None:
        _db = firebase_firestore.client(get_firebase_app())
    return _db


class VideoRepository:
    """Reads and updates VideoRecord documents in one collection."""

    def __init__(self, db: Any = None, collection: str = "videos") -> None:
        self._db = db
        self.collection_name = collection

    @property
    def collection(self):
        if self._db is None:
            self._db = _get_db()
        return self._db.collection(self.collection_name)

    # -----------------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------------

    def get(self, video_id: str) -> VideoRecord | None:
        """Fetch one record by id; ``None`` when the document does not exist."""
        snapshot = self.collection.document(video_id).get()
        if not snapshot.exists:
            return None
        return VideoRecord.from_dict(snapshot.id, snapshot.to_dict())

    def _module_query(self, course_id: str, module_id: str):
        return (
            self.collection
            .where(filter=FieldFilter("courseId", "==", course_id))
            .where(filter=FieldFilter("moduleId", "==", module_id))
        )

    def find_by_video_url(self, course_id: str, module_id: str, video_url: str) -> str | None:
        """Exact match on course, module and stored source URL."""
        query = (
            self._module_query(course_id, module_id)
            .where(filter=FieldFilter("videoUrl", "==", video_url))
            .limit(1)
        )
        for snapshot in query.stream():
            return snapshot.id
        return None

    def find_by_timestamp(self, course_id: str, module_id: str, token: str) -> str | None:
        """First record in the module whose ``videoUrl`` contains *token*.

        Substring matching can pick the wrong record when two uploads in
        the module share a token; the first hit wins regardless.
        """
        for snapshot in self._module_query(course_id, module_id).stream():
            video_url = (snapshot.to_dict() or {}).get("videoUrl") or ""
            if token in video_url:
                return snapshot.id
        return None

    def find_for_upload(
        self,
        course_id: str,
        module_id: str,
        video_url: str,
        token: str,
    ) -> str | None:
        """Resolve the document owning an uploaded object."""
        video_id = self.find_by_video_url(course_id, module_id, video_url)
        if video_id:
            logger.info("Found video document: %s", video_id)
            return video_id

        video_id = self.find_by_timestamp(course_id, module_id, token)
        if video_id:
            logger.info("Found video by timestamp match: %s", video_id)
        return video_id

    # -----------------------------------------------------------------------
    # Writes
    # -----------------------------------------------------------------------

    def mark_processed(self, video_id: str, result: StreamingResult) -> dict[str, Any]:
        """Write the streaming fields, the processed flag and a server timestamp.

        Returns the update payload that was sent.
        """
        update = result.to_dict()
        update["isCloudinaryProcessed"] = True
        update["processedAt"] = firestore.SERVER_TIMESTAMP
        self.collection.document(video_id).update(update)
        logger.info("Updated video document %s with streaming URLs", video_id)
        return update
