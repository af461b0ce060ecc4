"""Firebase Storage helpers for uploaded videos.

Cloudinary fetches its input by URL, so an uploaded object is made
publicly readable before the upload call. The upstream app stores a
long-lived signed URL on the video document; ``signed_url`` reproduces
it so the document can be found by exact match.
"""

from __future__ import annotations

import logging
import urllib.parse
from datetime import datetime, timezone

from firebase_admin import storage

from firestore_client import get_firebase_app

logger = logging.getLogger(__name__)

PUBLIC_URL_BASE = "https://storage.googleapis.com"

# Expiry the mobile app uses when it signs download URLs.
SIGNED_URL_EXPIRY = datetime(2500, 3, 1, tzinfo=timezone.utc)

# Characters encodeURIComponent leaves alone on top of quote()'s defaults.
_URI_COMPONENT_SAFE = "!*'()"


def public_url(bucket: str, path: str) -> str:
    """Public fetch URL of an object; the path is encoded as a single component."""
    return f"{PUBLIC_URL_BASE}/{bucket}/{urllib.parse.quote(path, safe=_URI_COMPONENT_SAFE)}"


class BucketStorage:
    """Object operations against Firebase Storage buckets."""

    def __init__(self, app=None) -> None:
        self._app = app

    def _blob(self, bucket: str, path: str):
        if self._app is None:
            self._app = get_firebase_app()
        return storage.bucket(bucket, app=self._app).blob(path)

    def make_public(self, bucket: str, path: str) -> str:
        """Grant public read on the object and return its public URL."""
        self._blob(bucket, path).make_public()
        url = public_url(bucket, path)
        logger.info("Made gs://%s/%s public: %s", bucket, path, url)
        return url

    def signed_url(self, bucket: str, path: str) -> str:
        """Read-only signed URL with the app's long-lived expiry."""
        return self._blob(bucket, path).generate_signed_url(
            expiration=SIGNED_URL_EXPIRY, method="GET",
        )
