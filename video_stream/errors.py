"""Errors raised by the manual processing flow.

Each subclass carries the callable-function error ``code`` the caller
sees. ``main.py`` translates them into ``HttpsError`` at the Firebase
boundary so this package stays free of the functions SDK.
"""

from __future__ import annotations


class VideoProcessingError(Exception):
    """Base class; ``code`` is the callable-function error code."""

    code = "unknown"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Unauthenticated(VideoProcessingError):
    code = "unauthenticated"


class InvalidArgument(VideoProcessingError):
    code = "invalid-argument"


class NotFound(VideoProcessingError):
    code = "not-found"


class FailedPrecondition(VideoProcessingError):
    code = "failed-precondition"


class InternalError(VideoProcessingError):
    code = "internal"
