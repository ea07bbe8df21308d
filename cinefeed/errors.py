"""Typed errors raised by the image pipeline.

Every error keeps the source or storage path it concerns and, when it wraps
a lower-level failure, that exception as ``cause`` (also chained as
``__cause__``).
"""
from __future__ import annotations

import os
from typing import Optional, Union

Source = Union[str, os.PathLike]


class MediaPipelineError(Exception):
    """Base exception for all cinefeed image pipeline errors."""


class AssetNotFoundError(MediaPipelineError):
    """Raised when a source handle does not resolve to an existing file."""

    def __init__(self, source: Source) -> None:
        self.source = str(source)
        super().__init__(f"Image not found: {self.source}")


class ReadError(MediaPipelineError):
    """Raised when a source cannot be read into an in-memory payload."""

    def __init__(self, source: Source, cause: Optional[BaseException] = None) -> None:
        self.source = str(source)
        self.cause = cause
        super().__init__(f"Failed to read image {self.source}: {cause}")


class CompressionFailedError(MediaPipelineError):
    """Raised when the resize/encode primitive or the size probe fails."""

    def __init__(self, source: Source, cause: Optional[BaseException] = None) -> None:
        self.source = str(source)
        self.cause = cause
        super().__init__(f"Failed to compress image {self.source}: {cause}")


class UploadError(MediaPipelineError):
    """Raised when writing to object storage or resolving its URL fails."""

    def __init__(
        self,
        path: str,
        cause: Optional[BaseException] = None,
        message: Optional[str] = None,
    ) -> None:
        self.path = path
        self.cause = cause
        super().__init__(message or f"Failed to upload {path}: {cause}")


class ObjectExistsError(UploadError):
    """Raised when a create-only upload hits an existing object."""

    def __init__(self, path: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(path, cause, message=f"Object already exists: {path}")


class DeleteError(MediaPipelineError):
    """Raised when removing an object from storage fails."""

    def __init__(self, path: str, cause: Optional[BaseException] = None) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to delete {path}: {cause}")
