"""Image compression and upload pipeline for cinefeed posts and comments."""
from cinefeed.errors import (
    AssetNotFoundError,
    CompressionFailedError,
    DeleteError,
    MediaPipelineError,
    ObjectExistsError,
    ReadError,
    UploadError,
)
from cinefeed.models import CompressionPolicy, CompressionResult
from cinefeed.services import (
    compress_image,
    compress_multiple_images,
    delete_image,
    prepare_images,
    upload_image,
    upload_multiple_images,
)

__all__ = [
    "AssetNotFoundError",
    "CompressionFailedError",
    "CompressionPolicy",
    "CompressionResult",
    "DeleteError",
    "MediaPipelineError",
    "ObjectExistsError",
    "ReadError",
    "UploadError",
    "compress_image",
    "compress_multiple_images",
    "delete_image",
    "prepare_images",
    "upload_image",
    "upload_multiple_images",
]
