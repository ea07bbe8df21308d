"""Compress-then-upload for a post's or comment's attached images."""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from cinefeed.services.image_compression import (
    ImageCompressor,
    ProgressCallback,
    get_image_compressor,
)
from cinefeed.services.image_upload import Folder, ImageUploadService, get_image_upload_service
from cinefeed.utils.files import Source

logger = logging.getLogger(__name__)


def prepare_images(
    uris: Iterable[Source],
    folder: Folder = "posts",
    *,
    on_progress: Optional[ProgressCallback] = None,
    compressor: Optional[ImageCompressor] = None,
    uploader: Optional[ImageUploadService] = None,
) -> List[str]:
    """Compress *uris* sequentially, then upload the results concurrently.

    Returns the public URLs in input order. A compression failure aborts
    before anything is uploaded; an upload failure may leave orphans.
    """

    compressor = compressor or get_image_compressor()
    uploader = uploader or get_image_upload_service()

    uris = list(uris)
    compressed = compressor.compress_multiple(uris, on_progress)
    logger.debug("Compressed %d images for %s", len(compressed), folder)
    return uploader.upload_multiple_images(compressed, folder)
