"""Pillow resize/encode primitive used by the compression controller."""
from __future__ import annotations

import logging
import os
import tempfile
from typing import Optional

from PIL import Image, ImageOps

from cinefeed.models import ResizedImage
from cinefeed.utils.files import Source, local_path

logger = logging.getLogger(__name__)


def resize_image(
    source: Source,
    *,
    max_dimension: int,
    quality: float,
    output_dir: Optional[str] = None,
) -> ResizedImage:
    """Resize/re-encode an image to JPEG and return the new file.

    The longer edge is bounded by *max_dimension* (aspect ratio preserved,
    never upscaled). *quality* is a fraction in (0, 1] mapped onto Pillow's
    JPEG scale. Each call writes a fresh temporary file that the caller owns.
    """

    jpeg_quality = max(1, min(95, round(quality * 100)))

    with Image.open(local_path(source)) as img:
        # Bake EXIF orientation into the pixels; the tag is not carried over
        img = ImageOps.exif_transpose(img)
        img = img.convert("RGB")  # ensure RGB for JPEG
        # Resize preserving aspect ratio if necessary
        if max(img.size) > max_dimension:
            img.thumbnail((max_dimension, max_dimension))

        fd, out_path = tempfile.mkstemp(prefix="cinefeed-", suffix=".jpeg", dir=output_dir)
        with os.fdopen(fd, "wb") as fh:
            img.save(fh, format="JPEG", quality=jpeg_quality, optimize=True)

        width, height = img.size

    logger.debug("Encoded %s -> %s (%dx%d, quality=%d)", source, out_path, width, height, jpeg_quality)
    return ResizedImage(uri=out_path, width=width, height=height)
