"""Client-side image compression before upload.

Images are re-encoded as JPEG with the longer edge bounded by
``max_dimension``. When the source is larger than the byte budget the
encode quality is lowered step by step until the output fits or the quality
floor is reached; the last attempt is returned either way.

Temporary files written by the resize primitive are left in place.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Callable, Iterable, List, Optional

from cinefeed.config import get_settings
from cinefeed.errors import AssetNotFoundError, CompressionFailedError
from cinefeed.models import CompressionPolicy, CompressionResult, FileInfo, ResizedImage
from cinefeed.utils.files import Source, probe_file
from cinefeed.utils.imaging import resize_image

logger = logging.getLogger(__name__)

Resizer = Callable[..., ResizedImage]
Probe = Callable[[Source], FileInfo]
ProgressCallback = Callable[[int, int], None]


class ImageCompressor:
    """Bounded quality-reduction loop around a resize/encode primitive."""

    def __init__(
        self,
        policy: CompressionPolicy | None = None,
        *,
        resizer: Resizer = resize_image,
        probe: Probe = probe_file,
        output_dir: str | None = None,
    ) -> None:
        self.policy = policy or CompressionPolicy()
        self._resizer = resizer
        self._probe = probe
        self._output_dir = output_dir

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compress(self, source: Source) -> CompressionResult:
        """Compress *source* towards ``policy.max_bytes``.

        Raises
        ------
        AssetNotFoundError
            If *source* does not exist.
        CompressionFailedError
            If resizing or size inspection fails.
        """

        info = self._inspect(source, source)
        if not info.exists:
            raise AssetNotFoundError(source)

        policy = self.policy
        logger.info("Original: %.1fKB", info.size / 1024)

        # If small enough, just resize
        if info.size <= policy.max_bytes:
            return self._resize(source, policy.initial_quality)

        # Reduce quality until under limit
        quality = policy.initial_quality
        result = self._resize(source, quality)

        while result.size > policy.max_bytes and quality > policy.min_quality:
            quality = self._next_quality(quality)
            result = self._resize(source, quality)

        logger.info("Compressed: %.1fKB (quality=%.2f)", result.size / 1024, quality)
        return result

    def compress_multiple(
        self,
        sources: Iterable[Source],
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[str]:
        """Compress sources one at a time, in order, returning output paths.

        *on_progress* receives ``(current, total)`` before each item starts.
        The first failure aborts the batch.
        """

        sources = list(sources)
        total = len(sources)
        compressed: List[str] = []

        for index, source in enumerate(sources):
            if on_progress:
                on_progress(index + 1, total)
            result = self.compress(source)
            compressed.append(result.uri)

        return compressed

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _next_quality(self, quality: float) -> float:
        # Rounded so that 0.8 - 3 * 0.1 lands on 0.5 rather than 0.5000000000000001
        lowered = round(quality - self.policy.quality_step, 6)
        return max(lowered, self.policy.min_quality)

    def _inspect(self, path: Source, source: Source) -> FileInfo:
        try:
            return self._probe(path)
        except Exception as exc:
            logger.error("Size probe failed for %s: %s", path, exc)
            raise CompressionFailedError(source, exc) from exc

    def _resize(self, source: Source, quality: float) -> CompressionResult:
        try:
            resized = self._resizer(
                source,
                max_dimension=self.policy.max_dimension,
                quality=quality,
                output_dir=self._output_dir,
            )
        except Exception as exc:
            logger.error("Compression failed for %s: %s", source, exc)
            raise CompressionFailedError(source, exc) from exc

        info = self._inspect(resized.uri, source)
        if not info.exists:
            raise CompressionFailedError(source, FileNotFoundError(resized.uri))

        logger.debug("Pass at quality=%.2f -> %d bytes", quality, info.size)
        return CompressionResult(
            uri=resized.uri,
            width=resized.width,
            height=resized.height,
            size=info.size,
        )


# ------------------------------------------------------------------
# Module-level facade
# ------------------------------------------------------------------


@lru_cache()
def get_image_compressor() -> ImageCompressor:
    settings = get_settings()
    return ImageCompressor(settings.compression_policy(), output_dir=settings.image_temp_dir)


def compress_image(uri: Source) -> CompressionResult:
    return get_image_compressor().compress(uri)


def compress_multiple_images(
    uris: Iterable[Source],
    on_progress: Optional[ProgressCallback] = None,
) -> List[str]:
    return get_image_compressor().compress_multiple(uris, on_progress)
