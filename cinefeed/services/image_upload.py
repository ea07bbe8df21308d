"""Upload post and comment images to object storage.

Each upload goes to a freshly generated ``{folder}/{millis}-{random}.jpeg``
key with a create-only write; the caller receives the object's public URL.
Nothing is retried, and a failure after the write (or in a sibling upload of
a batch) leaves already-written objects in the bucket.
"""
from __future__ import annotations

import logging
import secrets
import string
import time
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache
from typing import Callable, Iterable, List, Literal

import httpx

from cinefeed.config import get_settings
from cinefeed.errors import ReadError, UploadError
from cinefeed.models import UploadTarget
from cinefeed.services.storage import ObjectStorage, get_storage
from cinefeed.utils.files import Source, read_payload

logger = logging.getLogger(__name__)

Folder = Literal["posts", "comments"]
Reader = Callable[[Source], bytes]

_BASE36 = string.digits + string.ascii_lowercase


class ImageUploadService:
    """Create-only image uploads with public URL resolution."""

    _CONTENT_TYPE = "image/jpeg"
    _EXTENSION = "jpeg"
    _SUFFIX_LENGTH = 6

    def __init__(
        self,
        storage: ObjectStorage,
        *,
        reader: Reader = read_payload,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._storage = storage
        self._reader = reader
        self._clock = clock

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build_target(self, folder: str) -> UploadTarget:
        if not folder or "/" in folder:
            raise ValueError("folder must be a single non-empty path segment, got %r" % folder)
        timestamp = int(self._clock() * 1000)
        suffix = "".join(secrets.choice(_BASE36) for _ in range(self._SUFFIX_LENGTH))
        return UploadTarget(
            folder=folder,
            generated_name=f"{timestamp}-{suffix}.{self._EXTENSION}",
            content_type=self._CONTENT_TYPE,
        )

    def upload_image(self, uri: Source, folder: Folder = "posts") -> str:
        """Upload *uri* under *folder* and return its public URL.

        Raises ``ReadError`` if the source cannot be read and ``UploadError``
        (``ObjectExistsError`` on a name collision) if storage fails.
        """

        target = self.build_target(folder)

        try:
            payload = self._reader(uri)
        except (OSError, ValueError, httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("Error reading image %s: %s", uri, exc)
            raise ReadError(uri, exc) from exc

        try:
            self._storage.put_if_absent(target.path, payload, content_type=target.content_type)
            url = self._storage.get_public_url(target.path)
        except UploadError as exc:
            logger.error("Error uploading image: %s", exc)
            raise

        logger.info("Image uploaded: %s", url)
        return url

    def upload_multiple_images(self, uris: Iterable[Source], folder: Folder = "posts") -> List[str]:
        """Upload all *uris* concurrently; URLs come back in input order.

        Any failure fails the whole call. Uploads that already succeeded are
        not rolled back.
        """

        uris = list(uris)
        if not uris:
            return []

        logger.info("Uploading %d images...", len(uris))
        with ThreadPoolExecutor(max_workers=len(uris), thread_name_prefix="image-upload") as executor:
            futures = [executor.submit(self.upload_image, uri, folder) for uri in uris]
            urls = [future.result() for future in futures]

        logger.info("All images uploaded: %s", urls)
        return urls

    def delete_image(self, url: str) -> None:
        path = storage_path_from_url(url)
        try:
            self._storage.remove([path])
        except Exception as exc:
            logger.error("Error deleting image %s: %s", path, exc)
            raise


# ------------------------------------------------------------------
# Helper functions
# ------------------------------------------------------------------


def storage_path_from_url(url: str) -> str:
    """Return ``{folder}/{filename}`` from the last two segments of *url*.

    Assumes the URL carries no extra trailing segments or query string, which
    holds for URLs produced by :meth:`ImageUploadService.upload_image`.
    """

    parts = url.split("/")
    if len(parts) < 2:
        raise ValueError("Not an image URL: %r" % url)
    return f"{parts[-2]}/{parts[-1]}"


# ------------------------------------------------------------------
# Module-level facade
# ------------------------------------------------------------------


@lru_cache()
def get_image_upload_service() -> ImageUploadService:
    settings = get_settings()

    def reader(uri: Source) -> bytes:
        return read_payload(uri, timeout=settings.http_timeout)

    return ImageUploadService(get_storage(), reader=reader)


def upload_image(uri: Source, folder: Folder = "posts") -> str:
    return get_image_upload_service().upload_image(uri, folder)


def upload_multiple_images(uris: Iterable[Source], folder: Folder = "posts") -> List[str]:
    return get_image_upload_service().upload_multiple_images(uris, folder)


def delete_image(url: str) -> None:
    get_image_upload_service().delete_image(url)
