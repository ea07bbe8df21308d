"""Object storage backends for uploaded images.

Objects are stored under the following key pattern:

    {folder}/{unix_millis}-{random}.jpeg

and are served through the bucket's public URL. The Supabase Storage
backend is the production implementation; anything implementing
:class:`ObjectStorage` can stand in for it (tests use an in-memory one).
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Sequence

from supabase import Client, create_client

from cinefeed.config import Settings, get_settings
from cinefeed.errors import DeleteError, ObjectExistsError, UploadError

logger = logging.getLogger(__name__)


class ObjectStorage(ABC):
    """Abstract interface for a bucket of publicly readable objects."""

    @abstractmethod
    def put_if_absent(self, path: str, data: bytes, *, content_type: str) -> None:
        """Create *path* without overwriting.

        Raises ``ObjectExistsError`` if the object exists and ``UploadError``
        for any other failure.
        """

    @abstractmethod
    def get_public_url(self, path: str) -> str:
        """Return the public-read URL of *path*. Raises ``UploadError``."""

    @abstractmethod
    def remove(self, paths: Sequence[str]) -> None:
        """Delete *paths*. Raises ``DeleteError``."""


class SupabaseStorage(ObjectStorage):
    """Wrapper around a Supabase Storage bucket."""

    def __init__(self, client: Client, bucket: str) -> None:
        self._client = client
        self._bucket_name = bucket

    @classmethod
    def from_settings(cls, settings: Settings) -> "SupabaseStorage":
        return cls(get_supabase_client(), settings.storage_bucket)

    @property
    def bucket(self) -> str:
        return self._bucket_name

    # ------------------------------------------------------------------
    # ObjectStorage
    # ------------------------------------------------------------------

    def put_if_absent(self, path: str, data: bytes, *, content_type: str) -> None:
        try:
            self._bucket().upload(
                path,
                data,
                file_options={"content-type": content_type, "upsert": "false"},
            )
        except Exception as exc:
            if _is_duplicate(exc):
                raise ObjectExistsError(path, exc) from exc
            raise UploadError(path, exc) from exc
        logger.debug("Uploaded %d bytes to %s/%s", len(data), self._bucket_name, path)

    def get_public_url(self, path: str) -> str:
        try:
            url = self._bucket().get_public_url(path)
        except Exception as exc:
            raise UploadError(path, exc) from exc
        # Some storage3 releases append an empty query string
        return url.rstrip("?")

    def remove(self, paths: Sequence[str]) -> None:
        paths = list(paths)
        try:
            self._bucket().remove(paths)
        except Exception as exc:
            raise DeleteError(", ".join(paths), exc) from exc
        logger.debug("Removed %s from %s", paths, self._bucket_name)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _bucket(self):
        return self._client.storage.from_(self._bucket_name)


# ------------------------------------------------------------------
# Helper functions
# ------------------------------------------------------------------


def _is_duplicate(exc: Exception) -> bool:
    status = getattr(exc, "status", None) or getattr(exc, "status_code", None)
    if str(status) == "409":
        return True
    text = str(exc).lower()
    return "duplicate" in text or "already exists" in text


@lru_cache()
def get_supabase_client() -> Client:
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_key:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set to use Supabase Storage")
    return create_client(settings.supabase_url, settings.supabase_key)


@lru_cache()
def get_storage() -> ObjectStorage:
    return SupabaseStorage.from_settings(get_settings())
