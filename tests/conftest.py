"""Shared fixtures: an in-memory object store and an image factory."""
from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Callable, Optional, Sequence

import pytest
from PIL import Image

from cinefeed.config import get_settings
from cinefeed.errors import DeleteError, ObjectExistsError, UploadError
from cinefeed.services import image_compression, image_upload, storage
from cinefeed.services.storage import ObjectStorage

PUBLIC_BASE_URL = "https://demo.supabase.co/storage/v1/object/public/post-images"


class MemoryStorage(ObjectStorage):
    """Thread-safe in-memory bucket with switchable failures."""

    def __init__(
        self,
        *,
        barrier: Optional[threading.Barrier] = None,
        fail_uploads: bool = False,
        fail_public_url: bool = False,
        fail_remove: bool = False,
    ) -> None:
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.removed: list[list[str]] = []
        self._barrier = barrier
        self._fail_uploads = fail_uploads
        self._fail_public_url = fail_public_url
        self._fail_remove = fail_remove
        self._lock = threading.Lock()

    def put_if_absent(self, path: str, data: bytes, *, content_type: str) -> None:
        if self._barrier is not None:
            self._barrier.wait()
        if self._fail_uploads:
            raise UploadError(path, ConnectionError("network down"))
        with self._lock:
            if path in self.objects:
                raise ObjectExistsError(path)
            self.objects[path] = (data, content_type)

    def get_public_url(self, path: str) -> str:
        if self._fail_public_url:
            raise UploadError(path, RuntimeError("url resolution failed"))
        return f"{PUBLIC_BASE_URL}/{path}"

    def remove(self, paths: Sequence[str]) -> None:
        if self._fail_remove:
            raise DeleteError(", ".join(paths), RuntimeError("permission denied"))
        with self._lock:
            self.removed.append(list(paths))
            for path in paths:
                self.objects.pop(path, None)


@pytest.fixture(autouse=True)
def _clear_cached_singletons(monkeypatch: pytest.MonkeyPatch):
    for name in ("SUPABASE_URL", "SUPABASE_KEY", "STORAGE_BUCKET", "IMAGE_MAX_BYTES", "IMAGE_MAX_DIM"):
        monkeypatch.delenv(name, raising=False)
    caches = (
        get_settings,
        storage.get_supabase_client,
        storage.get_storage,
        image_compression.get_image_compressor,
        image_upload.get_image_upload_service,
    )
    for cached in caches:
        cached.cache_clear()
    yield
    for cached in caches:
        cached.cache_clear()


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def storage_factory() -> Callable[..., MemoryStorage]:
    return MemoryStorage


@pytest.fixture
def make_image(tmp_path: Path) -> Callable[..., Path]:
    """Write an image to ``tmp_path`` and return its path.

    ``noise=True`` fills it with random pixels so the JPEG stays large.
    """

    def _make(
        name: str = "photo.jpg",
        size: tuple[int, int] = (640, 480),
        *,
        noise: bool = False,
        mode: str = "RGB",
        fmt: str = "JPEG",
    ) -> Path:
        width, height = size
        if noise:
            img = Image.frombytes("RGB", size, os.urandom(width * height * 3)).convert(mode)
        else:
            img = Image.new(mode, size, color=(200, 40, 40, 255)[: len(mode)])
        path = tmp_path / name
        img.save(path, format=fmt)
        return path

    return _make
