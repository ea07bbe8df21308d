"""Tests for prepare_images and the upload script."""
from __future__ import annotations

import importlib.util
from pathlib import Path

import pytest
from PIL import Image

from cinefeed.errors import AssetNotFoundError
from cinefeed.services.image_compression import ImageCompressor
from cinefeed.services.image_upload import ImageUploadService, storage_path_from_url
from cinefeed.services.pipeline import prepare_images

SCRIPT_PATH = Path(__file__).resolve().parents[1] / "scripts" / "upload_images.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("upload_images_script", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_prepare_images_compresses_then_uploads(make_image, memory_storage, tmp_path: Path) -> None:
    sources = [make_image("a.jpg", (2000, 1000)), make_image("b.png", (300, 600), fmt="PNG")]
    progress: list[tuple[int, int]] = []

    urls = prepare_images(
        sources,
        "comments",
        on_progress=lambda current, total: progress.append((current, total)),
        compressor=ImageCompressor(output_dir=str(tmp_path)),
        uploader=ImageUploadService(memory_storage),
    )

    assert progress == [(1, 2), (2, 2)]
    assert all("/comments/" in url for url in urls)
    sizes = []
    for url in urls:
        data, content_type = memory_storage.objects[storage_path_from_url(url)]
        assert content_type == "image/jpeg"
        out = tmp_path / "check.jpeg"
        out.write_bytes(data)
        with Image.open(out) as img:
            sizes.append(img.size)
    assert sizes == [(1280, 640), (300, 600)]


def test_prepare_images_uploads_nothing_if_compression_fails(make_image, memory_storage, tmp_path: Path) -> None:
    sources = [make_image("a.jpg"), tmp_path / "missing.jpg"]
    with pytest.raises(AssetNotFoundError):
        prepare_images(
            sources,
            compressor=ImageCompressor(output_dir=str(tmp_path)),
            uploader=ImageUploadService(memory_storage),
        )
    assert memory_storage.objects == {}


def test_script_prints_uploaded_urls(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    script = _load_script()
    calls = []

    def fake_prepare(paths, folder, *, on_progress=None):
        calls.append((list(paths), folder))
        on_progress(1, 1)
        return ["https://cdn/posts/1-a.jpeg"]

    monkeypatch.setattr(script, "prepare_images", fake_prepare)
    script.main(["photo.jpg", "--folder", "comments"])

    out = capsys.readouterr().out
    assert calls == [(["photo.jpg"], "comments")]
    assert "Compressing 1/1..." in out
    assert "https://cdn/posts/1-a.jpeg" in out


def test_script_can_skip_compression(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    script = _load_script()
    monkeypatch.setattr(script, "upload_multiple_images", lambda paths, folder: [f"https://cdn/{folder}/x.jpeg"])
    script.main(["photo.jpg", "--no-compress"])
    assert "https://cdn/posts/x.jpeg" in capsys.readouterr().out
