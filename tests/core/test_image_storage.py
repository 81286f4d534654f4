"""Image Storage — Pillow resizing bounds and disk layout."""

import io

import pytest
from PIL import Image

from ventytime.core.errors import StorageError, ValidationError
from ventytime.infrastructure.image_storage import (
    FULL_SIZE, THUMBNAIL_PREFIX, THUMBNAIL_SIZE, delete_image, resize_to_bounds, save_image,
)


def _png(width, height, mode="RGBA"):
    buffer = io.BytesIO()
    Image.new(mode, (width, height), (200, 10, 10, 255)[: len(mode)]).save(buffer, "PNG")
    return buffer.getvalue()


def test_resize_keeps_aspect_ratio_within_bounds():
    resized = resize_to_bounds(Image.new("RGB", (3840, 1080)), FULL_SIZE)
    assert resized.size == (1920, 540)


def test_small_images_not_upscaled():
    assert resize_to_bounds(Image.new("RGB", (100, 50)), THUMBNAIL_SIZE).size == (100, 50)


def test_save_writes_full_and_thumbnail(tmp_path):
    stored = save_image(_png(1200, 600), ".png", tmp_path)

    assert stored.thumbnail_name == THUMBNAIL_PREFIX + stored.file_name
    with Image.open(tmp_path / stored.thumbnail_name) as thumb:
        assert thumb.size == (300, 150)
    with Image.open(tmp_path / stored.file_name) as full:
        assert full.size == (1200, 600)


def test_png_with_alpha_saved_as_jpeg(tmp_path):
    stored = save_image(_png(40, 40), ".jpg", tmp_path)
    with Image.open(tmp_path / stored.file_name) as image:
        assert image.format == "JPEG"


def test_garbage_bytes_rejected(tmp_path):
    with pytest.raises(ValidationError):
        save_image(b"definitely not an image", ".png", tmp_path)


def test_delete_removes_both_files(tmp_path):
    stored = save_image(_png(10, 10), ".png", tmp_path)
    assert delete_image(stored.file_name, tmp_path) is True
    assert list(tmp_path.iterdir()) == []
    assert delete_image(stored.file_name, tmp_path) is False


def test_oversized_dimensions_rejected_as_invalid(tmp_path, monkeypatch):
    data = _png(20, 20)
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    with pytest.raises(ValidationError):
        save_image(data, ".png", tmp_path)
    assert list(tmp_path.iterdir()) == []


def test_failed_thumbnail_write_leaves_no_files(tmp_path, monkeypatch):
    data = _png(50, 50)
    real_save = Image.Image.save
    calls = []

    def save_then_fail(self, fp, *args, **kwargs):
        calls.append(fp)
        if len(calls) == 2:
            raise OSError("disk full")
        return real_save(self, fp, *args, **kwargs)

    monkeypatch.setattr(Image.Image, "save", save_then_fail)
    with pytest.raises(StorageError):
        save_image(data, ".png", tmp_path)
    assert len(calls) == 2
    assert list(tmp_path.iterdir()) == []
