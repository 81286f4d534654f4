"""Image Storage — Pillow resizing and local-disk persistence for uploaded images.

Invariants:
    - Full images fit inside 1920x1080, thumbnails inside 300x300; aspect ratio preserved
    - Images smaller than the bound are never upscaled
    - Stored names are random (uuid4 hex) and keep the original extension
    - All functions here are blocking; callers run them in a worker thread
    - A failed save leaves neither file behind
    - Oversized pixel dimensions are rejected like undecodable data

Design Decisions:
    - Image.thumbnail() mutates in place and only shrinks, which is exactly the bound rule
    - Thumbnails live next to the full image with a "thumb_" prefix
"""

import io
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ventytime.core.errors import StorageError, ValidationError

logger = logging.getLogger(__name__)

FULL_SIZE = (1920, 1080)
THUMBNAIL_SIZE = (300, 300)
THUMBNAIL_PREFIX = "thumb_"

_PIL_FORMATS = {
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".png": "PNG",
    ".gif": "GIF",
}


@dataclass(frozen=True)
class StoredImage:
    file_name: str
    thumbnail_name: str


def _open(data: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ValidationError("File is not a valid image", field="file") from e
    return image


def _prepare_for_format(image: Image.Image, pil_format: str) -> Image.Image:
    # JPEG has no alpha channel or palette
    if pil_format == "JPEG" and image.mode not in ("RGB", "L"):
        return image.convert("RGB")
    return image


def resize_to_bounds(image: Image.Image, bounds: tuple[int, int]) -> Image.Image:
    resized = image.copy()
    resized.thumbnail(bounds, Image.Resampling.LANCZOS)
    return resized


def save_image(data: bytes, extension: str, upload_dir: str | Path) -> StoredImage:
    """Decode, resize and write the full image and its thumbnail."""
    pil_format = _PIL_FORMATS[extension]
    image = _open(data)

    directory = Path(upload_dir)
    file_name = f"{uuid.uuid4().hex}{extension}"
    thumbnail_name = f"{THUMBNAIL_PREFIX}{file_name}"

    full = _prepare_for_format(resize_to_bounds(image, FULL_SIZE), pil_format)
    thumb = _prepare_for_format(resize_to_bounds(image, THUMBNAIL_SIZE), pil_format)
    written: list[Path] = []
    try:
        directory.mkdir(parents=True, exist_ok=True)
        for target, img in ((directory / file_name, full), (directory / thumbnail_name, thumb)):
            written.append(target)
            img.save(target, format=pil_format)
    except OSError as e:
        for path in written:
            path.unlink(missing_ok=True)
        logger.error(f"Failed to write image {file_name}: {e}")
        raise StorageError("Failed to store uploaded image") from e

    logger.info(
        f"Stored image {file_name} ({full.width}x{full.height})",
    )
    return StoredImage(file_name=file_name, thumbnail_name=thumbnail_name)


def delete_image(file_name: str, upload_dir: str | Path) -> bool:
    """Remove an image and its thumbnail. True when anything was deleted."""
    directory = Path(upload_dir)
    name = Path(file_name).name
    removed = False
    for candidate in (directory / name, directory / f"{THUMBNAIL_PREFIX}{name}"):
        try:
            candidate.unlink()
            removed = True
        except FileNotFoundError:
            continue
        except OSError as e:
            raise StorageError(f"Failed to delete image {name}") from e
    return removed
