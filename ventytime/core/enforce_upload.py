"""Upload Enforcement — extension and size rules for image uploads.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Extension comparison is case-insensitive
"""

from pathlib import PurePath

from ventytime.core.errors import ValidationError

ALLOWED_IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif")


def image_extension(filename: str | None) -> str:
    return PurePath(filename or "").suffix.lower()


def check_extension(filename: str | None) -> ValidationError | None:
    if image_extension(filename) not in ALLOWED_IMAGE_EXTENSIONS:
        return ValidationError(
            "Invalid file type. Allowed types are: "
            + ", ".join(ALLOWED_IMAGE_EXTENSIONS),
            field="file",
        )
    return None


def check_size(size: int, max_bytes: int) -> ValidationError | None:
    if size == 0:
        return ValidationError("No file was uploaded", field="file")
    if size > max_bytes:
        return ValidationError(
            f"File size must be less than {max_bytes // (1024 * 1024)}MB",
            field="file",
        )
    return None


def validate_image_upload(
    filename: str | None, size: int, max_bytes: int,
) -> ValidationError | None:
    return check_extension(filename) or check_size(size, max_bytes)
