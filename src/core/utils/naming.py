"""File naming rules shared by upload, list and delete.

Originals are named ``<epoch-ms>-<random>.<ext>``. A thumbnail name is
derived from its original by inserting the marker immediately before the
final extension, so ``a.b.png`` pairs with ``a.b_thumb.png``.
"""

import time
import uuid

from core.utils.constants import THUMBNAIL_MARKER


def generate_file_name(extension: str, *, now_ms: int | None = None) -> str:
    """Generate a collision-resistant file name for a new original."""
    timestamp = now_ms if now_ms is not None else time.time_ns() // 1_000_000
    return f"{timestamp}-{uuid.uuid4().hex[:16]}.{extension.lstrip('.')}"


def split_extension(file_name: str) -> tuple[str, str]:
    """Split on the last dot only; extension is empty when there is none."""
    stem, dot, extension = file_name.rpartition(".")
    if not dot or not stem:
        return file_name, ""
    return stem, extension


def thumbnail_name_for(file_name: str) -> str:
    """Return the thumbnail file name paired with an original."""
    stem, extension = split_extension(file_name)
    if not extension:
        return f"{stem}{THUMBNAIL_MARKER}"
    return f"{stem}{THUMBNAIL_MARKER}.{extension}"


def is_thumbnail_name(file_name: str) -> bool:
    """Whether a stored name follows the thumbnail naming rule."""
    stem, _ = split_extension(file_name)
    return stem.endswith(THUMBNAIL_MARKER)


def original_name_for(thumbnail_name: str) -> str:
    """Inverse of `thumbnail_name_for`."""
    stem, extension = split_extension(thumbnail_name)
    if not stem.endswith(THUMBNAIL_MARKER):
        raise ValueError(f"Not a thumbnail name: {thumbnail_name}")

    stem = stem[: -len(THUMBNAIL_MARKER)]
    return f"{stem}.{extension}" if extension else stem
