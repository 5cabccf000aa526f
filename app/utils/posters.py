"""
Poster storage key helpers
"""

from typing import Any, Optional
from urllib.parse import unquote, urlparse

from app.core.config import settings

RESIZED_POSTER_SUFFIX = settings.RESIZED_POSTER_SUFFIX


def get_resized_image_path(original_key: str, suffix: str = RESIZED_POSTER_SUFFIX) -> str:
    """Derive the storage key of the resized poster variant.

    ``posters/123_photo.png`` becomes ``posters/123_photo_750x1080.webp``.
    The resized asset is not checked for existence.
    """
    if not original_key:
        return ""

    dot = original_key.rfind(".")
    if dot == -1:
        return f"{original_key}{suffix}"
    return f"{original_key[:dot]}{suffix}"


def extract_poster_path(record: Any) -> Optional[str]:
    """Return the storage key of a record's poster.

    Prefers the explicit ``poster_path``. Older records only kept the download
    URL, so as a fallback the key is recovered from the segment after ``/o/``.
    """
    poster_path = _field(record, "poster_path", "posterPath")
    if poster_path:
        return poster_path

    poster_url = _field(record, "poster_url", "posterUrl")
    if not poster_url:
        return None

    try:
        parsed = urlparse(poster_url)
    except ValueError:
        return None

    if not parsed.scheme or not parsed.netloc:
        return None

    _, marker, encoded = parsed.path.partition("/o/")
    if not marker or not encoded:
        return None
    return unquote(encoded.split("/o/")[0])


def _field(record: Any, name: str, alias: str) -> Optional[str]:
    if isinstance(record, dict):
        return record.get(name) or record.get(alias)
    return getattr(record, name, None)
