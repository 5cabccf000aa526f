"""
Poster compression, upload and cleanup
"""

import io
import logging
import time
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Dict, Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from app.core.config import settings
from app.core.exceptions import PersistenceError, PosterProcessingError
from app.services.poster_storage import PosterStorage
from app.utils.posters import extract_poster_path, get_resized_image_path

logger = logging.getLogger(__name__)

KEEP_FORMATS = {"JPEG": "image/jpeg", "PNG": "image/png", "WEBP": "image/webp"}
MIN_QUALITY = 0.3


@dataclass
class PosterUpload:
    """An uploaded poster file"""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


def _open_image(data: bytes) -> tuple[Image.Image, Optional[str]]:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise PosterProcessingError(f"Unreadable image: {e}") from e
    # Phone photos carry their rotation in EXIF
    return ImageOps.exif_transpose(image), image.format


def _encode(image: Image.Image, image_format: str, quality: float) -> bytes:
    if image_format == "JPEG" and image.mode not in ("RGB", "L"):
        image = image.convert("RGB")
    buffer = io.BytesIO()
    options = {} if image_format == "PNG" else {"quality": int(quality * 100)}
    image.save(buffer, format=image_format, **options)
    return buffer.getvalue()


def compress_image(
    data: bytes,
    max_size_mb: float = settings.POSTER_MAX_SIZE_MB,
    max_width_or_height: int = settings.POSTER_MAX_DIMENSION,
    quality: float = settings.POSTER_QUALITY,
) -> tuple[bytes, str]:
    """Downscale and re-encode an image until it fits ``max_size_mb``.

    Returns the encoded bytes and their content type. Lossy formats lower
    their quality step by step, PNG shrinks its dimensions instead.
    """
    image, source_format = _open_image(data)
    image_format = source_format if source_format in KEEP_FORMATS else "JPEG"
    image.thumbnail((max_width_or_height, max_width_or_height))

    max_bytes = int(max_size_mb * 1024 * 1024)
    encoded = _encode(image, image_format, quality)
    while len(encoded) > max_bytes:
        if image_format == "PNG":
            if min(image.size) <= 64:
                break
            image = image.resize((int(image.width * 0.8), int(image.height * 0.8)))
        else:
            if quality <= MIN_QUALITY:
                break
            quality = round(quality - 0.1, 2)
        encoded = _encode(image, image_format, quality)

    return encoded, KEEP_FORMATS[image_format]


def make_resized_variant(
    data: bytes,
    width: int = settings.RESIZED_POSTER_WIDTH,
    height: int = settings.RESIZED_POSTER_HEIGHT,
) -> bytes:
    """The smaller WebP copy shown on calendar cards"""
    image, _ = _open_image(data)
    image.thumbnail((width, height))
    return _encode(image, "WEBP", settings.POSTER_QUALITY)


def poster_path_for(filename: str, now_ms: Optional[int] = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    name = PurePosixPath(filename.replace("\\", "/")).name or "poster"
    return f"posters/{now_ms}_{name}"


class PosterService:
    """Stores posters with their resized variant and removes them again"""

    def __init__(self, storage: PosterStorage):
        self.storage = storage

    def attach(self, upload: PosterUpload) -> Dict[str, str]:
        """Compress and upload a poster, returning the record fields that point at it.

        Raises PosterProcessingError when the file is not a usable image and
        PersistenceError when the upload fails.
        """
        compressed, content_type = compress_image(upload.content)
        path = poster_path_for(upload.filename)
        poster_url = self.storage.upload(path, compressed, content_type)

        resized_path = get_resized_image_path(path)
        try:
            self.storage.upload(resized_path, make_resized_variant(compressed), "image/webp")
        except (PosterProcessingError, PersistenceError):
            self.delete_files({"poster_path": path})
            raise

        logger.info(f"Stored poster {path}")
        return {
            "poster_url": poster_url,
            "poster_path": path,
            "resized_poster_path": resized_path,
        }

    def delete_files(self, record) -> None:
        """Best effort removal of both poster variants, failures are only logged"""
        path = extract_poster_path(record)
        if not path:
            return

        for key in (path, get_resized_image_path(path)):
            try:
                self.storage.delete(key)
            except Exception as e:
                logger.warning(f"Could not delete poster image {key}: {e}")
