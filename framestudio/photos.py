"""
Photo intake: upload validation and decoding of customer photos.
"""

import io
from pathlib import Path
from typing import List
from PIL import Image, ImageOps
from loguru import logger

from .errors import FileTooLargeError, InvalidImageFormatError, PhotoLoadError
from .models import PhotoAsset


def validate_upload(filename: str, data: bytes, max_size: int,
                    allowed_extensions: List[str]) -> PhotoAsset:
    """Check size, extension and decodability of an uploaded photo"""
    if not filename:
        raise InvalidImageFormatError("<unnamed>", None)

    size = len(data)
    if size > max_size:
        raise FileTooLargeError(
            filename=filename,
            size_mb=size / (1024 * 1024),
            limit_mb=max_size / (1024 * 1024)
        )

    extension = Path(filename).suffix.lower()
    if extension not in [ext.lower() for ext in allowed_extensions]:
        raise InvalidImageFormatError(filename, extension or None)

    photo = PhotoAsset.from_bytes(data, filename=filename)
    logger.info(f"Accepted photo {filename}: {photo.width}x{photo.height} ({photo.orientation})")
    return photo


def load_photo_image(photo: PhotoAsset) -> Image.Image:
    """Decode the photo to RGBA pixels, EXIF rotation applied."""
    try:
        if isinstance(photo.source, bytes):
            img = Image.open(io.BytesIO(photo.source))
        else:
            img = Image.open(photo.source)
        with img:
            return ImageOps.exif_transpose(img).convert('RGBA')
    except Exception as e:
        raise PhotoLoadError(photo.label, str(e))
