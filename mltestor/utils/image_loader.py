import io
import logging
from typing import Optional, Tuple

from PIL import Image

from mltestor import config

logger = logging.getLogger(__name__)

# Anything Pillow raises for a file it cannot fully decode
DECODE_ERRORS = (OSError, SyntaxError, ValueError, Image.DecompressionBombError)


def bytes_to_kb(n: int) -> float:
    return n / 1024.0 if n is not None else 0.0


def _file_size(file) -> Optional[int]:
    size = getattr(file, "size", None)
    if size is None and hasattr(file, "getvalue"):
        size = len(file.getvalue())
    return size


def validate_image(image: Image.Image) -> bool:
    """
    Validate image format and size.

    Args:
        image: PIL Image object

    Returns:
        True if valid, False otherwise
    """
    if image.format not in config.ALLOWED_FORMATS:
        return False

    width, height = image.size
    if width < config.MIN_IMAGE_SIDE or height < config.MIN_IMAGE_SIDE:
        return False
    if width > config.MAX_IMAGE_SIDE or height > config.MAX_IMAGE_SIDE:
        return False

    return True


def _open_picked(file) -> Tuple[Optional[Image.Image], Optional[str]]:
    if file is None:
        return None, "No file provided."

    size = _file_size(file)
    if size is not None and size > config.MAX_UPLOAD_SIZE:
        return None, f"File too large: {bytes_to_kb(size):.0f} KB (max {bytes_to_kb(config.MAX_UPLOAD_SIZE):.0f} KB)"

    try:
        file.seek(0)
        image = Image.open(io.BytesIO(file.read()))
        image.load()
    except DECODE_ERRORS:
        return None, "Picked file is not a supported image or is corrupted."
    finally:
        file.seek(0)

    if not validate_image(image):
        return None, f"Unsupported image: {image.format} {image.width}x{image.height}"

    return image, None


def is_valid_image_file(file) -> Tuple[bool, Optional[str]]:
    """Basic validation for a picked file's size, type and dimensions."""
    image, err = _open_picked(file)
    return image is not None, err


def load_picked_image(file) -> Optional[Image.Image]:
    """
    Turn whatever the gallery picker handed back into a PIL image.

    Returns None when nothing usable was picked.
    """
    image, err = _open_picked(file)
    if image is None:
        logger.warning(f"Ignoring picked file: {err}")
    return image
