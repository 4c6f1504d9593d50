# Image import functionality using Pillow
import io
import math
import os
from typing import Optional, Union

import cv2
import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from ..config import settings
from ..processing.raster import RasterBuffer
from ..utils.errors import ErrorCategory, FileIOError, log_and_continue
from ..utils.logger import get_logger

logger = get_logger(__name__)

SUPPORTED_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.tif', '.tiff', '.bmp', '.webp', '.gif')


def is_supported_image(file_path: str) -> bool:
    """Check the file extension against the formats we load."""
    return os.path.splitext(str(file_path))[1].lower() in SUPPORTED_EXTENSIONS


def downscale_to_max_dimension(buffer: RasterBuffer, max_dimension: Optional[int]) -> RasterBuffer:
    """
    Shrinks a buffer so its longest side is at most max_dimension.

    Both sides are scaled by the same factor and rounded to the nearest pixel
    with halves rounded up (never below 1). Buffers that already fit, and a max_dimension of None
    or <= 0, are returned unchanged.
    """
    if not max_dimension or max_dimension <= 0 or buffer.is_empty():
        return buffer

    longest = max(buffer.width, buffer.height)
    if longest <= max_dimension:
        return buffer

    scale = max_dimension / longest
    new_w = max(1, int(math.floor(buffer.width * scale + 0.5)))
    new_h = max(1, int(math.floor(buffer.height * scale + 0.5)))
    logger.info("Downscaling %dx%d to %dx%d", buffer.width, buffer.height, new_w, new_h)
    resized = cv2.resize(buffer.pixels, (new_w, new_h), interpolation=cv2.INTER_AREA)
    return RasterBuffer(new_w, new_h, resized.reshape(new_h, new_w, 4))


def _to_raster(img: Image.Image, source: str) -> RasterBuffer:
    """Orient, convert to RGBA and wrap a Pillow image."""
    # Apply EXIF orientation (returns a new image object when a tag is present)
    img_oriented = ImageOps.exif_transpose(img)

    icc_profile = img_oriented.info.get('icc_profile')
    if icc_profile:
        log_and_continue(
            f"Embedded ICC profile ({len(icc_profile)} bytes) in '{source}' is ignored.",
            category=ErrorCategory.RECOVERABLE,
            level="info",
        )

    if img_oriented.mode != 'RGBA':
        logger.debug("Converting image from mode '%s' to 'RGBA'.", img_oriented.mode)
        img_rgba = img_oriented.convert('RGBA')
    else:
        img_rgba = img_oriented

    pixels = np.array(img_rgba, dtype=np.uint8)
    if pixels.size == 0:
        raise FileIOError(f"Loaded image is empty: '{source}'", file_path=source)
    return RasterBuffer.from_array(pixels)


def load_image(file_path: Union[str, os.PathLike], max_dimension: Optional[int] = None) -> RasterBuffer:
    """Loads an image file into an RGBA RasterBuffer using Pillow.

    Handles EXIF orientation, converts any mode to RGBA and downscales the
    result so the longest side fits max_dimension.

    Args:
        file_path: The path to the image file.
        max_dimension: Longest allowed side; defaults to IO_DEFAULTS["max_dimension"].
            Pass 0 to keep the full resolution.

    Returns:
        RasterBuffer with the decoded pixels.

    Raises:
        FileIOError: if the path is invalid, missing, or not a decodable image.
    """
    if max_dimension is None:
        max_dimension = settings.IO_DEFAULTS["max_dimension"]

    if not file_path:
        raise FileIOError("Invalid file path provided.", file_path=None,
                          user_message="No image file was given.")
    file_path = os.fspath(file_path)

    if not os.path.isfile(file_path):
        raise FileIOError(f"File not found at '{file_path}'", file_path=file_path,
                          user_message=f"File not found: {file_path}")

    try:
        with Image.open(file_path) as img:
            buffer = _to_raster(img, file_path)
    except UnidentifiedImageError as e:
        raise FileIOError(
            f"Pillow could not identify image file format or file is corrupted: '{file_path}'",
            file_path=file_path,
            original_error=e,
            user_message=f"Not a supported image: {os.path.basename(file_path)}",
        ) from e
    except OSError as e:
        raise FileIOError(f"Error reading image '{file_path}': {e}", file_path=file_path, original_error=e) from e

    logger.info("Loaded image '%s' (%dx%d)", file_path, buffer.width, buffer.height)
    return downscale_to_max_dimension(buffer, max_dimension)


def load_image_bytes(data: bytes, max_dimension: Optional[int] = None) -> RasterBuffer:
    """Decodes an in-memory encoded image (PNG, JPEG, ...) into a RasterBuffer."""
    if max_dimension is None:
        max_dimension = settings.IO_DEFAULTS["max_dimension"]
    if not data:
        raise FileIOError("No image data provided.", user_message="The image data is empty.")

    try:
        with Image.open(io.BytesIO(data)) as img:
            buffer = _to_raster(img, "<bytes>")
    except UnidentifiedImageError as e:
        raise FileIOError(
            "Pillow could not identify the in-memory image data.",
            original_error=e,
            user_message="The data is not a supported image.",
        ) from e
    except OSError as e:
        raise FileIOError(f"Error decoding image data: {e}", original_error=e) from e

    return downscale_to_max_dimension(buffer, max_dimension)
