# Export functionality using Pillow
import io
import os
from typing import Optional

from PIL import Image

from ..config import settings
from ..processing.raster import RasterBuffer
from ..utils.errors import ErrorCategory, FileIOError, handle_errors
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Pillow format name by file extension
FORMAT_BY_EXTENSION = {
    '.png': 'PNG',
    '.jpg': 'JPEG',
    '.jpeg': 'JPEG',
    '.webp': 'WEBP',
    '.tif': 'TIFF',
    '.tiff': 'TIFF',
    '.bmp': 'BMP',
}

# Formats that cannot store an alpha channel; images are flattened to RGB
OPAQUE_FORMATS = {'JPEG', 'BMP'}


def format_for_path(file_path: str) -> str:
    """Pillow format name for a file path, based on its extension."""
    ext = os.path.splitext(file_path)[1].lower()
    image_format = FORMAT_BY_EXTENSION.get(ext)
    if image_format is None:
        raise FileIOError(
            f"Unsupported output extension '{ext}'",
            file_path=file_path,
            user_message=f"Cannot save as '{ext or 'no extension'}'. Use one of: {', '.join(sorted(FORMAT_BY_EXTENSION))}",
        )
    return image_format


@handle_errors(
    category=ErrorCategory.FILE_IO,
    log_level="exception",
    reraise=True,
    user_message="The image could not be encoded.",
)
def encode_image(
    buffer: RasterBuffer,
    image_format: Optional[str] = None,
    quality: Optional[int] = None,
    png_compression: Optional[int] = None,
) -> bytes:
    """Encodes a buffer into image file bytes.

    PNG, WebP and TIFF keep the alpha channel; JPEG and BMP are flattened to RGB.

    Args:
        buffer: The image to encode.
        image_format: Pillow format name ('PNG', 'JPEG', 'WEBP', ...); defaults to PNG.
        quality: JPEG/WebP quality (1-100).
        png_compression: PNG compression level (0-9).

    Returns:
        The encoded bytes.

    Raises:
        FileIOError: for empty buffers or unknown formats.
        AppError: wrapping any encoder failure from Pillow.
    """
    if image_format is None:
        image_format = settings.IO_DEFAULTS["default_output_format"]
    if quality is None:
        quality = settings.IO_DEFAULTS["jpeg_quality"]
    if png_compression is None:
        png_compression = settings.IO_DEFAULTS["png_compression"]

    image_format = image_format.upper()
    if image_format == 'JPG':
        image_format = 'JPEG'
    if image_format not in set(FORMAT_BY_EXTENSION.values()):
        raise FileIOError(f"Unsupported image format '{image_format}'",
                          user_message=f"Unsupported image format: {image_format}")
    if buffer.is_empty():
        raise FileIOError("Cannot encode an empty image.")

    quality = max(1, min(int(quality), 100))
    png_compression = max(0, min(int(png_compression), 9))

    img = Image.fromarray(buffer.pixels)
    if image_format in OPAQUE_FORMATS:
        img = img.convert('RGB')

    save_params = {}
    if image_format in ('JPEG', 'WEBP'):
        save_params['quality'] = quality
    elif image_format == 'PNG':
        save_params['compress_level'] = png_compression

    out = io.BytesIO()
    img.save(out, format=image_format, **save_params)
    return out.getvalue()


@handle_errors(fallback_value=False, category=ErrorCategory.FILE_IO, log_level="error")
def save_image(
    buffer: RasterBuffer,
    file_path: str,
    quality: Optional[int] = None,
    png_compression: Optional[int] = None,
) -> bool:
    """Saves a buffer to file_path, the format chosen by the extension.

    Returns:
        bool: True if saving was successful, False if writing failed.

    Raises:
        FileIOError: for unsupported extensions or empty buffers.
        AppError: when Pillow fails to encode the image.
    """
    image_format = format_for_path(file_path)
    data = encode_image(buffer, image_format, quality=quality, png_compression=png_compression)

    with open(file_path, 'wb') as f:
        f.write(data)
    logger.info("Saved %s image to '%s' (%d bytes)", image_format, file_path, len(data))
    return True


def suggest_output_name(source_name: Optional[str], suffix: Optional[str] = None, extension: str = ".png") -> str:
    """Output file name for an edited image: '<stem><suffix><extension>'.

    Without a source name the result is 'edited<extension>'.
    """
    if suffix is None:
        suffix = settings.IO_DEFAULTS["output_suffix"]
    if not source_name:
        return f"edited{extension}"
    directory, base = os.path.split(source_name)
    stem = os.path.splitext(base)[0] or "image"
    return os.path.join(directory, f"{stem}{suffix}{extension}")
