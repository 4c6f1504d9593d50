# IO package initialization
from .image_loader import (
    load_image,
    load_image_bytes,
    downscale_to_max_dimension,
    is_supported_image,
    SUPPORTED_EXTENSIONS,
)
from .image_saver import (
    save_image,
    encode_image,
    format_for_path,
    suggest_output_name,
    FORMAT_BY_EXTENSION,
)

__all__ = [
    'load_image',
    'load_image_bytes',
    'downscale_to_max_dimension',
    'is_supported_image',
    'SUPPORTED_EXTENSIONS',
    'save_image',
    'encode_image',
    'format_for_path',
    'suggest_output_name',
    'FORMAT_BY_EXTENSION',
]
