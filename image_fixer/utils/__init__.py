# This file makes the 'utils' directory a Python package.

from .errors import (
    AppError,
    FileIOError,
    ProcessingError,
    ConfigurationError,
    BufferSizeError,
    ParameterRangeError,
    ErrorCategory,
    handle_errors,
    log_and_continue,
    format_user_error,
)
from .imaging import (
    clamp,
    clamp_to_uint8,
    channel_histogram,
    find_clip_bounds,
    build_levels_lut,
    apply_lut,
)

__all__ = [
    # Errors
    'AppError',
    'FileIOError',
    'ProcessingError',
    'ConfigurationError',
    'BufferSizeError',
    'ParameterRangeError',
    'ErrorCategory',
    'handle_errors',
    'log_and_continue',
    'format_user_error',
    # Imaging
    'clamp',
    'clamp_to_uint8',
    'channel_histogram',
    'find_clip_bounds',
    'build_levels_lut',
    'apply_lut',
]
