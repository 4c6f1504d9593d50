import numpy as np
import cv2


def clamp(value, min_value=0, max_value=255):
    """
    Bounds a scalar or NumPy array to [min_value, max_value].

    Scalars come back as scalars, arrays as new arrays of the same shape.
    """
    if isinstance(value, np.ndarray):
        return np.clip(value, min_value, max_value)
    return min_value if value < min_value else max_value if value > max_value else value


def clamp_to_uint8(values):
    """
    Re-quantizes computed channel intensities into the valid 8-bit range.

    Values are rounded to the nearest integer (halves to even), clamped to
    0-255 and returned as a new uint8 array.
    """
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def channel_histogram(channel):
    """Returns the 256-bin histogram of a uint8 channel as an int64 array."""
    return np.bincount(np.asarray(channel, dtype=np.uint8).ravel(), minlength=256)


def find_clip_bounds(histogram, clip_count):
    """
    Finds the (low, high) bins of a histogram after clipping clip_count samples from each end.

    low is the first bin, scanning upwards, where the running count exceeds
    clip_count; high is the same scanning downwards. When the bounds collapse
    (high <= low), or the histogram is empty, the full range (0, 255) is returned.
    """
    histogram = np.asarray(histogram)
    if histogram.sum() <= clip_count:
        return 0, 255

    ascending = np.cumsum(histogram)
    low = int(np.argmax(ascending > clip_count))
    descending = np.cumsum(histogram[::-1])
    high = 255 - int(np.argmax(descending > clip_count))

    if high <= low:
        return 0, 255
    return low, high


def build_levels_lut(low, high):
    """
    Builds a 256-entry uint8 lookup table stretching [low, high] to [0, 255].

    A zero-width range uses a divisor of 1 instead of dividing by zero.
    """
    value_range = (high - low) or 1
    lut_x = np.arange(256, dtype=np.float64)
    return clamp_to_uint8((lut_x - low) / value_range * 255.0)


def apply_lut(image_rgb, luts):
    """
    Applies one lookup table per channel to a uint8 image.

    Args:
        image_rgb: uint8 NumPy array of shape (h, w, c).
        luts: sequence of c uint8 arrays with 256 entries each.

    Returns:
        New uint8 array with the same shape as image_rgb.
    """
    if image_rgb.size == 0:
        return image_rgb.copy()
    channels = image_rgb.shape[2]
    if len(luts) != channels:
        raise ValueError(f"Expected {channels} lookup tables, got {len(luts)}")

    # cv2.LUT with a multi-channel table maps each channel through its own entry
    lut_stack = np.stack([np.asarray(lut, dtype=np.uint8) for lut in luts], axis=-1).reshape(1, 256, channels)
    result = cv2.LUT(np.ascontiguousarray(image_rgb), lut_stack)
    return result.reshape(image_rgb.shape)
