# Image adjustment operations
"""
Per-pixel adjustment stages of the pipeline.

Every stage takes a RasterBuffer and returns a new one of the same size; the
input is never modified. A stage whose parameter has no effect returns the
input buffer itself, so callers must treat results as read-only.
"""

import math
from typing import List, Optional, Tuple

import numpy as np

from ..config import settings
from ..utils.imaging import (
    apply_lut,
    build_levels_lut,
    channel_histogram,
    clamp,
    clamp_to_uint8,
    find_clip_bounds,
)
from ..utils.logger import get_logger
from .color import hsl_to_rgb, rgb_to_hsl
from .raster import RasterBuffer

logger = get_logger(__name__)


# --- Auto-Level (White Balance) ---

def compute_channel_levels(buffer: RasterBuffer, clip_fraction: Optional[float] = None) -> List[Tuple[int, int]]:
    """
    Finds the clipped (low, high) histogram bounds of the R, G and B channels.

    clip_fraction of the pixels (rounded) may fall below low and above high.
    """
    if clip_fraction is None:
        clip_fraction = settings.PIPELINE_DEFAULTS["auto_level_clip_fraction"]
    n = buffer.pixel_count
    # Halves round up
    clip_count = int(clamp(math.floor(n * clip_fraction + 0.5), 0, max(n - 1, 0)))
    return [
        find_clip_bounds(channel_histogram(buffer.pixels[..., ch]), clip_count)
        for ch in range(3)
    ]


def apply_auto_levels(buffer: RasterBuffer, clip_fraction: Optional[float] = None) -> RasterBuffer:
    """
    Auto white balance via per-channel auto levels with percentile clipping.

    Each colour channel is stretched so its clipped low/high bounds map to
    0 and 255. A channel whose bounds collapse (e.g. a single-colour image)
    is left unchanged. Alpha passes through.
    """
    if buffer.is_empty():
        return buffer

    levels = compute_channel_levels(buffer, clip_fraction)
    logger.debug("Auto levels bounds (R, G, B): %s", levels)
    luts = [build_levels_lut(low, high) for low, high in levels]
    return buffer.with_rgb(apply_lut(buffer.rgb, luts))


# --- Noise Injection ---

def _nonzero_uniform(rng: np.random.Generator, shape) -> np.ndarray:
    """Uniform samples in (0, 1). Zero draws are redrawn so log() stays finite."""
    samples = rng.random(shape)
    zeros = samples == 0.0
    while zeros.any():
        samples[zeros] = rng.random(int(zeros.sum()))
        zeros = samples == 0.0
    return samples


def box_muller(rng: np.random.Generator, shape, sigma: float = 1.0) -> np.ndarray:
    """
    Zero-mean Gaussian deviates via the Box-Muller transform.

    Each deviate uses its own pair of uniforms, so no two samples share a draw.
    """
    u = _nonzero_uniform(rng, shape)
    v = _nonzero_uniform(rng, shape)
    magnitude = np.sqrt(-2.0 * np.log(u))
    return magnitude * np.cos(2.0 * math.pi * v) * sigma


def apply_gaussian_noise(buffer: RasterBuffer, sigma: float, rng: Optional[np.random.Generator] = None) -> RasterBuffer:
    """
    Adds independent Gaussian noise to every colour channel of every pixel.

    Args:
        buffer: Input image.
        sigma: Standard deviation of the noise in 8-bit levels. <= 0 is a no-op.
        rng: Random generator; an unseeded one is created if omitted.
    """
    if sigma <= 0 or buffer.is_empty():
        return buffer
    if rng is None:
        rng = np.random.default_rng()

    noise = box_muller(rng, buffer.rgb.shape, sigma)
    return buffer.with_rgb(clamp_to_uint8(buffer.rgb.astype(np.float64) + noise))


# --- Brightness / Contrast ---

def contrast_factor(contrast_pct: float) -> float:
    """
    Standard contrast factor 259(c+1) / 255(1-c) for c = contrast_pct / 100.

    (1 - c) is floored so contrast_pct == 100 gives a large finite factor.
    """
    c = contrast_pct / 100.0
    denominator = max(1.0 - c, settings.PIPELINE_DEFAULTS["contrast_min_denominator"])
    return (259.0 * (c + 1.0)) / (255.0 * denominator)


def apply_brightness_contrast(buffer: RasterBuffer, brightness_pct: float, contrast_pct: float) -> RasterBuffer:
    """Affine remap out = f * (in - 128) + 128 + b of the colour channels."""
    if (brightness_pct == 0 and contrast_pct == 0) or buffer.is_empty():
        return buffer

    offset = (brightness_pct / 100.0) * 255.0
    factor = contrast_factor(contrast_pct)
    logger.debug("Brightness offset %.2f, contrast factor %.4f", offset, factor)
    result = factor * (buffer.rgb.astype(np.float64) - 128.0) + 128.0 + offset
    return buffer.with_rgb(clamp_to_uint8(result))


# --- Saturation ---

def apply_saturation(buffer: RasterBuffer, saturation_pct: float) -> RasterBuffer:
    """
    Scales HSL saturation by 1 + saturation_pct / 100.

    -100 fully desaturates (grey at the pixel's HSL lightness). Greys stay grey.
    """
    if saturation_pct == 0 or buffer.is_empty():
        return buffer

    factor = 1.0 + saturation_pct / 100.0
    rgb = buffer.rgb
    hue, sat, light = rgb_to_hsl(rgb[..., 0], rgb[..., 1], rgb[..., 2])
    sat = np.clip(sat * factor, 0.0, 1.0)
    r, g, b = hsl_to_rgb(hue, sat, light)
    return buffer.with_rgb(clamp_to_uint8(np.stack([r, g, b], axis=-1)))
