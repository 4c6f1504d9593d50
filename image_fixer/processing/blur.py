# Gaussian blur
"""
Separable Gaussian blur with clamp-to-edge boundaries.

The 2-D blur is computed as a horizontal 1-D pass into an intermediate uint8
buffer followed by a vertical 1-D pass over that buffer. Out-of-range
neighbours reuse the nearest edge pixel. All four channels, alpha included,
are blurred alike.
"""

import functools
import math
from typing import NamedTuple

import cv2
import numpy as np

from ..config import settings
from ..utils.imaging import clamp
from ..utils.logger import get_logger
from .raster import RasterBuffer

logger = get_logger(__name__)


class GaussianKernel(NamedTuple):
    """Normalised, symmetric 1-D kernel of length 2 * radius + 1."""
    weights: np.ndarray
    radius: int

    @property
    def size(self) -> int:
        return len(self.weights)


@functools.lru_cache(maxsize=64)
def make_gaussian_kernel(sigma: float) -> GaussianKernel:
    """
    Builds the blur kernel for a sigma in pixels.

    radius = ceil(3 * sigma) bounded to [1, 20]; weights are exp(-i^2 / 2 sigma^2)
    normalised to sum to 1. Sigmas at or below the blur threshold give the
    identity kernel [1.0] with radius 0.
    """
    if sigma <= settings.PIPELINE_DEFAULTS["blur_min_sigma"]:
        weights = np.ones(1, dtype=np.float64)
        weights.flags.writeable = False
        return GaussianKernel(weights, 0)

    radius = int(clamp(
        math.ceil(sigma * settings.PIPELINE_DEFAULTS["blur_radius_scale"]),
        1,
        settings.PIPELINE_DEFAULTS["blur_max_radius"],
    ))
    offsets = np.arange(-radius, radius + 1, dtype=np.float64)
    weights = np.exp(-(offsets * offsets) / (2.0 * sigma * sigma))
    weights /= weights.sum()
    # Cached kernels are shared between callers
    weights.flags.writeable = False
    return GaussianKernel(weights, radius)


def _convolve_axis(pixels: np.ndarray, kernel: GaussianKernel, axis: int) -> np.ndarray:
    """1-D filter along one axis, edges extended by replication. uint8 in and out."""
    if kernel.radius == 0 or pixels.size == 0:
        return pixels.copy()

    # Row vector filters along x (axis 1), column vector along y (axis 0)
    shape = (1, kernel.size) if axis == 1 else (kernel.size, 1)
    taps = np.array(kernel.weights, dtype=np.float64).reshape(shape)
    return cv2.filter2D(
        np.ascontiguousarray(pixels), -1, taps, borderType=cv2.BORDER_REPLICATE
    )


def convolve_horizontal(pixels: np.ndarray, kernel: GaussianKernel) -> np.ndarray:
    """Horizontal pass over an (h, w, c) uint8 array. Rows are independent."""
    return _convolve_axis(pixels, kernel, axis=1)


def convolve_vertical(pixels: np.ndarray, kernel: GaussianKernel) -> np.ndarray:
    """Vertical pass over an (h, w, c) uint8 array. Columns are independent."""
    return _convolve_axis(pixels, kernel, axis=0)


def apply_gaussian_blur(buffer: RasterBuffer, sigma_px: float) -> RasterBuffer:
    """
    Blurs the image with a Gaussian of standard deviation sigma_px pixels.

    sigma_px <= 0.1 counts as no visible blur and returns the input.
    """
    if sigma_px <= settings.PIPELINE_DEFAULTS["blur_min_sigma"] or buffer.is_empty():
        return buffer

    kernel = make_gaussian_kernel(float(sigma_px))
    logger.debug("Gaussian blur sigma=%.2f radius=%d", sigma_px, kernel.radius)
    intermediate = convolve_horizontal(buffer.pixels, kernel)
    return buffer.with_pixels(convolve_vertical(intermediate, kernel))
