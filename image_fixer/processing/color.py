# Colour space helpers
"""
Vectorised RGB <-> HSL conversion.

These follow the canonical normalised-float formulas: hue in [0, 1) turns,
saturation and lightness in [0, 1]. Inputs are arrays of 0-255 channel
values; outputs of hsl_to_rgb are floats in 0-255 (not yet quantised).
"""

import numpy as np


def rgb_to_hsl(r, g, b):
    """
    Converts RGB channel arrays (0-255) to hue, saturation and lightness arrays.

    When several channels share the maximum, the hue sector is chosen with
    red taking precedence over green, and green over blue.
    """
    r = np.asarray(r, dtype=np.float64) / 255.0
    g = np.asarray(g, dtype=np.float64) / 255.0
    b = np.asarray(b, dtype=np.float64) / 255.0

    c_max = np.maximum(np.maximum(r, g), b)
    c_min = np.minimum(np.minimum(r, g), b)
    lightness = (c_max + c_min) / 2.0
    delta = c_max - c_min
    chromatic = delta != 0

    # Placeholders avoid division by zero for grey pixels; they are masked out below
    safe_delta = np.where(chromatic, delta, 1.0)
    sat_divisor = np.where(lightness > 0.5, 2.0 - c_max - c_min, c_max + c_min)
    saturation = np.where(chromatic, delta / np.where(chromatic, sat_divisor, 1.0), 0.0)

    hue = np.select(
        [c_max == r, c_max == g],
        [
            (g - b) / safe_delta + np.where(g < b, 6.0, 0.0),
            (b - r) / safe_delta + 2.0,
        ],
        default=(r - g) / safe_delta + 4.0,
    )
    hue = np.where(chromatic, hue / 6.0, 0.0)
    return hue, saturation, lightness


def hue_to_rgb(p, q, t):
    """Piecewise hue-to-channel function of the HSL -> RGB conversion."""
    t = np.where(t < 0, t + 1.0, t)
    t = np.where(t > 1, t - 1.0, t)
    return np.select(
        [t < 1.0 / 6.0, t < 1.0 / 2.0, t < 2.0 / 3.0],
        [p + (q - p) * 6.0 * t, q, p + (q - p) * (2.0 / 3.0 - t) * 6.0],
        default=p,
    )


def hsl_to_rgb(h, s, l):
    """
    Converts hue, saturation and lightness arrays back to RGB floats in 0-255.

    Achromatic pixels (s == 0) come back as r = g = b = l * 255.
    """
    h = np.asarray(h, dtype=np.float64)
    s = np.asarray(s, dtype=np.float64)
    l = np.asarray(l, dtype=np.float64)

    q = np.where(l < 0.5, l * (1.0 + s), l + s - l * s)
    p = 2.0 * l - q

    achromatic = s == 0
    r = np.where(achromatic, l, hue_to_rgb(p, q, h + 1.0 / 3.0))
    g = np.where(achromatic, l, hue_to_rgb(p, q, h))
    b = np.where(achromatic, l, hue_to_rgb(p, q, h - 1.0 / 3.0))
    return r * 255.0, g * 255.0, b * 255.0
