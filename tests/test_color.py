"""Tests for the RGB <-> HSL helpers."""

import numpy as np
import pytest

from image_fixer.processing.color import hsl_to_rgb, hue_to_rgb, rgb_to_hsl


@pytest.mark.parametrize("rgb, expected_hue", [
    ((255, 0, 0), 0.0),
    ((255, 255, 0), 1.0 / 6.0),
    ((0, 255, 0), 1.0 / 3.0),
    ((0, 255, 255), 0.5),
    ((0, 0, 255), 2.0 / 3.0),
    ((255, 0, 255), 5.0 / 6.0),
])
def test_primary_and_secondary_hues(rgb, expected_hue):
    """Fully saturated colours land on the six hue sectors."""
    h, s, l = rgb_to_hsl(*[np.array([v]) for v in rgb])
    assert h[0] == pytest.approx(expected_hue)
    assert s[0] == pytest.approx(1.0)
    assert l[0] == pytest.approx(0.5)


def test_grey_is_achromatic():
    """Greys have zero hue and saturation, lightness = value / 255."""
    h, s, l = rgb_to_hsl(np.array([0, 128, 255]), np.array([0, 128, 255]), np.array([0, 128, 255]))
    assert np.all(h == 0)
    assert np.all(s == 0)
    assert np.allclose(l, [0.0, 128 / 255, 1.0])


def test_saturation_formula_both_branches():
    """Saturation uses d/(max+min) at or below half lightness, d/(2-max-min) above."""
    # l = 0.3: d = 0.2, max + min = 0.6
    _, s_dark, _ = rgb_to_hsl(np.array([0.4 * 255]), np.array([0.2 * 255]), np.array([0.2 * 255]))
    assert s_dark[0] == pytest.approx(0.2 / 0.6)
    # l = 0.7: d = 0.2, 2 - max - min = 0.6
    _, s_light, _ = rgb_to_hsl(np.array([0.8 * 255]), np.array([0.6 * 255]), np.array([0.6 * 255]))
    assert s_light[0] == pytest.approx(0.2 / 0.6)


def test_hsl_to_rgb_achromatic():
    """s == 0 gives r = g = b = l."""
    r, g, b = hsl_to_rgb(np.array([0.42]), np.array([0.0]), np.array([0.25]))
    assert r[0] == g[0] == b[0] == pytest.approx(0.25 * 255)


def test_hue_to_rgb_pieces():
    """The piecewise function covers its four segments and wraps t."""
    p, q = 0.2, 0.8
    assert hue_to_rgb(p, q, np.array(0.1)) == pytest.approx(p + (q - p) * 6 * 0.1)
    assert hue_to_rgb(p, q, np.array(0.3)) == pytest.approx(q)
    assert hue_to_rgb(p, q, np.array(0.6)) == pytest.approx(p + (q - p) * (2 / 3 - 0.6) * 6)
    assert hue_to_rgb(p, q, np.array(0.9)) == pytest.approx(p)
    # -0.9 wraps to 0.1, 1.3 wraps to 0.3
    assert hue_to_rgb(p, q, np.array(-0.9)) == pytest.approx(hue_to_rgb(p, q, np.array(0.1)))
    assert hue_to_rgb(p, q, np.array(1.3)) == pytest.approx(q)


def test_round_trip_reproduces_rgb():
    """RGB -> HSL -> RGB gives back the original values."""
    rng = np.random.default_rng(7)
    rgb = rng.integers(0, 256, size=(500, 3))
    h, s, l = rgb_to_hsl(rgb[:, 0], rgb[:, 1], rgb[:, 2])
    r, g, b = hsl_to_rgb(h, s, l)
    assert np.allclose(np.stack([r, g, b], axis=-1), rgb, atol=1e-6)
