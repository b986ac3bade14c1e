from __future__ import annotations

import math

import numpy as np
import pytest

from mandelview import colormap_colors, cosine_color, linear_color, to_rgba8


@pytest.mark.smoke
def test_linear_policy_endpoints() -> None:
    assert linear_color(50, 50) == (0, 0, 0)
    assert linear_color(0, 50) == (0, 0, 255)
    assert linear_color(25, 50) == (127, 0, 128)
    assert linear_color(49, 50) == (249, 0, 6)


@pytest.mark.smoke
def test_linear_policy_zero_budget_is_inside() -> None:
    assert linear_color(0, 0) == (0, 0, 0)


def test_cosine_policy_inside_is_black() -> None:
    assert cosine_color(80, 80) == (0.0, 0.0, 0.0)
    assert cosine_color(0, 0) == (0.0, 0.0, 0.0)


def test_cosine_policy_channels() -> None:
    r, g, b = cosine_color(0, 50)
    assert r == pytest.approx(0.5 + 0.5 * math.cos(3.0), abs=1e-6)
    assert g == pytest.approx(0.5 + 0.5 * math.cos(1.0), abs=1e-6)
    assert b == pytest.approx(0.5 + 0.5 * math.cos(5.0), abs=1e-6)

    t = 10 / 40
    r, g, b = cosine_color(10, 40)
    assert r == pytest.approx(0.5 + 0.5 * math.cos(3.0 + t * 10.0), abs=1e-6)
    assert g == pytest.approx(0.5 + 0.5 * math.cos(1.0 + t * 10.0), abs=1e-6)
    assert b == pytest.approx(0.5 + 0.5 * math.cos(5.0 + t * 10.0), abs=1e-6)


def test_cosine_policy_stays_in_unit_range() -> None:
    for count in range(100):
        assert all(0.0 <= v <= 1.0 for v in cosine_color(count, 100))


def test_policies_are_allowed_to_disagree() -> None:
    linear = linear_color(0, 50)
    cosine = tuple(int(v) for v in to_rgba8(np.array(cosine_color(0, 50))))
    assert linear != cosine


def test_to_rgba8_rounds_and_clips() -> None:
    out = to_rgba8(np.array([0.0, 0.5, 1.0, 1.2, -0.1], dtype=np.float32))
    assert out.dtype == np.uint8
    assert out.tolist() == [0, 128, 255, 255, 0]


def test_colormap_marks_inside_black_and_opaque() -> None:
    counts = np.array([[0, 5], [10, 10]])
    rgba = colormap_colors(counts, 10, "viridis")
    assert rgba.shape == (2, 2, 4)
    assert rgba.dtype == np.uint8
    assert rgba[1, 0].tolist() == [0, 0, 0, 255]
    assert rgba[1, 1].tolist() == [0, 0, 0, 255]
    assert (rgba[..., 3] == 255).all()
    assert rgba[0, 0, :3].any()
