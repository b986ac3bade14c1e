from __future__ import annotations

import dataclasses

import numpy as np
import pytest

from mandelview import PlaneCoordinate, Uniforms, ViewParameters, map_pixel


@pytest.mark.smoke
def test_map_pixel_uses_half_extent_centering(tiny_view: ViewParameters) -> None:
    c = map_pixel(0, 0, tiny_view)
    assert isinstance(c, PlaneCoordinate)
    assert c.real == pytest.approx(-0.52)
    assert c.imag == pytest.approx(-0.02)
    # pixel (width/2, height/2) samples the center exactly
    assert map_pixel(2, 2, tiny_view) == PlaneCoordinate(-0.5, 0.0)


@pytest.mark.smoke
def test_map_pixel_single_scale_on_non_square_view() -> None:
    view = ViewParameters(center_re=1.0, center_im=-1.0, scale=0.25, width=8, height=2)
    first = map_pixel(0, 0, view)
    last = map_pixel(7, 1, view)
    assert first == PlaneCoordinate(0.0, -1.25)
    assert last == PlaneCoordinate(1.75, -1.0)
    # the same pixel step moves both axes by the same amount
    step_x = map_pixel(1, 0, view).real - first.real
    step_y = map_pixel(0, 1, view).imag - first.imag
    assert step_x == step_y == 0.25


@pytest.mark.smoke
@pytest.mark.parametrize("width,height", [(0, 4), (4, 0), (-1, 3)])
def test_view_rejects_empty_resolution(width: int, height: int) -> None:
    with pytest.raises(ValueError):
        ViewParameters(center_re=0.0, center_im=0.0, scale=1.0, width=width, height=height)


def test_zero_scale_maps_every_pixel_to_center() -> None:
    view = ViewParameters(center_re=0.3, center_im=-0.2, scale=0.0, width=3, height=2)
    coords = {map_pixel(px, py, view) for py in range(2) for px in range(3)}
    assert coords == {PlaneCoordinate(0.3, -0.2)}


def test_view_is_immutable(tiny_view: ViewParameters) -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        tiny_view.scale = 1.0  # type: ignore[misc]
    assert tiny_view.buffer_length == 4 * 4 * 4


def test_uniforms_reduce_precision(tiny_view: ViewParameters) -> None:
    view = dataclasses.replace(tiny_view, center_re=-0.7436438870371587)
    uniforms = Uniforms.from_view(view)
    assert uniforms.center_re.dtype == np.float32
    assert float(uniforms.center_re) != view.center_re
    assert float(uniforms.center_re) == pytest.approx(view.center_re, rel=1e-7)
    assert uniforms.resolution == (4, 4)


@pytest.mark.smoke
@pytest.mark.parametrize("width,height", [(4.0, 4), (4, 2.5), ("4", 4)])
def test_view_rejects_non_integer_resolution(width: object, height: object) -> None:
    with pytest.raises(ValueError):
        ViewParameters(center_re=0.0, center_im=0.0, scale=1.0, width=width, height=height)  # type: ignore[arg-type]


def test_view_normalizes_numpy_integers() -> None:
    view = ViewParameters(center_re=0.0, center_im=0.0, scale=1.0, width=np.int64(3), height=np.uint16(2))
    assert type(view.width) is int
    assert type(view.height) is int
    assert view.buffer_length == 24
