from __future__ import annotations

import pytest

from mandelview import ViewParameters, escape_time, escape_time_f32, map_pixel


@pytest.mark.smoke
@pytest.mark.parametrize("max_iter", [1, 2, 50, 500])
def test_point_outside_radius_escapes_on_first_iteration(max_iter: int) -> None:
    assert escape_time((3.0, 0.0), max_iter) == 1
    assert escape_time_f32((3.0, 0.0), max_iter) == 1


@pytest.mark.smoke
@pytest.mark.parametrize("max_iter", [0, 1, 7, 500])
def test_origin_never_escapes(max_iter: int) -> None:
    assert escape_time((0.0, 0.0), max_iter) == max_iter
    assert escape_time_f32((0.0, 0.0), max_iter) == max_iter


@pytest.mark.smoke
def test_zero_budget_returns_zero_without_iterating() -> None:
    assert escape_time((3.0, 0.0), 0) == 0
    assert escape_time((100.0, -100.0), 0) == 0


@pytest.mark.parametrize(
    "c,expected",
    [
        ((0.5, 0.5), 5),
        ((0.5, -1.0), 2),
        ((-1.0, -1.0), 3),
        ((-1.0, 0.5), 5),
    ],
)
def test_known_escape_times(c: tuple[float, float], expected: int) -> None:
    assert escape_time(c, 100) == expected
    assert escape_time_f32(c, 100) == expected


@pytest.mark.parametrize("c", [(-2.0, 0.0), (-1.0, 0.0), (-0.5, 0.0), (0.25, 0.0)])
def test_bounded_orbits_return_budget(c: tuple[float, float]) -> None:
    # -2 sits exactly on the escape radius and never exceeds it
    assert escape_time(c, 200) == 200


def test_budget_caps_points_that_escape_later() -> None:
    assert escape_time((0.5, 0.5), 3) == 3


def test_counts_stay_within_budget(overview: ViewParameters) -> None:
    max_iter = 40
    for py in range(overview.height):
        for px in range(overview.width):
            count = escape_time(map_pixel(px, py, overview), max_iter)
            assert 0 <= count <= max_iter


def test_negative_budget_is_rejected() -> None:
    with pytest.raises(ValueError):
        escape_time((0.0, 0.0), -1)
    with pytest.raises(ValueError):
        escape_time_f32((0.0, 0.0), -1)
