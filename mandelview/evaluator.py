"""Escape-time evaluation of the Mandelbrot iteration."""

from __future__ import annotations

from typing import Sequence

import numpy as np

DEFAULT_MAX_ITER = 500

# |z| > 2, compared squared.
ESCAPE_RADIUS_SQ = 4.0


def check_max_iter(max_iter: int) -> int:
    max_iter = int(max_iter)
    if max_iter < 0:
        raise ValueError(f"max_iter must be non-negative, got {max_iter}.")
    return max_iter


def escape_count(cx: float, cy: float, max_iter: int) -> int:
    x = y = x2 = y2 = 0.0
    count = 0
    while count < max_iter and x2 + y2 <= ESCAPE_RADIUS_SQ:
        y = 2.0 * x * y + cy
        x = x2 - y2 + cx
        x2 = x * x
        y2 = y * y
        count += 1
    return count


def escape_time(c: Sequence[float], max_iter: int) -> int:
    """Count iterations of ``z <- z**2 + c`` until ``|z|**2 > 4``.

    ``c`` is a ``(real, imag)`` pair. The result lies in ``[0, max_iter]``;
    ``max_iter`` itself means the orbit stayed bounded for the whole budget.
    """

    max_iter = check_max_iter(max_iter)
    return escape_count(float(c[0]), float(c[1]), max_iter)


def escape_time_f32(c: Sequence[float], max_iter: int) -> int:
    """Single precision version of :func:`escape_time`.

    Performs the same operations in the same order as the data-parallel
    evaluator, so it serves as that backend's per-pixel reference.
    """

    max_iter = check_max_iter(max_iter)
    cx = np.float32(c[0])
    cy = np.float32(c[1])
    two = np.float32(2.0)
    radius_sq = np.float32(ESCAPE_RADIUS_SQ)
    x = y = x2 = y2 = np.float32(0.0)
    count = 0
    with np.errstate(over="ignore", invalid="ignore"):
        while count < max_iter and x2 + y2 <= radius_sq:
            y = two * x * y + cy
            x = x2 - y2 + cx
            x2 = x * x
            y2 = y * y
            count += 1
    return count
