"""Iteration count to color policies."""

from __future__ import annotations

import numpy as np
from matplotlib import colormaps

INSIDE_COLOR = (0, 0, 0)
OPAQUE = 255

# Red, green and blue phase offsets of the cosine palette.
COSINE_PHASES = (np.float32(3.0), np.float32(1.0), np.float32(5.0))
COSINE_FREQUENCY = np.float32(10.0)

_HALF = np.float32(0.5)


def linear_color(count: int, max_iter: int) -> tuple[int, int, int]:
    """Red-to-blue gradient used by the scalar backend."""

    if count >= max_iter:
        return INSIDE_COLOR
    t = 255 * count // max_iter
    return t, 0, 255 - t


def cosine_color(count: int, max_iter: int) -> tuple[np.float32, np.float32, np.float32]:
    """Cyclic cosine palette used by the parallel backend.

    Channels are single precision floats in ``[0, 1]``.
    """

    if count >= max_iter:
        zero = np.float32(0.0)
        return zero, zero, zero
    t = np.float32(count) / np.float32(max_iter)
    r, g, b = (_HALF + _HALF * np.cos(phase + t * COSINE_FREQUENCY) for phase in COSINE_PHASES)
    return np.float32(r), np.float32(g), np.float32(b)


def to_rgba8(colors: np.ndarray) -> np.ndarray:
    """Quantize float colors in ``[0, 1]`` to bytes."""

    return np.uint8(np.round(np.clip(colors, 0.0, 1.0) * 255.0))


def colormap_colors(counts: np.ndarray, max_iter: int, name: str) -> np.ndarray:
    """Color an iteration count grid through a named matplotlib colormap."""

    cmap = colormaps[name]
    counts = np.asarray(counts)
    inside = counts >= max_iter
    if max_iter > 0:
        values = counts.astype(np.float64) / float(max_iter)
    else:
        values = np.zeros(counts.shape, dtype=np.float64)
    rgba = np.array(cmap(values), copy=True)
    for k in (0, 1, 2):
        rgba[..., k] = np.where(inside, INSIDE_COLOR[k], rgba[..., k])
    rgba[..., 3] = 1.0
    return np.uint8(np.clip(rgba * 255, 0, 255))
