"""Deriving new views from old ones: pan, zoom, resize and zoom sequences."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterator, Optional, Sequence

import numpy as np

from .viewport import ViewParameters, map_pixel

# Plane height covered by the first frame.
DEFAULT_EXTENT = 4.0


def initial_scale(height: int, extent: float = DEFAULT_EXTENT) -> float:
    """Scale at which ``height`` pixels span ``extent`` plane units."""

    return float(extent) / float(max(int(height), 1))


def pan(view: ViewParameters, dx: float, dy: float) -> ViewParameters:
    """Drag the image by ``(dx, dy)`` pixels.

    The plane point under the pointer follows it, so the center moves the
    opposite way.
    """

    return replace(
        view,
        center_re=float(np.float64(view.center_re) - np.float64(dx) * np.float64(view.scale)),
        center_im=float(np.float64(view.center_im) - np.float64(dy) * np.float64(view.scale)),
    )


def zoom_at(
    view: ViewParameters,
    px: float,
    py: float,
    factor: float,
    max_scale: Optional[float] = None,
) -> ViewParameters:
    """Multiply the scale by ``factor`` keeping pixel ``(px, py)`` fixed.

    ``factor < 1`` zooms in. The new scale never exceeds ``max_scale``.
    """

    anchor = map_pixel(px, py, view)
    new_scale = np.float64(view.scale) * np.float64(factor)
    if max_scale is not None:
        new_scale = min(new_scale, np.float64(max_scale))
    center_re = np.float64(anchor.real) - (np.float64(px) - view.width * 0.5) * new_scale
    center_im = np.float64(anchor.imag) - (np.float64(py) - view.height * 0.5) * new_scale
    return replace(view, center_re=float(center_re), center_im=float(center_im), scale=float(new_scale))


def resize(view: ViewParameters, width: int, height: int) -> ViewParameters:
    return replace(view, width=int(width), height=int(height))


def compute_zoom_factors(frames: int, zoom_factor: float, *, final_zoom: float | None, easing: str) -> np.ndarray:
    """Compute per-frame scale multipliers for a zoom animation."""

    if frames <= 0:
        return np.array([], dtype=np.float64)

    if final_zoom is not None and final_zoom > 0:
        log_target = np.log(final_zoom)

        def ease_in_out(t: float) -> float:
            return 3 * t ** 2 - 2 * t ** 3

        ease = (lambda u: u) if easing.lower() == "linear" else ease_in_out
        if frames == 1:
            alphas = np.array([1.0], dtype=np.float64)
        else:
            alphas = np.array([ease(i / (frames - 1)) for i in range(frames)], dtype=np.float64)
        alphas = np.clip(alphas, 0.0, 1.0)
        increments = np.diff(np.concatenate(([0.0], alphas)))
        return np.exp(increments * log_target)

    return np.full(frames, np.float64(zoom_factor), dtype=np.float64)


def zoom_sequence(
    view: ViewParameters,
    factors: Sequence[float],
    focus: Optional[tuple[float, float]] = None,
) -> Iterator[ViewParameters]:
    """Yield one view per factor, each zoomed from the previous one.

    ``focus`` is the ``(px, py)`` pixel held fixed; it defaults to the
    pixel at the image center, which keeps the view center in place.
    """

    if focus is None:
        focus = (view.width * 0.5, view.height * 0.5)
    for factor in factors:
        view = zoom_at(view, focus[0], focus[1], factor)
        yield view
