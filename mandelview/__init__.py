"""Public API for Mandelbrot escape-time rendering.

The TensorFlow backend lives in :mod:`mandelview.parallel` and is imported
on demand.
"""

from .evaluator import DEFAULT_MAX_ITER, escape_time, escape_time_f32
from .navigation import (
    compute_zoom_factors,
    initial_scale,
    pan,
    resize,
    zoom_at,
    zoom_sequence,
)
from .palette import colormap_colors, cosine_color, linear_color, to_rgba8
from .scalar import ScalarRenderer, iteration_counts, partition_rows, render_rgba
from .viewport import PlaneCoordinate, Uniforms, ViewParameters, map_pixel

__all__ = [
    "DEFAULT_MAX_ITER",
    "PlaneCoordinate",
    "ScalarRenderer",
    "Uniforms",
    "ViewParameters",
    "colormap_colors",
    "compute_zoom_factors",
    "cosine_color",
    "escape_time",
    "escape_time_f32",
    "initial_scale",
    "iteration_counts",
    "linear_color",
    "map_pixel",
    "pan",
    "partition_rows",
    "render_rgba",
    "resize",
    "to_rgba8",
    "zoom_at",
    "zoom_sequence",
]
