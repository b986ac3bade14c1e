"""Data-parallel renderer: one independent evaluation per pixel."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
import tensorflow as tf

from .evaluator import DEFAULT_MAX_ITER, ESCAPE_RADIUS_SQ, check_max_iter, escape_time_f32
from .palette import COSINE_FREQUENCY, COSINE_PHASES, cosine_color, to_rgba8
from .viewport import Uniforms, ViewParameters


def shade_pixel(px: int, py: int, uniforms: Uniforms, max_iter: int) -> tuple[np.float32, np.float32, np.float32, np.float32]:
    """Color of pixel ``(px, py)``, computed on its own in single precision.

    This is the function every parallel invocation executes. It reads nothing
    but its arguments, so invocations may run in any order or all at once.
    """

    half = np.float32(0.5)
    real = (np.float32(px) - half * uniforms.width) * uniforms.scale + uniforms.center_re
    imag = (np.float32(py) - half * uniforms.height) * uniforms.scale + uniforms.center_im
    count = escape_time_f32((real, imag), max_iter)
    r, g, b = cosine_color(count, max_iter)
    return r, g, b, np.float32(1.0)


@tf.function
def _escape_step(
    cx: tf.Tensor,
    cy: tf.Tensor,
    x: tf.Tensor,
    y: tf.Tensor,
    x2: tf.Tensor,
    y2: tf.Tensor,
    counts: tf.Tensor,
    active: tf.Tensor,
) -> tuple[tf.Tensor, ...]:
    """Advance every pixel whose orbit has not escaped by one iteration."""

    y_new = 2.0 * x * y + cy
    x_new = x2 - y2 + cx
    x = tf.where(active, x_new, x)
    y = tf.where(active, y_new, y)
    x2 = x * x
    y2 = y * y
    counts = counts + tf.cast(active, tf.int32)
    radius_sq = tf.constant(ESCAPE_RADIUS_SQ, dtype=x2.dtype)
    active = tf.logical_and(active, x2 + y2 <= radius_sq)
    return x, y, x2, y2, counts, active


@tf.function
def _escape_run(cx: tf.Tensor, cy: tf.Tensor, max_iter: tf.Tensor) -> tf.Tensor:
    """Iterate all pixels with a TensorFlow while loop and return their counts."""

    max_iter = tf.cast(max_iter, tf.int32)
    i = tf.constant(0, dtype=tf.int32)
    x = tf.zeros_like(cx)
    y = tf.zeros_like(cx)
    x2 = tf.zeros_like(cx)
    y2 = tf.zeros_like(cx)
    counts = tf.zeros_like(cx, tf.int32)
    active = tf.ones_like(cx, tf.bool)

    def cond(i, x, y, x2, y2, counts, active):
        return tf.logical_and(tf.less(i, max_iter), tf.reduce_any(active))

    def body(i, x, y, x2, y2, counts, active):
        x, y, x2, y2, counts, active = _escape_step(cx, cy, x, y, x2, y2, counts, active)
        return i + 1, x, y, x2, y2, counts, active

    _, _, _, _, _, counts, _ = tf.while_loop(cond, body, (i, x, y, x2, y2, counts, active))
    return counts


def _plane_grid(uniforms: Uniforms) -> tuple[tf.Tensor, tf.Tensor]:
    width, height = uniforms.resolution
    half = np.float32(0.5)
    half_w = tf.constant(half * uniforms.width, dtype=tf.float32)
    half_h = tf.constant(half * uniforms.height, dtype=tf.float32)
    scale = tf.constant(uniforms.scale, dtype=tf.float32)
    cols = tf.range(width, dtype=tf.float32)
    rows = tf.range(height, dtype=tf.float32)
    real = (cols - half_w) * scale + tf.constant(uniforms.center_re, dtype=tf.float32)
    imag = (rows - half_h) * scale + tf.constant(uniforms.center_im, dtype=tf.float32)
    cx, cy = tf.meshgrid(real, imag)
    return cx, cy


def _cosine_palette(counts: tf.Tensor, max_iter: tf.Tensor) -> tf.Tensor:
    counts_f = tf.cast(counts, tf.float32)
    t = tf.math.divide_no_nan(counts_f, tf.cast(max_iter, tf.float32))
    channels = [0.5 + 0.5 * tf.cos(float(phase) + t * float(COSINE_FREQUENCY)) for phase in COSINE_PHASES]
    rgb = tf.stack(channels, axis=-1)
    inside = tf.expand_dims(counts >= max_iter, -1)
    rgb = tf.where(inside, tf.zeros_like(rgb), rgb)
    alpha = tf.ones_like(rgb[..., :1])
    return tf.concat([rgb, alpha], axis=-1)


def _as_uniforms(view: ViewParameters | Uniforms) -> Uniforms:
    return view if isinstance(view, Uniforms) else Uniforms.from_view(view)


def evaluate_grid(view: ViewParameters | Uniforms, max_iter: int, *, device: Optional[str] = None) -> np.ndarray:
    """Escape-time counts of every pixel, shape ``(height, width)``."""

    uniforms = _as_uniforms(view)
    max_iter = check_max_iter(max_iter)
    with tf.device(device if device is not None else "/CPU:0"):
        cx, cy = _plane_grid(uniforms)
        counts = _escape_run(cx, cy, tf.constant(max_iter, dtype=tf.int32))
    return counts.numpy()


def render_parallel(view: ViewParameters | Uniforms, max_iter: int, *, device: Optional[str] = None) -> np.ndarray:
    """Float RGBA colors of every pixel, shape ``(height, width, 4)``."""

    uniforms = _as_uniforms(view)
    max_iter = check_max_iter(max_iter)
    with tf.device(device if device is not None else "/CPU:0"):
        cx, cy = _plane_grid(uniforms)
        bound = tf.constant(max_iter, dtype=tf.int32)
        counts = _escape_run(cx, cy, bound)
        colors = _cosine_palette(counts, bound)
    return colors.numpy()


@dataclass(frozen=True)
class ParallelRenderer:
    """Parallel backend bound to one iteration limit and one device."""

    max_iter: int = DEFAULT_MAX_ITER
    device: Optional[str] = None

    def __post_init__(self) -> None:
        check_max_iter(self.max_iter)

    def render(self, view: ViewParameters | Uniforms) -> np.ndarray:
        """Render ``view`` to a ``(height, width, 4)`` uint8 RGBA array."""

        return to_rgba8(render_parallel(view, self.max_iter, device=self.device))

    def iterations(self, view: ViewParameters | Uniforms) -> np.ndarray:
        return evaluate_grid(view, self.max_iter, device=self.device)
