"""CPU renderer that evaluates the viewport one pixel at a time."""

from __future__ import annotations

import multiprocessing
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

from .evaluator import DEFAULT_MAX_ITER, check_max_iter, escape_count
from .palette import OPAQUE, linear_color
from .viewport import ViewParameters, map_pixel


def partition_rows(height: int, bands: int) -> list[tuple[int, int]]:
    """Split ``range(height)`` into at most ``bands`` contiguous row ranges.

    The ranges are disjoint, ordered and cover every row exactly once.
    """

    height = int(height)
    bands = max(1, min(int(bands), height))
    base, extra = divmod(height, bands)
    ranges = []
    start = 0
    for band in range(bands):
        stop = start + base + (1 if band < extra else 0)
        ranges.append((start, stop))
        start = stop
    return ranges


def _render_rows(view: ViewParameters, max_iter: int, row_start: int, row_stop: int) -> bytes:
    band = bytearray((row_stop - row_start) * view.width * 4)
    pos = 0
    for py in range(row_start, row_stop):
        for px in range(view.width):
            c = map_pixel(px, py, view)
            r, g, b = linear_color(escape_count(c.real, c.imag, max_iter), max_iter)
            band[pos] = r
            band[pos + 1] = g
            band[pos + 2] = b
            band[pos + 3] = OPAQUE
            pos += 4
    return bytes(band)


def _output_view(out: Any, expected: int) -> memoryview:
    try:
        buf = memoryview(out)
    except TypeError as exc:
        raise ValueError("output buffer must support the buffer protocol.") from exc
    if buf.readonly:
        raise ValueError("output buffer is read-only.")
    if not buf.c_contiguous:
        raise ValueError("output buffer must be C-contiguous.")
    buf = buf.cast("B")
    if buf.nbytes != expected:
        raise ValueError(f"output buffer holds {buf.nbytes} bytes, expected {expected} (width * height * 4).")
    return buf


def render_rgba(view: ViewParameters, max_iter: int, out: Any, *, workers: Optional[int] = None) -> None:
    """Render ``view`` into ``out`` as row-major RGBA bytes.

    ``out`` must be a writable, contiguous buffer of exactly
    ``view.buffer_length`` bytes; anything else is rejected before the first
    pixel is written. With ``workers > 1`` rows are split into disjoint bands
    evaluated in separate processes. The bytes written do not depend on
    ``workers``.
    """

    max_iter = check_max_iter(max_iter)
    buf = _output_view(out, view.buffer_length)
    row_len = view.width * 4

    if workers is None or workers <= 1 or view.height == 1:
        for py in range(view.height):
            buf[py * row_len:(py + 1) * row_len] = _render_rows(view, max_iter, py, py + 1)
        return

    bands = partition_rows(view.height, workers)
    # fork is unsafe once the caller has started threads (TensorFlow)
    with ProcessPoolExecutor(max_workers=len(bands), mp_context=multiprocessing.get_context("spawn")) as pool:
        futures = [pool.submit(_render_rows, view, max_iter, start, stop) for start, stop in bands]
        for (start, stop), future in zip(bands, futures):
            buf[start * row_len:stop * row_len] = future.result()


def iteration_counts(view: ViewParameters, max_iter: int) -> np.ndarray:
    """Escape-time grid of ``view`` with shape ``(height, width)``."""

    max_iter = check_max_iter(max_iter)
    counts = np.empty((view.height, view.width), dtype=np.int64)
    for py in range(view.height):
        for px in range(view.width):
            c = map_pixel(px, py, view)
            counts[py, px] = escape_count(c.real, c.imag, max_iter)
    return counts


@dataclass(frozen=True)
class ScalarRenderer:
    """Scalar backend with an iteration bound fixed per instance."""

    max_iter: int = DEFAULT_MAX_ITER
    workers: Optional[int] = None

    def __post_init__(self) -> None:
        check_max_iter(self.max_iter)

    def render(self, view: ViewParameters, out: Any = None) -> Any:
        if out is None:
            out = bytearray(view.buffer_length)
        render_rgba(view, self.max_iter, out, workers=self.workers)
        return out

    def render_array(self, view: ViewParameters) -> np.ndarray:
        """Render into a fresh ``(height, width, 4)`` uint8 array."""

        frame = np.zeros((view.height, view.width, 4), dtype=np.uint8)
        render_rgba(view, self.max_iter, frame, workers=self.workers)
        return frame
