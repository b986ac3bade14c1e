"""Mapping between pixel indices and points of the complex plane."""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np


class PlaneCoordinate(NamedTuple):
    """A point of the complex plane sampled by one pixel."""

    real: float
    imag: float


@dataclass(frozen=True)
class ViewParameters:
    """Parameters that describe the viewport of a single render."""

    center_re: float
    center_im: float
    scale: float
    width: int
    height: int

    def __post_init__(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if not isinstance(value, numbers.Integral):
                raise ValueError(f"{name} must be an integer, got {value!r}.")
            object.__setattr__(self, name, int(value))
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"resolution must be positive, got {self.width}x{self.height}.")

    @property
    def size(self) -> int:
        return int(self.width) * int(self.height)

    @property
    def buffer_length(self) -> int:
        """Number of bytes in an RGBA buffer covering this view."""

        return self.size * 4


@dataclass(frozen=True)
class Uniforms:
    """Single precision copy of a view, as uploaded to a parallel backend."""

    center_re: np.float32
    center_im: np.float32
    scale: np.float32
    width: np.float32
    height: np.float32

    @classmethod
    def from_view(cls, view: ViewParameters) -> "Uniforms":
        return cls(
            center_re=np.float32(view.center_re),
            center_im=np.float32(view.center_im),
            scale=np.float32(view.scale),
            width=np.float32(view.width),
            height=np.float32(view.height),
        )

    @property
    def resolution(self) -> tuple[int, int]:
        return int(self.width), int(self.height)


def map_pixel(px: int, py: int, view: ViewParameters) -> PlaneCoordinate:
    """Return the plane coordinate sampled by pixel ``(px, py)``.

    Both axes share ``view.scale`` and the origin is the top-left pixel, so
    ``imag`` grows with the row index.
    """

    half_w = view.width * 0.5
    half_h = view.height * 0.5
    real = view.center_re + (px - half_w) * view.scale
    imag = view.center_im + (py - half_h) * view.scale
    return PlaneCoordinate(real, imag)
