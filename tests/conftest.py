"""Shared fixtures: small views that render quickly."""

from __future__ import annotations

import pytest

from mandelview import ViewParameters


@pytest.fixture()
def tiny_view() -> ViewParameters:
    """4x4 view inside the main cardioid."""
    return ViewParameters(center_re=-0.5, center_im=0.0, scale=0.01, width=4, height=4)


@pytest.fixture()
def corner_view() -> ViewParameters:
    """4x4 view whose center pixels are inside the set and whose corners escape."""
    return ViewParameters(center_re=0.0, center_im=0.0, scale=0.5, width=4, height=4)


@pytest.fixture()
def overview() -> ViewParameters:
    """Small whole-set view with a non-square resolution."""
    return ViewParameters(center_re=-0.5, center_im=0.0, scale=3.0 / 24, width=32, height=24)
