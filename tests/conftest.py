"""
-------
conftest.py
-------
Shared pytest fixtures for rsr tests.
"""

import pytest
import numpy as np
import matplotlib
matplotlib.use("Agg")  # headless backend for the debug report

from rsr.rng import RNG


# -----------------------------------------------------------------------------
# Random source
# -----------------------------------------------------------------------------
@pytest.fixture
def seeded_rng() -> RNG:
    """Provide a deterministic RNG with fixed seed."""
    return RNG(seed=123)


# -----------------------------------------------------------------------------
# Images (BGR, OpenCV layout)
# -----------------------------------------------------------------------------
@pytest.fixture
def gray_image() -> np.ndarray:
    """Return a uniform 100x100 mid-gray BGR image."""
    return np.full((100, 100, 3), 128, dtype=np.uint8)


@pytest.fixture
def gradient_image() -> np.ndarray:
    """
    120x160 radial ramp, bright center and dark corners, values in
    [40, 120]. Same value in all BGR channels.
    """
    h, w = 120, 160
    y, x = np.indices((h, w))
    cx, cy = w / 2.0, h / 2.0
    r = np.sqrt((x - cx) ** 2 + (y - cy) ** 2)
    r_norm = r / (r.max() + 1e-9)
    img = np.rint(40 + 80 * (1.0 - r_norm)).astype(np.uint8)
    return np.stack([img] * 3, axis=-1)


@pytest.fixture
def red_biased_image(gradient_image) -> np.ndarray:
    """The gradient image with the red channel doubled (max 240)."""
    img = gradient_image.copy()
    img[..., 2] = gradient_image[..., 2] * 2
    return img


@pytest.fixture
def color_image() -> np.ndarray:
    """Random colorful 80x90 BGR image without zero channels."""
    gen = np.random.default_rng(2024)
    return gen.integers(1, 256, size=(80, 90, 3), dtype=np.uint8)
