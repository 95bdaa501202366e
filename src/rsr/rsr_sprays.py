"""
rsr_sprays.py
-------------

Random spray generation.

A spray is a fixed-size set of 2D offsets inside the unit disk. The
estimator scales the offsets by the image diagonal and uses them to pick
the neighborhood of a pixel.

Offsets are drawn as

    angle  ~ U[0, 2*pi)
    radius ~ U[0, 1)
    offset = (radius * cos(angle), radius * sin(angle))

The radius is uniform in length, not in area, so points concentrate
toward the spray center. This is the published behavior of Random Sprays
Retinex and is kept on purpose.
"""

from __future__ import annotations

__all__ = ["create_sprays",]

import logging

import numpy as np

from .rng import RNGSource, as_rng
from .rsr_errors import require_positive_int


LOGGER_NAME = "rsr"


def create_sprays(
    sprays_count: int,
    spray_size: int,
    rng: RNGSource = None,
) -> np.ndarray:
    """
    Create a pool of random sprays.

    Args:
        sprays_count: Number of sprays in the pool.
        spray_size: Number of offsets per spray.
        rng: Random source (seed, numpy Generator or RNG).

    Returns:
        float64 array of shape (sprays_count, spray_size, 2); the last axis
        holds (x, y) with x along columns and y along rows.

    Raises:
        InvalidArgumentError: either count is not a positive integer.
    """
    log = logging.getLogger(LOGGER_NAME)

    sprays_count = require_positive_int("sprays_count", sprays_count)
    spray_size = require_positive_int("spray_size", spray_size)
    rng = as_rng(rng)

    shape = (sprays_count, spray_size)
    angle = rng.uniform(0.0, 2.0 * np.pi, size=shape)
    radius = rng.uniform(0.0, 1.0, size=shape)

    sprays = np.empty(shape + (2,), dtype=np.float64)
    sprays[..., 0] = radius * np.cos(angle)
    sprays[..., 1] = radius * np.sin(angle)

    log.debug(f"Created {sprays_count} sprays x {spray_size} points.")
    return sprays
