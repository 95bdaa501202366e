"""
rsr_estimate.py
---------------

Global illumination estimation with Random Sprays Retinex.

Routines:
    sample_illumination_grid
    illumination_from_grids
    estimate_illumination

Ref:
    N. Banic and S. Loncaric, "Using the Random Sprays Retinex algorithm
    for global illumination estimation", CCVW 2013, pp. 3-8.

Outline
-------

The image is subsampled on a (rows_step, cols_step) grid. For every grid
point, N sprays are picked at random from a shared pool; each spray is
scaled by the image diagonal and scattered around the point over the
full-resolution image. The per-channel maximum seen along a spray is a
local white reference, and the ratio center / max, averaged over the N
sprays, is the local relative reflectance. Dividing the subsampled image
by it gives a local illumination; its mean, with the first and third
channel swapped and normalized to unit RMS, is the global estimate.

For an OpenCV BGR buffer the returned vector is therefore in RGB order.
"""

from __future__ import annotations

__all__ = [
    "SPRAYS_PER_ROUND",
    "sample_illumination_grid",
    "illumination_from_grids",
    "estimate_illumination",
]

import logging
from typing import Tuple

import numpy as np

from .rng import RNGSource, as_rng
from .rsr_errors import (
    EmptyInputError,
    InvalidArgumentError,
    require_bgr_image,
    require_positive_float,
    require_positive_int,
)
from .rsr_filter import box_filter
from .rsr_sprays import create_sprays


LOGGER_NAME = "rsr"

# Pool size is SPRAYS_PER_ROUND * n_sprays.
SPRAYS_PER_ROUND = 1000

# Upper bound on gathered neighbor samples per vectorized block.
_BLOCK_POINTS = 1 << 20


# ======================================================================
# 1) STOCHASTIC SAMPLING ON THE ESTIMATION GRID
# ======================================================================

def sample_illumination_grid(
    image: np.ndarray,
    n_sprays: int = 1,
    spray_size: int = 225,
    rows_step: int = 10,
    cols_step: int = 10,
    rng: RNGSource = None,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Run the spray sampling loop over the estimation grid.

    Args:
        image: (rows, cols, 3) array, any numeric dtype.
        n_sprays: Sprays sampled per grid point (N).
        spray_size: Points per spray (n).
        rows_step: Row stride of the estimation grid.
        cols_step: Column stride of the estimation grid.
        rng: Random source (seed, numpy Generator or RNG).

    Returns:
        (resized, estimate, degenerate): `resized` and `estimate` are float64
        arrays of shape (rows // rows_step, cols // cols_step, 3). `resized`
        holds the subsampled source pixels, `estimate` the clamped relative
        reflectance. Degenerate cells (some channel of the estimate is 0)
        hold resized = (0, 0, 0) and estimate = (1, 1, 1); `degenerate` is
        the boolean (rows // rows_step, cols // cols_step) mask of them.

    Raises:
        InvalidArgumentError: non-positive counts/strides or bad image shape.
        EmptyInputError: zero-area image or empty estimation grid.
    """
    log = logging.getLogger(LOGGER_NAME)

    require_bgr_image(image)
    n_sprays = require_positive_int("n_sprays", n_sprays)
    spray_size = require_positive_int("spray_size", spray_size)
    rows_step = require_positive_int("rows_step", rows_step)
    cols_step = require_positive_int("cols_step", cols_step)
    rng = as_rng(rng)

    converted = image.astype(np.float64)
    rows, cols = converted.shape[:2]

    out_rows = rows // rows_step
    out_cols = cols // cols_step
    if out_rows == 0 or out_cols == 0:
        raise EmptyInputError(
            f"Estimation grid is empty: image {rows}x{cols}, "
            f"steps {rows_step}x{cols_step}"
        )

    radius = int(np.sqrt(float(rows * rows + cols * cols)) + 0.5)
    sprays_count = SPRAYS_PER_ROUND * n_sprays
    sprays = create_sprays(sprays_count, spray_size, rng)
    # (count, n) integer pixel offsets
    d_col = np.rint(radius * sprays[..., 0]).astype(np.intp)
    d_row = np.rint(radius * sprays[..., 1]).astype(np.intp)

    grid_rows = np.arange(out_rows) * rows_step
    grid_cols = np.arange(out_cols) * cols_step
    resized = converted[grid_rows[:, None], grid_cols[None, :]].copy()

    # Drawn up front so the result does not depend on the block size.
    selected = rng.integers(0, sprays_count, size=(n_sprays, out_rows, out_cols))

    log.info(
        f"Sampling grid {out_rows}x{out_cols} (image {rows}x{cols}), "
        f"N={n_sprays}, n={spray_size}, R={radius}"
    )

    accum = np.zeros_like(resized)
    block = max(1, _BLOCK_POINTS // (out_cols * spray_size))
    for r_start in range(0, out_rows, block):
        r_end = min(r_start + block, out_rows)
        center = resized[r_start:r_end]
        g_rows = grid_rows[r_start:r_end, None, None]
        g_cols = grid_cols[None, :, None]

        for i in range(n_sprays):
            chosen = selected[i, r_start:r_end]
            nb_rows = g_rows + d_row[chosen]
            nb_cols = g_cols + d_col[chosen]
            inside = (
                (nb_rows >= 0) & (nb_rows < rows) & (nb_cols >= 0) & (nb_cols < cols)
            )
            samples = converted[
                np.clip(nb_rows, 0, rows - 1), np.clip(nb_cols, 0, cols - 1)
            ]
            samples = np.where(inside[..., None], samples, 0.0)

            # Running max starts at zero; out-of-bounds points contribute nothing.
            channel_max = np.maximum(samples.max(axis=2), 0.0)
            channel_max[channel_max == 0.0] = 1.0
            accum[r_start:r_end] += center / channel_max

    estimate = np.minimum(accum / n_sprays, 1.0)

    degenerate = np.any(estimate == 0.0, axis=2)
    estimate[degenerate] = 1.0
    resized[degenerate] = 0.0

    n_degenerate = int(degenerate.sum())
    if n_degenerate:
        log.debug(f"Degenerate grid cells: {n_degenerate}/{degenerate.size}")

    return resized, estimate, degenerate


# ======================================================================
# 2) REDUCTION TO A GLOBAL VECTOR
# ======================================================================

def illumination_from_grids(
    resized: np.ndarray,
    estimate: np.ndarray,
    upper_bound: float = 255.0,
    kernel_size: int = 5,
) -> np.ndarray:
    """
    Reduce the sampled grids to a unit-RMS illumination vector.

    Both grids are box filtered with `kernel_size` when it is > 1, then
    the mean of resized / (upper_bound * estimate) is taken per channel,
    the first and third channels are swapped, and the vector is divided
    by its root-mean-square.

    If every grid cell was degenerate the mean is zero; the neutral
    vector (1, 1, 1) is returned with a warning.

    Returns:
        float64 array of 3 components.
    """
    log = logging.getLogger(LOGGER_NAME)

    upper_bound = require_positive_float("upper_bound", upper_bound)
    kernel_size = require_positive_int("kernel_size", kernel_size)
    if resized.shape != estimate.shape or resized.ndim != 3 or resized.shape[2] != 3:
        raise InvalidArgumentError(
            f"Grid shapes must match and be (rows, cols, 3): "
            f"{resized.shape} vs {estimate.shape}"
        )

    if kernel_size > 1:
        resized = box_filter(resized, kernel_size)
        estimate = box_filter(estimate, kernel_size)

    illumination = np.mean(resized / (upper_bound * estimate), axis=(0, 1))
    illumination[[0, 2]] = illumination[[2, 0]]

    rms = float(np.sqrt(np.mean(illumination ** 2)))
    if not np.isfinite(rms) or rms == 0.0:
        log.warning(
            "Illumination estimate is degenerate (no usable grid cells); "
            "falling back to neutral (1, 1, 1)."
        )
        return np.ones(3, dtype=np.float64)

    return illumination / rms


# ======================================================================
# 3) ONE-SHOT ESTIMATION
# ======================================================================

def estimate_illumination(
    image: np.ndarray,
    n_sprays: int = 1,
    spray_size: int = 225,
    upper_bound: float = 255.0,
    rows_step: int = 10,
    cols_step: int = 10,
    kernel_size: int = 5,
    rng: RNGSource = None,
) -> np.ndarray:
    """
    Estimate the global scene illumination of `image`.

    Args:
        image: (rows, cols, 3) array (BGR for OpenCV images).
        n_sprays: Sprays sampled per grid point (N).
        spray_size: Points per spray (n).
        upper_bound: Maximal value of a pixel channel.
        rows_step: Row stride of the estimation grid.
        cols_step: Column stride of the estimation grid.
        kernel_size: Smoothing window for the grids; 1 disables smoothing.
        rng: Random source (seed, numpy Generator or RNG).

    Returns:
        Unit-RMS float64 vector with the channel order of `image` reversed.
    """
    log = logging.getLogger(LOGGER_NAME)

    # Validate everything before the expensive sampling pass.
    upper_bound = require_positive_float("upper_bound", upper_bound)
    kernel_size = require_positive_int("kernel_size", kernel_size)

    resized, estimate, _ = sample_illumination_grid(
        image,
        n_sprays=n_sprays,
        spray_size=spray_size,
        rows_step=rows_step,
        cols_step=cols_step,
        rng=rng,
    )
    illumination = illumination_from_grids(
        resized, estimate, upper_bound=upper_bound, kernel_size=kernel_size,
    )

    log.info(
        "Estimated illumination: "
        f"{illumination[0]:.4f}, {illumination[1]:.4f}, {illumination[2]:.4f}"
    )
    return illumination
