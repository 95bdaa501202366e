"""
rsr_filter.py
-------------

Box (averaging) filter on top of a summed-area table.

Routines:
    integral_table
    box_filter

The window of output pixel (i, j) covers rows [i - (k-1)//2, i + k//2]
and columns [j - (k-1)//2, j + k//2], so even kernels lean one step toward
higher indices. Windows are clamped to the image (no wrap, no reflection)
and every sum is divided by the clamped window area, not by k*k.
"""

from __future__ import annotations

__all__ = ["integral_table", "box_filter",]

import logging
from typing import Tuple

import numpy as np

from .rsr_errors import (
    EmptyInputError,
    InvalidArgumentError,
    require_positive_int,
)


LOGGER_NAME = "rsr"


def _as_float_channels(buffer: np.ndarray) -> np.ndarray:
    """Return a float64 (rows, cols, channels) view/copy of `buffer`."""
    buf = np.asarray(buffer, dtype=np.float64)
    if buf.ndim == 2:
        buf = buf[..., None]
    if buf.ndim != 3:
        raise InvalidArgumentError(
            f"buffer must have shape (rows, cols) or (rows, cols, channels), got {buf.shape}"
        )
    if buf.shape[0] == 0 or buf.shape[1] == 0:
        raise EmptyInputError(f"buffer has zero area: {buf.shape[0]}x{buf.shape[1]}")
    return buf


def integral_table(buffer: np.ndarray) -> np.ndarray:
    """
    Build a zero-padded per-channel summed-area table.

    table[r, c] is the sum of buffer[:r, :c]; row 0 and column 0 are zero.

    Args:
        buffer: (rows, cols) or (rows, cols, channels) array.

    Returns:
        float64 array of shape (rows + 1, cols + 1, channels).
    """
    buf = _as_float_channels(buffer)
    rows, cols, cn = buf.shape

    table = np.zeros((rows + 1, cols + 1, cn), dtype=np.float64)
    table[1:, 1:] = buf.cumsum(axis=0).cumsum(axis=1)
    return table


def _window_bounds(length: int, kernel_size: int) -> Tuple[np.ndarray, np.ndarray]:
    """Clamped [start, end) table indices of every window along one axis."""
    idx = np.arange(length)
    start = np.maximum(idx - (kernel_size - 1) // 2, 0)
    end = np.minimum(idx + kernel_size // 2 + 1, length)
    return start, end


def box_filter(buffer: np.ndarray, kernel_size: int) -> np.ndarray:
    """
    Average every pixel over a kernel_size x kernel_size window.

    The result is always a new float64 array; `buffer` is only read.

    Args:
        buffer: (rows, cols) or (rows, cols, channels) array.
        kernel_size: Window side length (>= 1). 1 is the identity.

    Returns:
        Filtered float64 array with the same shape as `buffer`.

    Raises:
        InvalidArgumentError: kernel_size < 1 or bad buffer shape.
        EmptyInputError: zero-area buffer.
    """
    log = logging.getLogger(LOGGER_NAME)

    kernel_size = require_positive_int("kernel_size", kernel_size)
    squeeze = np.ndim(buffer) == 2
    buf = _as_float_channels(buffer)

    if kernel_size == 1:
        out = buf.copy()
        return out[..., 0] if squeeze else out

    rows, cols, _ = buf.shape
    table = integral_table(buf)

    r0, r1 = _window_bounds(rows, kernel_size)
    c0, c1 = _window_bounds(cols, kernel_size)
    r0, r1 = r0[:, None], r1[:, None]
    c0, c1 = c0[None, :], c1[None, :]

    sums = table[r1, c1] - table[r1, c0] - table[r0, c1] + table[r0, c0]
    area = ((r1 - r0) * (c1 - c0)).astype(np.float64)
    out = sums / area[..., None]

    log.debug(f"Box filter: {rows}x{cols}, kernel_size={kernel_size}")
    return out[..., 0] if squeeze else out
