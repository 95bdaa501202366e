"""
rsr_errors.py
-------------

Exception taxonomy for the RSR core, plus the argument checks shared by
the core modules.

Both concrete errors also derive from ValueError, so callers that only
guard against bad values keep working.
"""

from __future__ import annotations

__all__ = [
    "RSRError",
    "InvalidArgumentError",
    "EmptyInputError",
    "require_positive_int",
    "require_positive_float",
    "require_bgr_image",
    "require_seed",
]

import numpy as np


class RSRError(Exception):
    """Base class for all RSR failures."""


class InvalidArgumentError(RSRError, ValueError):
    """A parameter, image shape or illumination vector is out of domain."""


class EmptyInputError(RSRError, ValueError):
    """The image (or its estimation grid) has zero area."""


# ======================================================================
# ARGUMENT CHECKS
# ======================================================================

def require_positive_int(name: str, value) -> int:
    """Return `value` as int, or raise InvalidArgumentError unless it is >= 1."""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidArgumentError(f"{name} must be >= 1, got {value}")
    return int(value)


def require_positive_float(name: str, value) -> float:
    """Return `value` as float, or raise InvalidArgumentError unless it is > 0."""
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{name} must be a number, got {value!r}")
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"{name} must be a number, got {value!r}") from None
    if not np.isfinite(value) or value <= 0:
        raise InvalidArgumentError(f"{name} must be a finite value > 0, got {value}")
    return value


def require_bgr_image(img: np.ndarray, name: str = "image") -> np.ndarray:
    """
    Check that `img` is a (rows, cols, 3) array with non-zero area.

    Raises:
        InvalidArgumentError: not an ndarray, or not exactly 3 channels.
        EmptyInputError: zero rows or zero columns.
    """
    if not isinstance(img, np.ndarray):
        raise InvalidArgumentError(f"{name} must be a numpy array, got {type(img).__name__}")
    if img.ndim != 3 or img.shape[2] != 3:
        raise InvalidArgumentError(
            f"{name} must have shape (rows, cols, 3), got {img.shape}"
        )
    if img.shape[0] == 0 or img.shape[1] == 0:
        raise EmptyInputError(f"{name} has zero area: {img.shape[0]}x{img.shape[1]}")
    return img


def require_seed(value) -> int:
    """Return `value` as int, or raise InvalidArgumentError unless it is an integer >= 0."""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidArgumentError(f"seed must be an integer, got {value!r}")
    if value < 0:
        raise InvalidArgumentError(f"seed must be >= 0, got {value}")
    return int(value)
