"""
rsr_correct.py
--------------

Von Kries style color-cast removal.

Every channel k of the image is divided by illumination[2 - k]; the
reversed index undoes the channel swap done by the estimator, so a BGR
buffer is corrected with an RGB illumination vector.
"""

from __future__ import annotations

__all__ = ["remove_color_cast", "convert_like",]

import logging
from typing import Sequence, Union

import numpy as np

from .rsr_errors import InvalidArgumentError, require_bgr_image


LOGGER_NAME = "rsr"


def convert_like(values: np.ndarray, dtype: np.dtype) -> np.ndarray:
    """
    Convert float values to `dtype` with saturation.

    Integer targets are rounded to nearest and clipped to the dtype range
    instead of wrapping; float targets are a plain cast.
    """
    dtype = np.dtype(dtype)
    if np.issubdtype(dtype, np.integer):
        info = np.iinfo(dtype)
        return np.clip(np.rint(values), info.min, info.max).astype(dtype)
    return values.astype(dtype)


def remove_color_cast(
    image: np.ndarray,
    illumination: Union[Sequence[float], np.ndarray],
) -> np.ndarray:
    """
    Remove the illumination color cast from `image`.

    Args:
        image: (rows, cols, 3) array (BGR for OpenCV images).
        illumination: 3 positive components, in reversed channel order
            relative to `image` (as returned by estimate_illumination).

    Returns:
        Corrected image with the shape and dtype of `image`.

    Raises:
        InvalidArgumentError: bad image shape, or illumination that is not
            3 finite positive values.
    """
    log = logging.getLogger(LOGGER_NAME)

    require_bgr_image(image)
    illum = np.asarray(illumination, dtype=np.float64).reshape(-1)
    if illum.shape != (3,):
        raise InvalidArgumentError(
            f"illumination must have 3 components, got {illum.shape[0]}"
        )
    if not np.all(np.isfinite(illum)) or np.any(illum <= 0.0):
        raise InvalidArgumentError(
            f"illumination components must be finite and > 0, got {illum.tolist()}"
        )

    divisors = illum[::-1]
    gains = 1.0 / divisors
    log.info(f"Color-cast gains (per image channel): {np.round(gains, 4).tolist()}")

    corrected = image.astype(np.float64) / divisors
    return convert_like(corrected, image.dtype)
