"""
rsr_utils.py
------------

Image loading and saving for the RSR pipeline (OpenCV codecs).

Images are kept in OpenCV layout: (rows, cols, 3) BGR, uint8 or uint16
as stored in the file, or float for HDR formats.
"""

from __future__ import annotations

__all__ = ["image_loader", "save_image", "default_upper_bound", "image_summary",]

import os
import logging
from typing import Tuple

import cv2
import numpy as np

from .rsr_errors import require_bgr_image


# ======================================================================
# MODULE CONSTANTS
# ======================================================================

LOGGER_NAME = "rsr"

# Keep 16-bit depth; drop alpha, keep color.
IMREAD_FLAGS = cv2.IMREAD_ANYDEPTH | cv2.IMREAD_ANYCOLOR


def default_upper_bound(dtype: np.dtype) -> float:
    """Maximal channel value assumed for images of `dtype`."""
    return 65535.0 if np.dtype(dtype) == np.uint16 else 255.0


def image_summary(img: np.ndarray) -> dict:
    """Basic shape/range statistics used in logs and pipeline metadata."""
    h, w = img.shape[:2]
    return {
        "width": w,
        "height": h,
        "channels": img.shape[2] if img.ndim == 3 else 1,
        "dtype": str(img.dtype),
        "min": float(img.min()) if img.size else 0.0,
        "max": float(img.max()) if img.size else 0.0,
        "mean": float(img.mean()) if img.size else 0.0,
    }


# ======================================================================
# IMAGE LOADING ROUTINE
# ======================================================================

def image_loader(path: str) -> Tuple[np.ndarray, dict]:
    """
    Load a 3-channel image file and collect basic metadata.

    Args:
        path: Image file path.

    Returns:
        (image_np, metadata_dict)

    Raises:
        FileNotFoundError: path does not exist.
        RuntimeError: OpenCV could not decode the file.
        EmptyInputError: decoded image has zero area.
        InvalidArgumentError: decoded image is not 3-channel.
    """
    log = logging.getLogger(LOGGER_NAME)

    if not os.path.exists(path):
        log.error(f"Image not found: {path}")
        raise FileNotFoundError(path)

    img = cv2.imread(path, IMREAD_FLAGS)
    if img is None:
        log.error(f"Failed to load image via OpenCV: {path}")
        raise RuntimeError(f"Could not load: {path}")

    if img.ndim == 2:
        img = img[..., None]
    require_bgr_image(img, name=path)

    meta = {"path": path, **image_summary(img)}
    log.info(
        f"Loaded image: {path} ({meta['width']}x{meta['height']}, "
        f"dtype={meta['dtype']}, min={meta['min']:.1f}, "
        f"max={meta['max']:.1f}, mean={meta['mean']:.1f})"
    )
    return img, meta


# ======================================================================
# IMAGE SAVE HELPER
# ======================================================================

def save_image(img: np.ndarray, path: str) -> str:
    """
    Save an image; the format follows the file extension.

    Args:
        img: BGR numpy array.
        path: Output path.

    Returns:
        Absolute output path.
    """
    log = logging.getLogger(LOGGER_NAME)

    full_path = os.path.abspath(path)
    directory = os.path.dirname(full_path)

    if directory and not os.path.exists(directory):
        os.makedirs(directory, exist_ok=True)
        log.debug(f"Created directory: {directory}")

    try:
        ok = cv2.imwrite(full_path, img)
    except cv2.error as e:
        log.error(f"OpenCV could not encode {full_path}: {e}")
        raise IOError(f"Could not write: {full_path}") from e

    if not ok:
        log.error(f"Failed to save image to: {full_path}")
        raise IOError(f"Could not write: {full_path}")

    log.info(f"Image saved: {full_path}")
    return full_path
