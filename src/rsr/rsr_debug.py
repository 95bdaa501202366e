"""
rsr_debug.py
------------

Debugging utilities for visualizing the stages of the RSR pipeline.

Produces:
    - Per-stage image dumps
    - Upscaled views of the estimation grids
    - Per-channel histogram diagnostics
    - A labeled side-by-side composite

All helpers work with OpenCV BGR images; anything that is not uint8 is
rescaled for display.
"""

from __future__ import annotations

__all__ = [
    "to_display",
    "grid_to_image",
    "grid_composite",
    "save_histogram",
    "save_pipeline_debug",
]

import os
import logging
from typing import Dict, List, Optional

import cv2
import numpy as np
import matplotlib.pyplot as plt

LOGGER_NAME = "rsr"


# ======================================================================
# 1) DISPLAY CONVERSION
# ======================================================================

def _ensure_dir(path: str) -> None:
    d = os.path.dirname(path)
    if d and not os.path.exists(d):
        os.makedirs(d, exist_ok=True)


def to_display(img: np.ndarray, upper_bound: float = 255.0) -> np.ndarray:
    """Map [0, upper_bound] to a uint8 BGR image."""
    if img.dtype == np.uint8 and upper_bound == 255.0:
        out = img
    else:
        scaled = img.astype(np.float64) * (255.0 / upper_bound)
        out = np.clip(np.rint(scaled), 0, 255).astype(np.uint8)
    if out.ndim == 2:
        out = cv2.cvtColor(out, cv2.COLOR_GRAY2BGR)
    return out


def grid_to_image(
    grid: np.ndarray,
    shape: tuple,
    upper_bound: float = 1.0,
) -> np.ndarray:
    """
    Upscale a float estimation grid to `shape` (rows, cols) with
    nearest-neighbor interpolation, so grid cells stay visible.
    """
    disp = to_display(grid, upper_bound)
    rows, cols = shape[:2]
    return cv2.resize(disp, (cols, rows), interpolation=cv2.INTER_NEAREST)


# ======================================================================
# 2) IMAGE GRID COMPOSITOR
# ======================================================================

def grid_composite(
    images: List[np.ndarray],
    labels: List[str],
    cols: int = 3,
    scale: float = 0.45,
    pad: int = 15,
    font_scale: float = 0.6,
) -> Optional[np.ndarray]:
    """
    Create a side-by-side composite grid with labels.

    images: list of BGR uint8 images, all the same size
    labels: list of strings matching images length
    """
    if len(images) != len(labels):
        raise ValueError("images and labels length mismatch")
    if len(images) == 0:
        return None

    H0, W0 = images[0].shape[:2]
    H = max(1, int(H0 * scale))
    W = max(1, int(W0 * scale))

    labeled = []
    for im, text in zip(images, labels):
        canvas = cv2.resize(im, (W, H), interpolation=cv2.INTER_AREA)
        cv2.putText(
            canvas, text, (10, 25), cv2.FONT_HERSHEY_SIMPLEX,
            font_scale, (0, 255, 0), 1, cv2.LINE_AA,
        )
        labeled.append(canvas)

    cols = min(cols, len(labeled))
    rows = int(np.ceil(len(labeled) / cols))
    blank = np.zeros((H, W, 3), dtype=np.uint8)
    labeled += [blank] * (rows * cols - len(labeled))

    grid = np.vstack([
        np.hstack(labeled[r * cols:(r + 1) * cols]) for r in range(rows)
    ])
    return cv2.copyMakeBorder(grid, pad, pad, pad, pad, cv2.BORDER_CONSTANT, value=0)


# ======================================================================
# 3) HISTOGRAM DIAGNOSTICS
# ======================================================================

def save_histogram(
    img: np.ndarray,
    out_path: str,
    title: str = "",
) -> None:
    """Save per-channel histograms of a BGR uint8 image using matplotlib."""
    log = logging.getLogger(LOGGER_NAME)
    _ensure_dir(out_path)

    fig, ax = plt.subplots(figsize=(6, 4))
    for ch, (name, color) in enumerate((("B", "blue"), ("G", "green"), ("R", "red"))):
        ax.hist(img[..., ch].ravel(), bins=256, range=(0, 255),
                alpha=0.5, color=color, label=name)
    ax.legend()
    ax.set_title(title)
    fig.tight_layout()
    fig.savefig(out_path)
    plt.close(fig)

    log.info(f"Saved histogram: {out_path}")


# ======================================================================
# 4) MAIN DEBUGGING HOOK
# ======================================================================

def save_pipeline_debug(
    stages: Dict[str, np.ndarray],
    out_dir: str,
    composite_name: str = "pipeline_debug.jpg",
    histogram: bool = True,
) -> Optional[str]:
    """
    Save a visual debugging report for the pipeline.

    Args:
        stages: Ordered mapping of stage name -> BGR uint8 image of the
            same size. None entries are skipped.
        out_dir: Directory to store outputs.
        composite_name: Name of the composite image file.
        histogram: Whether to generate histograms for each stage.

    Returns:
        Full path to the composite image, or None if no stage was given.
    """
    log = logging.getLogger(LOGGER_NAME)
    os.makedirs(out_dir, exist_ok=True)

    image_list = []
    label_list = []
    for name, img in stages.items():
        if img is None:
            continue

        out_path = os.path.join(out_dir, f"{name}.png")
        cv2.imwrite(out_path, img)
        log.debug(f"Saved stage: {out_path}")

        image_list.append(img)
        label_list.append(name)

        if histogram:
            save_histogram(img, os.path.join(out_dir, f"{name}_hist.png"), title=name)

    comp = grid_composite(image_list, label_list)
    if comp is None:
        return None

    comp_path = os.path.join(out_dir, composite_name)
    cv2.imwrite(comp_path, comp)
    log.info(f"Saved pipeline composite: {comp_path}")
    return comp_path
