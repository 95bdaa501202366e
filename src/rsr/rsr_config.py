"""
rsr_config.py
-------------

Central configuration object for the RSR pipeline.

All stages read their parameters from this dataclass, which keeps tuning,
reproducibility (seed) and presets in one place.
"""

from __future__ import annotations

__all__ = ["RSRConfig",]

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .rsr_errors import require_positive_float, require_positive_int, require_seed
from .rsr_utils import default_upper_bound


@dataclass
class RSRConfig:
    """
    Master configuration for the Random Sprays Retinex pipeline.

    Create and pass this object to the pipeline orchestrator:
        cfg = RSRConfig(seed=7)
        out, meta = run_rsr_pipeline(img, cfg)
    """

    # -------------------------------------------------------------
    # Spray sampling
    # -------------------------------------------------------------
    n_sprays: int = 1
    spray_size: int = 225

    # -------------------------------------------------------------
    # Estimation grid and smoothing
    # -------------------------------------------------------------
    rows_step: int = 10
    cols_step: int = 10
    kernel_size: int = 5

    # -------------------------------------------------------------
    # Value range; None = 65535 for uint16 images, 255 otherwise
    # -------------------------------------------------------------
    upper_bound: Optional[float] = None

    # -------------------------------------------------------------
    # Random source; None = PID/time entropy
    # -------------------------------------------------------------
    seed: Optional[int] = None

    # -------------------------------------------------------------
    # Debug output
    # -------------------------------------------------------------
    debug_enabled: bool = False
    debug_outdir: str = "debug_output"
    debug_composite_name: str = "pipeline_debug.jpg"
    debug_histograms: bool = True

    preset_name: Optional[str] = None

    def __post_init__(self):
        self.n_sprays = require_positive_int("n_sprays", self.n_sprays)
        self.spray_size = require_positive_int("spray_size", self.spray_size)
        self.rows_step = require_positive_int("rows_step", self.rows_step)
        self.cols_step = require_positive_int("cols_step", self.cols_step)
        self.kernel_size = require_positive_int("kernel_size", self.kernel_size)
        if self.upper_bound is not None:
            self.upper_bound = require_positive_float("upper_bound", self.upper_bound)
        if self.seed is not None:
            self.seed = require_seed(self.seed)

    def resolve_upper_bound(self, img: np.ndarray) -> float:
        """Explicit upper_bound, or the default for the image dtype."""
        if self.upper_bound is not None:
            return self.upper_bound
        return default_upper_bound(img.dtype)
