"""
rsr - Random Sprays Retinex global illumination estimation and
color-cast removal.
"""

from .__about__ import __version__
from .rng import RNG, as_rng
from .rsr_errors import RSRError, InvalidArgumentError, EmptyInputError
from .rsr_sprays import create_sprays
from .rsr_filter import integral_table, box_filter
from .rsr_estimate import (
    sample_illumination_grid,
    illumination_from_grids,
    estimate_illumination,
)
from .rsr_correct import remove_color_cast
from .rsr_config import RSRConfig
from .rsr_pipeline import run_rsr_pipeline, process_file

__all__ = [
    "RNG",
    "as_rng",
    "RSRError",
    "InvalidArgumentError",
    "EmptyInputError",
    "create_sprays",
    "integral_table",
    "box_filter",
    "sample_illumination_grid",
    "illumination_from_grids",
    "estimate_illumination",
    "remove_color_cast",
    "RSRConfig",
    "run_rsr_pipeline",
    "process_file",
]
