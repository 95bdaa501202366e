"""
cli.py - Command-line entry point for RSR color-cast removal.

    rsr input.png output.png [-N 1] [-n 225] [-k 5] [-r 10] [-c 10]
                             [-u UPPER_BOUND] [--seed SEED]
"""

from __future__ import annotations

import sys
import json
import logging
import argparse
from typing import List, Optional

from .logging_utils import configure_logging
from .rsr_config import RSRConfig
from .rsr_errors import RSRError
from .rsr_pipeline import process_file


def build_parser() -> argparse.ArgumentParser:
    d = RSRConfig()
    p = argparse.ArgumentParser(
        prog="rsr",
        description="Estimate the scene illumination with Random Sprays Retinex "
                    "and remove the color cast.",
    )
    p.add_argument("input", help="Input image file.")
    p.add_argument("output", help="Output image file.")
    p.add_argument("-N", "--sprays", type=int, default=d.n_sprays,
                   help="Number of sprays per sampled pixel (default: %(default)s).")
    p.add_argument("-n", "--spray-size", type=int, default=d.spray_size,
                   help="Size of an individual spray (default: %(default)s).")
    p.add_argument("-k", "--kernel-size", type=int, default=d.kernel_size,
                   help="Averaging kernel size; 1 disables smoothing (default: %(default)s).")
    p.add_argument("-r", "--rows-step", type=int, default=d.rows_step,
                   help="Rows counting step (default: %(default)s).")
    p.add_argument("-c", "--cols-step", type=int, default=d.cols_step,
                   help="Columns counting step (default: %(default)s).")
    p.add_argument("-u", "--upper-bound", type=float, default=None,
                   help="Maximal value of a pixel channel "
                        "(default: 65535 for 16-bit images, else 255).")
    p.add_argument("--seed", type=int, default=None,
                   help="Random seed for reproducible estimates.")
    p.add_argument("--debug-dir", default=None,
                   help="Write a debug report (stages, histograms) to this directory.")
    p.add_argument("--log-level", default="INFO",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    p.add_argument("--log-dir", default=None,
                   help="Also write a rotating log file to this directory.")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI; returns the process exit code."""
    args = build_parser().parse_args(argv)

    configure_logging(level=getattr(logging, args.log_level),
                      log_dir=args.log_dir, name="rsr", run_prefix="rsr")
    logger = logging.getLogger("rsr")

    try:
        cfg = RSRConfig(
            n_sprays=args.sprays,
            spray_size=args.spray_size,
            kernel_size=args.kernel_size,
            rows_step=args.rows_step,
            cols_step=args.cols_step,
            upper_bound=args.upper_bound,
            seed=args.seed,
            debug_enabled=args.debug_dir is not None,
            debug_outdir=args.debug_dir or "debug_output",
        )
        meta = process_file(args.input, args.output, cfg)
    except (RSRError, OSError, RuntimeError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    logger.debug(f"Run metadata: {json.dumps(meta, default=str)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
