"""
test_cli.py
-----------
End-to-end tests for the `rsr` command-line entry point.
"""

import logging

import cv2
import numpy as np
import pytest

from rsr.cli import build_parser, main


@pytest.fixture(autouse=True)
def reset_rsr_logger():
    """main() installs handlers on the 'rsr' logger; drop them afterwards."""
    yield
    logger = logging.getLogger("rsr")
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.setLevel(logging.NOTSET)


def test_parser_defaults():
    args = build_parser().parse_args(["in.png", "out.png"])
    assert (args.sprays, args.spray_size, args.kernel_size) == (1, 225, 5)
    assert (args.rows_step, args.cols_step) == (10, 10)
    assert args.upper_bound is None
    assert args.seed is None


def test_main_corrects_image(red_biased_image, tmp_path):
    src = tmp_path / "in.png"
    dst = tmp_path / "out.png"
    cv2.imwrite(str(src), red_biased_image)

    code = main([str(src), str(dst), "-N", "2", "-n", "30", "--seed", "3"])
    assert code == 0
    out = cv2.imread(str(dst), cv2.IMREAD_UNCHANGED)
    assert out.shape == red_biased_image.shape
    assert out[..., 2].mean() < red_biased_image[..., 2].mean()


def test_main_writes_log_file(gray_image, tmp_path):
    src = tmp_path / "in.png"
    cv2.imwrite(str(src), gray_image)
    code = main([str(src), str(tmp_path / "out.png"), "-n", "20",
                 "--log-dir", str(tmp_path / "logs")])
    assert code == 0
    assert list((tmp_path / "logs").glob("rsr_PID*.log"))


def test_main_missing_input_fails(tmp_path):
    dst = tmp_path / "out.png"
    assert main([str(tmp_path / "missing.png"), str(dst)]) == 1
    assert not dst.exists()


def test_main_invalid_parameter_fails(gray_image, tmp_path):
    src = tmp_path / "in.png"
    dst = tmp_path / "out.png"
    cv2.imwrite(str(src), gray_image)
    assert main([str(src), str(dst), "-N", "0"]) == 1
    assert not dst.exists()


def test_main_negative_seed_fails(gray_image, tmp_path):
    src = tmp_path / "in.png"
    dst = tmp_path / "out.png"
    cv2.imwrite(str(src), gray_image)
    assert main([str(src), str(dst), "--seed=-1"]) == 1
    assert not dst.exists()
