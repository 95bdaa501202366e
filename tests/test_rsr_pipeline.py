"""
test_rsr_pipeline.py
--------------------
Tests for RSRConfig, run_rsr_pipeline() and process_file().
"""

import os

import cv2
import numpy as np
import pytest

from rsr.rsr_config import RSRConfig
from rsr.rsr_errors import EmptyInputError, InvalidArgumentError
from rsr.rsr_pipeline import process_file, run_rsr_pipeline


def fast_config(**kw) -> RSRConfig:
    params = dict(n_sprays=2, spray_size=40, seed=11)
    params.update(kw)
    return RSRConfig(**params)


def red_green_ratio(img: np.ndarray) -> float:
    return float(img[..., 2].astype(np.float64).mean() / img[..., 1].astype(np.float64).mean())


# ---------------------------------------------------------------------------
# 1. Configuration
# ---------------------------------------------------------------------------

def test_config_defaults():
    cfg = RSRConfig()
    assert (cfg.n_sprays, cfg.spray_size, cfg.kernel_size) == (1, 225, 5)
    assert (cfg.rows_step, cfg.cols_step) == (10, 10)
    assert cfg.upper_bound is None
    assert cfg.seed is None


@pytest.mark.parametrize("kwargs", [
    dict(n_sprays=0),
    dict(spray_size=-1),
    dict(kernel_size=0),
    dict(rows_step=0),
    dict(cols_step=1.5),
    dict(upper_bound=0),
    dict(seed=-1),
    dict(seed=1.5),
])
def test_config_validation(kwargs):
    with pytest.raises(InvalidArgumentError):
        RSRConfig(**kwargs)


def test_upper_bound_resolution():
    cfg = RSRConfig()
    assert cfg.resolve_upper_bound(np.zeros((2, 2, 3), np.uint8)) == 255.0
    assert cfg.resolve_upper_bound(np.zeros((2, 2, 3), np.uint16)) == 65535.0
    assert cfg.resolve_upper_bound(np.zeros((2, 2, 3), np.float32)) == 255.0
    assert RSRConfig(upper_bound=1000).resolve_upper_bound(
        np.zeros((2, 2, 3), np.uint16)) == 1000.0


# ---------------------------------------------------------------------------
# 2. Pipeline scenarios
# ---------------------------------------------------------------------------

def test_flat_gray_is_unchanged(gray_image):
    out, meta = run_rsr_pipeline(gray_image, fast_config())
    assert np.allclose(meta["illumination"], [1.0, 1.0, 1.0])
    assert np.array_equal(out, gray_image)


def test_red_bias_is_reduced(red_biased_image):
    out, meta = run_rsr_pipeline(red_biased_image, fast_config())
    illum = meta["illumination"]
    assert illum[0] > illum[1]

    before = red_green_ratio(red_biased_image)
    after = red_green_ratio(out)
    assert after < before
    assert abs(after - 1.0) < 0.02


def test_seed_makes_pipeline_reproducible(color_image):
    out1, meta1 = run_rsr_pipeline(color_image, fast_config(seed=5))
    out2, meta2 = run_rsr_pipeline(color_image, fast_config(seed=5))
    assert meta1["illumination"] == meta2["illumination"]
    assert np.array_equal(out1, out2)
    assert meta1["seed"] == 5


def test_explicit_rng_overrides_seed(color_image):
    _, meta1 = run_rsr_pipeline(color_image, fast_config(seed=5), rng=99)
    _, meta2 = run_rsr_pipeline(color_image, fast_config(seed=6), rng=99)
    assert meta1["illumination"] == meta2["illumination"]


def test_uint16_defaults_upper_bound(color_image):
    img16 = color_image.astype(np.uint16) * 257
    out, meta = run_rsr_pipeline(img16, fast_config())
    assert meta["upper_bound"] == 65535.0
    assert out.dtype == np.uint16


def test_metadata_contents(color_image):
    _, meta = run_rsr_pipeline(color_image, fast_config(preset_name="unit"))
    assert meta["grid_shape"] == [8, 9]
    assert meta["degenerate_cells"] == 0
    assert meta["config_preset"] == "unit"
    assert len(meta["illumination"]) == 3


def test_degenerate_cells_counted():
    img = np.full((60, 60, 3), 150, dtype=np.uint8)
    img[:, :30, 1] = 0
    _, meta = run_rsr_pipeline(img, fast_config())
    assert meta["degenerate_cells"] == 18


def test_empty_image_raises():
    with pytest.raises(EmptyInputError):
        run_rsr_pipeline(np.zeros((0, 0, 3), dtype=np.uint8), fast_config())


# ---------------------------------------------------------------------------
# 3. Debug report
# ---------------------------------------------------------------------------

def test_debug_report_written(color_image, tmp_path):
    cfg = fast_config(debug_enabled=True, debug_outdir=str(tmp_path / "dbg"))
    run_rsr_pipeline(color_image, cfg)
    files = set(os.listdir(tmp_path / "dbg"))
    assert "pipeline_debug.jpg" in files
    for stage in ("original", "grid_source", "grid_estimate", "corrected"):
        assert f"{stage}.png" in files
        assert f"{stage}_hist.png" in files


# ---------------------------------------------------------------------------
# 4. File level
# ---------------------------------------------------------------------------

def test_process_file_round_trip(red_biased_image, tmp_path):
    src = tmp_path / "in.png"
    dst = tmp_path / "out" / "corrected.png"
    cv2.imwrite(str(src), red_biased_image)

    meta = process_file(str(src), str(dst), fast_config())
    assert dst.exists()
    assert meta["input"]["width"] == red_biased_image.shape[1]

    out = cv2.imread(str(dst), cv2.IMREAD_UNCHANGED)
    assert out.shape == red_biased_image.shape
    assert red_green_ratio(out) < red_green_ratio(red_biased_image)


def test_process_file_writes_nothing_on_failure(tmp_path):
    src = tmp_path / "tiny.png"
    dst = tmp_path / "out.png"
    cv2.imwrite(str(src), np.full((4, 4, 3), 90, dtype=np.uint8))

    with pytest.raises(EmptyInputError):
        process_file(str(src), str(dst), fast_config())
    assert not dst.exists()
