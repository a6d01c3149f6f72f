"""Tests for effect quality measurement."""

import numpy as np
from models.effect_settings import EffectSettings
from engines.analysis import measure_effect, quality_sweep
from engines.pipeline import CompressionEffect
from utils.test_images import generate_thin_stripes


def test_quality_psnr_monotonic():
    """PSNR should increase with quality factor."""
    image = np.random.randint(0, 256, (64, 64, 3), dtype=np.uint8)
    base = EffectSettings(chroma_subsample_ratio=1)
    results = quality_sweep(image, base, [0.5, 1.0, 2.0, 4.0])
    assert [q for q, _ in results] == [0.5, 1.0, 2.0, 4.0]

    psnr_values = [r.psnr_y for _, r in results]
    for i in range(len(psnr_values) - 1):
        assert psnr_values[i] <= psnr_values[i + 1] + 0.1


def test_high_quality_reconstruction():
    image = np.random.randint(0, 256, (64, 64, 3), dtype=np.uint8)
    result = measure_effect(image, EffectSettings(quality_factor=10.0, chroma_subsample_ratio=1))
    assert result.applied
    assert result.psnr_y > 45.0
    assert result.frame_time_ms > 0


def test_subsampling_affects_quality():
    """Chroma subsampling smears fine color detail."""
    stripes = generate_thin_stripes(64, stripe_width=1)
    full = measure_effect(stripes, EffectSettings(quality_factor=4.0, chroma_subsample_ratio=1))
    sub = measure_effect(stripes, EffectSettings(quality_factor=4.0, chroma_subsample_ratio=2))
    assert full.psnr_rgb > sub.psnr_rgb


def test_unavailable_effect_reports_passthrough():
    image = np.random.randint(0, 256, (16, 16, 3), dtype=np.uint8)
    with CompressionEffect(chroma_table=np.zeros((8, 8))) as effect:
        result = measure_effect(image, EffectSettings(), effect)
    assert not result.applied
    assert result.degraded_image is image
    assert np.isinf(result.psnr_y)
    assert result.stage_times_ms == {}
