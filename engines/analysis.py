"""Quality measurement of the effect on a single frame."""

import dataclasses
import time
from typing import Iterable, List, Optional, Tuple

import numpy as np

from models.effect_result import EffectResult
from models.effect_settings import EffectSettings
from engines.pipeline import CompressionEffect
from utils.metrics import compute_psnr_ssim


def measure_effect(
    image: np.ndarray,
    settings: EffectSettings,
    effect: Optional[CompressionEffect] = None
) -> EffectResult:
    """Run the effect once and compare the result with the source."""
    owned = effect is None
    if owned:
        effect = CompressionEffect(max_workers=1)
    try:
        start = time.perf_counter()
        degraded = effect.apply(image, settings)
        frame_time_ms = (time.perf_counter() - start) * 1000.0
        stage_times = dict(effect.last_timings) if degraded is not None else {}
    finally:
        if owned:
            effect.close()

    applied = degraded is not None
    if not applied:
        degraded = image
    metrics = compute_psnr_ssim(image, degraded)

    return EffectResult(
        original_image=image,
        degraded_image=degraded,
        psnr_y=metrics['psnr_y'],
        ssim_y=metrics['ssim_y'],
        psnr_rgb=metrics['psnr_rgb'],
        ssim_rgb=metrics['ssim_rgb'],
        frame_time_ms=frame_time_ms,
        stage_times_ms=stage_times,
        applied=applied,
    )


def quality_sweep(
    image: np.ndarray,
    base_settings: EffectSettings,
    quality_factors: Iterable[float] = (0.5, 1.0, 2.0, 4.0, 8.0)
) -> List[Tuple[float, EffectResult]]:
    """Measure the effect over a range of quality factors, sharing one set of buffers."""
    results = []
    with CompressionEffect() as effect:
        for factor in quality_factors:
            settings = dataclasses.replace(base_settings, quality_factor=float(factor))
            results.append((float(factor), measure_effect(image, settings, effect)))
    return results
