"""Effect result with metrics."""

from dataclasses import dataclass, field
from typing import Dict

import numpy as np


@dataclass
class EffectResult:
    """Source and degraded frame with quality metrics."""

    original_image: np.ndarray
    degraded_image: np.ndarray

    # Quality metrics
    psnr_y: float
    ssim_y: float
    psnr_rgb: float
    ssim_rgb: float

    # Runtime
    frame_time_ms: float
    stage_times_ms: Dict[str, float] = field(default_factory=dict)

    applied: bool = True
