"""Metrics: PSNR, SSIM, timing."""

import time
import numpy as np
from skimage.metrics import peak_signal_noise_ratio, structural_similarity
from typing import Dict


def to_unit_float(image: np.ndarray) -> np.ndarray:
    """Image as float64 in [0, 1] (uint8 is divided by 255)."""
    if image.dtype == np.uint8:
        return image.astype(np.float64) / 255.0
    return image.astype(np.float64)


def _ssim_window(shape) -> int:
    side = min(shape[0], shape[1], 7)
    return side if side % 2 == 1 else side - 1


def compute_psnr_ssim(original_rgb: np.ndarray, reconstructed_rgb: np.ndarray) -> Dict[str, float]:
    """Compute PSNR and SSIM on RGB and Y channel."""
    original = to_unit_float(original_rgb[:, :, :3])
    recon = to_unit_float(reconstructed_rgb[:, :, :3])
    win_size = _ssim_window(original.shape)

    psnr_rgb = peak_signal_noise_ratio(original, recon, data_range=1.0)
    ssim_rgb = structural_similarity(
        original, recon, channel_axis=2, data_range=1.0, win_size=win_size
    )

    # Y channel (luminance) - BT.601
    original_y = 0.299 * original[:, :, 0] + 0.587 * original[:, :, 1] + 0.114 * original[:, :, 2]
    recon_y = 0.299 * recon[:, :, 0] + 0.587 * recon[:, :, 1] + 0.114 * recon[:, :, 2]

    psnr_y = peak_signal_noise_ratio(original_y, recon_y, data_range=1.0)
    ssim_y = structural_similarity(original_y, recon_y, data_range=1.0, win_size=win_size)

    return {
        'psnr_rgb': float(psnr_rgb),
        'ssim_rgb': float(ssim_rgb),
        'psnr_y': float(psnr_y),
        'ssim_y': float(ssim_y)
    }


class Timer:
    """Collects wall-clock time per named step, in milliseconds."""

    def __init__(self):
        self.times_ms: Dict[str, float] = {}

    def measure(self, label: str, func, *args, **kwargs):
        start = time.perf_counter()
        result = func(*args, **kwargs)
        self.times_ms[label] = self.times_ms.get(label, 0.0) + (time.perf_counter() - start) * 1000.0
        return result

    @property
    def total_ms(self) -> float:
        return sum(self.times_ms.values())
