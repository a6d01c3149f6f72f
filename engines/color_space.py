"""Color space conversion and chroma subsampling.

Planes use normalized [0, 1] samples. Chroma is offset by 128/255 so that a
neutral pixel centers to exactly zero in the transform domain.
"""

import numpy as np
import cv2
from typing import Literal, Tuple

from engines.block_processor import ceil_div
from utils.constants import CHROMA_OFFSET

FilterMode = Literal['point', 'bilinear']


def rgb_to_luma(rgb: np.ndarray) -> np.ndarray:
    R, G, B = rgb[:, :, 0], rgb[:, :, 1], rgb[:, :, 2]
    return 0.299 * R + 0.587 * G + 0.114 * B


def rgb_to_chroma(rgb: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    R, G, B = rgb[:, :, 0], rgb[:, :, 1], rgb[:, :, 2]
    Cb = -0.168736 * R - 0.331264 * G + 0.5 * B + CHROMA_OFFSET
    Cr = 0.5 * R - 0.418688 * G - 0.081312 * B + CHROMA_OFFSET
    return Cb, Cr


def subsample_chroma(channel: np.ndarray, ratio: int) -> np.ndarray:
    """Average each ratio x ratio block, clamping the source at its edges.

    Output shape is ``(ceil(h / ratio), ceil(w / ratio))``.
    """
    if ratio < 1:
        raise ValueError(f"Subsample ratio must be >= 1, got {ratio}")
    if ratio == 1:
        return np.array(channel, dtype=np.float64)

    h, w = channel.shape
    out_h, out_w = ceil_div(h, ratio), ceil_div(w, ratio)
    padded = np.pad(channel, ((0, out_h * ratio - h), (0, out_w * ratio - w)), mode='edge')
    return padded.reshape(out_h, ratio, out_w, ratio).mean(axis=(1, 3))


def upsample_chroma(
    channel: np.ndarray,
    ratio: int,
    target_shape: Tuple[int, int],
    method: FilterMode = 'point'
) -> np.ndarray:
    """Upsample a chroma plane back to target (h, w).

    'point' fetches sample (y // ratio, x // ratio); 'bilinear' interpolates.
    """
    h, w = target_shape
    if ratio == 1:
        return channel[:h, :w]

    if method == 'point':
        ys = np.arange(h) // ratio
        xs = np.arange(w) // ratio
        return channel[ys[:, None], xs[None, :]]
    if method == 'bilinear':
        ch, cw = channel.shape
        up = cv2.resize(np.ascontiguousarray(channel), (cw * ratio, ch * ratio), interpolation=cv2.INTER_LINEAR)
        return up[:h, :w]
    raise ValueError(f"Unknown filter mode: {method}")


def rgb_to_ycbcr(rgb: np.ndarray, subsample_ratio: int = 1) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """RGB [0, 1] to full-resolution Y and subsampled Cb, Cr (ITU-R BT.601)."""
    Y = rgb_to_luma(rgb)
    Cb, Cr = rgb_to_chroma(rgb)
    return Y, subsample_chroma(Cb, subsample_ratio), subsample_chroma(Cr, subsample_ratio)


def ycbcr_to_rgb(
    Y: np.ndarray,
    Cb: np.ndarray,
    Cr: np.ndarray,
    subsample_ratio: int = 1,
    method: FilterMode = 'point'
) -> np.ndarray:
    """Full-resolution Y plus subsampled Cb, Cr back to RGB, clipped to [0, 1]."""
    shape = Y.shape
    Cb = upsample_chroma(Cb, subsample_ratio, shape, method) - CHROMA_OFFSET
    Cr = upsample_chroma(Cr, subsample_ratio, shape, method) - CHROMA_OFFSET
    R = Y + 1.402 * Cr
    G = Y - 0.344136 * Cb - 0.714136 * Cr
    B = Y + 1.772 * Cb
    rgb = np.stack([R, G, B], axis=-1)
    return np.clip(rgb, 0.0, 1.0)
