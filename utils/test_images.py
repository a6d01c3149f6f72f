"""Synthetic test frames that make compression artifacts easy to see."""

import numpy as np


def generate_colored_checkerboard(size: int = 512, square: int = 32) -> np.ndarray:
    """High-contrast checkerboard - shows blocking and ringing at edges."""
    idx = np.arange(size) // square
    mask = (idx[:, None] + idx[None, :]) % 2 == 1
    img = np.empty((size, size, 3), dtype=np.uint8)
    img[~mask] = [30, 30, 30]
    img[mask] = [220, 220, 220]
    return img


def generate_thin_stripes(size: int = 512, stripe_width: int = 4) -> np.ndarray:
    """Fine vertical color stripes - shows chroma bleeding from subsampling."""
    img = np.empty((size, size, 3), dtype=np.uint8)
    even = (np.arange(size) // stripe_width) % 2 == 0
    img[:, even] = [200, 60, 60]
    img[:, ~even] = [60, 180, 200]
    return img


def generate_gradient(size: int = 512) -> np.ndarray:
    """Smooth diagonal gradient - reveals banding from quantization."""
    i, j = np.mgrid[0:size, 0:size]
    t = (i + j) / max(2 * size - 2, 1)
    start = np.array([40.0, 60.0, 120.0])
    span = np.array([180.0, 140.0, 100.0])
    img = start + t[:, :, None] * span
    return np.clip(img, 0, 255).astype(np.uint8)


def generate_chroma_stripes(size: int = 512) -> np.ndarray:
    """Saturated color bars - shows chroma bleeding and subsampling effects."""
    colors = np.array([
        [180, 40, 40],    # Red
        [40, 160, 40],    # Green
        [40, 80, 180],    # Blue
        [180, 180, 40],   # Yellow
        [180, 40, 180],   # Magenta
        [40, 180, 180],   # Cyan
        [200, 120, 40],   # Orange
        [120, 40, 180],   # Purple
    ], dtype=np.uint8)

    bar = np.minimum(np.arange(size) * len(colors) // size, len(colors) - 1)
    return np.broadcast_to(colors[bar][None, :, :], (size, size, 3)).copy()


def generate_flat(size: int = 8, value: int = 128) -> np.ndarray:
    """Uniform gray frame."""
    return np.full((size, size, 3), value, dtype=np.uint8)


SYNTHETIC_IMAGES = {
    "checkerboard": generate_colored_checkerboard,
    "stripes": generate_thin_stripes,
    "gradient": generate_gradient,
    "chroma_stripes": generate_chroma_stripes,
}


def generate_demo_image(key: str, size: int = 512) -> np.ndarray | None:
    """Generate demo image by key."""
    generator = SYNTHETIC_IMAGES.get(key)
    if generator is None:
        return None
    return generator(size)
