"""Quantization operations."""

import numpy as np

from utils.constants import BLOCK_SIZE, MAX_QUANT_STEP


def validate_base_table(base_matrix: np.ndarray) -> np.ndarray:
    """Check an 8x8 base table and return it as float64."""
    table = np.asarray(base_matrix)
    if table.shape != (BLOCK_SIZE, BLOCK_SIZE):
        raise ValueError(f"Quantization table must be {BLOCK_SIZE}x{BLOCK_SIZE}, got {table.shape}")
    if not np.all(np.isfinite(table)) or np.any(table < 1):
        raise ValueError("Quantization table entries must be finite and >= 1")
    return table.astype(np.float64)


def scale_quant_matrix(base_matrix: np.ndarray, quality: float) -> np.ndarray:
    """Scale quantization matrix by quality (higher = less loss).

    Entries are ``max(1, round(base / quality))`` capped at ``MAX_QUANT_STEP``,
    so dequantization never multiplies by, and quantization never divides by,
    zero or infinity. An infinite quality gives an all-ones table.
    """
    if np.isnan(quality) or quality <= 0:
        raise ValueError(f"Quality must be positive, got {quality}")

    with np.errstate(over='ignore'):
        Q = np.round(np.asarray(base_matrix, dtype=np.float64) / quality)
    Q = np.clip(Q, 1.0, MAX_QUANT_STEP)
    Q.setflags(write=False)
    return Q


def quantize(dct_coeffs: np.ndarray, Q_matrix: np.ndarray) -> np.ndarray:
    """Quantize DCT coefficients (round half to even)."""
    return np.round(dct_coeffs / Q_matrix)


def dequantize(quantized: np.ndarray, Q_matrix: np.ndarray) -> np.ndarray:
    """Dequantize coefficients."""
    return quantized.astype(np.float64) * Q_matrix


def quantize_inplace(coeffs: np.ndarray, tiled_Q: np.ndarray) -> np.ndarray:
    """Quantize then dequantize a plane of coefficients without reallocating.

    ``tiled_Q`` must have the same shape as ``coeffs`` (the table repeated
    over the block grid).
    """
    np.divide(coeffs, tiled_Q, out=coeffs)
    np.round(coeffs, out=coeffs)
    np.multiply(coeffs, tiled_Q, out=coeffs)
    return coeffs
