"""Blockwise DCT/IDCT stages with level shift.

A plane is compressed by running the seven stages of :class:`Stage` in
order. Each stage is a full pass over a block-aligned float64 buffer and is
applied in place; a stage never starts before the previous one has finished
over the whole plane.
"""

from enum import IntEnum
from typing import Iterable, Optional

import numpy as np
from scipy.fft import dct, idct, dctn, idctn

from engines.block_processor import block_rows, block_columns, check_aligned
from engines.quantizer import quantize_inplace
from utils.constants import SAMPLE_SCALE, SAMPLE_OFFSET


class Stage(IntEnum):
    CENTER = 0
    DCT_HORIZONTAL = 1
    DCT_VERTICAL = 2
    QUANTIZE = 3
    IDCT_HORIZONTAL = 4
    IDCT_VERTICAL = 5
    DECENTER = 6


FORWARD_STAGES = (Stage.CENTER, Stage.DCT_HORIZONTAL, Stage.DCT_VERTICAL)
INVERSE_STAGES = (Stage.IDCT_HORIZONTAL, Stage.IDCT_VERTICAL, Stage.DECENTER)


def dct2(block: np.ndarray) -> np.ndarray:
    """2D DCT-II with orthonormal normalization."""
    return dctn(block, type=2, norm='ortho')


def idct2(coeffs: np.ndarray) -> np.ndarray:
    """2D inverse DCT (Type-III)."""
    return idctn(coeffs, type=2, norm='ortho')


def encode_block(block: np.ndarray) -> np.ndarray:
    """Level shift a [0, 1] block to [-128, 127] then DCT."""
    shifted = np.asarray(block, dtype=np.float64) * SAMPLE_SCALE - SAMPLE_OFFSET
    return dct2(shifted)


def decode_block(coeffs: np.ndarray) -> np.ndarray:
    """IDCT then reverse level shift back to [0, 1]."""
    spatial = idct2(coeffs)
    return (spatial + SAMPLE_OFFSET) / SAMPLE_SCALE


def center_values(data: np.ndarray) -> np.ndarray:
    data *= SAMPLE_SCALE
    data -= SAMPLE_OFFSET
    return data


def decenter_values(data: np.ndarray) -> np.ndarray:
    data += SAMPLE_OFFSET
    data /= SAMPLE_SCALE
    return data


def dct_horizontal(data: np.ndarray) -> np.ndarray:
    """8-point DCT-II along every block row."""
    rows = block_rows(data)
    rows[...] = dct(rows, type=2, norm='ortho', axis=-1)
    return data


def dct_vertical(data: np.ndarray) -> np.ndarray:
    """8-point DCT-II along every block column."""
    cols = block_columns(data)
    cols[...] = dct(cols, type=2, norm='ortho', axis=1)
    return data


def idct_horizontal(data: np.ndarray) -> np.ndarray:
    """8-point DCT-III along every block row (inverse of dct_horizontal)."""
    rows = block_rows(data)
    rows[...] = idct(rows, type=2, norm='ortho', axis=-1)
    return data


def idct_vertical(data: np.ndarray) -> np.ndarray:
    """8-point DCT-III along every block column (inverse of dct_vertical)."""
    cols = block_columns(data)
    cols[...] = idct(cols, type=2, norm='ortho', axis=1)
    return data


_STAGE_FUNCTIONS = {
    Stage.CENTER: center_values,
    Stage.DCT_HORIZONTAL: dct_horizontal,
    Stage.DCT_VERTICAL: dct_vertical,
    Stage.IDCT_HORIZONTAL: idct_horizontal,
    Stage.IDCT_VERTICAL: idct_vertical,
    Stage.DECENTER: decenter_values,
}


def apply_stage(stage: Stage, data: np.ndarray, table: Optional[np.ndarray] = None) -> np.ndarray:
    """Run one stage over a whole block-aligned plane, in place.

    ``table`` is only used by QUANTIZE and must be the scaled table tiled to
    the plane shape.
    """
    check_aligned(data)
    if stage == Stage.QUANTIZE:
        if table is None:
            raise ValueError("QUANTIZE stage requires a quantization table")
        if table.shape != data.shape:
            raise ValueError(f"Tiled table shape {table.shape} does not match plane {data.shape}")
        return quantize_inplace(data, table)
    return _STAGE_FUNCTIONS[stage](data)


def compress_plane(
    data: np.ndarray,
    table: Optional[np.ndarray],
    stages: Iterable[Stage] = Stage,
) -> np.ndarray:
    """Run stages in order over one plane (all seven by default)."""
    for stage in stages:
        apply_stage(stage, data, table)
    return data
