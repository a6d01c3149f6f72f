"""Block geometry: padding, block grids and blockwise views."""

import numpy as np
from typing import Tuple

from utils.constants import BLOCK_SIZE


def ceil_div(value: int, divisor: int) -> int:
    """Integer ceiling division."""
    return -(-value // divisor)


def block_grid(height: int, width: int, block_size: int = BLOCK_SIZE) -> Tuple[int, int]:
    """Number of blocks (rows, cols) covering a height x width plane."""
    return ceil_div(height, block_size), ceil_div(width, block_size)


def aligned_shape(height: int, width: int, block_size: int = BLOCK_SIZE) -> Tuple[int, int]:
    """Smallest block-aligned shape that holds a height x width plane."""
    rows, cols = block_grid(height, width, block_size)
    return rows * block_size, cols * block_size


def fill_margin(data: np.ndarray, height: int, width: int) -> np.ndarray:
    """Replicate the last valid row/column into the block-alignment margin, in place."""
    if height < data.shape[0]:
        data[height:, :width] = data[height - 1:height, :width]
    if width < data.shape[1]:
        data[:, width:] = data[:, width - 1:width]
    return data


def check_aligned(data: np.ndarray, block_size: int = BLOCK_SIZE) -> None:
    if data.ndim != 2:
        raise ValueError(f"Expected a 2D plane, got shape {data.shape}")
    h, w = data.shape
    if h % block_size or w % block_size:
        raise ValueError(f"Plane shape {data.shape} is not a multiple of {block_size}")
    # blockwise views must alias the buffer, reshape would copy otherwise
    if not data.flags.c_contiguous:
        raise ValueError("Plane buffer must be C-contiguous")


def block_rows(data: np.ndarray, block_size: int = BLOCK_SIZE) -> np.ndarray:
    """View as (rows, blocks_x, block_size): each last-axis vector is one block row."""
    check_aligned(data, block_size)
    h, w = data.shape
    return data.reshape(h, w // block_size, block_size)


def block_columns(data: np.ndarray, block_size: int = BLOCK_SIZE) -> np.ndarray:
    """View as (blocks_y, block_size, cols): each axis-1 vector is one block column."""
    check_aligned(data, block_size)
    h, w = data.shape
    return data.reshape(h // block_size, block_size, w)


def tile_table(table: np.ndarray, shape: Tuple[int, int], block_size: int = BLOCK_SIZE) -> np.ndarray:
    """Repeat a block table over a block-aligned plane shape.

    Entry (y, x) of the result is ``table[y % block_size, x % block_size]``.
    """
    h, w = shape
    if h % block_size or w % block_size:
        raise ValueError(f"Shape {shape} is not a multiple of {block_size}")
    tiled = np.tile(np.asarray(table, dtype=np.float64), (h // block_size, w // block_size))
    tiled.setflags(write=False)
    return tiled


def extract_block(data: np.ndarray, block_row: int, block_col: int, block_size: int = BLOCK_SIZE) -> np.ndarray:
    """Copy of one block of a block-aligned plane."""
    i, j = block_row * block_size, block_col * block_size
    return data[i:i + block_size, j:j + block_size].copy()
