"""Per-frame plane sizes."""

from dataclasses import dataclass
from typing import Tuple

from utils.constants import BLOCK_SIZE


@dataclass(frozen=True)
class FrameLayout:
    """Sizes derived from the source frame and the sampling ratios.

    Sizes are (width, height); block grids are (cols, rows).
    """

    source_size: Tuple[int, int]
    full_size: Tuple[int, int]
    chroma_size: Tuple[int, int]
    downsample_ratio: int = 1
    chroma_subsample_ratio: int = 1

    @property
    def full_blocks(self) -> Tuple[int, int]:
        w, h = self.full_size
        return -(-w // BLOCK_SIZE), -(-h // BLOCK_SIZE)

    @property
    def chroma_blocks(self) -> Tuple[int, int]:
        w, h = self.chroma_size
        return -(-w // BLOCK_SIZE), -(-h // BLOCK_SIZE)

    @property
    def is_degenerate(self) -> bool:
        return min(*self.full_size, *self.chroma_size) <= 0
