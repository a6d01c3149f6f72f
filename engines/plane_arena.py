"""Reusable plane buffers indexed by plane kind."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

import numpy as np

from engines.block_processor import aligned_shape, block_grid, ceil_div, fill_margin
from engines.exceptions import ConfigurationUnavailable, DimensionDegenerate
from models.frame_layout import FrameLayout

logger = logging.getLogger(__name__)


class PlaneKind(Enum):
    LUMA = 'Y'
    CB = 'Cb'
    CR = 'Cr'


CHROMA_KINDS = (PlaneKind.CB, PlaneKind.CR)


@dataclass
class Plane:
    """Block-aligned float64 plane.

    ``data`` is ``ceil(height/8)*8`` by ``ceil(width/8)*8``; the logical
    samples are the top-left ``height x width`` view. The rest is scratch
    space that belongs to this plane only, so edge blocks never touch
    anything outside it.
    """

    kind: PlaneKind
    width: int
    height: int
    data: np.ndarray = field(init=False, repr=False)

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise DimensionDegenerate(f"{self.kind.value} plane size must be positive, got {self.width}x{self.height}")
        self.data = np.zeros(aligned_shape(self.height, self.width), dtype=np.float64)

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.height, self.width)

    @property
    def blocks(self) -> Tuple[int, int]:
        """Block grid as (rows, cols)."""
        return block_grid(self.height, self.width)

    @property
    def samples(self) -> np.ndarray:
        return self.data[:self.height, :self.width]

    def load(self, values: np.ndarray) -> None:
        """Copy samples in and refill the alignment margin from the edges."""
        if values.shape != self.shape:
            raise ValueError(f"{self.kind.value} plane expects {self.shape}, got {values.shape}")
        self.data[:self.height, :self.width] = values
        fill_margin(self.data, self.height, self.width)


def compute_layout(width: int, height: int, downsample_ratio: int = 1, chroma_subsample_ratio: int = 1) -> FrameLayout:
    """Ceiling-divide the source size by the downsample, then by the chroma ratio."""
    if downsample_ratio < 1 or chroma_subsample_ratio < 1:
        raise DimensionDegenerate(
            f"Ratios must be >= 1, got downsample={downsample_ratio}, subsample={chroma_subsample_ratio}"
        )
    full_w, full_h = ceil_div(width, downsample_ratio), ceil_div(height, downsample_ratio)
    layout = FrameLayout(
        source_size=(width, height),
        full_size=(full_w, full_h),
        chroma_size=(ceil_div(full_w, chroma_subsample_ratio), ceil_div(full_h, chroma_subsample_ratio)),
        downsample_ratio=downsample_ratio,
        chroma_subsample_ratio=chroma_subsample_ratio,
    )
    if layout.is_degenerate:
        raise DimensionDegenerate(f"Degenerate plane size for a {width}x{height} frame")
    return layout


class PlaneArena:
    """Owns the Y, Cb and Cr planes and keeps them across frames.

    Buffers are only reallocated when the plane sizes change.
    """

    def __init__(self):
        self._planes: Dict[PlaneKind, Plane] = {}
        self._sizes: Optional[Tuple[Tuple[int, int], Tuple[int, int]]] = None

    def __getitem__(self, kind: PlaneKind) -> Plane:
        try:
            return self._planes[kind]
        except KeyError:
            raise ConfigurationUnavailable(f"No {kind.value} plane allocated") from None

    def ensure(self, layout: FrameLayout) -> bool:
        """Lay the planes out for ``layout``. Returns True if buffers were reallocated."""
        sizes = (layout.full_size, layout.chroma_size)
        if sizes == self._sizes and len(self._planes) == len(PlaneKind):
            return False

        self.release()
        full_w, full_h = layout.full_size
        chroma_w, chroma_h = layout.chroma_size
        try:
            planes = {PlaneKind.LUMA: Plane(PlaneKind.LUMA, full_w, full_h)}
            for kind in CHROMA_KINDS:
                planes[kind] = Plane(kind, chroma_w, chroma_h)
        except MemoryError as e:
            raise ConfigurationUnavailable(f"Could not allocate planes for {layout.full_size}") from e

        self._planes = planes
        self._sizes = sizes
        logger.debug("Allocated planes: luma %dx%d, chroma %dx%d", full_w, full_h, chroma_w, chroma_h)
        return True

    def release(self) -> None:
        self._planes = {}
        self._sizes = None
