"""Effect settings."""

import math
import sys
from dataclasses import dataclass, fields
from typing import Any, Literal, Mapping

FILTER_MODES = ('point', 'bilinear')

MAX_DOWNSAMPLE_RATIO = 8
MAX_SUBSAMPLE_RATIO = 32


@dataclass(frozen=True)
class EffectSettings:
    """JPEG-like compression effect settings for one frame."""

    downsample_ratio: int = 1
    downsample_filter: Literal['point', 'bilinear'] = 'point'
    chroma_subsample_ratio: int = 2
    subsample_filter: Literal['point', 'bilinear'] = 'point'
    quality_factor: float = 1.0
    profiler_tag: str = "JPEG Compression"

    def __post_init__(self):
        if isinstance(self.downsample_ratio, bool) or not isinstance(self.downsample_ratio, int):
            raise ValueError(f"Downsample ratio must be an integer, got {self.downsample_ratio!r}")
        if not (1 <= self.downsample_ratio <= MAX_DOWNSAMPLE_RATIO):
            raise ValueError(f"Downsample ratio must be 1-{MAX_DOWNSAMPLE_RATIO}, got {self.downsample_ratio}")
        if isinstance(self.chroma_subsample_ratio, bool) or not isinstance(self.chroma_subsample_ratio, int):
            raise ValueError(f"Chroma subsample ratio must be an integer, got {self.chroma_subsample_ratio!r}")
        if not (1 <= self.chroma_subsample_ratio <= MAX_SUBSAMPLE_RATIO):
            raise ValueError(
                f"Chroma subsample ratio must be 1-{MAX_SUBSAMPLE_RATIO}, got {self.chroma_subsample_ratio}"
            )
        if self.downsample_filter not in FILTER_MODES:
            raise ValueError(f"Downsample filter must be one of {FILTER_MODES}, got {self.downsample_filter!r}")
        if self.subsample_filter not in FILTER_MODES:
            raise ValueError(f"Subsample filter must be one of {FILTER_MODES}, got {self.subsample_filter!r}")
        if not math.isfinite(self.quality_factor) or self.quality_factor <= 0:
            raise ValueError(f"Quality factor must be positive, got {self.quality_factor}")
        if self.effective_quality < sys.float_info.min:
            raise ValueError(f"Quality factor {self.quality_factor} is too small to square")

    @property
    def effective_quality(self) -> float:
        """Divisor applied to the base tables (inf when the square overflows)."""
        return float(self.quality_factor) * float(self.quality_factor)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "EffectSettings":
        """Build settings from plain values (e.g. a parsed JSON file), ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in values.items() if k in known}
        if 'quality_factor' in kwargs:
            kwargs['quality_factor'] = float(kwargs['quality_factor'])
        return cls(**kwargs)
