"""DSP engines - pure computation, no host dependencies."""

from .exceptions import EffectUnavailable, ConfigurationUnavailable, DimensionDegenerate, UnsupportedFormat
from .color_space import rgb_to_ycbcr, ycbcr_to_rgb, subsample_chroma, upsample_chroma
from .block_processor import block_grid, aligned_shape, tile_table
from .dct_engine import Stage, dct2, idct2, encode_block, decode_block, apply_stage, compress_plane
from .quantizer import scale_quant_matrix, quantize, dequantize
from .plane_arena import Plane, PlaneArena, PlaneKind, compute_layout
from .pipeline import CompressionEffect, apply_effect, process_frames
from .analysis import measure_effect, quality_sweep

__all__ = [
    'EffectUnavailable',
    'ConfigurationUnavailable',
    'DimensionDegenerate',
    'UnsupportedFormat',
    'rgb_to_ycbcr',
    'ycbcr_to_rgb',
    'subsample_chroma',
    'upsample_chroma',
    'block_grid',
    'aligned_shape',
    'tile_table',
    'Stage',
    'dct2',
    'idct2',
    'encode_block',
    'decode_block',
    'apply_stage',
    'compress_plane',
    'scale_quant_matrix',
    'quantize',
    'dequantize',
    'Plane',
    'PlaneArena',
    'PlaneKind',
    'compute_layout',
    'CompressionEffect',
    'apply_effect',
    'process_frames',
    'measure_effect',
    'quality_sweep',
]
