"""Shared utilities."""

from .constants import JPEG_LUMA_Q50, JPEG_CHROMA_Q50, BLOCK_SIZE
from .metrics import compute_psnr_ssim, Timer, to_unit_float
from .test_images import generate_colored_checkerboard, generate_thin_stripes, generate_demo_image
from .image_io import load_image, save_image, read_video_frames, VideoSink

__all__ = [
    'JPEG_LUMA_Q50',
    'JPEG_CHROMA_Q50',
    'BLOCK_SIZE',
    'compute_psnr_ssim',
    'Timer',
    'to_unit_float',
    'generate_colored_checkerboard',
    'generate_thin_stripes',
    'generate_demo_image',
    'load_image',
    'save_image',
    'read_video_frames',
    'VideoSink',
]
