"""Fixed tables and numeric constants."""

import numpy as np

BLOCK_SIZE = 8

# Centering maps the [0, 1] plane range onto [-128, 127]
SAMPLE_SCALE = 255.0
SAMPLE_OFFSET = 128.0

# Neutral chroma, so that centered Cb/Cr of a gray pixel is exactly 0
CHROMA_OFFSET = SAMPLE_OFFSET / SAMPLE_SCALE

# Largest quantization step; coarser steps zero every coefficient anyway
MAX_QUANT_STEP = 65536.0

JPEG_LUMA_Q50 = np.array([
    [16, 11, 10, 16, 24, 40, 51, 61],
    [12, 12, 14, 19, 26, 58, 60, 55],
    [14, 13, 16, 24, 40, 57, 69, 56],
    [14, 17, 22, 29, 51, 87, 80, 62],
    [18, 22, 37, 56, 68, 109, 103, 77],
    [24, 35, 55, 64, 81, 104, 113, 92],
    [49, 64, 78, 87, 103, 121, 120, 101],
    [72, 92, 95, 98, 112, 100, 103, 99],
], dtype=np.int32)

JPEG_CHROMA_Q50 = np.array([
    [17, 18, 24, 47, 99, 99, 99, 99],
    [18, 21, 26, 66, 99, 99, 99, 99],
    [24, 26, 56, 99, 99, 99, 99, 99],
    [47, 66, 99, 99, 99, 99, 99, 99],
    [99, 99, 99, 99, 99, 99, 99, 99],
    [99, 99, 99, 99, 99, 99, 99, 99],
    [99, 99, 99, 99, 99, 99, 99, 99],
    [99, 99, 99, 99, 99, 99, 99, 99],
], dtype=np.int32)

JPEG_LUMA_Q50.setflags(write=False)
JPEG_CHROMA_Q50.setflags(write=False)
