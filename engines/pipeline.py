"""Per-frame compression effect pipeline."""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, Dict, Iterable, Iterator, Optional, Tuple, Union

import cv2
import numpy as np

from models.effect_settings import EffectSettings
from models.frame_layout import FrameLayout
from engines.block_processor import tile_table
from engines.color_space import rgb_to_ycbcr, ycbcr_to_rgb
from engines.dct_engine import compress_plane
from engines.exceptions import ConfigurationUnavailable, EffectUnavailable, UnsupportedFormat
from engines.plane_arena import CHROMA_KINDS, PlaneArena, PlaneKind, compute_layout
from engines.quantizer import scale_quant_matrix, validate_base_table
from utils.constants import JPEG_LUMA_Q50, JPEG_CHROMA_Q50
from utils.metrics import Timer, to_unit_float

logger = logging.getLogger(__name__)

_INTERPOLATION = {
    'point': cv2.INTER_NEAREST,
    'bilinear': cv2.INTER_LINEAR,
}


def split_image(image: np.ndarray) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    """Split a frame into float RGB in [0, 1] and its alpha channel (if any)."""
    if not isinstance(image, np.ndarray) or image.ndim != 3 or image.shape[2] not in (3, 4):
        shape = getattr(image, 'shape', None)
        raise UnsupportedFormat(f"Expected an (H, W, 3) or (H, W, 4) image, got shape {shape}")
    if image.dtype != np.uint8 and not np.issubdtype(image.dtype, np.floating):
        raise UnsupportedFormat(f"Unsupported pixel type {image.dtype}")
    alpha = image[:, :, 3] if image.shape[2] == 4 else None
    return to_unit_float(image[:, :, :3]), alpha


def restore_image(rgb: np.ndarray, alpha: Optional[np.ndarray], dtype: np.dtype) -> np.ndarray:
    """Convert [0, 1] RGB back to the source pixel type and reattach alpha."""
    if dtype == np.uint8:
        out = np.rint(np.clip(rgb, 0.0, 1.0) * 255.0).astype(np.uint8)
    else:
        out = rgb.astype(dtype)
    if alpha is not None:
        out = np.concatenate([out, alpha[:, :, None].astype(out.dtype)], axis=2)
    return out


class CompressionEffect:
    """Applies JPEG-style block compression artifacts to frames.

    One instance owns the plane buffers and scaled tables and reuses them
    from frame to frame; sizes and tables are only rederived when the frame
    size or the settings they depend on change. ``apply`` never raises: a
    frame that cannot be processed returns ``None`` and the caller should
    show the source frame instead.
    """

    def __init__(
        self,
        luma_table: np.ndarray = JPEG_LUMA_Q50,
        chroma_table: np.ndarray = JPEG_CHROMA_Q50,
        max_workers: int = 3,
    ):
        self.luma_table = luma_table
        self.chroma_table = chroma_table
        self.max_workers = max(1, int(max_workers))

        self._arena = PlaneArena()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._layout: Optional[FrameLayout] = None
        self._quality: Optional[float] = None
        self._scaled: Dict[PlaneKind, np.ndarray] = {}
        self._tiled: Dict[PlaneKind, np.ndarray] = {}
        self._disabled_reason: Optional[str] = None
        self._reported = set()
        self.last_timings: Dict[str, float] = {}

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False

    @property
    def available(self) -> bool:
        return self._disabled_reason is None

    @property
    def layout(self) -> Optional[FrameLayout]:
        return self._layout

    @property
    def arena(self) -> PlaneArena:
        return self._arena

    def scaled_table(self, kind: PlaneKind) -> Optional[np.ndarray]:
        return self._scaled.get(kind)

    def apply(self, image: np.ndarray, settings: EffectSettings) -> Optional[np.ndarray]:
        """Run the effect on one frame. Returns None when the effect is unavailable."""
        if self._disabled_reason is not None:
            return None
        try:
            return self._process(image, settings)
        except ConfigurationUnavailable as e:
            self._disabled_reason = str(e)
            self._invalidate()
            logger.error("Compression effect disabled: %s", e)
        except EffectUnavailable as e:
            self._warn_once(type(e), "Skipping compression effect: %s", e)
        except Exception as e:
            self._warn_once(type(e), "Compression effect failed, passing frame through: %s", e, exc_info=True)
        return None

    def reset(self) -> None:
        """Forget derived state and re-enable the effect after a configuration failure."""
        self._disabled_reason = None
        self._reported.clear()
        self._invalidate()

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _invalidate(self) -> None:
        self._arena.release()
        self._layout = None
        self._quality = None
        self._scaled = {}
        self._tiled = {}

    def _warn_once(self, key: type, msg: str, *args, exc_info: bool = False) -> None:
        # keyed on the error type; messages carry frame sizes
        if key in self._reported:
            return
        self._reported.add(key)
        logger.warning(msg, *args, exc_info=exc_info)

    def _process(self, image: np.ndarray, settings: EffectSettings) -> np.ndarray:
        rgb, alpha = split_image(image)
        height, width = rgb.shape[:2]
        layout = self._prepare(width, height, settings)
        timer = Timer()

        full_rgb = timer.measure('downsample', self._downsample, rgb, layout, settings)
        timer.measure('to_ycbcr', self._load_planes, full_rgb, layout)
        timer.measure('block_transform', self._compress_planes)
        out = timer.measure('to_rgb', self._reconstruct, layout, settings)
        out = timer.measure('upsample', self._upsample, out, layout, settings)

        self.last_timings = dict(timer.times_ms)
        logger.debug(
            "[%s] %dx%d frame in %.2f ms", settings.profiler_tag, width, height, timer.total_ms
        )
        return restore_image(out, alpha, image.dtype)

    def _prepare(self, width: int, height: int, settings: EffectSettings) -> FrameLayout:
        layout = compute_layout(width, height, settings.downsample_ratio, settings.chroma_subsample_ratio)
        retile = False

        if layout != self._layout:
            if self._arena.ensure(layout):
                logger.debug("Re-laid out planes for %dx%d source", width, height)
            self._layout = layout
            retile = True

        quality = settings.effective_quality
        if quality != self._quality:
            self._scale_tables(quality)
            retile = True

        if retile:
            self._tiled = {
                kind: tile_table(self._scaled[kind], self._arena[kind].data.shape)
                for kind in PlaneKind
            }
        return layout

    def _scale_tables(self, quality: float) -> None:
        try:
            luma = validate_base_table(self.luma_table)
            chroma = validate_base_table(self.chroma_table)
        except ValueError as e:
            raise ConfigurationUnavailable(f"Invalid quantization table: {e}") from e

        chroma_scaled = scale_quant_matrix(chroma, quality)
        self._scaled = {PlaneKind.LUMA: scale_quant_matrix(luma, quality)}
        self._scaled.update({kind: chroma_scaled for kind in CHROMA_KINDS})
        self._quality = quality
        logger.debug("Scaled quantization tables for quality %.3f", quality)

    def _downsample(self, rgb: np.ndarray, layout: FrameLayout, settings: EffectSettings) -> np.ndarray:
        if layout.downsample_ratio == 1:
            return rgb
        return cv2.resize(rgb, layout.full_size, interpolation=_INTERPOLATION[settings.downsample_filter])

    def _upsample(self, rgb: np.ndarray, layout: FrameLayout, settings: EffectSettings) -> np.ndarray:
        if layout.downsample_ratio == 1:
            return rgb
        return cv2.resize(rgb, layout.source_size, interpolation=_INTERPOLATION[settings.downsample_filter])

    def _load_planes(self, rgb: np.ndarray, layout: FrameLayout) -> None:
        Y, Cb, Cr = rgb_to_ycbcr(rgb, layout.chroma_subsample_ratio)
        self._arena[PlaneKind.LUMA].load(Y)
        self._arena[PlaneKind.CB].load(Cb)
        self._arena[PlaneKind.CR].load(Cr)

    def _compress_plane(self, kind: PlaneKind) -> None:
        compress_plane(self._arena[kind].data, self._tiled[kind])

    def _compress_planes(self) -> None:
        if self.max_workers == 1:
            for kind in PlaneKind:
                self._compress_plane(kind)
            return

        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix='jpeg-plane')
        futures = [self._executor.submit(self._compress_plane, kind) for kind in PlaneKind]
        # every plane must drain before any result is read or raised
        wait(futures)
        for future in futures:
            future.result()

    def _reconstruct(self, layout: FrameLayout, settings: EffectSettings) -> np.ndarray:
        return ycbcr_to_rgb(
            self._arena[PlaneKind.LUMA].samples,
            self._arena[PlaneKind.CB].samples,
            self._arena[PlaneKind.CR].samples,
            layout.chroma_subsample_ratio,
            settings.subsample_filter,
        )


def apply_effect(
    image: np.ndarray,
    settings: EffectSettings,
    effect: Optional[CompressionEffect] = None
) -> np.ndarray:
    """Apply the effect, or return the source unchanged if it is unavailable."""
    if effect is None:
        with CompressionEffect(max_workers=1) as one_shot:
            result = one_shot.apply(image, settings)
    else:
        result = effect.apply(image, settings)
    return image if result is None else result


def process_frames(
    frames: Iterable[np.ndarray],
    settings: Union[EffectSettings, Callable[[int], EffectSettings]],
    effect: Optional[CompressionEffect] = None
) -> Iterator[np.ndarray]:
    """Apply the effect to a stream of frames, reusing one set of buffers.

    ``settings`` is either fixed or a callable returning the settings for a
    frame index. Frames the effect cannot process are yielded unchanged.
    """
    owned = effect is None
    if owned:
        effect = CompressionEffect()
    try:
        for index, frame in enumerate(frames):
            frame_settings = settings(index) if callable(settings) else settings
            yield apply_effect(frame, frame_settings, effect)
    finally:
        if owned:
            effect.close()
