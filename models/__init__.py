"""Data models for effect settings, frame layout and results."""

from .effect_settings import EffectSettings, FILTER_MODES
from .effect_result import EffectResult
from .frame_layout import FrameLayout

__all__ = ['EffectSettings', 'FILTER_MODES', 'EffectResult', 'FrameLayout']
