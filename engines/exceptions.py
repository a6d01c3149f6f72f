"""Reasons the effect can be skipped for a frame."""


class EffectUnavailable(RuntimeError):
    """The effect cannot run; the frame should pass through unchanged."""


class ConfigurationUnavailable(EffectUnavailable):
    """Tables or plane buffers could not be set up. Disables the effect until reset."""


class DimensionDegenerate(EffectUnavailable):
    """A computed plane has zero width or height."""


class UnsupportedFormat(EffectUnavailable):
    """The source image is not an (H, W, 3) or (H, W, 4) array."""
