"""Render configuration.

RenderConfig gathers the knobs of one render and validates them up front,
before any kernel runs, so that bad values surface as a ValueError instead
of an out-of-bounds field access.
"""

from dataclasses import dataclass
from typing import Optional

# Preallocated field sizes; changing them forces kernel recompilation
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

DEFAULT_ASPECT_RATIO = 16.0 / 9.0
DEFAULT_WIDTH = 400
DEFAULT_SAMPLES_PER_PIXEL = 100
DEFAULT_MAX_DEPTH = 50


@dataclass
class RenderConfig:
    """Settings for a single render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Camera rays averaged per pixel.
        max_depth: Maximum number of scatter events per camera ray.
        seed: Root seed for the random streams. None draws OS entropy and
            makes the output non-reproducible.
    """

    width: int = DEFAULT_WIDTH
    height: int = int(DEFAULT_WIDTH / DEFAULT_ASPECT_RATIO)
    samples_per_pixel: int = DEFAULT_SAMPLES_PER_PIXEL
    max_depth: int = DEFAULT_MAX_DEPTH
    seed: Optional[int] = None

    @classmethod
    def from_aspect(cls, width: int, aspect_ratio: float, **kwargs) -> "RenderConfig":
        """Build a config whose height follows from width and aspect ratio."""
        return cls(width=width, height=int(width / aspect_ratio), **kwargs)

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def validate(self) -> "RenderConfig":
        """Check every setting.

        Returns:
            self, to allow chaining.

        Raises:
            ValueError: If a dimension, sample count or depth is not
                positive, a dimension exceeds the preallocated maximum, or the
                seed is negative.
        """
        for name in ("width", "height", "samples_per_pixel", "max_depth"):
            value = getattr(self, name)
            if not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if self.width > MAX_IMAGE_WIDTH or self.height > MAX_IMAGE_HEIGHT:
            raise ValueError(
                f"Image dimensions ({self.width}x{self.height}) exceed maximum supported "
                f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
            )
        if self.seed is not None and self.seed < 0:
            raise ValueError(f"seed must be non-negative, got {self.seed}")
        return self
