"""RGB colors with channels held in [0, 1].

The host-side Color class clamps on every construction and mutation, so a
Color can never hold an out-of-range channel. Kernel code works on plain
``vec3`` values and uses the ``ti.func`` helpers at the bottom of this module.

Example:
    >>> red = Color(1.0, 0.0, 0.0)
    >>> str(red)
    '255 0 0'
    >>> Color.merge_samples([Color(1.0, 0.0, 0.0), Color(0.0, 0.0, 1.0)])
    Color(0.5, 0.0, 0.5)
"""

import functools
from collections.abc import Iterable
from typing import Optional

import numpy as np
import taichi as ti
import taichi.math as tm

from rtweekend.core.vec3 import vec3

# Scale used when serializing a channel to 0..255
CHANNEL_SCALE = 255.999


def _clamp(value: float) -> float:
    return min(max(float(value), 0.0), 1.0)


class Color:
    """An RGB color with every channel clamped to [0, 1].

    Channels can be read through ``red``/``green``/``blue`` or by index 0..2.
    Setters clamp the same way the constructor does.
    """

    __slots__ = ("_r", "_g", "_b")

    def __init__(self, red: float, green: float, blue: float):
        self._r = _clamp(red)
        self._g = _clamp(green)
        self._b = _clamp(blue)

    @classmethod
    def black(cls) -> "Color":
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def white(cls) -> "Color":
        return cls(1.0, 1.0, 1.0)

    @classmethod
    def random(
        cls, low: float = 0.0, high: float = 1.0, rng: Optional[np.random.Generator] = None
    ) -> "Color":
        """Draw each channel independently and uniformly from [low, high)."""
        if rng is None:
            rng = np.random.default_rng()
        r, g, b = rng.uniform(low, high, size=3)
        return cls(r, g, b)

    @classmethod
    def from_array(cls, values) -> "Color":
        return cls(float(values[0]), float(values[1]), float(values[2]))

    # =========================================================================
    # Channel access
    # =========================================================================

    @property
    def red(self) -> float:
        return self._r

    @red.setter
    def red(self, value: float) -> None:
        self._r = _clamp(value)

    @property
    def green(self) -> float:
        return self._g

    @green.setter
    def green(self, value: float) -> None:
        self._g = _clamp(value)

    @property
    def blue(self) -> float:
        return self._b

    @blue.setter
    def blue(self, value: float) -> None:
        self._b = _clamp(value)

    def __getitem__(self, index: int) -> float:
        if index == 0:
            return self._r
        if index == 1:
            return self._g
        if index == 2:
            return self._b
        raise IndexError(f"Color channel index out of range: {index}")

    def __iter__(self):
        return iter((self._r, self._g, self._b))

    def to_array(self) -> np.ndarray:
        return np.array([self._r, self._g, self._b], dtype=np.float64)

    # =========================================================================
    # Color operations
    # =========================================================================

    def interpolate(self, other: "Color", t: float) -> "Color":
        """Blend linearly toward ``other``.

        Args:
            other: The color reached at t = 1.
            t: Blend factor, clamped to [0, 1] before use.

        Returns:
            (1 - t) * self + t * other, per channel.
        """
        t = _clamp(t)
        return Color(
            (1.0 - t) * self._r + t * other._r,
            (1.0 - t) * self._g + t * other._g,
            (1.0 - t) * self._b + t * other._b,
        )

    def attenuate(self, other: "Color") -> "Color":
        """Channel-wise product, as light filtered by a surface."""
        return Color(self._r * other._r, self._g * other._g, self._b * other._b)

    def gamma_corrected(self, gamma: float = 2.0) -> "Color":
        """Raise each channel to 1 / gamma. Gamma 2 is a square root."""
        inv = 1.0 / gamma
        return Color(self._r**inv, self._g**inv, self._b**inv)

    @classmethod
    def merge_samples(cls, samples: Iterable["Color"]) -> "Color":
        """Average a collection of color samples.

        Each sample becomes a (count, sum) pair and the pairs are reduced by
        addition, so the result does not depend on sample order or on how the
        reduction is grouped.

        Args:
            samples: One or more colors.

        Returns:
            The per-channel mean.

        Raises:
            ValueError: If ``samples`` is empty.
        """
        pairs = [(1, sample.to_array()) for sample in samples]
        if not pairs:
            raise ValueError("merge_samples requires at least one sample")
        count, total = functools.reduce(
            lambda acc, item: (acc[0] + item[0], acc[1] + item[1]), pairs
        )
        return cls.from_array(total / count)

    # =========================================================================
    # Arithmetic (results are clamped)
    # =========================================================================

    def __mul__(self, scalar: float) -> "Color":
        if isinstance(scalar, Color):
            return NotImplemented
        return Color(self._r * scalar, self._g * scalar, self._b * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Color":
        if isinstance(scalar, Color):
            return NotImplemented
        return Color(self._r / scalar, self._g / scalar, self._b / scalar)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Color):
            return NotImplemented
        return (self._r, self._g, self._b) == (other._r, other._g, other._b)

    def __hash__(self) -> int:
        return hash((self._r, self._g, self._b))

    def __repr__(self) -> str:
        return f"Color({self._r}, {self._g}, {self._b})"

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_ints(self) -> tuple[int, int, int]:
        """Map each channel to an integer in 0..255 by floor(c * 255.999)."""
        return (
            int(self._r * CHANNEL_SCALE),
            int(self._g * CHANNEL_SCALE),
            int(self._b * CHANNEL_SCALE),
        )

    def to_bytes(self) -> bytes:
        return bytes(self.to_ints())

    def __str__(self) -> str:
        r, g, b = self.to_ints()
        return f"{r} {g} {b}"


# =============================================================================
# Kernel-side color helpers
# =============================================================================


@ti.func
def clamp_color(c: vec3) -> vec3:
    return tm.clamp(c, 0.0, 1.0)


@ti.func
def attenuate(a: vec3, b: vec3) -> vec3:
    """Channel-wise product of two colors, clamped to [0, 1]."""
    return clamp_color(a * b)


@ti.func
def interpolate_color(a: vec3, b: vec3, t: ti.f32) -> vec3:
    s = tm.clamp(t, 0.0, 1.0)
    return clamp_color((1.0 - s) * a + s * b)


@ti.func
def sky_color(direction: vec3) -> vec3:
    """Background color seen by a ray that escapes the scene.

    Blends white into light blue by 0.5 * (unit_direction.y + 1).
    """
    unit = direction / tm.length(direction)
    t = 0.5 * (unit.y + 1.0)
    return interpolate_color(vec3(1.0, 1.0, 1.0), vec3(0.5, 0.7, 1.0), t)
