"""Angles tagged with their unit.

An Angle carries its value together with the unit it was created in.
Conversions are exact for the matching unit, and arithmetic between two
angles in different units normalizes both to radians first.

Example:
    >>> right = Angle.degrees(90.0)
    >>> right.to_radians().value  # pi / 2
    >>> (right + Angle.radians(0.0)).unit
    <AngleUnit.RADIANS: 'radians'>
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


class AngleUnit(Enum):
    """The unit an Angle value is expressed in."""

    DEGREES = "degrees"
    RADIANS = "radians"


@dataclass(frozen=True)
class Angle:
    """A planar angle in degrees or radians.

    Attributes:
        value: The magnitude in ``unit``.
        unit: Either AngleUnit.DEGREES or AngleUnit.RADIANS.
    """

    value: float
    unit: AngleUnit

    @classmethod
    def degrees(cls, value: float) -> Angle:
        return cls(float(value), AngleUnit.DEGREES)

    @classmethod
    def radians(cls, value: float) -> Angle:
        return cls(float(value), AngleUnit.RADIANS)

    # =========================================================================
    # Conversion
    # =========================================================================

    def to_degrees(self) -> Angle:
        """Return the same angle expressed in degrees.

        Idempotent: an angle already in degrees is returned unchanged.
        """
        if self.unit is AngleUnit.DEGREES:
            return self
        return Angle.degrees(math.degrees(self.value))

    def to_radians(self) -> Angle:
        """Return the same angle expressed in radians."""
        if self.unit is AngleUnit.RADIANS:
            return self
        return Angle.radians(math.radians(self.value))

    def unwrap_degrees(self) -> float:
        """Convert to degrees and return the bare number.

        Raises:
            AssertionError: If conversion did not produce a degree angle.
        """
        converted = self.to_degrees()
        if converted.unit is not AngleUnit.DEGREES:
            raise AssertionError(f"expected degrees after conversion, got {converted.unit}")
        return converted.value

    def unwrap_radians(self) -> float:
        """Convert to radians and return the bare number.

        Raises:
            AssertionError: If conversion did not produce a radian angle.
        """
        converted = self.to_radians()
        if converted.unit is not AngleUnit.RADIANS:
            raise AssertionError(f"expected radians after conversion, got {converted.unit}")
        return converted.value

    # =========================================================================
    # Trigonometry
    # =========================================================================

    def sin(self) -> float:
        return math.sin(self.unwrap_radians())

    def cos(self) -> float:
        return math.cos(self.unwrap_radians())

    def tan(self) -> float:
        return math.tan(self.unwrap_radians())

    def sin_cos(self) -> tuple[float, float]:
        radians = self.unwrap_radians()
        return math.sin(radians), math.cos(radians)

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def __add__(self, other: Angle) -> Angle:
        if not isinstance(other, Angle):
            return NotImplemented
        if self.unit is other.unit:
            return Angle(self.value + other.value, self.unit)
        return Angle.radians(self.unwrap_radians() + other.unwrap_radians())

    def __sub__(self, other: Angle) -> Angle:
        if not isinstance(other, Angle):
            return NotImplemented
        return self + (-other)

    def __neg__(self) -> Angle:
        return Angle(-self.value, self.unit)

    def __mul__(self, scalar: float) -> Angle:
        if isinstance(scalar, Angle):
            return NotImplemented
        return Angle(self.value * scalar, self.unit)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Angle:
        if isinstance(scalar, Angle):
            return NotImplemented
        return Angle(self.value / scalar, self.unit)

    def __str__(self) -> str:
        suffix = "deg" if self.unit is AngleUnit.DEGREES else "rad"
        return f"{self.value}{suffix}"


# =============================================================================
# Inverse Trigonometry (results always in radians)
# =============================================================================


def asin(x: float) -> Angle:
    return Angle.radians(math.asin(x))


def acos(x: float) -> Angle:
    return Angle.radians(math.acos(x))


def atan(x: float) -> Angle:
    return Angle.radians(math.atan(x))


def atan2(x: float, y: float) -> Angle:
    """Angle of the point (x, y) measured from the positive x-axis.

    Args:
        x: Horizontal coordinate.
        y: Vertical coordinate.

    Returns:
        An angle in radians within (-pi, pi]. The origin maps to 0.
    """
    return Angle.radians(math.atan2(y, x))
