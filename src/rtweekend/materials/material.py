"""Shared material types.

Materials form a closed set of variants (Lambertian, Metal, Dielectric),
tagged by MaterialType and dispatched in kernels through the material
registry. On the host every material is an immutable value object that
many spheres may reference at once.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, ClassVar, Optional

from rtweekend.core.color import Color

if TYPE_CHECKING:
    from rtweekend.scene.hittable import RayHit


class MaterialType(IntEnum):
    """Tag used for material dispatch inside kernels."""

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


@dataclass(frozen=True)
class ScatterRecord:
    """Outcome of a scatter event that did not absorb the ray.

    Attributes:
        attenuation: Color the incoming light is multiplied by.
        origin: Origin of the scattered ray, exactly the hit point.
        direction: Direction of the scattered ray.
    """

    attenuation: Color
    origin: tuple[float, float, float]
    direction: tuple[float, float, float]


def as_color(value) -> Color:
    if isinstance(value, Color):
        return value
    return Color(*value)


class Material:
    """Base class for host-side material descriptions.

    Subclasses set ``name`` and ``material_type`` and report their kernel
    parameters through ``kernel_params``.
    """

    name: ClassVar[str] = "material"
    material_type: ClassVar[MaterialType]

    def kernel_params(self) -> tuple[Color, float]:
        """Return (albedo, scalar parameter) as stored in the registry."""
        raise NotImplementedError

    def scatter(
        self, direction, hit: RayHit, stream: int = 0
    ) -> Optional[ScatterRecord]:
        """Scatter a ray that hit a surface made of this material.

        Runs the same kernel code the renderer uses, on one stream.

        Args:
            direction: Incoming ray direction as a 3-sequence.
            hit: The intersection being shaded.
            stream: Random stream to draw from.

        Returns:
            The scattered ray and its attenuation, or None if the ray was
            absorbed.
        """
        # Deferred: the registry declares Taichi fields
        from rtweekend.materials.registry import scatter_once

        return scatter_once(self, direction, hit.p, hit.normal, stream)
