"""Metal (specular) material with optional fuzz.

The incoming direction is mirrored about the surface normal and then
perturbed by a random point in a ball of radius ``fuzziness``. Perturbed
rays that end up pointing into the surface are absorbed.
"""

from dataclasses import dataclass, field
from typing import ClassVar

import taichi as ti
import taichi.math as tm

from rtweekend.core.color import Color
from rtweekend.core.sampler import random_in_unit_sphere
from rtweekend.core.vec3 import facing_normal, normalize, reflect, vec3
from rtweekend.materials.material import Material, MaterialType, as_color


@dataclass(frozen=True)
class Metal(Material):
    """Reflective surface.

    Attributes:
        albedo: Tint applied to reflected light.
        fuzziness: Radius of the reflection perturbation, clamped to [0, 1].
            Zero is a perfect mirror.
    """

    albedo: Color = field(default_factory=lambda: Color(0.8, 0.8, 0.8))
    fuzziness: float = 0.0

    name: ClassVar[str] = "metal"
    material_type: ClassVar[MaterialType] = MaterialType.METAL

    def __post_init__(self):
        object.__setattr__(self, "albedo", as_color(self.albedo))
        object.__setattr__(self, "fuzziness", min(max(float(self.fuzziness), 0.0), 1.0))

    def kernel_params(self) -> tuple[Color, float]:
        return self.albedo, self.fuzziness


@ti.func
def scatter_metal(
    albedo: vec3, fuzziness: ti.f32, direction: vec3, normal: vec3, stream: ti.i32
):
    """Reflect off a metal surface.

    Args:
        albedo: The metal's reflectance color.
        fuzziness: Perturbation radius in [0, 1].
        direction: Incoming ray direction.
        normal: Outward surface normal at the hit point.
        stream: Random stream of the calling worker.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter). did_scatter
        is 0 when the perturbed direction does not leave the surface on the
        side the ray came from.
    """
    reflected = reflect(normalize(direction), normal)
    scattered = reflected + fuzziness * random_in_unit_sphere(stream)

    did_scatter = 0
    if tm.dot(scattered, facing_normal(normal, direction)) > 0.0:
        did_scatter = 1

    return scattered, albedo, did_scatter
