"""Dielectric (glass-like) material.

At each hit the ray either reflects or refracts. Total internal reflection
forces a reflection; otherwise the choice is made at random with probability
given by Schlick's approximation. Averaged over many samples this splits the
energy between the two paths in the right proportion.

Entering or leaving the medium is decided from the outward normal alone:
a ray with dot(direction, normal) < 0 is entering (eta 1.0 -> n), any other
ray is leaving (eta n -> 1.0).
"""

from dataclasses import dataclass, field
from typing import ClassVar

import taichi as ti
import taichi.math as tm

from rtweekend.core.color import Color
from rtweekend.core.sampler import random_float
from rtweekend.core.vec3 import normalize, reflect, refract, schlick_reflectance, vec3
from rtweekend.materials.material import Material, MaterialType, as_color


@dataclass(frozen=True)
class Dielectric(Material):
    """Clear refractive material.

    Attributes:
        refractive_index: Index of refraction relative to the surrounding
            medium (1.5 for glass).
        albedo: Tint applied to both reflected and transmitted light.
    """

    refractive_index: float = 1.5
    albedo: Color = field(default_factory=Color.white)

    name: ClassVar[str] = "dielectric"
    material_type: ClassVar[MaterialType] = MaterialType.DIELECTRIC

    def __post_init__(self):
        object.__setattr__(self, "albedo", as_color(self.albedo))
        object.__setattr__(self, "refractive_index", float(self.refractive_index))

    def kernel_params(self) -> tuple[Color, float]:
        return self.albedo, self.refractive_index


@ti.func
def refraction_setup(direction: vec3, normal: vec3, refractive_index: ti.f32):
    """Orient the interface for a ray crossing it.

    Returns:
        A tuple of (unit_direction, oriented_normal, eta_ratio, cos_theta)
        where oriented_normal opposes the ray, eta_ratio is eta_from / eta_to
        and cos_theta = -dot(unit_direction, oriented_normal), at most 1.
    """
    unit = normalize(direction)
    n = normal
    ratio = refractive_index
    if tm.dot(unit, normal) < 0.0:
        # Entering: vacuum -> medium
        ratio = 1.0 / refractive_index
    else:
        n = -normal
    cos_theta = tm.min(-tm.dot(unit, n), 1.0)
    return unit, n, ratio, cos_theta


@ti.func
def must_reflect(ratio: ti.f32, cos_theta: ti.f32) -> ti.i32:
    """Total internal reflection test: eta_from / eta_to * sin(theta) > 1."""
    sin_theta = ti.sqrt(tm.max(1.0 - cos_theta * cos_theta, 0.0))
    return ratio * sin_theta > 1.0


@ti.func
def scatter_dielectric(
    albedo: vec3, refractive_index: ti.f32, direction: vec3, normal: vec3, stream: ti.i32
):
    """Reflect or refract through a dielectric boundary.

    Args:
        albedo: Tint of the material.
        refractive_index: Index of refraction of the medium.
        direction: Incoming ray direction.
        normal: Outward surface normal at the hit point.
        stream: Random stream of the calling worker.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter). did_scatter
        is always 1.
    """
    unit, n, ratio, cos_theta = refraction_setup(direction, normal, refractive_index)

    scattered = vec3(0.0, 0.0, 0.0)
    if must_reflect(ratio, cos_theta) or schlick_reflectance(cos_theta, ratio) > random_float(
        stream
    ):
        scattered = reflect(unit, n)
    else:
        scattered = refract(unit, n, ratio)

    return scattered, albedo, 1
