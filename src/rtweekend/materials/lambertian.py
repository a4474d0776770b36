"""Lambertian (ideal diffuse) material.

A diffuse surface scatters toward the normal facing the incoming ray, offset
by a uniformly random unit vector. The resulting directions follow a cosine
distribution about that normal. The ray is never absorbed.

Example:
    >>> # Inside a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_lambertian(
    >>> #     albedo, ray_direction, hit_normal, stream)
"""

from dataclasses import dataclass, field
from typing import ClassVar

import taichi as ti

from rtweekend.core.color import Color
from rtweekend.core.sampler import random_unit_vector
from rtweekend.core.vec3 import facing_normal, near_zero, vec3
from rtweekend.materials.material import Material, MaterialType, as_color


@dataclass(frozen=True)
class Lambertian(Material):
    """Matte surface.

    Attributes:
        albedo: Fraction of light reflected per channel.
    """

    albedo: Color = field(default_factory=lambda: Color(0.5, 0.5, 0.5))

    name: ClassVar[str] = "lambertian"
    material_type: ClassVar[MaterialType] = MaterialType.LAMBERTIAN

    def __post_init__(self):
        object.__setattr__(self, "albedo", as_color(self.albedo))

    def kernel_params(self) -> tuple[Color, float]:
        return self.albedo, 0.0


@ti.func
def diffuse_direction(normal: vec3, direction: vec3, offset: vec3) -> vec3:
    """Facing normal plus a unit offset.

    A sum that cancels to near zero falls back to the outward normal.
    """
    scattered = facing_normal(normal, direction) + offset
    result = scattered
    if near_zero(scattered):
        result = normal
    return result


@ti.func
def scatter_lambertian(albedo: vec3, direction: vec3, normal: vec3, stream: ti.i32):
    """Sample a diffuse bounce.

    Args:
        albedo: The diffuse reflectance color (RGB).
        direction: Incoming ray direction.
        normal: Outward surface normal at the hit point.
        stream: Random stream of the calling worker.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter). did_scatter
        is always 1.
    """
    scattered = diffuse_direction(normal, direction, random_unit_vector(stream))
    return scattered, albedo, 1
