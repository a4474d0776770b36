"""Core rendering module.

Components:
    vec3: Vector algebra ti.funcs over taichi.math.vec3
    ray: Ray data structure
    angle: Unit-tagged angles and inverse trigonometry
    color: Clamped RGB colors and kernel color helpers
    sampler: Per-worker random number streams
    integrator: The recursive color estimator and scanline kernel
    renderer: Scanline driver producing gamma-corrected rows

sampler, integrator and renderer declare Taichi fields and are NOT imported
here; import them directly after ti.init().
"""

from .angle import Angle, AngleUnit, acos, asin, atan, atan2
from .color import Color
from .ray import Ray, make_ray, ray_at
from .vec3 import (
    Point3,
    cross,
    dot,
    facing_normal,
    length,
    length_squared,
    near_zero,
    normalize,
    reflect,
    refract,
    schlick_reflectance,
    vec3,
)

__all__ = [
    "Angle",
    "AngleUnit",
    "asin",
    "acos",
    "atan",
    "atan2",
    "Color",
    "Ray",
    "make_ray",
    "ray_at",
    "vec3",
    "Point3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "near_zero",
    "reflect",
    "refract",
    "schlick_reflectance",
    "facing_normal",
]
