"""Ray data structure.

A ray is an origin plus a direction. The direction is never normalized on
construction; callers that need unit length normalize explicitly.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> @ti.kernel
    ... def far_point() -> vec3:
    ...     ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -2.0))
    ...     return ray_at(ray, 5.0)  # (0, 0, -10)
"""

import taichi as ti

from rtweekend.core.vec3 import vec3


@ti.dataclass
class Ray:
    """A half-line in space.

    Attributes:
        origin: Starting point of the ray.
        direction: Direction vector, any nonzero length.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Point at parameter t along the ray.

    No sign check is performed; negative t gives points behind the origin.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    return Ray(origin=origin, direction=direction)
