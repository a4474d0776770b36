"""Sphere primitive and ray-sphere intersection.

Intersection solves |o + t d - c|^2 = r^2 in the half-b form

    a t^2 + 2 h t + c' = 0,   a = d.d,  h = d.(o - c),  c' = |o - c|^2 - r^2

and reports the nearer root inside the inclusive interval [t_min, t_max],
falling back to the farther root. Normals always point away from the center;
deciding which side the ray came from is left to the materials.

Note:
    The host-side query declares Taichi fields; import only after ti.init().

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rtweekend.geometry.sphere import query_sphere
    >>> query_sphere((0, 0, -1), 0.5, (0, 0, 0), (0, 0, -1), 0.001, 1e9).t
    0.5
"""

from dataclasses import dataclass
from typing import Optional

import taichi as ti
import taichi.math as tm

from rtweekend.core.vec3 import vec3


@ti.dataclass
class SphereGeometry:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere, never negative.
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Record of a ray-sphere intersection.

    Attributes:
        hit: 1 if the ray intersected the sphere within the interval, else 0.
        t: Ray parameter of the intersection. Only valid if hit == 1.
        point: The intersection point. Only valid if hit == 1.
        normal: Outward unit normal at the intersection point (for a
            positive radius). Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3


@ti.func
def _solve_quadratic_robust(h: ti.f32, a: ti.f32, c: ti.f32, sqrt_d: ti.f32):
    """Solve a*t^2 + 2*h*t + c = 0 without catastrophic cancellation.

    Args:
        h: Half of the linear coefficient.
        a: Quadratic coefficient.
        c: Constant term.
        sqrt_d: Square root of the quarter discriminant (h^2 - a*c).

    Returns:
        Tuple of (t0, t1) where t0 <= t1.
    """
    # q = -(h + sign(h) * sqrt(discriminant)) keeps both terms the same sign
    sign_h = ti.select(h < 0.0, -1.0, 1.0)
    q = -(h + sign_h * sqrt_d)

    t0 = 0.0
    t1 = 0.0

    if ti.abs(q) < 1e-10:
        # Tangent ray through the origin's closest point
        t0 = (-h - sqrt_d) / a
        t1 = (-h + sqrt_d) / a
    else:
        t0 = q / a
        t1 = c / q

    if t0 > t1:
        temp = t0
        t0 = t1
        t1 = temp

    return t0, t1


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: SphereGeometry,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Intersect a ray with a sphere.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The ray direction, any nonzero length.
        sphere: The sphere to test.
        t_min: Smallest accepted ray parameter (inclusive).
        t_max: Largest accepted ray parameter (inclusive).

    Returns:
        A HitRecord for the nearest root in [t_min, t_max]. A negative
        discriminant, or both roots outside the interval, yields hit == 0.
    """
    oc = ray_origin - sphere.center

    a = tm.dot(ray_direction, ray_direction)
    h = tm.dot(ray_direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius

    discriminant = h * h - a * c

    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t0, t1 = _solve_quadratic_robust(h, a, c, sqrt_d)

        t = t0
        valid = (t >= t_min) and (t <= t_max)

        if not valid:
            t = t1
            valid = (t >= t_min) and (t <= t_max)

        if valid:
            did_hit = 1
            hit_t = t
            hit_point = ray_origin + t * ray_direction
            hit_normal = (hit_point - sphere.center) / sphere.radius

    return HitRecord(hit=did_hit, t=hit_t, point=hit_point, normal=hit_normal)


# =============================================================================
# Host-side query
# =============================================================================


@dataclass(frozen=True)
class SphereHit:
    """A sphere intersection read back to Python."""

    t: float
    point: tuple[float, float, float]
    normal: tuple[float, float, float]


_query_hit = ti.field(dtype=ti.i32, shape=())
_query_t = ti.field(dtype=ti.f32, shape=())
_query_point = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_normal = ti.Vector.field(3, dtype=ti.f32, shape=())


@ti.kernel
def _hit_sphere_kernel(
    center: vec3,
    radius: ti.f32,
    origin: vec3,
    direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
):
    sphere = SphereGeometry(center=center, radius=radius)
    record = hit_sphere(origin, direction, sphere, t_min, t_max)
    _query_hit[None] = record.hit
    _query_t[None] = record.t
    _query_point[None] = record.point
    _query_normal[None] = record.normal


def _as_tuple(v) -> tuple[float, float, float]:
    return (float(v[0]), float(v[1]), float(v[2]))


def query_sphere(
    center,
    radius: float,
    origin,
    direction,
    t_min: float,
    t_max: float,
) -> Optional[SphereHit]:
    """Run hit_sphere from Python.

    Args:
        center: Sphere center as a 3-sequence.
        radius: Sphere radius.
        origin: Ray origin as a 3-sequence.
        direction: Ray direction as a 3-sequence.
        t_min: Lower bound of the accepted interval.
        t_max: Upper bound of the accepted interval.

    Returns:
        The intersection, or None for a miss.
    """
    _hit_sphere_kernel(vec3(*center), radius, vec3(*origin), vec3(*direction), t_min, t_max)
    if _query_hit[None] == 0:
        return None
    return SphereHit(
        t=float(_query_t[None]),
        point=_as_tuple(_query_point[None]),
        normal=_as_tuple(_query_normal[None]),
    )
