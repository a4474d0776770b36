"""Vector algebra for three-component vectors and points.

``vec3`` and ``Point3`` are both ``taichi.math.vec3``; arithmetic comes from
Taichi vectors and always produces new values. The helpers below are
``ti.func``s callable from any kernel.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> @ti.kernel
    ... def mirror() -> vec3:
    ...     return reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))
    >>> mirror()  # (1, 1, 0)
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3
Point3 = tm.vec3

NEAR_ZERO_EPSILON = 1e-8


@ti.func
def length(v: vec3) -> ti.f32:
    """Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Squared length of a vector.

    Prefer this over length() for comparisons; it skips the square root.
    """
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale a vector to unit length.

    The division is unguarded: a zero vector yields NaN components.
    """
    return v / tm.length(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Right-handed cross product, so cross(x, y) == z."""
    return tm.cross(a, b)


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Return 1 if every component is within NEAR_ZERO_EPSILON of zero."""
    s = NEAR_ZERO_EPSILON
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s


@ti.func
def reflect(v: vec3, n: vec3) -> vec3:
    """Mirror v about the unit normal n.

    Args:
        v: Incoming direction.
        n: Unit surface normal.

    Returns:
        v - 2 * dot(v, n) * n.
    """
    return v - 2.0 * tm.dot(v, n) * n


@ti.func
def refract(uv: vec3, n: vec3, eta_ratio: ti.f32) -> vec3:
    """Bend a unit direction through a surface with Snell's law.

    The caller is responsible for ruling out total internal reflection
    before calling this.

    Args:
        uv: Unit incoming direction.
        n: Unit normal on the incoming side (dot(uv, n) <= 0).
        eta_ratio: Ratio of refractive indices, eta_from / eta_to.

    Returns:
        The transmitted direction, perpendicular part plus parallel part.
    """
    cos_theta = tm.min(-tm.dot(uv, n), 1.0)
    r_out_perp = eta_ratio * (uv + cos_theta * n)
    r_out_parallel = -ti.sqrt(ti.abs(1.0 - tm.dot(r_out_perp, r_out_perp))) * n
    return r_out_perp + r_out_parallel


@ti.func
def schlick_reflectance(cosine: ti.f32, ratio: ti.f32) -> ti.f32:
    """Schlick's approximation of Fresnel reflectance.

    Args:
        cosine: Cosine of the incidence angle, in [0, 1].
        ratio: Ratio of refractive indices across the interface.

    Returns:
        r0 + (1 - r0) * (1 - cosine)^5 with r0 = ((1 - ratio) / (1 + ratio))^2.
    """
    r0 = (1.0 - ratio) / (1.0 + ratio)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


@ti.func
def facing_normal(normal: vec3, direction: vec3) -> vec3:
    """Orient a normal so it opposes the ray direction."""
    result = normal
    if tm.dot(normal, direction) >= 0.0:
        result = -normal
    return result
