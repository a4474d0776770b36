"""World storage and nearest-hit queries for kernels.

Spheres live in Structure-of-Arrays fields, in the order they appear in the
host HittableList. intersect_scene() walks them in that order, shrinking the
accepted interval to the best hit so far, so a later sphere replaces the
current best only when it is at least as close.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rtweekend.scene.intersection import load_world, intersect_scene
    >>> load_world(world)  # world: HittableList
    >>> # Use intersect_scene within a Taichi kernel

Note:
    Declares Taichi fields; import only after ti.init().
"""

from typing import Optional

import taichi as ti

from rtweekend.core.vec3 import vec3
from rtweekend.geometry.sphere import SphereGeometry, hit_sphere
from rtweekend.materials.registry import add_material, clear_materials


@ti.dataclass
class SceneHitRecord:
    """Nearest intersection of a ray with the world.

    Attributes:
        hit: 1 if any sphere was hit, else 0.
        t: Ray parameter of the nearest hit. Only valid if hit == 1.
        point: The intersection point. Only valid if hit == 1.
        normal: Outward unit normal of the hit sphere. Only valid if hit == 1.
        material_id: Registry id of the hit sphere's material, -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    material_id: ti.i32


MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all spheres. Field contents are overwritten on the next add."""
    num_spheres[None] = 0


def add_sphere(center, radius: float, material_id: int = 0) -> int:
    """Append a sphere to the world.

    Args:
        center: The center point as a 3-sequence.
        radius: The radius; negative values are clamped to 0.
        material_id: Registry id of the sphere's material.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = [float(center[0]), float(center[1]), float(center[2])]
    sphere_radii[idx] = max(float(radius), 0.0)
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    return int(num_spheres[None])


def load_world(world) -> dict[int, int]:
    """Replace the kernel-side world with the contents of a HittableList.

    Every distinct material object is registered once and shared by all
    spheres that reference it. Nested lists are flattened depth first.

    Args:
        world: A HittableList (or anything with a ``spheres()`` iterator).

    Returns:
        Mapping from ``id(material)`` to its registry id.
    """
    clear_scene()
    clear_materials()

    material_ids: dict[int, int] = {}
    for sphere in world.spheres():
        key = id(sphere.material)
        if key not in material_ids:
            material_ids[key] = add_material(sphere.material)
        add_sphere(sphere.center, sphere.radius, material_ids[key])
    return material_ids


@ti.func
def _make_miss_record() -> SceneHitRecord:
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material_id=-1,
    )


@ti.func
def intersect_scene(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> SceneHitRecord:
    """Find the nearest sphere hit in [t_min, t_max].

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        t_min: Minimum accepted ray parameter.
        t_max: Maximum accepted ray parameter.

    Returns:
        The nearest hit, or a miss record (hit == 0) for an empty world or
        when nothing lies in the interval.
    """
    closest_t = t_max
    result = _make_miss_record()

    for i in range(num_spheres[None]):
        sphere = SphereGeometry(center=sphere_centers[i], radius=sphere_radii[i])
        rec = hit_sphere(ray_origin, ray_direction, sphere, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = SceneHitRecord(
                hit=1,
                t=rec.t,
                point=rec.point,
                normal=rec.normal,
                material_id=sphere_material_ids[i],
            )

    return result


# =============================================================================
# Host-side query
# =============================================================================

_query_hit = ti.field(dtype=ti.i32, shape=())
_query_t = ti.field(dtype=ti.f32, shape=())
_query_point = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_normal = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_material = ti.field(dtype=ti.i32, shape=())


@ti.kernel
def _intersect_kernel(origin: vec3, direction: vec3, t_min: ti.f32, t_max: ti.f32):
    # Single-iteration outer loop keeps the sphere walk serial
    for _ in range(1):
        rec = intersect_scene(origin, direction, t_min, t_max)
        _query_hit[None] = rec.hit
        _query_t[None] = rec.t
        _query_point[None] = rec.point
        _query_normal[None] = rec.normal
        _query_material[None] = rec.material_id


def query_scene(
    origin, direction, t_min: float, t_max: float
) -> Optional[tuple[float, tuple, tuple, int]]:
    """Run intersect_scene from Python.

    Returns:
        (t, point, normal, material_id) of the nearest hit, or None.
    """
    _intersect_kernel(vec3(*origin), vec3(*direction), t_min, t_max)
    if _query_hit[None] == 0:
        return None
    p = _query_point[None]
    n = _query_normal[None]
    return (
        float(_query_t[None]),
        (float(p[0]), float(p[1]), float(p[2])),
        (float(n[0]), float(n[1]), float(n[2])),
        int(_query_material[None]),
    )
