"""Material table shared by every kernel.

Each registered material gets a material id indexing three parallel fields:
its MaterialType tag, its albedo, and one scalar parameter (fuzziness for
metal, refractive index for dielectric, unused for Lambertian). Kernels
dispatch on the tag with scatter_material().

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rtweekend.materials import Lambertian
    >>> from rtweekend.materials.registry import add_material
    >>> matte_id = add_material(Lambertian(Color(0.8, 0.3, 0.3)))

Note:
    Declares Taichi fields; import only after ti.init().
"""

from typing import Optional

import taichi as ti

from rtweekend.core.color import Color
from rtweekend.core.vec3 import vec3
from rtweekend.materials.dielectric import scatter_dielectric
from rtweekend.materials.lambertian import scatter_lambertian
from rtweekend.materials.material import Material, MaterialType, ScatterRecord
from rtweekend.materials.metal import scatter_metal

MAX_MATERIALS = 1024

material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_params = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Forget every registered material."""
    num_materials[None] = 0


def get_material_count() -> int:
    return int(num_materials[None])


def add_material(material: Material) -> int:
    """Register a material and return its material id.

    Args:
        material: A Lambertian, Metal or Dielectric instance.

    Returns:
        The id to store alongside primitives that use this material.

    Raises:
        TypeError: If the object is not a known material variant.
        RuntimeError: If the table is full.
    """
    if not isinstance(material, Material) or not hasattr(material, "material_type"):
        raise TypeError(f"Cannot register {type(material).__name__} as a material")

    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    albedo, param = material.kernel_params()
    material_types[idx] = int(material.material_type)
    material_albedos[idx] = [albedo.red, albedo.green, albedo.blue]
    material_params[idx] = param
    num_materials[None] = idx + 1
    return idx


def get_material_type_of(material_id: int) -> MaterialType:
    """Host-side lookup of a registered material's tag.

    Raises:
        IndexError: If the id was never registered.
    """
    if not 0 <= material_id < num_materials[None]:
        raise IndexError(f"Unknown material id: {material_id}")
    return MaterialType(int(material_types[material_id]))


# =============================================================================
# Kernel-side dispatch
# =============================================================================


@ti.func
def scatter_with(
    material_type: ti.i32,
    albedo: vec3,
    param: ti.f32,
    direction: vec3,
    normal: vec3,
    stream: ti.i32,
):
    """Scatter according to an explicit material tag and parameters.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter). An
        unknown tag absorbs the ray.
    """
    scattered = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if material_type == int(MaterialType.LAMBERTIAN):
        scattered, attenuation, did_scatter = scatter_lambertian(albedo, direction, normal, stream)

    elif material_type == int(MaterialType.METAL):
        scattered, attenuation, did_scatter = scatter_metal(
            albedo, param, direction, normal, stream
        )

    elif material_type == int(MaterialType.DIELECTRIC):
        scattered, attenuation, did_scatter = scatter_dielectric(
            albedo, param, direction, normal, stream
        )

    return scattered, attenuation, did_scatter


@ti.func
def scatter_material(material_id: ti.i32, direction: vec3, normal: vec3, stream: ti.i32):
    """Scatter with the registered material ``material_id``.

    Args:
        material_id: Id returned by add_material().
        direction: Incoming ray direction.
        normal: Outward surface normal at the hit point.
        stream: Random stream of the calling worker.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter).
    """
    return scatter_with(
        material_types[material_id],
        material_albedos[material_id],
        material_params[material_id],
        direction,
        normal,
        stream,
    )


# =============================================================================
# Host-side scatter
# =============================================================================

_scatter_direction = ti.Vector.field(3, dtype=ti.f32, shape=())
_scatter_attenuation = ti.Vector.field(3, dtype=ti.f32, shape=())
_scatter_flag = ti.field(dtype=ti.i32, shape=())


@ti.kernel
def _scatter_kernel(
    material_type: ti.i32,
    albedo: vec3,
    param: ti.f32,
    direction: vec3,
    normal: vec3,
    stream: ti.i32,
):
    scattered, attenuation, did_scatter = scatter_with(
        material_type, albedo, param, direction, normal, stream
    )
    _scatter_direction[None] = scattered
    _scatter_attenuation[None] = attenuation
    _scatter_flag[None] = did_scatter


def scatter_once(
    material: Material, direction, point, normal, stream: int = 0
) -> Optional[ScatterRecord]:
    """Run one scatter event for ``material`` from Python.

    Args:
        material: The material being hit.
        direction: Incoming ray direction as a 3-sequence.
        point: Hit point; becomes the origin of the scattered ray.
        normal: Outward surface normal as a 3-sequence.
        stream: Random stream to draw from.

    Returns:
        A ScatterRecord, or None if the ray was absorbed.
    """
    albedo, param = material.kernel_params()
    _scatter_kernel(
        int(material.material_type),
        vec3(albedo.red, albedo.green, albedo.blue),
        param,
        vec3(*direction),
        vec3(*normal),
        stream,
    )
    if _scatter_flag[None] == 0:
        return None
    out = _scatter_direction[None]
    att = _scatter_attenuation[None]
    return ScatterRecord(
        attenuation=Color(att[0], att[1], att[2]),
        origin=(float(point[0]), float(point[1]), float(point[2])),
        direction=(float(out[0]), float(out[1]), float(out[2])),
    )
