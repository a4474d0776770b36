"""Scattering materials.

Components:
    material: MaterialType tag, ScatterRecord and the Material base class
    lambertian: Ideal diffuse reflection
    metal: Mirror reflection with optional fuzz
    dielectric: Glass-like reflection and refraction (Schlick)
    registry: Material table and kernel-side dispatch

Only the field-free base types are re-exported here. The variant modules
draw from the random streams in core.sampler, so import them directly
(e.g. ``from rtweekend.materials.metal import Metal``) after ti.init().
"""

from .material import Material, MaterialType, ScatterRecord

__all__ = [
    "Material",
    "MaterialType",
    "ScatterRecord",
]
