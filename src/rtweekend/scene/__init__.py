"""Scene description and world storage.

Components:
    hittable: Host-side Sphere, HittableList and RayHit
    intersection: Kernel-side sphere storage and nearest-hit query
    presets: Ready-made worlds with matching cameras

Only the field-free host types are re-exported; import intersection and
presets after ti.init().
"""

from .hittable import Hittable, HittableList, RayHit, Sphere

__all__ = [
    "Hittable",
    "HittableList",
    "RayHit",
    "Sphere",
]
