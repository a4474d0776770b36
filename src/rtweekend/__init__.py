"""Taichi-accelerated Monte Carlo path tracer for sphere scenes.

Subpackages:
    core: Vector algebra, angles, colors, rays, random streams, the color
        estimator and the scanline renderer
    geometry: Sphere intersection kernel
    materials: Lambertian, metal and dielectric scattering
    camera: Thin-lens camera with optional depth of field
    scene: Hittable objects, world storage and preset scenes
    output: PPM and PNG image sinks

Modules that declare Taichi fields (sampler, intersection, registry,
camera, integrator, renderer) must be imported after ``ti.init()``.
"""

__version__ = "0.1.0"
