"""Ready-made scenes, each returned as a (world, camera) pair.

Scenes:
    two_spheres: A red and a blue diffuse sphere side by side
    showcase: Ground, a matte center sphere, a hollow glass sphere and a
        metal sphere
    random_spheres: The "weekend" cover scene, a field of small random
        spheres around three large ones, with depth of field

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rtweekend.scene.presets import SCENES
    >>> world, camera = SCENES["random_spheres"](3.0 / 2.0, seed=7)

Note:
    Imports material modules that declare Taichi fields; import only after
    ti.init().
"""

import math
from collections.abc import Callable
from typing import Optional

import numpy as np

from rtweekend.camera.thin_lens import Camera, Orientation, Structure
from rtweekend.core.angle import Angle
from rtweekend.core.color import Color
from rtweekend.materials.dielectric import Dielectric
from rtweekend.materials.lambertian import Lambertian
from rtweekend.materials.metal import Metal
from rtweekend.scene.hittable import HittableList, Sphere

SceneFactory = Callable[..., tuple[HittableList, Camera]]

# Cumulative thresholds for picking a small sphere's material
DIFFUSE_THRESHOLD = 0.8
METAL_THRESHOLD = 0.95

GLASS_INDEX = 1.5


def two_spheres_scene(aspect_ratio: float = 16.0 / 9.0, seed: Optional[int] = None):
    """Two radius-1 diffuse spheres filling the left and right halves."""
    world = HittableList()
    world.push(Sphere((-1.0, 0.0, -1.5), 1.0, Lambertian(Color(0.8, 0.1, 0.1))))
    world.push(Sphere((1.0, 0.0, -1.5), 1.0, Lambertian(Color(0.1, 0.1, 0.8))))

    camera = Camera(
        Orientation(origin=(0.0, 0.0, 0.0), look_at=(0.0, 0.0, -1.0), up=(0.0, 1.0, 0.0)),
        Structure(vertical_fov=Angle.degrees(90.0), aspect_ratio=aspect_ratio),
    )
    return world, camera


def material_showcase_scene(aspect_ratio: float = 16.0 / 9.0, seed: Optional[int] = None):
    """One sphere of each material on a large matte ground sphere.

    The left glass sphere is hollow: a second glass sphere with a negative
    radius would be clamped, so the bubble is an inner sphere with the
    reciprocal refractive index.
    """
    ground = Lambertian(Color(0.8, 0.8, 0.0))
    center = Lambertian(Color(0.1, 0.2, 0.5))
    glass = Dielectric(GLASS_INDEX)
    bubble = Dielectric(1.0 / GLASS_INDEX)
    metal = Metal(Color(0.8, 0.6, 0.2), 0.0)

    world = HittableList()
    world.push(Sphere((0.0, -100.5, -1.0), 100.0, ground))
    world.push(Sphere((0.0, 0.0, -1.0), 0.5, center))
    world.push(Sphere((-1.0, 0.0, -1.0), 0.5, glass))
    world.push(Sphere((-1.0, 0.0, -1.0), 0.4, bubble))
    world.push(Sphere((1.0, 0.0, -1.0), 0.5, metal))

    origin = (3.0, 3.0, 2.0)
    look_at = (0.0, 0.0, -1.0)
    camera = Camera(
        Orientation(origin=origin, look_at=look_at, up=(0.0, 1.0, 0.0)),
        Structure(
            vertical_fov=Angle.degrees(20.0),
            aspect_ratio=aspect_ratio,
            aperture_width=2.0,
            focus_distance=math.dist(origin, look_at),
        ),
    )
    return world, camera


def _material_kind(choose: float) -> int:
    if choose < DIFFUSE_THRESHOLD:
        return 0
    if choose < METAL_THRESHOLD:
        return 1
    return 2


def _random_material(kind: int, rng: np.random.Generator):
    if kind == 0:
        albedo = Color.random(rng=rng).attenuate(Color.random(rng=rng))
        return Lambertian(albedo)
    if kind == 1:
        return Metal(Color.random(0.5, 1.0, rng), float(rng.uniform(0.0, 0.5)))
    if kind == 2:
        return Dielectric(GLASS_INDEX)
    raise AssertionError(f"unknown material kind {kind}")


def random_spheres_scene(aspect_ratio: float = 3.0 / 2.0, seed: Optional[int] = None):
    """A grid of small random spheres around three large feature spheres.

    Args:
        aspect_ratio: Image width divided by height.
        seed: Seed for the scene layout. None gives a different layout each
            call.
    """
    rng = np.random.default_rng(seed)
    world = HittableList()

    world.push(Sphere((0.0, -1000.0, 0.0), 1000.0, Lambertian(Color(0.5, 0.5, 0.5))))

    clearing = np.array([4.0, 0.2, 0.0])
    small = HittableList()
    for a in range(-11, 11):
        for b in range(-11, 11):
            choose = float(rng.random())
            center = np.array([a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random()])
            if np.linalg.norm(center - clearing) > 0.9:
                material = _random_material(_material_kind(choose), rng)
                small.push(Sphere(tuple(center), 0.2, material))
    world.push(small)

    world.push(Sphere((0.0, 1.0, 0.0), 1.0, Dielectric(GLASS_INDEX)))
    world.push(Sphere((-4.0, 1.0, 0.0), 1.0, Lambertian(Color(0.4, 0.2, 0.1))))
    world.push(Sphere((4.0, 1.0, 0.0), 1.0, Metal(Color(0.7, 0.6, 0.5), 0.0)))

    camera = Camera(
        Orientation(origin=(13.0, 2.0, 3.0), look_at=(0.0, 0.0, 0.0), up=(0.0, 1.0, 0.0)),
        Structure(
            vertical_fov=Angle.degrees(20.0),
            aspect_ratio=aspect_ratio,
            aperture_width=0.1,
            focus_distance=10.0,
        ),
    )
    return world, camera


SCENES: dict[str, SceneFactory] = {
    "two_spheres": two_spheres_scene,
    "showcase": material_showcase_scene,
    "random_spheres": random_spheres_scene,
}


def get_scene(name: str) -> SceneFactory:
    """Look up a scene factory by name.

    Raises:
        KeyError: If no scene has that name.
    """
    try:
        return SCENES[name]
    except KeyError:
        raise KeyError(f"Unknown scene {name!r}; choose from {', '.join(sorted(SCENES))}") from None
