"""Thin-lens camera with optional depth of field.

The camera is described by where it stands (Orientation) and by its optics
(Structure). From these it builds an orthonormal basis

- w: points from look_at back toward the origin (opposite the view)
- u: points right in the image plane
- v: points up in the image plane

and a viewport placed on the focal plane, ``focus_distance`` in front of
the lens. With a zero aperture every ray starts at the origin (a pinhole);
otherwise ray origins are spread over a lens disk of radius aperture / 2
while all rays for one image coordinate still meet on the focal plane.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rtweekend.camera.thin_lens import (
    ...     Camera, Orientation, Structure, setup_camera, get_ray
    ... )
    >>> camera = Camera(
    ...     Orientation(origin=(13.0, 2.0, 3.0), look_at=(0.0, 0.0, 0.0), up=(0.0, 1.0, 0.0)),
    ...     Structure(vertical_fov=Angle.degrees(20.0), aspect_ratio=3.0 / 2.0,
    ...               aperture_width=0.1, focus_distance=10.0),
    ... )
    >>> setup_camera(camera)
    >>> # Inside a kernel: ray = get_ray(s, t, stream)

Note:
    Declares Taichi fields; import only after ti.init().
"""

from dataclasses import dataclass, field

import numpy as np
import taichi as ti

from rtweekend.core.angle import Angle
from rtweekend.core.ray import Ray, make_ray
from rtweekend.core.sampler import random_in_unit_disk
from rtweekend.core.vec3 import vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class Orientation:
    """Camera placement.

    Attributes:
        origin: Lens center in world space.
        look_at: Point the camera faces.
        up: Approximate up direction; must not be parallel to the view.
    """

    origin: tuple[float, float, float] = (0.0, 0.0, 0.0)
    look_at: tuple[float, float, float] = (0.0, 0.0, -1.0)
    up: tuple[float, float, float] = (0.0, 1.0, 0.0)


@dataclass(frozen=True)
class Structure:
    """Camera optics.

    Attributes:
        vertical_fov: Full vertical field of view.
        aspect_ratio: Image width divided by height.
        aperture_width: Lens diameter. Zero disables depth of field.
        focus_distance: Distance from the lens to the plane in perfect focus.
    """

    vertical_fov: Angle = field(default_factory=lambda: Angle.degrees(90.0))
    aspect_ratio: float = 16.0 / 9.0
    aperture_width: float = 0.0
    focus_distance: float = 1.0


def _unit(v: np.ndarray) -> np.ndarray:
    return v / np.linalg.norm(v)


class Camera:
    """An immutable camera with a precomputed basis and viewport.

    Args:
        orientation: Where the camera stands and looks.
        structure: Field of view, aspect ratio, aperture and focus.

    Attributes:
        origin, u, v, w, horizontal, vertical, lower_left_corner: numpy
            float64 vectors describing the viewport on the focal plane.
        lens_radius: Half the aperture width.
    """

    def __init__(self, orientation: Orientation, structure: Structure):
        self._orientation = orientation
        self._structure = structure

        h = (structure.vertical_fov / 2.0).tan()
        viewport_height = 2.0 * h
        viewport_width = structure.aspect_ratio * viewport_height

        origin = np.array(orientation.origin, dtype=np.float64)
        look_at = np.array(orientation.look_at, dtype=np.float64)
        up = np.array(orientation.up, dtype=np.float64)

        w = _unit(origin - look_at)
        u = _unit(np.cross(up, w))
        v = np.cross(w, u)

        focus = structure.focus_distance
        horizontal = focus * viewport_width * u
        vertical = focus * viewport_height * v

        self.origin = origin
        self.u = u
        self.v = v
        self.w = w
        self.horizontal = horizontal
        self.vertical = vertical
        self.lower_left_corner = origin - horizontal / 2.0 - vertical / 2.0 - focus * w
        self.lens_radius = structure.aperture_width / 2.0

        for array in (self.origin, self.u, self.v, self.w, self.horizontal, self.vertical):
            array.setflags(write=False)
        self.lower_left_corner.setflags(write=False)

    @property
    def orientation(self) -> Orientation:
        return self._orientation

    @property
    def structure(self) -> Structure:
        return self._structure

    @property
    def aspect_ratio(self) -> float:
        return self._structure.aspect_ratio

    def focal_point(self, s: float, t: float) -> np.ndarray:
        """Point on the focal plane at image coordinates (s, t)."""
        return self.lower_left_corner + s * self.horizontal + t * self.vertical

    def __repr__(self) -> str:
        return f"Camera({self._orientation!r}, {self._structure!r})"


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_u = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_v = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_w = ti.Vector.field(3, dtype=ti.f32, shape=())
_viewport_horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())
_viewport_vertical = ti.Vector.field(3, dtype=ti.f32, shape=())
_lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())
_lens_radius = ti.field(dtype=ti.f32, shape=())


def setup_camera(camera: Camera) -> None:
    """Upload a camera so kernels can generate rays with get_ray().

    Args:
        camera: The camera to render from.
    """
    _camera_origin[None] = camera.origin.tolist()
    _camera_u[None] = camera.u.tolist()
    _camera_v[None] = camera.v.tolist()
    _camera_w[None] = camera.w.tolist()
    _viewport_horizontal[None] = camera.horizontal.tolist()
    _viewport_vertical[None] = camera.vertical.tolist()
    _lower_left_corner[None] = camera.lower_left_corner.tolist()
    _lens_radius[None] = camera.lens_radius


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_ray(s: ti.f32, t: ti.f32, stream: ti.i32) -> Ray:
    """Generate a primary ray for normalized image coordinates (s, t).

    s runs left to right and t bottom to top, both over [0, 1]. The
    direction is left unnormalized.

    Args:
        s: Horizontal image coordinate.
        t: Vertical image coordinate.
        stream: Random stream used for the lens sample.

    Returns:
        A ray from a point on the lens toward the focal-plane point (s, t).
    """
    offset = vec3(0.0, 0.0, 0.0)
    if _lens_radius[None] > 0.0:
        rd = _lens_radius[None] * random_in_unit_disk(stream)
        offset = _camera_u[None] * rd.x + _camera_v[None] * rd.y

    origin = _camera_origin[None]
    target = _lower_left_corner[None] + s * _viewport_horizontal[None] + t * _viewport_vertical[None]

    return make_ray(origin + offset, target - origin - offset)


def get_camera_info() -> dict:
    """Read the uploaded camera state back for inspection.

    Returns:
        Dictionary with origin, u, v, w, horizontal, vertical, lower_left
        and lens_radius.
    """

    def _tuple(f) -> tuple[float, float, float]:
        value = f[None]
        return (float(value[0]), float(value[1]), float(value[2]))

    return {
        "origin": _tuple(_camera_origin),
        "u": _tuple(_camera_u),
        "v": _tuple(_camera_v),
        "w": _tuple(_camera_w),
        "horizontal": _tuple(_viewport_horizontal),
        "vertical": _tuple(_viewport_vertical),
        "lower_left": _tuple(_lower_left_corner),
        "lens_radius": float(_lens_radius[None]),
    }
