"""Monte Carlo color estimator and the scanline kernel.

The estimator follows a camera ray through the world:

- a miss returns the sky gradient,
- a hit asks the surface material to scatter and continues along the
  scattered ray with one less bounce, filtering by the attenuation,
- absorption, or running out of bounces, returns black.

That recursion is written as a loop that carries the running product of
attenuations, which is the same estimate without a call stack.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rtweekend.core.integrator import render_sample
    >>> render_sample((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), max_depth=50)

Note:
    Declares Taichi fields; import only after ti.init().
"""

import taichi as ti
import taichi.math as tm

from rtweekend.camera.thin_lens import get_ray
from rtweekend.config import MAX_IMAGE_WIDTH
from rtweekend.core.color import Color, attenuate, sky_color
from rtweekend.core.sampler import random_float
from rtweekend.core.vec3 import vec3
from rtweekend.materials.registry import scatter_material
from rtweekend.scene.intersection import intersect_scene

# Accepted ray parameter interval; T_MIN keeps a scattered ray from
# re-hitting the surface it starts on
T_MIN = 0.001
T_MAX = tm.inf

# One row of averaged, linear (not gamma-corrected) pixel colors
_scanline = ti.Vector.field(3, dtype=ti.f32, shape=MAX_IMAGE_WIDTH)

_sample_result = ti.Vector.field(3, dtype=ti.f32, shape=())


@ti.func
def ray_color(origin: vec3, direction: vec3, max_depth: ti.i32, stream: ti.i32) -> vec3:
    """Estimate the light arriving along a ray.

    Args:
        origin: Ray origin.
        direction: Ray direction, any nonzero length.
        max_depth: Remaining scatter budget. Zero or less returns black.
        stream: Random stream of the calling worker.

    Returns:
        The estimated RGB color, each channel in [0, 1].
    """
    color = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    ray_origin = origin
    ray_direction = direction
    depth = max_depth

    # Taichi has no early return, so the path carries an active flag
    active = 1
    while active == 1:
        if depth <= 0:
            active = 0
        else:
            rec = intersect_scene(ray_origin, ray_direction, T_MIN, T_MAX)
            if rec.hit == 0:
                color = attenuate(throughput, sky_color(ray_direction))
                active = 0
            else:
                scattered, attenuation, did_scatter = scatter_material(
                    rec.material_id, ray_direction, rec.normal, stream
                )
                if did_scatter == 0:
                    active = 0
                else:
                    throughput = attenuate(throughput, attenuation)
                    ray_origin = rec.point
                    ray_direction = scattered
                    depth -= 1

    return color


@ti.func
def _sanitize(color: vec3) -> vec3:
    """Replace NaN/Inf channels (from degenerate normalizations) with zero."""
    result = color
    for c in ti.static(range(3)):
        if tm.isnan(result[c]) or tm.isinf(result[c]):
            result[c] = 0.0
    return result


@ti.func
def pixel_sample(
    i: ti.i32, j: ti.i32, width: ti.i32, height: ti.i32, max_depth: ti.i32, stream: ti.i32
) -> vec3:
    """One jittered estimate for pixel (i, j), with j = 0 the bottom row."""
    s = (ti.cast(i, ti.f32) + random_float(stream)) / ti.cast(ti.max(width - 1, 1), ti.f32)
    t = (ti.cast(j, ti.f32) + random_float(stream)) / ti.cast(ti.max(height - 1, 1), ti.f32)
    ray = get_ray(s, t, stream)
    return _sanitize(ray_color(ray.origin, ray.direction, max_depth, stream))


@ti.kernel
def render_scanline(
    j: ti.i32, width: ti.i32, height: ti.i32, samples_per_pixel: ti.i32, max_depth: ti.i32
):
    """Fill the scanline buffer with the averaged colors of row j.

    Columns are processed in parallel; column i draws only from stream i.
    Each pixel keeps a running sum and count of its samples.

    Args:
        j: Row index, 0 at the bottom of the image.
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Estimates averaged per pixel.
        max_depth: Scatter budget per estimate.
    """
    for i in range(width):
        total = vec3(0.0, 0.0, 0.0)
        count = 0
        for _ in range(samples_per_pixel):
            total += pixel_sample(i, j, width, height, max_depth, i)
            count += 1
        _scanline[i] = total / ti.cast(count, ti.f32)


def get_scanline(width: int):
    """Copy the first ``width`` entries of the scanline buffer to numpy."""
    return _scanline.to_numpy()[:width]


# =============================================================================
# Single-sample entry points
# =============================================================================


@ti.kernel
def _ray_color_kernel(origin: vec3, direction: vec3, max_depth: ti.i32, stream: ti.i32):
    # Single-iteration outer loop keeps the estimator serial
    for _ in range(1):
        _sample_result[None] = ray_color(origin, direction, max_depth, stream)


@ti.kernel
def _pixel_sample_kernel(
    i: ti.i32, j: ti.i32, width: ti.i32, height: ti.i32, max_depth: ti.i32, stream: ti.i32
):
    for _ in range(1):
        _sample_result[None] = pixel_sample(i, j, width, height, max_depth, stream)


def render_sample(origin, direction, max_depth: int, stream: int = 0) -> Color:
    """Evaluate ray_color once from Python.

    Args:
        origin: Ray origin as a 3-sequence.
        direction: Ray direction as a 3-sequence.
        max_depth: Scatter budget.
        stream: Random stream to draw from.

    Returns:
        The estimated color.
    """
    _ray_color_kernel(vec3(*origin), vec3(*direction), max_depth, stream)
    return Color.from_array(_sample_result[None])


def sample_pixel(i: int, j: int, width: int, height: int, max_depth: int, stream: int = 0) -> Color:
    """Take one jittered camera sample for pixel (i, j) from Python."""
    _pixel_sample_kernel(i, j, width, height, max_depth, stream)
    return Color.from_array(_sample_result[None])
