"""Explicit random number streams for kernel code.

Every parallel worker owns one stream, identified by an integer index into a
field of xorshift32 states. A worker only ever reads and advances its own
state, so kernels never share generator state between threads.

Streams are (re)seeded from the host through numpy's SeedSequence, which
makes a render with a fixed seed reproducible bit for bit:

    >>> seed_streams(7, 0)
    >>> first = sample_floats(4)
    >>> seed_streams(7, 0)
    >>> assert sample_floats(4) == first

Note:
    Declares Taichi fields; import only after ti.init().
"""

from typing import Optional

import numpy as np
import taichi as ti

from rtweekend.core.vec3 import length_squared, normalize, vec3

# One stream per pixel column; matches the widest supported image
MAX_STREAMS = 2048

_rng_states = ti.field(dtype=ti.u32, shape=MAX_STREAMS)

# Scratch buffer for host-side draws
_sample_buffer = ti.field(dtype=ti.f32, shape=MAX_STREAMS)


def seed_streams(seed: Optional[int], *keys: int) -> None:
    """Seed every stream from a root seed and optional sub-keys.

    Args:
        seed: Root seed. None draws fresh entropy from the OS.
        *keys: Non-negative integers that select an independent family of
            streams under the same root, e.g. the scanline index.
    """
    sequence = np.random.SeedSequence(entropy=seed, spawn_key=tuple(int(k) for k in keys))
    rng = np.random.default_rng(sequence)
    # xorshift has a fixed point at zero, so states start at 1
    states = rng.integers(1, 2**32, size=MAX_STREAMS, dtype=np.uint32)
    _rng_states.from_numpy(states)


def get_stream_states() -> np.ndarray:
    return _rng_states.to_numpy()


@ti.func
def random_float(stream: ti.i32) -> ti.f32:
    """Uniform float in [0, 1) drawn from one stream.

    Advances the stream with xorshift32 (13, 17, 5). Shifts are written as
    unsigned multiply and floor-divide so they stay logical on every backend.
    """
    x = _rng_states[stream]
    x ^= x * ti.u32(8192)
    x ^= x // ti.u32(131072)
    x ^= x * ti.u32(32)
    _rng_states[stream] = x
    # Top 24 bits give an exactly representable f32 below 1
    return ti.cast(x // ti.u32(256), ti.f32) / 16777216.0


@ti.func
def random_range(stream: ti.i32, low: ti.f32, high: ti.f32) -> ti.f32:
    return low + (high - low) * random_float(stream)


@ti.func
def random_vec3(stream: ti.i32, low: ti.f32, high: ti.f32) -> vec3:
    """Vector with independent uniform components in [low, high)."""
    x = random_range(stream, low, high)
    y = random_range(stream, low, high)
    z = random_range(stream, low, high)
    return vec3(x, y, z)


@ti.func
def random_in_unit_sphere(stream: ti.i32) -> vec3:
    """Uniform point strictly inside the unit ball.

    Rejection sampling from the cube [-1, 1]^3. Each attempt is accepted with
    probability pi / 6, so the loop runs until success without a cap.
    """
    p = vec3(1.0, 1.0, 1.0)
    while length_squared(p) >= 1.0:
        p = random_vec3(stream, -1.0, 1.0)
    return p


@ti.func
def random_unit_vector(stream: ti.i32) -> vec3:
    """Direction uniformly distributed on the unit sphere."""
    return normalize(random_in_unit_sphere(stream))


@ti.func
def random_in_unit_disk(stream: ti.i32) -> vec3:
    """Uniform point (x, y, 0) with x^2 + y^2 < 1."""
    p = vec3(1.0, 1.0, 0.0)
    while length_squared(p) >= 1.0:
        x = random_range(stream, -1.0, 1.0)
        y = random_range(stream, -1.0, 1.0)
        p = vec3(x, y, 0.0)
    return p


@ti.kernel
def _draw_floats(count: ti.i32, stream: ti.i32):
    ti.loop_config(serialize=True)
    for i in range(count):
        _sample_buffer[i] = random_float(stream)


def sample_floats(count: int, stream: int = 0) -> list[float]:
    """Draw ``count`` values from one stream on the host.

    Raises:
        ValueError: If count or stream is outside the supported range.
    """
    if not 0 <= count <= MAX_STREAMS:
        raise ValueError(f"count must be in [0, {MAX_STREAMS}], got {count}")
    if not 0 <= stream < MAX_STREAMS:
        raise ValueError(f"stream must be in [0, {MAX_STREAMS}), got {stream}")
    _draw_floats(count, stream)
    return [float(v) for v in _sample_buffer.to_numpy()[:count]]
