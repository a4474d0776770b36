"""Host-side scene description: spheres and lists of hittables.

A world is a HittableList whose members are Spheres or further lists. The
renderer uploads it to kernel fields with scene.intersection.load_world();
the ``hit_by`` methods here run the same intersection kernel one ray at a
time and are meant for inspection and tests.

Example:
    >>> world = HittableList()
    >>> world.push(Sphere((0.0, 0.0, -1.0), 0.5, Lambertian(Color(0.8, 0.3, 0.3))))
    >>> hit = world.hit_by((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
    >>> hit.t
    0.5
"""

from __future__ import annotations

import math
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, Union

from rtweekend.materials.material import Material

Vec = tuple[float, float, float]

T_MIN = 0.001
T_MAX = math.inf


@dataclass(frozen=True)
class RayHit:
    """An intersection as seen by Python.

    Attributes:
        p: The hit point.
        normal: Outward unit normal at ``p``.
        t: Ray parameter of the hit.
        material: The material of the surface that was hit (shared, not copied).
    """

    p: Vec
    normal: Vec
    t: float
    material: Material


class Hittable:
    """Anything a ray can be tested against."""

    def hit_by(
        self, origin, direction, t_min: float = T_MIN, t_max: float = T_MAX
    ) -> Optional[RayHit]:
        raise NotImplementedError

    def spheres(self) -> Iterator[Sphere]:
        raise NotImplementedError


class Sphere(Hittable):
    """A sphere with a shared material.

    Args:
        center: Center point as a 3-sequence.
        radius: Radius; negative values are clamped to 0.
        material: Any Material instance.
    """

    def __init__(self, center, radius: float, material: Material):
        self.center: Vec = (float(center[0]), float(center[1]), float(center[2]))
        self.radius = max(float(radius), 0.0)
        self.material = material

    def hit_by(
        self, origin, direction, t_min: float = T_MIN, t_max: float = T_MAX
    ) -> Optional[RayHit]:
        # Deferred: the query kernel declares Taichi fields
        from rtweekend.geometry.sphere import query_sphere

        hit = query_sphere(self.center, self.radius, origin, direction, t_min, t_max)
        if hit is None:
            return None
        return RayHit(p=hit.point, normal=hit.normal, t=hit.t, material=self.material)

    def spheres(self) -> Iterator[Sphere]:
        yield self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sphere):
            return NotImplemented
        return (
            self.center == other.center
            and self.radius == other.radius
            and self.material.name == other.material.name
        )

    def __hash__(self) -> int:
        return hash((self.center, self.radius, self.material.name))

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius}, material={self.material!r})"


class HittableList(Hittable):
    """An ordered collection of hittables, itself hittable.

    push() and clear() are the only mutators. While the list is frozen for a
    render both raise RuntimeError.
    """

    def __init__(self, members: Optional[list[Union[Sphere, HittableList]]] = None):
        self._members: list[Union[Sphere, HittableList]] = []
        self._freeze_depth = 0
        for member in members or []:
            self.push(member)

    @property
    def is_frozen(self) -> bool:
        return self._freeze_depth > 0

    def _check_mutable(self) -> None:
        if self.is_frozen:
            raise RuntimeError("HittableList is frozen while a render is in progress")

    def push(self, member: Union[Sphere, HittableList]) -> None:
        """Append a sphere or a nested list.

        Raises:
            RuntimeError: If the list is frozen.
            TypeError: If ``member`` is not hittable.
        """
        self._check_mutable()
        if not isinstance(member, Hittable):
            raise TypeError(f"Cannot add {type(member).__name__} to a HittableList")
        self._members.append(member)

    def clear(self) -> None:
        self._check_mutable()
        self._members.clear()

    @contextmanager
    def frozen(self):
        """Reject mutation of this list and every nested list during the block."""
        with ExitStack() as stack:
            self._freeze_depth += 1
            stack.callback(self._unfreeze)
            for member in self._members:
                if isinstance(member, HittableList):
                    stack.enter_context(member.frozen())
            yield self

    def _unfreeze(self) -> None:
        self._freeze_depth -= 1

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self):
        return iter(self._members)

    def spheres(self) -> Iterator[Sphere]:
        for member in self._members:
            yield from member.spheres()

    def hit_by(
        self, origin, direction, t_min: float = T_MIN, t_max: float = T_MAX
    ) -> Optional[RayHit]:
        """Nearest hit among all members.

        Members are tested in order and the upper bound shrinks to the best
        hit found so far, so a member at exactly the same t as the current
        best replaces it.
        """
        best: Optional[RayHit] = None
        for member in self._members:
            upper = best.t if best is not None else t_max
            hit = member.hit_by(origin, direction, t_min, upper)
            if hit is not None:
                best = hit
        return best

    def __repr__(self) -> str:
        return f"HittableList({self._members!r})"
