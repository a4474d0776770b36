"""Unit tests for kernel-side world storage and nearest-hit queries.

Tests cover:
- Empty world
- Nearest hit regardless of insertion order
- Ties resolved in favor of the later sphere
- Radius clamping and capacity limits
- load_world material sharing and nested list flattening
"""

import pytest
import taichi as ti


class TestIntersectScene:
    """Tests for intersect_scene via the host query."""

    def test_empty_world_misses(self):
        from rtweekend.scene.intersection import query_scene

        assert query_scene((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), 0.001, float("inf")) is None

    @pytest.mark.parametrize("near_first", [True, False])
    def test_nearest_sphere_wins(self, near_first):
        from rtweekend.scene.intersection import add_sphere, query_scene

        if near_first:
            add_sphere((0.0, 0.0, -2.0), 0.5, material_id=0)
            add_sphere((0.0, 0.0, -5.0), 0.5, material_id=1)
        else:
            add_sphere((0.0, 0.0, -5.0), 0.5, material_id=1)
            add_sphere((0.0, 0.0, -2.0), 0.5, material_id=0)

        t, point, normal, material_id = query_scene(
            (0.0, 0.0, 0.0), (0.0, 0.0, -1.0), 0.001, float("inf")
        )
        assert t == pytest.approx(1.5, abs=1e-5)
        assert point[2] == pytest.approx(-1.5, abs=1e-5)
        assert normal[2] == pytest.approx(1.0, abs=1e-5)
        assert material_id == 0

    def test_tie_goes_to_later_sphere(self):
        from rtweekend.scene.intersection import add_sphere, query_scene

        add_sphere((0.0, 0.0, -2.0), 0.5, material_id=3)
        add_sphere((0.0, 0.0, -2.0), 0.5, material_id=4)

        _, _, _, material_id = query_scene((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), 0.001, 100.0)
        assert material_id == 4

    def test_interval_excludes_near_hits(self):
        from rtweekend.scene.intersection import add_sphere, query_scene

        add_sphere((0.0, 0.0, -2.0), 0.5, material_id=0)
        assert query_scene((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), 0.001, 1.0) is None

    def test_miss_record_in_kernel(self):
        from rtweekend.scene.intersection import intersect_scene, vec3

        hit = ti.field(dtype=ti.i32, shape=())
        material_id = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            for _ in range(1):
                rec = intersect_scene(vec3(0.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0), 0.001, 1e9)
                hit[None] = rec.hit
                material_id[None] = rec.material_id

        test_kernel()
        assert hit[None] == 0
        assert material_id[None] == -1


class TestSceneStorage:
    """Tests for add_sphere / clear_scene."""

    def test_negative_radius_is_clamped(self):
        from rtweekend.scene.intersection import add_sphere, sphere_radii

        idx = add_sphere((0.0, 0.0, 0.0), -3.0)
        assert sphere_radii[idx] == 0.0

    def test_clear_scene(self):
        from rtweekend.scene.intersection import add_sphere, clear_scene, get_sphere_count

        add_sphere((0.0, 0.0, 0.0), 1.0)
        add_sphere((1.0, 0.0, 0.0), 1.0)
        assert get_sphere_count() == 2
        clear_scene()
        assert get_sphere_count() == 0

    def test_capacity(self):
        from rtweekend.scene.intersection import MAX_SPHERES, add_sphere

        for i in range(MAX_SPHERES):
            add_sphere((float(i), 0.0, 0.0), 0.1)
        with pytest.raises(RuntimeError):
            add_sphere((0.0, 0.0, 0.0), 0.1)


class TestLoadWorld:
    """Tests for uploading a HittableList."""

    def test_shared_material_registered_once(self):
        from rtweekend.core.color import Color
        from rtweekend.materials.lambertian import Lambertian
        from rtweekend.materials.metal import Metal
        from rtweekend.materials.registry import get_material_count
        from rtweekend.scene.hittable import HittableList, Sphere
        from rtweekend.scene.intersection import get_sphere_count, load_world, sphere_material_ids

        matte = Lambertian(Color(0.5, 0.5, 0.5))
        shiny = Metal(Color(0.9, 0.9, 0.9), 0.1)
        world = HittableList(
            [
                Sphere((0.0, 0.0, -1.0), 0.5, matte),
                Sphere((1.0, 0.0, -1.0), 0.5, shiny),
                Sphere((2.0, 0.0, -1.0), 0.5, matte),
            ]
        )

        ids = load_world(world)
        assert get_sphere_count() == 3
        assert get_material_count() == 2
        assert ids[id(matte)] == 0
        assert ids[id(shiny)] == 1
        assert [sphere_material_ids[i] for i in range(3)] == [0, 1, 0]

    def test_nested_lists_are_flattened_in_order(self):
        from rtweekend.core.color import Color
        from rtweekend.materials.lambertian import Lambertian
        from rtweekend.scene.hittable import HittableList, Sphere
        from rtweekend.scene.intersection import load_world, sphere_centers

        matte = Lambertian(Color(0.5, 0.5, 0.5))
        inner = HittableList([Sphere((1.0, 0.0, 0.0), 0.5, matte)])
        world = HittableList([Sphere((0.0, 0.0, 0.0), 0.5, matte), inner])
        world.push(Sphere((2.0, 0.0, 0.0), 0.5, matte))

        load_world(world)
        assert [float(sphere_centers[i][0]) for i in range(3)] == [0.0, 1.0, 2.0]

    def test_reload_replaces_previous_world(self):
        from rtweekend.core.color import Color
        from rtweekend.materials.lambertian import Lambertian
        from rtweekend.scene.hittable import HittableList, Sphere
        from rtweekend.scene.intersection import get_sphere_count, load_world

        matte = Lambertian(Color(0.5, 0.5, 0.5))
        load_world(HittableList([Sphere((0.0, 0.0, 0.0), 0.5, matte)] * 3))
        load_world(HittableList([Sphere((0.0, 0.0, 0.0), 0.5, matte)]))
        assert get_sphere_count() == 1
