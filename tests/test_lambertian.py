"""Unit tests for the Lambertian material.

Tests cover:
- Scattered directions stay on the side the ray came from
- Attenuation always equals albedo
- Never absorbs
- Host-side scatter record originates at the hit point
"""

import pytest
import taichi as ti


class TestScatterLambertian:
    """Tests for scatter_lambertian in kernels."""

    def test_scatter_hemisphere_facing_ray(self):
        from rtweekend.materials.lambertian import scatter_lambertian

        n = 256
        dots = ti.field(dtype=ti.f32, shape=n)
        flags = ti.field(dtype=ti.i32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                albedo = ti.math.vec3(0.5, 0.5, 0.5)
                incident = ti.math.vec3(0.0, -1.0, 0.0)
                normal = ti.math.vec3(0.0, 1.0, 0.0)
                direction, _, did_scatter = scatter_lambertian(albedo, incident, normal, i)
                dots[i] = direction.dot(normal)
                flags[i] = did_scatter

        test_kernel()
        assert (dots.to_numpy() >= 0.0).all()
        assert (flags.to_numpy() == 1).all()

    def test_ray_from_inside_scatters_inward(self):
        from rtweekend.materials.lambertian import scatter_lambertian

        n = 128
        dots = ti.field(dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                albedo = ti.math.vec3(0.5, 0.5, 0.5)
                # Ray travelling along the outward normal hits the surface from inside
                incident = ti.math.vec3(0.0, 1.0, 0.0)
                normal = ti.math.vec3(0.0, 1.0, 0.0)
                direction, _, _ = scatter_lambertian(albedo, incident, normal, i)
                dots[i] = direction.dot(normal)

        test_kernel()
        assert (dots.to_numpy() <= 0.0).all()

    def test_attenuation_is_albedo(self):
        from rtweekend.materials.lambertian import scatter_lambertian

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            _, attenuation, _ = scatter_lambertian(
                ti.math.vec3(0.8, 0.3, 0.1),
                ti.math.vec3(0.0, 0.0, -1.0),
                ti.math.vec3(0.0, 0.0, 1.0),
                0,
            )
            result[None] = attenuation

        test_kernel()
        a = result[None]
        assert abs(a[0] - 0.8) < 1e-6
        assert abs(a[1] - 0.3) < 1e-6
        assert abs(a[2] - 0.1) < 1e-6

    def test_degenerate_direction_falls_back_to_outward_normal(self):
        from rtweekend.materials.lambertian import diffuse_direction

        results = ti.Vector.field(3, dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            normal = ti.math.vec3(0.0, 1.0, 0.0)
            # Hit from inside: the facing normal is -y, an offset of +y cancels it
            results[0] = diffuse_direction(
                normal, ti.math.vec3(0.0, 1.0, 0.0), ti.math.vec3(0.0, 1.0, 0.0)
            )
            # Non-degenerate sums are left alone
            results[1] = diffuse_direction(
                normal, ti.math.vec3(0.0, -1.0, 0.0), ti.math.vec3(1.0, 0.0, 0.0)
            )

        test_kernel()
        assert results.to_numpy()[0].tolist() == [0.0, 1.0, 0.0]
        assert results.to_numpy()[1].tolist() == [1.0, 1.0, 0.0]
class TestLambertianHost:
    """Tests for the Lambertian value object."""

    def test_name_and_params(self):
        from rtweekend.core.color import Color
        from rtweekend.materials.lambertian import Lambertian
        from rtweekend.materials.material import MaterialType

        material = Lambertian(Color(0.2, 0.4, 0.6))
        assert material.name == "lambertian"
        assert material.material_type is MaterialType.LAMBERTIAN
        assert material.kernel_params() == (Color(0.2, 0.4, 0.6), 0.0)

    def test_tuple_albedo_is_clamped_color(self):
        from rtweekend.core.color import Color
        from rtweekend.materials.lambertian import Lambertian

        assert Lambertian((2.0, 0.5, -1.0)).albedo == Color(1.0, 0.5, 0.0)

    def test_scatter_record(self):
        from rtweekend.core.color import Color
        from rtweekend.materials.lambertian import Lambertian
        from rtweekend.scene.hittable import RayHit

        material = Lambertian(Color(0.7, 0.7, 0.7))
        hit = RayHit(p=(0.0, 0.0, -0.5), normal=(0.0, 0.0, 1.0), t=0.5, material=material)

        for stream in range(16):
            record = material.scatter((0.0, 0.0, -1.0), hit, stream=stream)
            assert record is not None
            assert record.origin == (0.0, 0.0, -0.5)
            assert list(record.attenuation) == pytest.approx([0.7, 0.7, 0.7], abs=1e-6)
            assert record.direction[2] >= 0.0
