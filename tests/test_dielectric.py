"""Unit tests for the Dielectric material.

Tests cover:
- Entering/exiting orientation and refraction ratio
- Total internal reflection
- Schlick-weighted stochastic reflection
- Index 1.0 passes light straight through
- Attenuation and host-side scatter records
"""

import math

import taichi as ti


class TestRefractionSetup:
    """Tests for refraction_setup and must_reflect."""

    def test_entering_and_exiting(self):
        from rtweekend.materials.dielectric import refraction_setup

        normals = ti.Vector.field(3, dtype=ti.f32, shape=2)
        ratios = ti.field(dtype=ti.f32, shape=2)
        cosines = ti.field(dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            normal = ti.math.vec3(0.0, 1.0, 0.0)
            _, n0, r0, c0 = refraction_setup(ti.math.vec3(0.0, -2.0, 0.0), normal, 1.5)
            _, n1, r1, c1 = refraction_setup(ti.math.vec3(0.0, 2.0, 0.0), normal, 1.5)
            normals[0] = n0
            normals[1] = n1
            ratios[0] = r0
            ratios[1] = r1
            cosines[0] = c0
            cosines[1] = c1

        test_kernel()
        # Entering: vacuum -> glass, normal kept
        assert abs(normals[0][1] - 1.0) < 1e-6
        assert abs(ratios[0] - 1.0 / 1.5) < 1e-6
        # Exiting: glass -> vacuum, normal flipped to oppose the ray
        assert abs(normals[1][1] + 1.0) < 1e-6
        assert abs(ratios[1] - 1.5) < 1e-6
        # Cosine is measured against the oriented normal, so it is positive
        assert abs(cosines[0] - 1.0) < 1e-6
        assert abs(cosines[1] - 1.0) < 1e-6

    def test_total_internal_reflection_threshold(self):
        from rtweekend.materials.dielectric import must_reflect

        flags = ti.field(dtype=ti.i32, shape=3)

        @ti.kernel
        def test_kernel():
            flags[0] = must_reflect(1.5, 0.5)  # sin = 0.866, 1.5 * 0.866 > 1
            flags[1] = must_reflect(1.5, 0.9)  # sin = 0.436
            flags[2] = must_reflect(1.0, 0.0)  # grazing, ratio 1: exactly 1, not > 1

        test_kernel()
        assert flags[0] == 1
        assert flags[1] == 0
        assert flags[2] == 0


class TestScatterDielectric:
    """Tests for scatter_dielectric."""

    def test_total_internal_reflection_always_reflects(self):
        from rtweekend.materials.dielectric import scatter_dielectric

        n = 128
        directions = ti.Vector.field(3, dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                albedo = ti.math.vec3(1.0, 1.0, 1.0)
                # Inside the glass, 60 degrees from the normal
                incident = ti.math.vec3(ti.sqrt(3.0) / 2.0, 0.5, 0.0)
                normal = ti.math.vec3(0.0, 1.0, 0.0)
                direction, _, _ = scatter_dielectric(albedo, 1.5, incident, normal, i)
                directions[i] = direction

        test_kernel()
        d = directions.to_numpy()
        assert abs(d[:, 0] - math.sqrt(3.0) / 2.0).max() < 1e-5
        assert abs(d[:, 1] + 0.5).max() < 1e-5

    def test_unit_index_passes_straight_through(self):
        from rtweekend.materials.dielectric import scatter_dielectric

        n = 256
        directions = ti.Vector.field(3, dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                albedo = ti.math.vec3(1.0, 1.0, 1.0)
                incident = ti.math.vec3(0.0, -1.0, 0.0)
                normal = ti.math.vec3(0.0, 1.0, 0.0)
                direction, _, _ = scatter_dielectric(albedo, 1.0, incident, normal, i)
                directions[i] = direction

        test_kernel()
        d = directions.to_numpy()
        assert abs(d[:, 1] + 1.0).max() < 1e-5

    def test_normal_incidence_reflects_about_four_percent(self):
        from rtweekend.materials.dielectric import scatter_dielectric

        n = 2048
        reflected = ti.field(dtype=ti.i32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                albedo = ti.math.vec3(1.0, 1.0, 1.0)
                incident = ti.math.vec3(0.0, -1.0, 0.0)
                normal = ti.math.vec3(0.0, 1.0, 0.0)
                direction, _, _ = scatter_dielectric(albedo, 1.5, incident, normal, i)
                reflected[i] = 1 if direction.y > 0.0 else 0

        test_kernel()
        fraction = reflected.to_numpy().mean()
        # r0 = ((1 - 1/1.5) / (1 + 1/1.5))^2 = 0.04
        assert 0.015 < fraction < 0.07

    def test_always_scatters_with_albedo(self):
        from rtweekend.materials.dielectric import scatter_dielectric

        n = 64
        flags = ti.field(dtype=ti.i32, shape=n)
        attenuations = ti.Vector.field(3, dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                albedo = ti.math.vec3(0.9, 0.8, 0.7)
                incident = ti.math.vec3(1.0, -1.0, 0.3)
                normal = ti.math.vec3(0.0, 1.0, 0.0)
                _, attenuation, did_scatter = scatter_dielectric(albedo, 1.5, incident, normal, i)
                flags[i] = did_scatter
                attenuations[i] = attenuation

        test_kernel()
        assert (flags.to_numpy() == 1).all()
        a = attenuations.to_numpy()
        assert abs(a[:, 0] - 0.9).max() < 1e-6
        assert abs(a[:, 2] - 0.7).max() < 1e-6


class TestDielectricHost:
    """Tests for the Dielectric value object."""

    def test_defaults(self):
        from rtweekend.core.color import Color
        from rtweekend.materials.dielectric import Dielectric

        glass = Dielectric(1.5)
        assert glass.albedo == Color(1.0, 1.0, 1.0)
        assert glass.name == "dielectric"
        assert glass.kernel_params() == (Color(1.0, 1.0, 1.0), 1.5)

    def test_scatter_record_refracts_into_glass(self):
        from rtweekend.materials.dielectric import Dielectric
        from rtweekend.scene.hittable import RayHit

        glass = Dielectric(1.5)
        hit = RayHit(p=(0.0, 0.5, 0.0), normal=(0.0, 1.0, 0.0), t=1.0, material=glass)

        seen = set()
        for stream in range(64):
            record = glass.scatter((0.0, -1.0, 0.0), hit, stream=stream)
            assert record is not None
            assert record.origin == (0.0, 0.5, 0.0)
            seen.add(round(record.direction[1]))
        # Mostly transmitted, never anything but straight down or straight up
        assert -1 in seen
        assert seen <= {-1, 1}
