"""Tests for the material registry and kernel-side dispatch."""

import pytest
import taichi as ti


class TestAddMaterial:
    def test_ids_are_sequential(self):
        from rtweekend.materials.dielectric import Dielectric
        from rtweekend.materials.lambertian import Lambertian
        from rtweekend.materials.metal import Metal
        from rtweekend.materials.registry import add_material, get_material_count

        assert add_material(Lambertian((0.8, 0.3, 0.3))) == 0
        assert add_material(Metal((0.8, 0.8, 0.8), 0.3)) == 1
        assert add_material(Dielectric(1.5)) == 2
        assert get_material_count() == 3

    def test_parameters_are_stored(self):
        from rtweekend.materials.metal import Metal
        from rtweekend.materials.registry import (
            add_material,
            material_albedos,
            material_params,
        )

        idx = add_material(Metal((0.8, 0.6, 0.2), 1.7))
        albedo = material_albedos[idx]
        assert abs(albedo[0] - 0.8) < 1e-6
        assert abs(albedo[2] - 0.2) < 1e-6
        # Fuzziness is clamped to 1 before it reaches the table
        assert abs(material_params[idx] - 1.0) < 1e-6

    def test_type_lookup(self):
        from rtweekend.materials.dielectric import Dielectric
        from rtweekend.materials.lambertian import Lambertian
        from rtweekend.materials.material import MaterialType
        from rtweekend.materials.registry import add_material, get_material_type_of

        matte = add_material(Lambertian())
        glass = add_material(Dielectric(1.5))
        assert get_material_type_of(matte) == MaterialType.LAMBERTIAN
        assert get_material_type_of(glass) == MaterialType.DIELECTRIC

        with pytest.raises(IndexError):
            get_material_type_of(5)

    def test_rejects_non_material(self):
        from rtweekend.materials.registry import add_material

        with pytest.raises(TypeError):
            add_material("lambertian")

    def test_clear(self):
        from rtweekend.materials.lambertian import Lambertian
        from rtweekend.materials.registry import (
            add_material,
            clear_materials,
            get_material_count,
        )

        add_material(Lambertian())
        clear_materials()
        assert get_material_count() == 0
        assert add_material(Lambertian()) == 0


class TestScatterMaterial:
    def test_dispatch_by_tag(self):
        from rtweekend.materials.dielectric import Dielectric
        from rtweekend.materials.lambertian import Lambertian
        from rtweekend.materials.metal import Metal
        from rtweekend.materials.registry import add_material, scatter_material

        add_material(Lambertian((0.5, 0.5, 0.5)))
        add_material(Metal((0.9, 0.9, 0.9), 0.0))
        add_material(Dielectric(1.0))

        directions = ti.Vector.field(3, dtype=ti.f32, shape=3)
        attenuations = ti.Vector.field(3, dtype=ti.f32, shape=3)
        flags = ti.field(dtype=ti.i32, shape=3)

        @ti.kernel
        def test_kernel():
            for k in range(3):
                incident = ti.math.vec3(0.0, -1.0, 0.0)
                normal = ti.math.vec3(0.0, 1.0, 0.0)
                direction, attenuation, did_scatter = scatter_material(k, incident, normal, k)
                directions[k] = direction
                attenuations[k] = attenuation
                flags[k] = did_scatter

        test_kernel()

        # Lambertian: away from the surface, albedo attenuation
        assert directions[0][1] > 0.0
        assert abs(attenuations[0][0] - 0.5) < 1e-6
        # Metal: mirror bounce straight back up
        assert abs(directions[1][1] - 1.0) < 1e-6
        assert abs(attenuations[1][0] - 0.9) < 1e-6
        # Dielectric with index 1: straight through
        assert abs(directions[2][1] + 1.0) < 1e-6
        assert abs(attenuations[2][0] - 1.0) < 1e-6
        assert flags.to_numpy().tolist() == [1, 1, 1]

    def test_host_scatter_absorbed_returns_none(self):
        from rtweekend.materials.metal import Metal
        from rtweekend.scene.hittable import RayHit

        # Fuzzy metal grazing the surface: some perturbations point inward
        metal = Metal((0.8, 0.8, 0.8), 1.0)
        hit = RayHit(p=(0.0, 0.0, 0.0), normal=(0.0, 1.0, 0.0), t=1.0, material=metal)
        outcomes = [metal.scatter((1.0, -0.01, 0.0), hit, stream=s) for s in range(64)]

        assert any(record is None for record in outcomes)
        assert any(record is not None for record in outcomes)
        for record in outcomes:
            if record is not None:
                assert record.direction[1] > 0.0
