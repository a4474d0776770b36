"""Geometric primitives.

Components:
    sphere: SphereGeometry, HitRecord and the hit_sphere kernel function

The sphere module declares fields for its host-side query; import it after
ti.init().
"""
