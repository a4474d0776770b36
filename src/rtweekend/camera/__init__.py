"""Camera models.

Components:
    thin_lens: Camera, Orientation and Structure, plus kernel-side get_ray

thin_lens declares Taichi fields; import it after ti.init().
"""
