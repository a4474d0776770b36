"""Image sinks.

Components:
    ppm: Plain (P3) and binary (P6) PPM writers, plus a test gradient
    export: PNG export via Pillow
"""

from .export import compute_rmse, image_to_uint8, save_png
from .ppm import (
    format_header,
    gradient_rows,
    write_header,
    write_header_binary,
    write_pixels,
    write_pixels_binary,
    write_ppm,
    write_ppm_binary,
)

__all__ = [
    "compute_rmse",
    "format_header",
    "gradient_rows",
    "image_to_uint8",
    "save_png",
    "write_header",
    "write_header_binary",
    "write_pixels",
    "write_pixels_binary",
    "write_ppm",
    "write_ppm_binary",
]
