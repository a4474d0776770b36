"""PNG export via Pillow.

Rows are the gamma-corrected Color rows produced by the renderer, top row
first. Channels are quantized exactly as the PPM writer does.
"""

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from rtweekend.core.color import Color


def image_to_uint8(rows: Sequence[Sequence[Color]]) -> npt.NDArray[np.uint8]:
    """Convert Color rows to an (height, width, 3) uint8 array.

    Raises:
        ValueError: If the rows are empty or ragged.
    """
    if not rows:
        raise ValueError("Cannot convert an empty image")
    width = len(rows[0])
    if any(len(row) != width for row in rows):
        raise ValueError("All rows must have the same number of pixels")
    return np.array([[color.to_ints() for color in row] for row in rows], dtype=np.uint8)


def save_png(filepath: str, rows: Sequence[Sequence[Color]]) -> None:
    """Save Color rows as an 8-bit RGB PNG.

    Args:
        filepath: Output file path (should end in .png).
        rows: Rows of colors, top row first.
    """
    pil_image = PILImage.fromarray(image_to_uint8(rows))
    pil_image.save(filepath, format="PNG")


def compute_rmse(a: npt.NDArray, b: npt.NDArray) -> float:
    """Root mean squared error between two images of the same shape.

    Raises:
        ValueError: If the shapes differ.
    """
    if a.shape != b.shape:
        raise ValueError(f"Shape mismatch: {a.shape} vs {b.shape}")
    diff = a.astype(np.float64) - b.astype(np.float64)
    return float(np.sqrt(np.mean(diff * diff)))
