"""Scanline renderer driving the color estimator.

The Renderer uploads a world and camera, then produces the image one
scanline at a time from the top row (j = height - 1) down to the bottom
(j = 0). Before each scanline the random streams are reseeded from
(seed, j), so a fixed seed reproduces the same image exactly, whichever
scanlines are rendered and in whatever order.

Example:
    >>> import sys
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from rtweekend.config import RenderConfig
    >>> from rtweekend.core.renderer import Renderer
    >>> from rtweekend.scene.presets import two_spheres_scene
    >>>
    >>> world, camera = two_spheres_scene(16.0 / 9.0)
    >>> renderer = Renderer(world, camera, RenderConfig(width=400, height=225, seed=1))
    >>> renderer.render(sys.stdout)

Note:
    Declares no fields itself but imports modules that do; import only after
    ti.init().
"""

from collections.abc import Callable, Generator
from typing import BinaryIO, Optional, TextIO, Union

import numpy as np

from rtweekend.camera.thin_lens import Camera, setup_camera
from rtweekend.config import RenderConfig
from rtweekend.core.color import Color
from rtweekend.core.integrator import get_scanline, render_scanline, sample_pixel
from rtweekend.core.sampler import seed_streams
from rtweekend.output.ppm import (
    write_header,
    write_header_binary,
    write_pixels,
    write_pixels_binary,
)
from rtweekend.scene.hittable import HittableList
from rtweekend.scene.intersection import load_world

# Callback receives the index of the scanline about to be rendered, which is
# also the number of scanlines left after it
ProgressCallback = Callable[[int], None]

Row = list[Color]


def gamma_correct(linear: np.ndarray) -> np.ndarray:
    """Gamma 2 encoding: the square root of each clamped channel."""
    return np.sqrt(np.clip(linear, 0.0, 1.0))


class Renderer:
    """Renders a world through a camera with a fixed configuration.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        config: The validated render configuration.
    """

    def __init__(self, world: HittableList, camera: Camera, config: RenderConfig) -> None:
        """Validate the configuration and upload the scene.

        Raises:
            ValueError: If the configuration is invalid.
            RuntimeError: If the world does not fit in the scene fields.
        """
        self._config = config.validate()
        self._world = world
        self._camera = camera
        self.prepare()

    @property
    def width(self) -> int:
        return self._config.width

    @property
    def height(self) -> int:
        return self._config.height

    @property
    def config(self) -> RenderConfig:
        return self._config

    @property
    def world(self) -> HittableList:
        return self._world

    @property
    def camera(self) -> Camera:
        return self._camera

    def prepare(self) -> None:
        """(Re)upload world and camera to the kernel fields."""
        load_world(self._world)
        setup_camera(self._camera)

    def render_scanline(self, j: int) -> Row:
        """Render row j (0 is the bottom) and return gamma-corrected colors.

        Raises:
            ValueError: If j is not a valid row index.
        """
        if not 0 <= j < self.height:
            raise ValueError(f"Scanline {j} outside image of height {self.height}")
        self.prepare()
        return self._trace_scanline(j)

    def _trace_scanline(self, j: int) -> Row:
        config = self._config
        seed_streams(config.seed, j)
        render_scanline(j, config.width, config.height, config.samples_per_pixel, config.max_depth)
        row = gamma_correct(get_scanline(config.width))
        return [Color.from_array(pixel) for pixel in row]

    def scanlines(
        self, callback: Optional[ProgressCallback] = None
    ) -> Generator[tuple[int, Row], None, None]:
        """Yield (j, row) from the top scanline to the bottom one.

        The world and camera are uploaded first, so the image always shows
        this renderer's current world even if another Renderer ran since.
        The world is frozen until the generator finishes or is closed.

        Args:
            callback: Called with j before each scanline is rendered.
        """
        with self._world.frozen():
            self.prepare()
            for j in range(self.height - 1, -1, -1):
                if callback is not None:
                    callback(j)
                yield j, self._trace_scanline(j)

    def render(
        self,
        out: Union[TextIO, BinaryIO],
        callback: Optional[ProgressCallback] = None,
        binary: bool = False,
    ) -> None:
        """Render the full image as PPM into ``out``.

        Pixels are written as each scanline completes. Write errors are not
        retried; they propagate to the caller.

        Args:
            out: Text stream for P3, binary stream for P6.
            callback: Progress callback, see scanlines().
            binary: Emit binary P6 instead of plain P3.
        """
        if binary:
            write_header_binary(out, self.width, self.height)
        else:
            write_header(out, self.width, self.height)
        for _, row in self.scanlines(callback):
            if binary:
                write_pixels_binary(out, row)
            else:
                write_pixels(out, row)

    def render_rows(self, callback: Optional[ProgressCallback] = None) -> list[Row]:
        """Render the full image and return its rows, top row first."""
        return [row for _, row in self.scanlines(callback)]

    def render_pixel(self, i: int, j: int) -> Color:
        """Render a single pixel the way render_scanline() would.

        The samples are gathered one at a time from Python and averaged with
        Color.merge_samples(); this is slow and meant for inspection.

        Raises:
            ValueError: If (i, j) lies outside the image.
        """
        if not (0 <= i < self.width and 0 <= j < self.height):
            raise ValueError(f"Pixel ({i}, {j}) outside {self.width}x{self.height} image")
        self.prepare()
        config = self._config
        seed_streams(config.seed, j)
        samples = [
            sample_pixel(i, j, config.width, config.height, config.max_depth, stream=i)
            for _ in range(config.samples_per_pixel)
        ]
        mean = Color.merge_samples(samples)
        return Color.from_array(gamma_correct(mean.to_array()))

    def __repr__(self) -> str:
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"samples_per_pixel={self._config.samples_per_pixel}, "
            f"max_depth={self._config.max_depth}, spheres={sum(1 for _ in self._world.spheres())})"
        )
