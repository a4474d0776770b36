"""Command-line entry point.

Usage:
    rtweekend [options]
    python -m rtweekend [options]

Options:
    --scene NAME        two_spheres, showcase, random_spheres or gradient
                        (default: two_spheres)
    --width WIDTH       Image width in pixels (default: 400)
    --height HEIGHT     Image height in pixels (default: width / aspect)
    --aspect RATIO      Aspect ratio used when --height is omitted
    --samples SAMPLES   Samples per pixel (default: 100)
    --max-depth DEPTH   Maximum scatter events per ray (default: 50)
    --seed SEED         Seed for the random streams and scene layout
    --output PATH       Output path, "-" for stdout (default: -). A .png
                        suffix writes PNG instead of PPM.
    --binary            Write binary P6 instead of plain P3
    --arch ARCH         Taichi backend, cpu or gpu (default: cpu)
    --quiet             Suppress progress output

Example:
    rtweekend --scene random_spheres --width 600 --samples 50 --output cover.ppm

Progress goes to stderr, one "Scanlines remaining: N" line per scanline, so
the image can be piped from stdout.
"""

from __future__ import annotations

import argparse
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import taichi as ti

from rtweekend.config import (
    DEFAULT_ASPECT_RATIO,
    DEFAULT_MAX_DEPTH,
    DEFAULT_SAMPLES_PER_PIXEL,
    DEFAULT_WIDTH,
    RenderConfig,
)

SCENE_CHOICES = ("two_spheres", "showcase", "random_spheres", "gradient")

# random_spheres looks best wider than 16:9
SCENE_ASPECT = {"random_spheres": 3.0 / 2.0}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rtweekend",
        description="Render a sphere scene by Monte Carlo path tracing.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        choices=SCENE_CHOICES,
        default="two_spheres",
        help="Scene to render (default: two_spheres)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=DEFAULT_WIDTH,
        help=f"Image width in pixels (default: {DEFAULT_WIDTH})",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Image height in pixels (default: width / aspect)",
    )
    parser.add_argument(
        "--aspect",
        type=float,
        default=None,
        help="Aspect ratio used when --height is omitted (default: per scene)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=DEFAULT_SAMPLES_PER_PIXEL,
        help=f"Samples per pixel (default: {DEFAULT_SAMPLES_PER_PIXEL})",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f"Maximum scatter events per ray (default: {DEFAULT_MAX_DEPTH})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for random streams and scene layout (default: OS entropy)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="-",
        help='Output path, "-" for stdout (default: -)',
    )
    parser.add_argument(
        "--binary",
        action="store_true",
        help="Write binary P6 instead of plain P3",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)


def config_from_args(args: argparse.Namespace) -> RenderConfig:
    """Turn parsed arguments into a validated RenderConfig.

    Raises:
        ValueError: If the resulting configuration is invalid.
    """
    aspect = args.aspect
    if aspect is None:
        aspect = SCENE_ASPECT.get(args.scene, DEFAULT_ASPECT_RATIO)
    if aspect <= 0:
        raise ValueError(f"aspect must be positive, got {aspect}")
    height = args.height if args.height is not None else int(args.width / aspect)
    return RenderConfig(
        width=args.width,
        height=height,
        samples_per_pixel=args.samples,
        max_depth=args.max_depth,
        seed=args.seed,
    ).validate()


def _log(message: str, quiet: bool) -> None:
    if not quiet:
        print(message, file=sys.stderr, flush=True)


@contextmanager
def _open_sink(output: str, binary: bool):
    """Yield a stream for the output path; "-" means stdout."""
    if output == "-":
        stream = sys.stdout.buffer if binary else sys.stdout
        yield stream
        stream.flush()
    else:
        with open(output, "wb" if binary else "w", encoding=None if binary else "ascii") as f:
            yield f


def render_to(args: argparse.Namespace, config: RenderConfig) -> None:
    """Build the scene, render it and write the result.

    Raises:
        OSError: If the output cannot be written.
    """
    # Lazy imports to allow Taichi initialization first
    from rtweekend.output.export import save_png
    from rtweekend.output.ppm import gradient_rows, write_ppm, write_ppm_binary

    def progress(j: int) -> None:
        _log(f"Scanlines remaining: {j}", args.quiet)

    as_png = args.output != "-" and Path(args.output).suffix.lower() == ".png"

    if args.scene == "gradient":
        rows = []
        scanline_indices = range(config.height - 1, -1, -1)
        for j, row in zip(scanline_indices, gradient_rows(config.width, config.height)):
            progress(j)
            rows.append(row)
        if as_png:
            save_png(args.output, rows)
        else:
            with _open_sink(args.output, args.binary) as out:
                writer = write_ppm_binary if args.binary else write_ppm
                writer(out, config.width, config.height, rows)
        return

    from rtweekend.core.renderer import Renderer
    from rtweekend.scene.presets import get_scene

    world, camera = get_scene(args.scene)(config.aspect_ratio, seed=args.seed)
    renderer = Renderer(world, camera, config)
    _log(
        f"Rendering {args.scene} ({config.width}x{config.height}, "
        f"{config.samples_per_pixel} spp, depth {config.max_depth})...",
        args.quiet,
    )

    if as_png:
        save_png(args.output, renderer.render_rows(progress))
    else:
        with _open_sink(args.output, args.binary) as out:
            renderer.render(out, callback=progress, binary=args.binary)


def main(argv: Optional[list[str]] = None, init_backend: bool = True) -> int:
    """Main entry point.

    Args:
        argv: Arguments to parse instead of sys.argv.
        init_backend: Call ti.init() for the requested arch. Pass False when
            Taichi is already initialized in this process; a second
            ti.init() would invalidate every field declared so far.

    Returns:
        The process exit status: 0 on success, 1 on an output error, 2 on
        an invalid configuration.
    """
    args = parse_args(argv)

    try:
        config = config_from_args(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if init_backend:
        ti.init(arch=ti.gpu if args.arch == "gpu" else ti.cpu)

    start_time = time.time()
    try:
        render_to(args, config)
    except OSError as e:
        print(f"Error: could not write output: {e}", file=sys.stderr)
        return 1

    _log("Done.", args.quiet)
    _log(f"Total time: {time.time() - start_time:.2f}s", args.quiet)
    return 0


if __name__ == "__main__":
    sys.exit(main())
