#!/usr/bin/env python3
"""Render the random spheres cover scene to PNG.

Builds the scene with a fixed layout seed, renders it scanline by scanline
and saves the result with Pillow. Unlike the rtweekend CLI this prints a
single updating progress line with a scanline rate.

Usage:
    python examples/render_cover.py [options]

Options:
    --width WIDTH       Image width in pixels (default: 1200)
    --samples SAMPLES   Number of samples per pixel (default: 500)
    --seed SEED         Seed for the scene layout and sampling (default: 2)
    --output OUTPUT     Output file path (default: cover.png)
    --quiet             Suppress progress output

Example:
    python examples/render_cover.py --width 600 --samples 50
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the random spheres cover scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=1200,
        help="Image width in pixels (default: 1200)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=500,
        help="Number of samples per pixel (default: 500)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=2,
        help="Seed for the scene layout and sampling (default: 2)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="cover.png",
        help="Output file path (default: cover.png)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_cover(
    width: int = 1200,
    num_samples: int = 500,
    seed: int = 2,
    output_path: str = "cover.png",
    quiet: bool = False,
) -> Path:
    """Render the cover scene and save it as PNG.

    Args:
        width: Image width in pixels; height follows the 3:2 aspect ratio.
        num_samples: Number of samples per pixel.
        seed: Seed for both the scene layout and the random streams.
        output_path: Output file path (PNG).
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from rtweekend.config import RenderConfig
    from rtweekend.core.renderer import Renderer
    from rtweekend.output.export import save_png
    from rtweekend.scene.presets import random_spheres_scene

    config = RenderConfig.from_aspect(width, 3.0 / 2.0, samples_per_pixel=num_samples, seed=seed)
    world, camera = random_spheres_scene(config.aspect_ratio, seed=seed)
    renderer = Renderer(world, camera, config)

    if not quiet:
        print(f"Rendering {renderer!r}...")

    start_time = time.time()

    def progress_callback(j: int) -> None:
        if not quiet:
            done = config.height - 1 - j
            elapsed = time.time() - start_time
            rate = done / elapsed if elapsed > 0 else 0
            print(
                f"\r  Scanlines remaining: {j:4d} - {rate:.1f} rows/s",
                end="",
                flush=True,
            )

    rows = renderer.render_rows(progress_callback)

    if not quiet:
        print()  # Newline after progress

    output_file = Path(output_path)
    save_png(str(output_file), rows)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    # Falls back to CPU on its own when no GPU backend is available
    ti.init(arch=ti.gpu)

    try:
        render_cover(
            width=args.width,
            num_samples=args.samples,
            seed=args.seed,
            output_path=args.output,
            quiet=args.quiet,
        )
        return 0
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
