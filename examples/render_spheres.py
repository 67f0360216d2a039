#!/usr/bin/env python3
"""Render the demo sphere scene.

This script renders the reference scene (four spheres over a checkerboard,
three point lights) with the Whitted ray tracer and writes it to a PNG.

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH       Image width in pixels (default: 1024)
    --height HEIGHT     Image height in pixels (default: 768)
    --fov DEGREES       Vertical field of view in degrees (default: 90)
    --depth DEPTH       Recursion depth (default: 4)
    --output OUTPUT     Output file path (default: output.png)
    --arch {cpu,gpu}    Taichi backend (default: cpu)
    --quiet             Suppress progress output

Example:
    python -m examples.render_spheres --width 640 --height 480 --depth 3
"""

from __future__ import annotations

import argparse
import math
import sys
import time
from dataclasses import replace
from pathlib import Path

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the demo sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=1024,
        help="Image width in pixels (default: 1024)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=768,
        help="Image height in pixels (default: 768)",
    )
    parser.add_argument(
        "--fov",
        type=float,
        default=90.0,
        help="Vertical field of view in degrees (default: 90)",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=4,
        help="Recursion depth (default: 4)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="output.png",
        help="Output file path (default: output.png)",
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
    return parser.parse_args()


def render_spheres(
    width: int = 1024,
    height: int = 768,
    fov_degrees: float = 90.0,
    depth: int = 4,
    output_path: str = "output.png",
    quiet: bool = False,
) -> Path:
    """Render the demo scene and save it to a file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        fov_degrees: Vertical field of view in degrees.
        depth: Recursion depth of primary rays.
        output_path: Output file path (PNG).
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from whitted.core.renderer import RenderConfig, Renderer
    from whitted.preview.export import save_png
    from whitted.scene.demo import create_demo_scene

    config = RenderConfig(
        width=width,
        height=height,
        fov=math.radians(fov_degrees),
        max_depth=depth,
    )

    if not quiet:
        print(f"Creating demo scene ({width}x{height}, depth {depth})...")

    scene, camera = create_demo_scene()
    renderer = Renderer(config)
    renderer.set_scene(scene)
    renderer.set_camera(replace(camera, fov=config.fov))

    start_time = time.time()
    image = renderer.render()

    output_file = Path(output_path)
    save_png(image, str(output_file))

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")
        print("rendering done")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    ti.init(arch=ti.gpu if args.arch == "gpu" else ti.cpu)

    try:
        render_spheres(
            width=args.width,
            height=args.height,
            fov_degrees=args.fov,
            depth=args.depth,
            output_path=args.output,
            quiet=args.quiet,
        )
        return 0
    except (OSError, RuntimeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
