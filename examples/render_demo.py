#!/usr/bin/env python3
"""Render the built-in demo scene from Python.

This script shows the library API without the command-line wrapper: it
builds the demo scene, renders it at several reflection depths and writes
one pixel map per depth.

Usage:
    python -m examples.render_demo [--width WIDTH] [--height HEIGHT] [--output-dir DIR]

Example:
    python -m examples.render_demo --width 320 --height 240
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Render the demo scene at several depths.")
    parser.add_argument("--width", type=int, default=640, help="Image width (default: 640)")
    parser.add_argument("--height", type=int, default=480, help="Image height (default: 480)")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("."),
        help="Directory for the output files (default: current directory)",
    )
    return parser.parse_args()


def render_depths(width: int, height: int, output_dir: Path) -> list[Path]:
    """Render the demo scene with max depth 0 through 4.

    Returns:
        Paths of the saved images.
    """
    # Lazy imports to allow Taichi initialization first
    from raycaster.core.integrator import RenderSettings
    from raycaster.core.renderer import Renderer
    from raycaster.scene.demo import create_demo_scene

    scene = create_demo_scene(width=width, height=height)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for depth in range(5):
        renderer = Renderer(scene, RenderSettings(max_depth=depth))
        renderer.render()
        path = renderer.save(output_dir / f"demo_depth{depth}.ppm")
        print(f"depth {depth}: {path}")
        paths.append(path)
    return paths


def main() -> int:
    """Main entry point."""
    args = parse_args()
    ti.init(arch=ti.cpu)
    render_depths(args.width, args.height, args.output_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
