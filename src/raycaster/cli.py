"""Command-line entry point: render a scene to a pixel-map file.

Usage:
    raycaster [SCENE] [options]

SCENE is a JSON scene (.json) or a token stream file (any other suffix).
Without SCENE the built-in demo scene is rendered; with --interactive the
scene is entered on the console.

Options:
    --output OUTPUT     Output file path, .ppm or .png (default: out.ppm)
    --interactive       Enter the scene on the console
    --max-depth N       Maximum reflection depth (default: 4)
    --far-plane F       Render distance (default: 1000)
    --width/--height/--fov  Demo scene camera (ignored for scene files)
    --arch ARCH         Taichi backend, cpu or gpu (default: cpu)
    --show              Show the result in a Matplotlib window
    --quiet             Only report errors

Example:
    raycaster scenes/demo.txt --output demo.ppm --max-depth 5
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="raycaster",
        description="Render a scene of spheres and point lights to an image file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "scene",
        nargs="?",
        type=Path,
        help="Scene file (.json or token stream); default: built-in demo scene",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("out.ppm"),
        help="Output file path, .ppm or .png (default: out.ppm)",
    )
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Enter the scene on the console",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=4,
        help="Maximum reflection depth (default: 4)",
    )
    parser.add_argument(
        "--far-plane",
        type=float,
        default=1000.0,
        help="Render distance; hits beyond it show background (default: 1000)",
    )
    parser.add_argument("--width", type=int, default=1024, help="Demo scene width (default: 1024)")
    parser.add_argument("--height", type=int, default=768, help="Demo scene height (default: 768)")
    parser.add_argument(
        "--fov", type=float, default=60.0, help="Demo scene field of view in degrees (default: 60)"
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Show the rendered image in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only report errors",
    )
    return parser.parse_args(argv)


def init_taichi(arch: str) -> None:
    """Initialize Taichi, falling back to CPU when no GPU backend is available."""
    if arch == "gpu":
        try:
            ti.init(arch=ti.gpu)
            logger.info("Using GPU backend")
            return
        except Exception:
            logger.warning("GPU backend unavailable, using CPU backend")
    ti.init(arch=ti.cpu)


def build_scene(args: argparse.Namespace):
    """Create the SceneManager requested on the command line."""
    # Lazy imports to allow Taichi initialization first
    from raycaster.scene.demo import create_demo_scene
    from raycaster.scene.loader import load_scene_file, prompt_scene
    from raycaster.scene.manager import SceneManager

    if args.interactive:
        config = prompt_scene()
    elif args.scene is not None:
        config = load_scene_file(args.scene)
    else:
        logger.info("No scene file given, rendering the demo scene")
        return create_demo_scene(width=args.width, height=args.height, fov=args.fov)

    scene = SceneManager()
    scene.from_config(config)
    return scene


def run(args: argparse.Namespace) -> Path:
    """Build the scene, render it and write the output file.

    Returns:
        Path to the saved image file.
    """
    from raycaster.core.integrator import RenderSettings
    from raycaster.core.renderer import Renderer

    settings = RenderSettings(max_depth=args.max_depth, far_plane=args.far_plane)
    scene = build_scene(args)

    start_time = time.time()
    renderer = Renderer(scene, settings)
    image = renderer.render()
    output_file = renderer.save(args.output)

    if not args.quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {time.time() - start_time:.2f}s")

    if args.show:
        from raycaster.preview.display import show_preview

        show_preview(image)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    init_taichi(args.arch)

    try:
        run(args)
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
