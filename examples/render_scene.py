#!/usr/bin/env python3
"""Render one of the preset scenes to a PNG file.

Usage:
    python -m examples.render_scene [options]

Options:
    --scene NAME        Preset scene (default: double_horizon)
    --width WIDTH       Image width in pixels (default: 480)
    --height HEIGHT     Image height in pixels (default: 270)
    --samples SAMPLES   Number of samples per pixel (default: 100)
    --depth DEPTH       Maximum bounces per ray (default: 50)
    --workers N         CPU threads per image row (default: 1)
    --aperture A        Lens aperture, material_showcase only (default: 0)
    --seed SEED         Taichi random seed (default: Taichi default)
    --normals           Shade by surface normal instead of path tracing
    --output OUTPUT     Output file path (default: output.png)
    --preview           Show the result in a Matplotlib window
    --quiet             Suppress progress output

Example:
    python -m examples.render_scene --scene material_showcase --samples 50
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    from src.pathtracer.scene.presets import SCENES

    parser = argparse.ArgumentParser(
        description="Render a preset scene with the Monte Carlo path tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        choices=sorted(SCENES),
        default="double_horizon",
        help="Preset scene (default: double_horizon)",
    )
    parser.add_argument("--width", type=int, default=480, help="Image width in pixels (default: 480)")
    parser.add_argument("--height", type=int, default=270, help="Image height in pixels (default: 270)")
    parser.add_argument(
        "--samples", type=int, default=100, help="Number of samples per pixel (default: 100)"
    )
    parser.add_argument("--depth", type=int, default=50, help="Maximum bounces per ray (default: 50)")
    parser.add_argument("--workers", type=int, default=1, help="CPU threads per image row (default: 1)")
    parser.add_argument(
        "--aperture",
        type=float,
        default=0.0,
        help="Lens aperture, material_showcase only (default: 0)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Taichi random seed")
    parser.add_argument(
        "--normals", action="store_true", help="Shade by surface normal instead of path tracing"
    )
    parser.add_argument(
        "--output", type=str, default="output.png", help="Output file path (default: output.png)"
    )
    parser.add_argument("--preview", action="store_true", help="Show the result in a window")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser.parse_args()


def render_scene(args: argparse.Namespace) -> Path:
    """Render the selected scene and save it.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports so Taichi is initialized first
    from src.pathtracer.camera.thin_lens import Camera
    from src.pathtracer.core.renderer import Renderer, RenderSettings
    from src.pathtracer.preview.export import save_png
    from src.pathtracer.scene.presets import SCENES

    settings = RenderSettings(
        width=args.width,
        height=args.height,
        samples_per_pixel=args.samples,
        max_depth=args.depth,
        workers=args.workers,
    )

    factory = SCENES[args.scene]
    if args.scene == "material_showcase":
        scene, camera_settings = factory(settings.aspect_ratio, aperture=args.aperture)
    else:
        scene, camera_settings = factory(settings.aspect_ratio)

    if not args.quiet:
        print(f"Rendering {args.scene} ({settings.width}x{settings.height}, "
              f"{settings.samples_per_pixel} spp)...")

    renderer = Renderer(
        scene.world,
        Camera.from_settings(camera_settings),
        settings,
        shade="normals" if args.normals else "path",
    )

    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        if not args.quiet:
            elapsed = time.time() - start_time
            progress_pct = (current / target) * 100 if target > 0 else 0
            print(
                f"\r  Progress: {current}/{target} rows ({progress_pct:.1f}%) - {elapsed:.1f}s",
                end="",
                flush=True,
            )

    pixels = renderer.render(callback=progress_callback)

    if not args.quiet:
        print()  # Newline after progress

    output_file = save_png(pixels, args.output)

    if not args.quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {time.time() - start_time:.2f}s")

    if args.preview:
        from src.pathtracer.preview.display import show_preview

        show_preview(pixels, title=f"{args.scene} - {settings.samples_per_pixel} spp")

    return output_file


def taichi_options(args: argparse.Namespace) -> dict:
    """Keyword arguments for ti.init beyond the backend choice."""
    options = {}
    if args.seed is not None:
        options["random_seed"] = args.seed
    return options


def main() -> int:
    """Main entry point."""
    args = parse_args()
    options = taichi_options(args)

    # Try GPU first, fall back to CPU. Default float type (f32) on both so
    # every backend compiles the same kernels.
    try:
        ti.init(arch=ti.gpu, **options)
        if not args.quiet:
            print("Using GPU backend")
    except Exception:
        ti.init(arch=ti.cpu, **options)
        if not args.quiet:
            print("Using CPU backend")

    try:
        render_scene(args)
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
