#!/usr/bin/env python3
"""Render every built-in demo scene to a PNG file.

This script renders scene1 to scene4 side by side in one output directory,
once without and once with mirror reflections, and prints a per-scene timing
summary.

Usage:
    python -m examples.render_demo_scenes [options]

Options:
    --width WIDTH       Image width in pixels (default: 400)
    --height HEIGHT     Image height in pixels (default: 300)
    --output-dir DIR    Directory for the PNG files (default: renders)
    --quiet             Suppress progress output

Example:
    python -m examples.render_demo_scenes --width 200 --height 150
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
        description="Render every built-in demo scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=400,
        help="Image width in pixels (default: 400)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=300,
        help="Image height in pixels (default: 300)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="renders",
        help="Directory for the PNG files (default: renders)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_demo_scenes(
    width: int = 400,
    height: int = 300,
    output_dir: str = "renders",
    quiet: bool = False,
) -> list[Path]:
    """Render each demo scene with and without reflections.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        output_dir: Directory the PNG files are written to.
        quiet: If True, suppress progress output.

    Returns:
        Paths of the saved image files.
    """
    # Lazy imports to allow Taichi initialization first
    from whitted.preview.export import save_png
    from whitted.scene.demo_scenes import create_scene, list_scenes

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    saved = []

    for name in list_scenes():
        scene = create_scene(name, aspect_ratio=width / height)
        for reflection in (False, True):
            suffix = "_reflect" if reflection else ""
            output_file = out / f"{name}{suffix}.png"

            def progress_callback(done: int, total: int) -> None:
                if not quiet:
                    print(f"\r  {output_file.name}: {done}/{total} rows", end="", flush=True)

            start_time = time.time()
            image = scene.render(width, height, reflection, callback=progress_callback)
            save_png(image, output_file)
            saved.append(output_file)

            if not quiet:
                print(f" - {time.time() - start_time:.2f}s")

    if not quiet:
        print(f"Saved {len(saved)} images to: {out.absolute()}")

    return saved


def main() -> int:
    """Main entry point."""
    args = parse_args()

    ti.init(arch=ti.cpu, default_fp=ti.f64)

    try:
        render_demo_scenes(
            width=args.width,
            height=args.height,
            output_dir=args.output_dir,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
