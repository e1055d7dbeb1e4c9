"""Command-line entry point: render a scene to a PPM or PNG image.

Usage:
    whitted-render [options]

Options:
    -w, --width WIDTH     Image width in pixels (default: 800)
    --height HEIGHT       Image height in pixels (default: 600)
    -s, --scene SCENE     Demo scene name or path to a JSON scene file (default: scene1)
    -r, --reflection      Trace mirror reflections
    -t, --textures        Accepted for compatibility; textures are not rendered
    --max-depth DEPTH     Recursion budget for primary rays (default: 5)
    -o, --output OUTPUT   Output file; .png writes PNG, anything else PPM.
                          PPM goes to stdout when omitted.
    --quiet               Only log warnings and errors
    --verbose             Log render progress

Example:
    whitted-render --scene scene3 --reflection -o scene3.png
    whitted-render -w 320 --height 240 > scene1.ppm
"""

from __future__ import annotations

import argparse
import contextlib
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from whitted import init_taichi

if TYPE_CHECKING:
    from whitted.core.render import RenderSettings
    from whitted.scene.manager import Scene

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="whitted-render",
        description="A ray tracer that renders 3D scenes to PPM images.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-w",
        "--width",
        type=int,
        default=800,
        help="Image width in pixels (default: 800)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=600,
        help="Image height in pixels (default: 600)",
    )
    parser.add_argument(
        "-s",
        "--scene",
        type=str,
        default="scene1",
        help="Demo scene name or path to a JSON scene file (default: scene1)",
    )
    parser.add_argument(
        "-r",
        "--reflection",
        action="store_true",
        help="Trace mirror reflections",
    )
    parser.add_argument(
        "-t",
        "--textures",
        action="store_true",
        help="Accepted for compatibility; textures are not rendered",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=5,
        help="Recursion budget for primary rays (default: 5)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Output file path; .png writes PNG, otherwise PPM (default: stdout)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors",
    )
    verbosity.add_argument(
        "--verbose",
        action="store_true",
        help="Log render progress",
    )
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)


def configure_logging(quiet: bool = False, verbose: bool = False) -> None:
    """Send log records to stderr; stdout may carry the image."""
    level = logging.INFO
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def settings_from_args(args: argparse.Namespace) -> RenderSettings:
    """Build validated RenderSettings from parsed arguments.

    Raises:
        ValueError: If the image size or depth is invalid.
    """
    from whitted.core.render import RenderSettings

    settings = RenderSettings(
        width=args.width,
        height=args.height,
        scene=args.scene,
        enable_reflection=args.reflection,
        enable_textures=args.textures,
        max_depth=args.max_depth,
        output=args.output,
    )
    settings.validate()
    return settings


def load_scene(settings: RenderSettings) -> Scene:
    """Load the scene named by the settings.

    A name ending in .json is read as a scene file; a file without a camera
    gets the default camera for the output aspect ratio. Any other name is
    looked up in the demo scene catalog.

    Raises:
        OSError: If the scene file cannot be read.
        ValueError: If the scene file is invalid.
    """
    from whitted.scene.demo_scenes import create_scene
    from whitted.scene.manager import Scene

    if settings.scene.endswith(".json"):
        path = Path(settings.scene)
        logger.info("Loading scene file %s", path)
        with open(path, encoding="utf-8") as f:
            scene = Scene.from_dict(json.load(f))
        if scene.camera is None:
            from whitted.camera.pinhole import PinholeCamera

            scene.set_camera(
                PinholeCamera(
                    position=(0.0, 0.0, 0.0),
                    look_at=(0.0, 0.0, -1.0),
                    up=(0.0, 1.0, 0.0),
                    vfov=45.0,
                    aspect_ratio=settings.aspect_ratio,
                )
            )
        return scene

    return create_scene(settings.scene, settings.aspect_ratio)


def run(settings: RenderSettings) -> None:
    """Render according to settings and write the image.

    Taichi must already be initialized.
    """
    from whitted.core.render import render
    from whitted.preview.export import save_png, save_ppm, write_ppm

    if settings.enable_textures:
        logger.debug("Textures are not supported; --textures is ignored")

    scene = load_scene(settings)
    image = render(
        scene,
        settings.width,
        settings.height,
        settings.enable_reflection,
        max_depth=settings.max_depth,
    )

    if settings.output is None:
        write_ppm(image, sys.stdout)
        return

    output = Path(settings.output)
    if output.suffix.lower() == ".png":
        save_png(image, output)
    else:
        save_ppm(image, output)
    logger.info("Saved to %s", output.absolute())


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    configure_logging(quiet=args.quiet, verbose=args.verbose)

    try:
        # Keep Taichi start-up banners off stdout, which may carry the image
        with contextlib.redirect_stdout(sys.stderr):
            init_taichi(log_level="warn")
        settings = settings_from_args(args)
        run(settings)
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
