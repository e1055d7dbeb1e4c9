"""Render entry point with row-batched progress reporting.

render() uploads a Scene into the Taichi fields and shades every pixel with
the render_rows kernel. The kernel's outer loop over (row, column) is
parallelized by Taichi and each task writes only its own pixel, so the
output does not depend on scheduling and repeated renders are bit-identical.

Rows are submitted in batches so that progress can be reported between
kernel launches: after each batch the number of remaining scanlines is
logged at DEBUG level and the optional callback is invoked.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from whitted.core.render import render, render_progressive
    >>> from whitted.scene.demo_scenes import create_scene
    >>>
    >>> scene = create_scene("scene3", aspect_ratio=4 / 3)
    >>> image = render(scene, 160, 120, enable_reflection=True)
    >>>
    >>> for done, total in render_progressive(scene, image):
    ...     print(f"{done}/{total} rows")
"""

import logging
import time
from collections.abc import Callable, Generator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from whitted.core.integrator import DEFAULT_MAX_DEPTH, render_rows, validate_depth
from whitted.preview.image import Image

if TYPE_CHECKING:
    from whitted.scene.manager import Scene

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]

DEFAULT_ROWS_PER_BATCH = 10


@dataclass
class RenderSettings:
    """Options for one render invocation.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        scene: Name of a demo scene, or a path to a JSON scene file.
        enable_reflection: Whether mirror reflection rays are traced.
        enable_textures: Accepted for compatibility; textures are not supported.
        max_depth: Recursion budget for primary rays.
        output: Output file path, or None to write PPM to stdout.
    """

    width: int = 800
    height: int = 600
    scene: str = "scene1"
    enable_reflection: bool = False
    enable_textures: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH
    output: str | None = None

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def validate(self) -> None:
        """Check the settings.

        Raises:
            ValueError: If the image size or depth is invalid.
        """
        _validate_size(self.width, self.height)
        validate_depth(self.max_depth)


def _validate_size(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")


def _check_camera(scene: "Scene") -> None:
    if scene.camera is None:
        raise RuntimeError("Camera not set")


def render_progressive(
    scene: "Scene",
    image: Image,
    enable_reflection: bool = False,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    rows_per_batch: int = DEFAULT_ROWS_PER_BATCH,
) -> Generator[tuple[int, int], None, None]:
    """Render a scene into image, yielding progress after each batch of rows.

    This is a generator-based alternative to render() with callbacks,
    useful for driving a UI or checking for cancellation between batches.

    Args:
        scene: The scene to render; it must have a camera.
        image: Destination image; its size sets the render resolution.
        enable_reflection: Whether mirror reflection rays are traced.
        max_depth: Recursion budget for primary rays.
        rows_per_batch: Number of rows shaded per kernel launch.

    Yields:
        Tuple of (rows_done, total_rows).

    Raises:
        RuntimeError: If the scene has no camera.
        ValueError: If max_depth or rows_per_batch is invalid.
    """
    _check_camera(scene)
    validate_depth(max_depth)
    if rows_per_batch <= 0:
        raise ValueError(f"rows_per_batch must be positive, got {rows_per_batch}")

    scene.upload()

    height = image.height
    reflection_flag = 1 if enable_reflection else 0
    row = 0
    while row < height:
        row_end = min(row + rows_per_batch, height)
        render_rows(image.pixels, row, row_end, reflection_flag, max_depth)
        row = row_end
        logger.debug("Scanlines remaining: %d", height - row)
        yield (row, height)


def render(
    scene: "Scene",
    width: int,
    height: int,
    enable_reflection: bool = False,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    image: Image | None = None,
    rows_per_batch: int = DEFAULT_ROWS_PER_BATCH,
    callback: ProgressCallback | None = None,
) -> Image:
    """Render a scene through its camera.

    Args:
        scene: The scene to render; it must have a camera.
        width: Image width in pixels.
        height: Image height in pixels.
        enable_reflection: Whether mirror reflection rays are traced.
        max_depth: Recursion budget for primary rays, in [0, MAX_SUPPORTED_DEPTH].
        image: Optional destination image of size width x height. A new one
            is created if omitted.
        rows_per_batch: Number of rows shaded per kernel launch.
        callback: Optional callback called after each batch with
            (rows_done, total_rows).

    Returns:
        The rendered Image.

    Raises:
        RuntimeError: If the scene has no camera.
        ValueError: If the size, depth or destination image is invalid.
    """
    _check_camera(scene)
    _validate_size(width, height)
    validate_depth(max_depth)

    if image is None:
        image = Image(width, height)
    elif image.width != width or image.height != height:
        raise ValueError(
            f"Image is {image.width}x{image.height}, expected {width}x{height}"
        )

    logger.info(
        "Rendering %dx%d (reflection=%s, max_depth=%d, %d primitives, %d lights)",
        width,
        height,
        enable_reflection,
        max_depth,
        scene.get_primitive_count(),
        scene.get_light_count(),
    )
    start = time.perf_counter()

    for rows_done, total_rows in render_progressive(
        scene,
        image,
        enable_reflection,
        max_depth=max_depth,
        rows_per_batch=rows_per_batch,
    ):
        if callback is not None:
            callback(rows_done, total_rows)

    logger.info("Render finished in %.2fs", time.perf_counter() - start)
    return image
