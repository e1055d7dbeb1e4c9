"""Preview module for render output.

Components:
    image: Pixel grid written by the renderer
    export: 8-bit conversion and PPM/PNG file output

Example:
    >>> from whitted.preview import Image, save_png
    >>> image = Image(4, 3)
    >>> image.set_pixel(0, 0, (1.0, 0.0, 0.0))
    >>> save_png(image, "output.png")
"""

from whitted.preview.export import (
    compute_rmse,
    format_ppm,
    image_to_uint8,
    save_png,
    save_ppm,
    write_ppm,
)
from whitted.preview.image import Image

__all__ = [
    "Image",
    # Export functions
    "image_to_uint8",
    "format_ppm",
    "write_ppm",
    "save_ppm",
    "save_png",
    "compute_rmse",
]
