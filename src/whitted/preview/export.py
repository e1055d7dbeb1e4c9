"""Image export utilities for rendered images.

This module converts rendered images to 8-bit color and writes them out.

Supported formats:
    - PPM (ASCII P3, written by hand)
    - PNG (8-bit RGB via Pillow)

Conversion to 8-bit clamps each channel to [0, 1], scales by 255 and
truncates toward zero, so 1.0 maps to 255 and 0.999 to 254.

Example:
    >>> from whitted.preview.export import save_png, save_ppm
    >>> from whitted.scene.demo_scenes import create_scene
    >>>
    >>> image = create_scene("scene1").render(400, 300)
    >>> save_ppm(image, "output.ppm")
    >>> save_png(image, "output.png")
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from whitted.preview.image import Image

PPM_MAX_VALUE = 255


def image_to_uint8(image: Image, *, gamma: float = 1.0) -> npt.NDArray[np.uint8]:
    """Convert an image to uint8 for export.

    Args:
        image: The image to convert.
        gamma: Gamma correction exponent (1.0 leaves values linear).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.

    Raises:
        ValueError: If gamma is not positive.
    """
    if gamma <= 0.0:
        raise ValueError(f"Gamma must be positive, got {gamma}")

    clamped = np.clip(image.pixels, 0.0, 1.0)
    if gamma != 1.0:
        clamped = np.power(clamped, 1.0 / gamma)

    # astype truncates toward zero
    return (clamped * PPM_MAX_VALUE).astype(np.uint8)


def format_ppm(image: Image) -> str:
    """Serialize an image as an ASCII PPM (P3) document.

    The header is followed by one "r g b" line per pixel, rows top to bottom.
    """
    data = image_to_uint8(image).reshape(-1, 3)
    lines = [f"P3\n{image.width} {image.height}\n{PPM_MAX_VALUE}"]
    lines.extend(f"{r} {g} {b}" for r, g, b in data.tolist())
    return "\n".join(lines) + "\n"


def write_ppm(image: Image, stream: TextIO | None = None) -> None:
    """Write an image as ASCII PPM to a text stream (stdout by default)."""
    if stream is None:
        stream = sys.stdout
    stream.write(format_ppm(image))


def save_ppm(image: Image, filepath: str | Path) -> None:
    """Save an image as an ASCII PPM file."""
    with open(filepath, "w", encoding="ascii") as f:
        write_ppm(image, f)


def save_png(image: Image, filepath: str | Path, *, gamma: float = 1.0) -> None:
    """Save an image as an 8-bit RGB PNG file.

    Args:
        image: The image to save.
        filepath: Output file path (should end in .png).
        gamma: Gamma correction exponent. The default keeps the same values
            as the PPM output.
    """
    pil_image = PILImage.fromarray(image_to_uint8(image, gamma=gamma))
    pil_image.save(filepath)


def compute_rmse(
    image_a: npt.NDArray[np.floating[npt.NBitBase]],
    image_b: npt.NDArray[np.floating[npt.NBitBase]],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
