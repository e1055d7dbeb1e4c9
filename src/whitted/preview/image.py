"""Pixel grid that render() writes into.

The Image wraps a float64 NumPy array of shape (height, width, 3). Row 0 is
the top of the picture and column 0 the left edge, matching the order in
which PPM and PNG files store pixels. Colors are stored unclamped; export
functions clamp when converting to 8-bit.
"""

import numpy as np
import numpy.typing as npt


class Image:
    """A width x height grid of RGB colors.

    Attributes:
        width: Number of columns.
        height: Number of rows.
    """

    def __init__(self, width: int, height: int) -> None:
        """Create a black image.

        Raises:
            ValueError: If width or height is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
        self._width = int(width)
        self._height = int(height)
        self._pixels = np.zeros((self._height, self._width, 3), dtype=np.float64)

    @classmethod
    def from_array(cls, pixels: npt.ArrayLike) -> "Image":
        """Create an image from an array of shape (height, width, 3).

        Raises:
            ValueError: If the array does not have that shape.
        """
        array = np.asarray(pixels, dtype=np.float64)
        if array.ndim != 3 or array.shape[2] != 3:
            raise ValueError(f"Expected an array of shape (height, width, 3), got {array.shape}")
        image = cls(array.shape[1], array.shape[0])
        image._pixels[...] = array
        return image

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def pixels(self) -> npt.NDArray[np.float64]:
        """The underlying (height, width, 3) float64 array (not a copy)."""
        return self._pixels

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def set_pixel(self, x: int, y: int, color: tuple[float, float, float]) -> None:
        """Set the color at column x, row y. Out-of-range writes are ignored."""
        if self._in_bounds(x, y):
            self._pixels[y, x] = color

    def get_pixel(self, x: int, y: int) -> tuple[float, float, float]:
        """Get the color at column x, row y; black when out of range."""
        if not self._in_bounds(x, y):
            return (0.0, 0.0, 0.0)
        r, g, b = self._pixels[y, x]
        return (float(r), float(g), float(b))

    def fill(self, color: tuple[float, float, float]) -> None:
        """Set every pixel to color."""
        self._pixels[...] = color
