"""Tests for the preview module.

This module tests the preview/image and preview/export functionality including:
- Pixel storage and bounds handling
- 8-bit conversion (clamping and truncation)
- PPM formatting and file output
- PNG export
- RMSE computation
"""

import io

import numpy as np
import pytest
from PIL import Image as PILImage


class TestImage:
    """Test the Image pixel grid."""

    def test_new_image_is_black(self):
        from whitted.preview.image import Image

        image = Image(3, 2)
        assert image.pixels.shape == (2, 3, 3)
        assert np.all(image.pixels == 0.0)

    @pytest.mark.parametrize("width, height", [(0, 1), (1, 0), (-2, 2)])
    def test_invalid_dimensions(self, width, height):
        from whitted.preview.image import Image

        with pytest.raises(ValueError):
            Image(width, height)

    def test_set_and_get_pixel(self):
        from whitted.preview.image import Image

        image = Image(3, 2)
        image.set_pixel(2, 1, (0.1, 0.2, 0.3))
        assert image.get_pixel(2, 1) == pytest.approx((0.1, 0.2, 0.3))
        # Column x, row y
        assert image.pixels[1, 2] == pytest.approx([0.1, 0.2, 0.3])

    def test_out_of_range_access_is_ignored(self):
        """Test that out-of-range writes are dropped and reads return black."""
        from whitted.preview.image import Image

        image = Image(2, 2)
        image.set_pixel(5, 0, (1.0, 1.0, 1.0))
        image.set_pixel(-1, 0, (1.0, 1.0, 1.0))
        assert np.all(image.pixels == 0.0)
        assert image.get_pixel(0, 7) == (0.0, 0.0, 0.0)

    def test_fill(self):
        from whitted.preview.image import Image

        image = Image(2, 2)
        image.fill((0.5, 0.25, 1.0))
        assert image.get_pixel(1, 1) == pytest.approx((0.5, 0.25, 1.0))

    def test_from_array(self):
        from whitted.preview.image import Image

        image = Image.from_array(np.ones((2, 5, 3)))
        assert (image.width, image.height) == (5, 2)

        with pytest.raises(ValueError):
            Image.from_array(np.ones((2, 5)))


class TestImageToUint8:
    """Test 8-bit conversion."""

    def test_full_range(self):
        from whitted.preview.export import image_to_uint8
        from whitted.preview.image import Image

        image = Image.from_array([[[0.0, 0.5, 1.0]]])
        result = image_to_uint8(image)
        assert result.dtype == np.uint8
        # 0.5 * 255 = 127.5 truncates to 127
        assert result[0, 0].tolist() == [0, 127, 255]

    def test_truncates_rather_than_rounds(self):
        from whitted.preview.export import image_to_uint8
        from whitted.preview.image import Image

        image = Image.from_array([[[0.999, 0.0039, 0.004]]])
        assert image_to_uint8(image)[0, 0].tolist() == [254, 0, 1]

    def test_clamps_out_of_range(self):
        from whitted.preview.export import image_to_uint8
        from whitted.preview.image import Image

        image = Image.from_array([[[-0.5, 2.0, 1.5]]])
        assert image_to_uint8(image)[0, 0].tolist() == [0, 255, 255]

    def test_gamma(self):
        from whitted.preview.export import image_to_uint8
        from whitted.preview.image import Image

        image = Image.from_array([[[0.25, 0.25, 0.25]]])
        # 0.25^(1/2) = 0.5
        assert image_to_uint8(image, gamma=2.0)[0, 0].tolist() == [127, 127, 127]

        with pytest.raises(ValueError):
            image_to_uint8(image, gamma=0.0)


class TestPPM:
    """Test ASCII PPM output."""

    def test_format(self):
        from whitted.preview.export import format_ppm
        from whitted.preview.image import Image

        image = Image(2, 2)
        image.set_pixel(0, 0, (1.0, 0.0, 0.0))
        image.set_pixel(1, 1, (1.0, 1.0, 1.0))

        assert format_ppm(image) == "P3\n2 2\n255\n255 0 0\n0 0 0\n0 0 0\n255 255 255\n"

    def test_write_to_stream(self):
        from whitted.preview.export import write_ppm
        from whitted.preview.image import Image

        stream = io.StringIO()
        write_ppm(Image(1, 1), stream)
        assert stream.getvalue().splitlines() == ["P3", "1 1", "255", "0 0 0"]

    def test_write_defaults_to_stdout(self, capsys):
        from whitted.preview.export import write_ppm
        from whitted.preview.image import Image

        write_ppm(Image(1, 1))
        assert capsys.readouterr().out.startswith("P3\n1 1\n255\n")

    def test_save(self, tmp_path):
        from whitted.preview.export import format_ppm, save_ppm
        from whitted.preview.image import Image

        image = Image(3, 1)
        image.fill((0.2, 0.4, 0.6))
        path = tmp_path / "out.ppm"
        save_ppm(image, path)

        assert path.read_text(encoding="ascii") == format_ppm(image)


class TestPNGExport:
    """Test PNG export via Pillow."""

    def test_save_png(self, tmp_path):
        from whitted.preview.export import save_png
        from whitted.preview.image import Image

        image = Image(4, 3)
        image.set_pixel(3, 0, (1.0, 0.5, 0.0))
        path = tmp_path / "out.png"
        save_png(image, path)

        with PILImage.open(path) as loaded:
            assert loaded.size == (4, 3)
            assert loaded.mode == "RGB"
            assert loaded.getpixel((3, 0)) == (255, 127, 0)
            assert loaded.getpixel((0, 0)) == (0, 0, 0)


class TestRMSE:
    def test_identical(self):
        from whitted.preview.export import compute_rmse

        a = np.random.default_rng(0).random((4, 4, 3))
        assert compute_rmse(a, a.copy()) == 0.0

    def test_known_value(self):
        from whitted.preview.export import compute_rmse

        assert compute_rmse(np.zeros((2, 2, 3)), np.full((2, 2, 3), 0.5)) == pytest.approx(0.5)

    def test_shape_mismatch(self):
        from whitted.preview.export import compute_rmse

        with pytest.raises(ValueError):
            compute_rmse(np.zeros((2, 2, 3)), np.zeros((3, 2, 3)))
