"""Tests for ThumbnailGenerator class."""

import io
import os

from PIL import Image

from thumbswitch.image_size import ImageSize
from thumbswitch.thumbnail_generator import (
    ThumbnailGenerator, constrain_dimensions, resize_dimensions)


class TestResizeDimensions:
    """Tests for the derivative geometry."""

    def test_fit_inside_box(self):
        assert resize_dimensions(1000, 500, 300, 300) == (0, 0, 1000, 500, 300, 150)

    def test_unconstrained_height(self):
        assert resize_dimensions(1000, 500, 768, 0) == (0, 0, 1000, 500, 768, 384)

    def test_crop_from_centre(self):
        assert resize_dimensions(1000, 500, 150, 150, crop=True) == (250, 0, 500, 500, 150, 150)

    def test_crop_with_zero_height_keeps_ratio(self):
        assert resize_dimensions(1000, 500, 400, 0, crop=True) == (0, 0, 1000, 500, 400, 200)

    def test_no_upscale(self):
        assert resize_dimensions(200, 100, 300, 300) is None
        assert resize_dimensions(200, 100, 300, 300, crop=True) is None

    def test_no_target_dimensions(self):
        assert resize_dimensions(1000, 500, 0, 0) is None

    def test_same_size_as_original(self):
        assert resize_dimensions(300, 300, 300, 300) is None


def test_constrain_dimensions():
    assert constrain_dimensions(1000, 500) == (1000, 500)
    assert constrain_dimensions(1000, 500, 0, 100) == (200, 100)
    assert constrain_dimensions(1000, 500, 1980, 9999) == (1000, 500)


class TestThumbnailGenerator:
    """Tests for ThumbnailGenerator class."""

    def test_init_defaults(self):
        gen = ThumbnailGenerator()

        assert gen.quality == 82

    def test_make_subsize_writes_file(self, tmp_path, sample_image_bytes):
        gen = ThumbnailGenerator()
        img = Image.open(io.BytesIO(sample_image_bytes))

        result = gen.make_subsize(img, ImageSize('medium', 300, 300), 'abcd1234', '.jpg', str(tmp_path))

        assert result == {
            'file': 'abcd1234-300x150.jpg',
            'width': 300,
            'height': 150,
            'mime-type': 'image/jpeg',
        }
        written = Image.open(os.path.join(str(tmp_path), 'abcd1234-300x150.jpg'))
        assert written.size == (300, 150)

    def test_make_subsize_crops(self, tmp_path, sample_image_bytes):
        gen = ThumbnailGenerator()
        img = Image.open(io.BytesIO(sample_image_bytes))

        result = gen.make_subsize(img, ImageSize('thumbnail', 150, 150, True), 'abcd1234', '.jpg', str(tmp_path))

        assert (result['width'], result['height']) == (150, 150)

    def test_make_subsize_skips_small_original(self, tmp_path):
        gen = ThumbnailGenerator()
        img = Image.new('RGB', (100, 100))

        result = gen.make_subsize(img, ImageSize('medium', 300, 300), 'small', '.jpg', str(tmp_path))

        assert result is None
        assert os.listdir(str(tmp_path)) == []

    def test_encode_png_keeps_format(self, sample_png_bytes):
        gen = ThumbnailGenerator()
        img = Image.open(io.BytesIO(sample_png_bytes))

        data, content_type = gen.encode(img, '.png')

        assert content_type == 'image/png'
        assert Image.open(io.BytesIO(data)).format == 'PNG'

    def test_encode_jpeg_flattens_alpha(self, sample_png_bytes):
        gen = ThumbnailGenerator()
        img = Image.open(io.BytesIO(sample_png_bytes))

        data, content_type = gen.encode(img, '.jpg')

        assert content_type == 'image/jpeg'
        assert Image.open(io.BytesIO(data)).mode == 'RGB'
