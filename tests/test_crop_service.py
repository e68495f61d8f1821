import itertools

import pytest

from favicon_forge.models.icon_model import ImageCrop, PixelRect
from favicon_forge.services.crop_service import CropNormalizer, round_half_up

DIMENSIONS = [1, 2, 3, 17, 100, 333, 1024]
RECTS = [
    ImageCrop(0, 0, 1, 1),
    ImageCrop(0.25, 0, 0.5, 1),
    ImageCrop(0.999, 0.999, 0.5, 0.5),
    ImageCrop(1.5, -0.2, 0, 0),
    ImageCrop(-1, -1, 3, 3),
    ImageCrop(0.5, 0.5, 0, 0.0000001),
]


@pytest.fixture
def normalizer():
    return CropNormalizer()


def test_round_half_up_rounds_halves_upwards():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4999) == 2
    assert round_half_up(-0.5) == 0


def test_default_crop_is_centered_square(normalizer):
    crop = normalizer.default_crop(200, 100)
    assert crop == ImageCrop(x=0.25, y=0.0, width=0.5, height=1.0)
    assert normalizer.to_pixel_rect(crop, 200, 100) == PixelRect(50, 0, 100, 100)


def test_default_crop_for_portrait(normalizer):
    crop = normalizer.default_crop(100, 300)
    assert normalizer.to_pixel_rect(crop, 100, 300) == PixelRect(0, 100, 100, 100)


def test_normalized_crop_converts_percent(normalizer):
    crop = normalizer.normalized_crop({"x": 10, "y": 20, "width": 50, "height": 40}, width=10, height=10)
    assert crop == ImageCrop(x=0.1, y=0.2, width=0.5, height=0.4)


def test_normalized_crop_without_rect_falls_back_to_default(normalizer):
    assert normalizer.normalized_crop(None, width=200, height=100) == normalizer.default_crop(200, 100)


def test_normalized_crop_clamps_out_of_range(normalizer):
    crop = normalizer.normalized_crop({"x": 80, "y": -10, "width": 50, "height": 150}, width=10, height=10)
    assert crop.x == pytest.approx(0.8)
    assert crop.y == 0
    assert crop.x + crop.width <= 1
    assert crop.y + crop.height <= 1


@pytest.mark.parametrize("width,height,crop", list(itertools.product(DIMENSIONS, DIMENSIONS, RECTS)))
def test_pixel_rect_always_inside_source(normalizer, width, height, crop):
    sx, sy, sw, sh = normalizer.to_pixel_rect(crop, width, height)
    assert sx >= 0 and sy >= 0
    assert sw >= 1 and sh >= 1
    assert sx + sw <= width
    assert sy + sh <= height


def test_clamped_crop_keeps_positive_extent():
    crop = ImageCrop(1.5, 2, 0, -1).clamped()
    assert 0 <= crop.x < 1 and 0 <= crop.y < 1
    assert crop.width > 0 and crop.height > 0
