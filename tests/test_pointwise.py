from typing import Optional

import numpy as np
import pytest

from filterlab.core import PixelBuffer
from filterlab.processing import (
    BrightnessFilter,
    GlassFilter,
    GrayscaleFilter,
    InvertFilter,
    SepiaFilter,
    WavesHorizontalFilter,
    WavesVerticalFilter,
)


def coordinate_image(width: int, height: int, alpha: Optional[int] = None) -> PixelBuffer:
    """R = x, G = y, B = 0 (plus a constant alpha if given)."""
    channels = 3 if alpha is None else 4
    arr = np.zeros((height, width, channels), dtype=np.uint8)
    arr[..., 0] = np.arange(width)[np.newaxis, :]
    arr[..., 1] = np.arange(height)[:, np.newaxis]
    if alpha is not None:
        arr[..., 3] = alpha
    return PixelBuffer.from_array(arr)


def test_invert_twice_is_identity(random_image):
    f = InvertFilter()
    once = f.process(random_image)
    assert once.get_pixel(0, 0) == tuple(255 - c for c in random_image.get_pixel(0, 0))
    assert f.process(once) == random_image


def test_grayscale_equal_channels_and_weights(random_image):
    result = GrayscaleFilter().process(random_image)
    assert (result.pixels[..., 0] == result.pixels[..., 1]).all()
    assert (result.pixels[..., 1] == result.pixels[..., 2]).all()

    image = PixelBuffer.solid(1, 1, (100, 150, 200))
    assert GrayscaleFilter().process(image).get_pixel(0, 0) == (137, 137, 137)
    white = PixelBuffer.solid(1, 1, (255, 255, 255))
    assert GrayscaleFilter().process(white).get_pixel(0, 0) == (255, 255, 255)


@pytest.mark.parametrize(
    "color,expected",
    [
        ((100, 150, 200), (167, 144, 122)),
        ((255, 255, 255), (255, 255, 240)),
        ((0, 0, 0), (30, 7, 0)),
    ],
)
def test_sepia_tone(color, expected):
    image = PixelBuffer.solid(1, 1, color)
    assert SepiaFilter().process(image).get_pixel(0, 0) == expected


def test_brightness_adds_and_clamps():
    image = PixelBuffer.solid(4, 4, (200, 100, 50))
    result = BrightnessFilter().process(image)
    assert result == PixelBuffer.solid(4, 4, (255, 200, 150))


def test_color_filters_make_rgba_opaque():
    image = PixelBuffer.solid(2, 2, (10, 20, 30, 5))
    result = BrightnessFilter().process(image)
    assert result.get_pixel(1, 1) == (110, 120, 130, 255)
    assert InvertFilter().process(image).get_pixel(0, 0) == (245, 235, 225, 255)


def test_waves_horizontal_shifts_by_row():
    image = coordinate_image(40, 20)
    result = WavesHorizontalFilter().process(image)

    # sin(0) == 0: row 0 untouched
    assert result.pixels[0].tolist() == image.pixels[0].tolist()
    # row 15 is a quarter period: shifted by 20 then clamped at the right edge
    assert result.get_pixel(0, 15) == (20, 15, 0)
    assert result.get_pixel(30, 15) == (39, 15, 0)


def test_waves_vertical_shifts_whole_columns_along_x():
    image = coordinate_image(40, 6)
    result = WavesVerticalFilter().process(image)

    assert result.pixels[:, 0].tolist() == image.pixels[:, 0].tolist()
    # int(7 + 20*sin(2*pi*7/30)) == 26, identical for every row
    np.testing.assert_array_equal(result.pixels[:, 7], image.pixels[:, 26])


def test_displacement_keeps_source_alpha():
    image = coordinate_image(8, 8, alpha=77)
    assert (WavesHorizontalFilter().process(image).pixels[..., 3] == 77).all()
    assert (GlassFilter(seed=3).process(image).pixels[..., 3] == 77).all()


def test_glass_samples_within_five_pixels():
    image = coordinate_image(20, 20)
    result = GlassFilter(seed=11).process(image)

    xs = np.arange(20)[np.newaxis, :]
    ys = np.arange(20)[:, np.newaxis]
    assert (np.abs(result.pixels[..., 0].astype(int) - xs) <= 5).all()
    assert (np.abs(result.pixels[..., 1].astype(int) - ys) <= 5).all()


def test_glass_seed_makes_runs_reproducible(random_image):
    f = GlassFilter(seed=42)
    first = f.process(random_image)
    assert f.process(random_image) == first
    assert GlassFilter(seed=42).process(random_image) == first


def test_glass_seed_parameter_validation():
    f = GlassFilter()
    assert f.param_value("seed") == -1
    assert f.set_parameter("seed", 7)
    assert not f.set_parameter("seed", -2)


@pytest.mark.parametrize(
    "filter_class",
    [InvertFilter, GrayscaleFilter, SepiaFilter, BrightnessFilter,
     WavesHorizontalFilter, WavesVerticalFilter],
)
def test_pixel_path_matches_column_path(filter_class, random_rgba_image):
    f = filter_class()
    result = f.process(random_rgba_image)
    for x in range(random_rgba_image.width):
        for y in range(random_rgba_image.height):
            color = tuple(f.pixel_color(random_rgba_image, x, y))
            assert color == result.get_pixel(x, y)[:len(color)]


def test_unseeded_glass_differs_between_runs():
    image = coordinate_image(30, 30)
    f = GlassFilter()
    assert f.param_value("seed") == -1
    assert f.process(image) != f.process(image)
