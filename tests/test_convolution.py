import numpy as np
import pytest

from filterlab.core import PixelBuffer
from filterlab.processing import (
    BlurFilter,
    BorderSelectFilter,
    EmbossFilter,
    FilterParameter,
    GaussianFilter,
    MatrixFilter,
    MotionBlurFilter,
    ParameterType,
    SharpenFilter,
    SobelFilter,
)
from filterlab.processing.kernels import (
    check_kernel,
    gaussian_kernel,
    motion_blur_kernel,
)

NEIGHBOURHOOD_FILTERS = [
    BlurFilter,
    GaussianFilter,
    SobelFilter,
    SharpenFilter,
    EmbossFilter,
    MotionBlurFilter,
    BorderSelectFilter,
]


@pytest.mark.parametrize("color", [(200, 100, 50), (255, 255, 255), (0, 0, 0), (17, 33, 250)])
def test_box_blur_keeps_flat_image(color):
    image = PixelBuffer.solid(5, 4, color)
    assert BlurFilter().process(image) == image


def test_motion_blur_and_gaussian_keep_flat_image():
    image = PixelBuffer.solid(6, 6, (200, 100, 50))
    assert MotionBlurFilter().process(image) == image
    assert GaussianFilter().process(image) == image


def test_one_pixel_image_clamps_all_neighbours():
    image = PixelBuffer.solid(1, 1, (10, 20, 30))

    assert BlurFilter().process(image).get_pixel(0, 0) == (10, 20, 30)
    assert GaussianFilter().process(image).get_pixel(0, 0) == (10, 20, 30)
    assert SharpenFilter().process(image).get_pixel(0, 0) == (10, 20, 30)
    assert MotionBlurFilter().process(image).get_pixel(0, 0) == (10, 20, 30)
    assert SobelFilter().process(image).get_pixel(0, 0) == (0, 0, 0)
    assert BorderSelectFilter().process(image).get_pixel(0, 0) == (0, 0, 0)
    assert EmbossFilter().process(image).get_pixel(0, 0) == (100, 100, 100)


def test_sobel_responds_to_vertical_gradient_only(grey_image):
    rows = grey_image([[0, 0, 0], [10, 10, 10], [20, 20, 20]])
    result = SobelFilter().process(rows)
    assert result.get_pixel(1, 1) == (80, 80, 80)
    # Top and bottom rows see a replicated edge
    assert result.get_pixel(0, 0) == (40, 40, 40)
    assert result.get_pixel(2, 2) == (40, 40, 40)

    columns = grey_image([[0, 10, 20]] * 3)
    assert SobelFilter().process(columns).get_pixel(1, 1) == (0, 0, 0)


def test_sharpen_boosts_centre_and_clamps_neighbours(grey_image):
    image = grey_image([[0, 0, 0], [0, 50, 0], [0, 0, 0]])
    result = SharpenFilter().process(image)
    assert result.get_pixel(1, 1) == (250, 250, 250)
    assert result.get_pixel(1, 0) == (0, 0, 0)
    assert result.get_pixel(0, 0) == (0, 0, 0)


def test_emboss_flat_image_becomes_bias_grey():
    image = PixelBuffer.solid(4, 4, (200, 100, 50))
    result = EmbossFilter().process(image)
    assert (result.pixels == 100).all()


def test_emboss_uses_red_channel_for_every_output():
    arr = np.zeros((3, 3, 3), dtype=np.uint8)
    arr[:, :, 0] = [0, 10, 20]  # red grows with x
    arr[:, :, 1] = 200
    image = PixelBuffer.from_array(arr)

    # R(x-1) + R(y-1) - R(y+1) - R(x+1) = 0 + 10 - 10 - 20 = -20, plus 100
    assert EmbossFilter().process(image).get_pixel(1, 1) == (80, 80, 80)


def test_motion_blur_streaks_along_diagonal(grey_image):
    values = np.zeros((5, 5), dtype=np.uint8)
    values[2, 2] = 250
    result = MotionBlurFilter().process(grey_image(values))

    assert result.get_pixel(2, 2) == (50, 50, 50)
    assert result.get_pixel(1, 1) == (50, 50, 50)
    assert result.get_pixel(3, 3) == (50, 50, 50)
    assert result.get_pixel(2, 1) == (0, 0, 0)


def test_border_select_combines_gradient_magnitude(grey_image):
    # v(x, y) = 2*(2-x) + 2*(2-y): both directional responses are 64
    values = [[2 * (2 - x) + 2 * (2 - y) for x in range(3)] for y in range(3)]
    result = BorderSelectFilter().process(grey_image(values))
    assert result.get_pixel(1, 1) == (90, 90, 90)

    rows = grey_image([[4, 4, 4], [2, 2, 2], [0, 0, 0]])
    result = BorderSelectFilter().process(rows)
    assert result.get_pixel(1, 1) == (64, 64, 64)
    assert result.get_pixel(0, 0) == (32, 32, 32)


def test_border_select_flat_image_is_black():
    image = PixelBuffer.solid(3, 3, (90, 40, 10))
    assert (BorderSelectFilter().process(image).pixels == 0).all()


def test_gaussian_kernel_follows_literal_formula():
    kernel = gaussian_kernel(3, 2.0)
    assert kernel.shape == (7, 7)
    assert kernel.sum() == pytest.approx(1.0)
    # exp(i² + j²) grows away from the centre
    assert kernel[0, 0] > kernel[3, 3]
    assert kernel[0, 0] == pytest.approx(kernel[6, 6])


def test_gaussian_parameters_rebuild_kernel():
    f = GaussianFilter()
    assert f.kernel.shape == (7, 7)
    assert f.set_parameter("radius", 1)
    assert f.kernel.shape == (3, 3)
    assert not f.set_parameter("radius", 0)
    assert f.kernel.shape == (3, 3)


def test_motion_blur_kernel_is_diagonal():
    kernel = motion_blur_kernel(5)
    assert kernel.shape == (5, 5)
    assert np.allclose(np.diag(kernel), 0.2)
    assert kernel.sum() == pytest.approx(1.0)

    f = MotionBlurFilter()
    assert not f.set_parameter("size", 4)
    assert f.set_parameter("size", 3)
    assert f.kernel.shape == (3, 3)


def test_custom_matrix_filter_and_kernel_checks():
    identity = MatrixFilter([[0, 0, 0], [0, 1, 0], [0, 0, 0]])
    image = PixelBuffer.solid(2, 2, (1, 2, 3))
    assert identity.process(image) == image

    with pytest.raises(ValueError):
        check_kernel([[1, 1], [1, 1]])
    with pytest.raises(ValueError):
        check_kernel([1, 2, 3])


def test_matrix_filter_without_kernel_is_rejected():
    with pytest.raises(ValueError, match="explicit kernel"):
        MatrixFilter()

    # a parameterised custom kernel keeps its matrix when parameters change
    custom = MatrixFilter(
        [[1]],
        parameters={"gain": FilterParameter("Gain", ParameterType.FLOAT, 1.0)},
    )
    assert custom.set_parameter("gain", 2.0)
    assert custom.kernel.tolist() == [[1.0]]


@pytest.mark.parametrize("filter_class", NEIGHBOURHOOD_FILTERS)
def test_pixel_path_matches_column_path(filter_class, random_image):
    f = filter_class()
    result = f.process(random_image)
    for x in range(random_image.width):
        for y in range(random_image.height):
            assert tuple(f.pixel_color(random_image, x, y)) == result.get_pixel(x, y)


@pytest.mark.parametrize("filter_class", NEIGHBOURHOOD_FILTERS)
def test_rgba_output_is_opaque(filter_class, random_rgba_image):
    result = filter_class().process(random_rgba_image)
    assert result.channels == 4
    assert (result.pixels[..., 3] == 255).all()
