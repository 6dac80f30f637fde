"""
Convolution (kernel) filters.

All members share one weighted-sum algorithm with edge replication at the
borders and differ only in how the kernel is built or how the per-channel sums
are combined.
"""

from typing import Optional, Sequence

import numpy as np

from ..core import PixelBuffer, clamp
from .filters import FilterParameter, ParameterType, ProcessingFilter
from .kernels import (
    border_select_kernels,
    box_blur_kernel,
    check_kernel,
    emboss_kernel,
    gaussian_kernel,
    kernel_radius,
    motion_blur_kernel,
    sharpen_kernel,
    sobel_kernel,
)

# Weighted sums are rounded to this many decimals before truncation so that
# float error (199.99999999999997) does not darken flat regions.
_SUM_DECIMALS = 6


def weighted_sum(source: PixelBuffer, kernel: np.ndarray, x: int, ys: np.ndarray) -> np.ndarray:
    """
    Per-channel RGB kernel sums for pixels (x, ys).

    Neighbours outside the image are replaced by the nearest edge pixel.
    Returns a ``(len(ys), 3)`` float64 array.
    """
    radius_x, radius_y = kernel_radius(kernel)
    rgb = source.pixels[..., :3]
    last_x = source.width - 1
    last_y = source.height - 1

    acc = np.zeros((len(ys), 3))
    for l in range(-radius_y, radius_y + 1):
        idy = np.clip(ys + l, 0, last_y)
        for k in range(-radius_x, radius_x + 1):
            weight = kernel[k + radius_x, l + radius_y]
            if weight == 0.0:
                continue
            idx = clamp(x + k, 0, last_x)
            acc += rgb[idy, idx] * weight
    return acc


def to_channel(values: np.ndarray, bias: int = 0) -> np.ndarray:
    """Truncate toward zero, add bias and clamp to [0, 255]."""
    truncated = np.trunc(np.round(values, _SUM_DECIMALS)).astype(np.int64)
    return np.clip(truncated + bias, 0, 255)


class MatrixFilter(ProcessingFilter):
    """Applies a 2D kernel independently to R, G and B."""

    vectorized = True

    def __init__(
        self,
        kernel=None,
        filter_id: str = "custom_kernel",
        name: str = "Custom Kernel",
        category: str = "Blur & Sharpen",
        parameters: Optional[dict] = None,
    ):
        super().__init__(
            filter_id=filter_id,
            name=name,
            category=category,
            parameters=parameters or {},
        )
        if kernel is None:
            if type(self).build_kernel is MatrixFilter.build_kernel:
                raise ValueError(f"{type(self).__name__} requires an explicit kernel")
            kernel = self.build_kernel()
        self.kernel = check_kernel(kernel)

    def build_kernel(self) -> np.ndarray:
        """Construct the kernel from the current parameters. A plain MatrixFilter keeps its own."""
        return self.kernel

    def _parameters_changed(self) -> None:
        self.kernel = check_kernel(self.build_kernel())

    def convolve(self, source: PixelBuffer, x: int, ys: np.ndarray) -> np.ndarray:
        """Output RGB values for pixels (x, ys)."""
        return to_channel(weighted_sum(source, self.kernel, x, ys))

    def pixel_color(self, source: PixelBuffer, x: int, y: int) -> Sequence[int]:
        return tuple(int(c) for c in self.convolve(source, x, np.array([y]))[0])

    def column_colors(self, source: PixelBuffer, x: int) -> np.ndarray:
        return self.convolve(source, x, np.arange(source.height))


class BlurFilter(MatrixFilter):
    """3x3 box blur."""

    def __init__(self):
        super().__init__(filter_id="blur", name="Blur", category="Blur & Sharpen")

    def build_kernel(self) -> np.ndarray:
        return box_blur_kernel(3, 3)


class GaussianFilter(MatrixFilter):
    """Normalised exponential kernel (see gaussian_kernel for the formula)."""

    def __init__(self):
        super().__init__(
            filter_id="gaussian",
            name="Gaussian Blur",
            category="Blur & Sharpen",
            parameters={
                "radius": FilterParameter(
                    name="Radius",
                    param_type=ParameterType.INT,
                    value=3,
                    min_val=1,
                    max_val=10,
                    description="Kernel radius; kernel size is 2*radius+1"
                ),
                "sigma": FilterParameter(
                    name="Sigma",
                    param_type=ParameterType.FLOAT,
                    value=2.0,
                    min_val=0.1,
                    max_val=10.0,
                    description="Spread of the kernel"
                ),
            }
        )

    def build_kernel(self) -> np.ndarray:
        return gaussian_kernel(self.param_value("radius"), self.param_value("sigma"))


class SobelFilter(MatrixFilter):
    """Vertical-gradient Sobel operator."""

    def __init__(self):
        super().__init__(filter_id="sobel", name="Sobel", category="Edge Detection")

    def build_kernel(self) -> np.ndarray:
        return sobel_kernel()


class SharpenFilter(MatrixFilter):
    def __init__(self):
        super().__init__(filter_id="sharpen", name="Sharpen", category="Blur & Sharpen")

    def build_kernel(self) -> np.ndarray:
        return sharpen_kernel()


class EmbossFilter(MatrixFilter):
    """
    Emboss with a grey bias of 100.

    All three output channels are computed from the red channel of the
    neighbours, which gives the effect its flat grey look.
    """

    BIAS = 100

    def __init__(self):
        super().__init__(filter_id="emboss", name="Emboss", category="Effects & Distortion")

    def build_kernel(self) -> np.ndarray:
        return emboss_kernel()

    def convolve(self, source: PixelBuffer, x: int, ys: np.ndarray) -> np.ndarray:
        red = to_channel(weighted_sum(source, self.kernel, x, ys)[:, 0], bias=self.BIAS)
        return np.stack([red, red, red], axis=1)


class MotionBlurFilter(MatrixFilter):
    """Diagonal streak blur."""

    def __init__(self):
        super().__init__(
            filter_id="motion_blur",
            name="Motion Blur",
            category="Blur & Sharpen",
            parameters={
                "size": FilterParameter(
                    name="Size",
                    param_type=ParameterType.INT,
                    value=5,
                    min_val=1,
                    max_val=15,
                    odd_only=True,
                    description="Streak length in pixels (odd)"
                ),
            }
        )

    def build_kernel(self) -> np.ndarray:
        return motion_blur_kernel(self.param_value("size"))


class BorderSelectFilter(MatrixFilter):
    """Gradient magnitude of two directional kernels, per channel."""

    def __init__(self):
        self.kernel_x, self.kernel_y = border_select_kernels()
        super().__init__(
            kernel=self.kernel_x,
            filter_id="border_select",
            name="Border Select",
            category="Edge Detection",
        )

    def convolve(self, source: PixelBuffer, x: int, ys: np.ndarray) -> np.ndarray:
        gx = to_channel(weighted_sum(source, self.kernel_x, x, ys))
        gy = to_channel(weighted_sum(source, self.kernel_y, x, ys))
        magnitude = np.sqrt(gx * gx + gy * gy)
        return np.clip(np.trunc(magnitude).astype(np.int64), 0, 255)
