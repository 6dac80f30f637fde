"""
Convolution kernel constructors.

Kernels are float64 arrays indexed ``kernel[k + radius_x, l + radius_y]``:
the first axis is the x offset, the second the y offset.
"""

import math

import numpy as np


def check_kernel(kernel) -> np.ndarray:
    """Return kernel as a float64 array, rejecting anything without a centre."""
    arr = np.asarray(kernel, dtype=np.float64)
    if arr.ndim != 2:
        raise ValueError(f"Kernel must be 2-dimensional, got shape {arr.shape}")
    if arr.shape[0] % 2 == 0 or arr.shape[1] % 2 == 0:
        raise ValueError(f"Kernel dimensions must be odd, got {arr.shape[0]}x{arr.shape[1]}")
    return arr


def kernel_radius(kernel: np.ndarray) -> tuple[int, int]:
    """(radius_x, radius_y)"""
    return kernel.shape[0] // 2, kernel.shape[1] // 2


def box_blur_kernel(size_x: int = 3, size_y: int = 3) -> np.ndarray:
    return np.full((size_x, size_y), 1.0 / (size_x * size_y))


def gaussian_kernel(radius: int = 3, sigma: float = 2.0) -> np.ndarray:
    """
    Normalised "Gaussian" kernel of size 2*radius+1.

    Uses exp(i² + j²) / σ² per cell. Without the negative exponent the weights
    grow towards the corners; the formula is kept as is.
    """
    size = 2 * radius + 1
    kernel = np.empty((size, size))
    for i in range(-radius, radius + 1):
        for j in range(-radius, radius + 1):
            kernel[i + radius, j + radius] = math.exp(i * i + j * j) / (sigma * sigma)
    return kernel / kernel.sum()


def sobel_kernel() -> np.ndarray:
    return np.array([
        [-1.0, 0.0, 1.0],
        [-2.0, 0.0, 2.0],
        [-1.0, 0.0, 1.0],
    ])


def sharpen_kernel() -> np.ndarray:
    return np.array([
        [0.0, -1.0, 0.0],
        [-1.0, 5.0, -1.0],
        [0.0, -1.0, 0.0],
    ])


def emboss_kernel() -> np.ndarray:
    return np.array([
        [0.0, 1.0, 0.0],
        [1.0, 0.0, -1.0],
        [0.0, -1.0, 0.0],
    ])


def motion_blur_kernel(size: int = 5) -> np.ndarray:
    """Diagonal streak: 1/size on the main diagonal, 0 elsewhere."""
    return np.eye(size) / size


def border_select_kernels() -> tuple[np.ndarray, np.ndarray]:
    """Scharr-like directional pair (kernel_x, kernel_y)."""
    kernel_x = np.array([
        [3.0, 0.0, -3.0],
        [10.0, 0.0, -10.0],
        [3.0, 0.0, -3.0],
    ])
    kernel_y = np.array([
        [3.0, 10.0, 3.0],
        [0.0, 0.0, 0.0],
        [-3.0, -10.0, -3.0],
    ])
    return kernel_x, kernel_y
