"""
Pointwise color filters and coordinate-displacement filters.

Color filters look only at the pixel itself. Displacement filters copy a
whole source pixel (alpha included) from a remapped, clamped coordinate.
"""

from abc import abstractmethod
from typing import Optional, Sequence

import numpy as np

from ..core import PixelBuffer
from .filters import (
    CancelCheck,
    FilterParameter,
    ParameterType,
    ProcessingFilter,
    ProgressCallback,
)


class ColorFilter(ProcessingFilter):
    """Maps each RGB triple independently of its neighbours."""

    vectorized = True

    @abstractmethod
    def transform(self, rgb: np.ndarray) -> np.ndarray:
        """Map an ``(n, 3)`` int64 array of RGB values to output RGB values."""

    def pixel_color(self, source: PixelBuffer, x: int, y: int) -> Sequence[int]:
        rgb = source.pixels[y, x, :3].astype(np.int64)[np.newaxis, :]
        return tuple(int(c) for c in self.transform(rgb)[0])

    def column_colors(self, source: PixelBuffer, x: int) -> np.ndarray:
        return self.transform(source.pixels[:, x, :3].astype(np.int64))


def intensity(rgb: np.ndarray) -> np.ndarray:
    """Truncated 0.36R + 0.53G + 0.11B, computed exactly in integers."""
    return (36 * rgb[:, 0] + 53 * rgb[:, 1] + 11 * rgb[:, 2]) // 100


class InvertFilter(ColorFilter):
    def __init__(self):
        super().__init__(filter_id="invert", name="Invert", category="Color Transforms")

    def transform(self, rgb: np.ndarray) -> np.ndarray:
        return 255 - rgb


class GrayscaleFilter(ColorFilter):
    """Luminance with 0.36/0.53/0.11 weights. The weights sum to 1, so no clamp."""

    def __init__(self):
        super().__init__(filter_id="grayscale", name="Grayscale", category="Color Transforms")

    def transform(self, rgb: np.ndarray) -> np.ndarray:
        gray = intensity(rgb)
        return np.stack([gray, gray, gray], axis=1)


class SepiaFilter(ColorFilter):
    """Grayscale shifted towards brown: +2k red, +k/2 green, -k blue."""

    K = 15

    def __init__(self):
        super().__init__(filter_id="sepia", name="Sepia", category="Color Transforms")

    def transform(self, rgb: np.ndarray) -> np.ndarray:
        gray = intensity(rgb)
        red = gray + 2 * self.K
        green = gray + self.K // 2  # int(gray + 7.5) for gray >= 0
        blue = gray - self.K
        return np.clip(np.stack([red, green, blue], axis=1), 0, 255)


class BrightnessFilter(ColorFilter):
    OFFSET = 100

    def __init__(self):
        super().__init__(filter_id="brightness", name="Brightness", category="Color Transforms")

    def transform(self, rgb: np.ndarray) -> np.ndarray:
        return np.clip(rgb + self.OFFSET, 0, 255)


class DisplacementFilter(ProcessingFilter):
    """Samples the source at a displaced coordinate, clamped to the image."""

    vectorized = True

    @abstractmethod
    def source_coords(self, source: PixelBuffer, x: int, ys: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Unclamped integer source coordinates (xs, ys) for pixels (x, ys)."""

    def _sample(self, source: PixelBuffer, x: int, ys: np.ndarray) -> np.ndarray:
        src_x, src_y = self.source_coords(source, x, ys)
        src_x = np.clip(src_x, 0, source.width - 1)
        src_y = np.clip(src_y, 0, source.height - 1)
        return source.pixels[src_y, src_x].astype(np.int64)

    def pixel_color(self, source: PixelBuffer, x: int, y: int) -> Sequence[int]:
        return tuple(int(c) for c in self._sample(source, x, np.array([y]))[0])

    def column_colors(self, source: PixelBuffer, x: int) -> np.ndarray:
        return self._sample(source, x, np.arange(source.height))


class WavesHorizontalFilter(DisplacementFilter):
    """Shifts each row sideways by 20*sin(2*pi*y/60)."""

    AMPLITUDE = 20
    PERIOD = 60

    def __init__(self):
        super().__init__(
            filter_id="waves_horizontal",
            name="Waves (Horizontal)",
            category="Effects & Distortion",
        )

    def source_coords(self, source, x, ys):
        offset = self.AMPLITUDE * np.sin(2 * np.pi * ys / self.PERIOD)
        return np.trunc(x + offset).astype(np.int64), ys


class WavesVerticalFilter(DisplacementFilter):
    """
    Shifts each column sideways by 20*sin(2*pi*x/30).

    The displacement is along x and keyed on x itself, not along y.
    """

    AMPLITUDE = 20
    PERIOD = 30

    def __init__(self):
        super().__init__(
            filter_id="waves_vertical",
            name="Waves (Vertical)",
            category="Effects & Distortion",
        )

    def source_coords(self, source, x, ys):
        src_x = int(x + self.AMPLITUDE * np.sin(2 * np.pi * x / self.PERIOD))
        return np.full(len(ys), src_x, dtype=np.int64), ys


class GlassFilter(DisplacementFilter):
    """
    Frosted glass: each pixel is taken from a random neighbour up to 5px away.

    A seed of -1 draws from fresh OS entropy on every run; any other seed makes
    runs reproducible.
    """

    SPREAD = 10

    def __init__(self, seed: int = -1):
        super().__init__(
            filter_id="glass",
            name="Glass",
            category="Effects & Distortion",
            parameters={
                "seed": FilterParameter(
                    name="Seed",
                    param_type=ParameterType.INT,
                    value=seed,
                    min_val=-1,
                    description="Random seed (-1 = unseeded)"
                ),
            }
        )
        self._rng = self._make_rng()

    def _make_rng(self) -> np.random.Generator:
        seed = self.param_value("seed")
        return np.random.default_rng(None if seed == -1 else seed)

    def _parameters_changed(self) -> None:
        self._rng = self._make_rng()

    def source_coords(self, source, x, ys):
        draws = self._rng.random((len(ys), 2))
        src_x = np.trunc(x + (draws[:, 0] - 0.5) * self.SPREAD).astype(np.int64)
        src_y = np.trunc(ys + (draws[:, 1] - 0.5) * self.SPREAD).astype(np.int64)
        return src_x, src_y

    def process(
        self,
        source: PixelBuffer,
        on_progress: Optional[ProgressCallback] = None,
        is_cancelled: Optional[CancelCheck] = None,
    ) -> Optional[PixelBuffer]:
        # Restart the random stream so a seeded filter repeats itself
        self._rng = self._make_rng()
        return super().process(source, on_progress, is_cancelled)
