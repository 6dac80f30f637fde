"""
Median (rank) filter over packed pixel values.

Pixels are laid out as 32bpp BGRA bytes and read as little-endian signed
32-bit integers. The 3x3 neighbourhood of each interior pixel is sorted by that
integer and the middle value is copied back byte for byte, so this is a median
of whole pixel values rather than a per-channel median. The outermost 1-pixel
border is never written and stays all-zero.
"""

from typing import Optional, Sequence

import numpy as np

from ..core import PixelBuffer
from .filters import CancelCheck, ProcessingFilter, ProgressCallback, drive_columns

WINDOW = 3
OFFSET = (WINDOW - 1) // 2
MIDDLE = (WINDOW * WINDOW) // 2


def pack_pixels(pixels: np.ndarray) -> np.ndarray:
    """``(h, w, 3|4)`` uint8 RGB(A) -> ``(h, w)`` int32 of BGRA bytes. Alpha defaults to 255."""
    height, width, channels = pixels.shape
    bgra = np.empty((height, width, 4), dtype=np.uint8)
    bgra[..., 0] = pixels[..., 2]
    bgra[..., 1] = pixels[..., 1]
    bgra[..., 2] = pixels[..., 0]
    bgra[..., 3] = pixels[..., 3] if channels == 4 else 255
    return bgra.view("<i4")[..., 0]


def unpack_pixels(packed: np.ndarray, channels: int) -> np.ndarray:
    """``(n,)`` int32 of BGRA bytes -> ``(n, channels)`` RGB(A) values."""
    bgra = np.ascontiguousarray(packed, dtype="<i4").view(np.uint8).reshape(-1, 4)
    rgba = bgra[:, [2, 1, 0, 3]]
    return rgba[:, :channels].astype(np.int64)


class MedianFilter(ProcessingFilter):
    """3x3 median of packed pixel values; border left black."""

    vectorized = True

    def __init__(self):
        super().__init__(
            filter_id="median",
            name="Median",
            category="Noise Reduction",
        )

    def _is_interior(self, source: PixelBuffer, x: int, y: int) -> bool:
        return (
            OFFSET <= x < source.width - OFFSET
            and OFFSET <= y < source.height - OFFSET
        )

    def pixel_color(self, source: PixelBuffer, x: int, y: int) -> Sequence[int]:
        if not self._is_interior(source, x, y):
            return (0,) * source.channels
        window = source.pixels[y - OFFSET:y + OFFSET + 1, x - OFFSET:x + OFFSET + 1]
        neighbours = sorted(int(v) for v in pack_pixels(window).ravel())
        middle = np.array([neighbours[MIDDLE]], dtype="<i4")
        return tuple(int(c) for c in unpack_pixels(middle, source.channels)[0])

    def _median_column(self, packed: np.ndarray, channels: int, x: int) -> np.ndarray:
        height, width = packed.shape
        column = np.zeros(height, dtype="<i4")

        if OFFSET <= x < width - OFFSET and height > 2 * OFFSET:
            rows = height - 2 * OFFSET
            neighbours = np.stack(
                [
                    packed[OFFSET + dy:OFFSET + dy + rows, x + dx]
                    for dy in range(-OFFSET, OFFSET + 1)
                    for dx in range(-OFFSET, OFFSET + 1)
                ],
                axis=1,
            )
            neighbours.sort(axis=1)
            column[OFFSET:height - OFFSET] = neighbours[:, MIDDLE]

        return unpack_pixels(column, channels)

    def column_colors(self, source: PixelBuffer, x: int) -> np.ndarray:
        return self._median_column(pack_pixels(source.pixels), source.channels, x)

    def process(
        self,
        source: PixelBuffer,
        on_progress: Optional[ProgressCallback] = None,
        is_cancelled: Optional[CancelCheck] = None,
    ) -> Optional[PixelBuffer]:
        # Pack the byte planes once per run instead of once per column
        packed = pack_pixels(source.pixels)
        result = drive_columns(
            source.width,
            source.height,
            source.channels,
            lambda x: self._median_column(packed, source.channels, x),
            on_progress,
            is_cancelled,
        )
        if result is None:
            return None
        return PixelBuffer.adopt(result)
