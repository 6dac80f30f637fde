"""
Core data types for filterlab.

All types use @dataclass and Enum for structured representations.
No loose arrays or dicts at the internal API boundary.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Sequence

import numpy as np

from .errors import InvalidDimensions


SUPPORTED_CHANNELS = (3, 4)


class FilterKind(Enum):
    """Fixed set of selectable filters. Values are registry ids."""
    INVERT = "invert"
    BLUR = "blur"
    GAUSSIAN = "gaussian"
    GRAYSCALE = "grayscale"
    SEPIA = "sepia"
    BRIGHTNESS = "brightness"
    SOBEL = "sobel"
    SHARPEN = "sharpen"
    EMBOSS = "emboss"
    MOTION_BLUR = "motion_blur"
    MEDIAN = "median"
    BORDER_SELECT = "border_select"
    WAVES_HORIZONTAL = "waves_horizontal"
    WAVES_VERTICAL = "waves_vertical"
    GLASS = "glass"


class ValidationSeverity(Enum):
    """Validation issue severity."""
    ERROR = auto()
    WARNING = auto()


@dataclass
class ValidationIssue:
    """A validation problem."""
    severity: ValidationSeverity
    code: str
    message: str
    context: dict = field(default_factory=dict)

    def __str__(self) -> str:
        return f"[{self.severity.name}] {self.code}: {self.message}"


def clamp(value: int, minimum: int, maximum: int) -> int:
    """Bound value to [minimum, maximum]."""
    if value < minimum:
        return minimum
    if value > maximum:
        return maximum
    return value


def _check_dimensions(width: int, height: int, channels: int) -> None:
    if width <= 0 or height <= 0:
        raise InvalidDimensions(width, height)
    if channels not in SUPPORTED_CHANNELS:
        raise InvalidDimensions(
            width, height, f"Unsupported channel count: {channels} (expected 3 or 4)"
        )


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """
    Read-only 8-bit RGB(A) image.

    Pixels are stored as a ``(height, width, channels)`` uint8 array and
    addressed as ``(x, y)``. The constructor copies any array the caller could
    still write to, then flags the stored data read-only, so a buffer handed to
    a filter can never change underneath it.
    """
    pixels: np.ndarray

    def __post_init__(self):
        arr = np.asarray(self.pixels)
        if arr.ndim != 3:
            raise InvalidDimensions(
                0, 0, f"Expected a (height, width, channels) array, got shape {arr.shape}"
            )
        height, width, channels = arr.shape
        _check_dimensions(width, height, channels)
        if arr.dtype != np.uint8:
            raise TypeError(f"Pixel data must be uint8, got {arr.dtype}")
        if arr.flags.writeable or arr.base is not None:
            arr = arr.copy()
        # A view of a read-only owner cannot be made writable again
        arr.flags.writeable = False
        object.__setattr__(self, "pixels", arr.view())

    @classmethod
    def adopt(cls, array: np.ndarray) -> "PixelBuffer":
        """
        Wrap a freshly allocated uint8 array without copying it.

        The array is made read-only; the caller must not keep using it.
        """
        array.flags.writeable = False
        return cls(array)

    @classmethod
    def from_array(cls, array) -> "PixelBuffer":
        """Build a buffer from any array-like, clipping values to [0, 255]."""
        arr = np.asarray(array)
        if arr.dtype != np.uint8:
            return cls.adopt(np.clip(arr, 0, 255).astype(np.uint8))
        return cls(arr)

    @classmethod
    def blank(cls, width: int, height: int, channels: int = 3) -> "PixelBuffer":
        """All-zero image. Dimensions are checked before allocating."""
        _check_dimensions(width, height, channels)
        return cls.adopt(np.zeros((height, width, channels), dtype=np.uint8))

    @classmethod
    def solid(cls, width: int, height: int, color: Sequence[int]) -> "PixelBuffer":
        """Image filled with a single RGB or RGBA color."""
        _check_dimensions(width, height, len(color))
        arr = np.empty((height, width, len(color)), dtype=np.uint8)
        arr[:, :] = color
        return cls.adopt(arr)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def channels(self) -> int:
        return self.pixels.shape[2]

    @property
    def has_alpha(self) -> bool:
        return self.channels == 4

    @property
    def size(self) -> tuple[int, int]:
        """(width, height)"""
        return self.width, self.height

    def get_pixel(self, x: int, y: int) -> tuple[int, ...]:
        """Channel values at (x, y). Raises IndexError outside the image."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return tuple(int(c) for c in self.pixels[y, x])

    def get_clamped(self, x: int, y: int) -> tuple[int, ...]:
        """Channel values at (x, y) with coordinates snapped to the nearest edge."""
        return self.get_pixel(
            clamp(x, 0, self.width - 1),
            clamp(y, 0, self.height - 1),
        )

    def to_array(self) -> np.ndarray:
        """Writable copy of the pixel data."""
        return self.pixels.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and bool(
            np.array_equal(self.pixels, other.pixels)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height}, channels={self.channels})"

