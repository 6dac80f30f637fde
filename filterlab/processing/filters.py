"""
Filter base classes for the processing engine.

Each filter computes one output pixel from a read-only source buffer and a
coordinate. The shared driver walks the image column by column, reports
progress and polls for cancellation between columns.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, ClassVar, Dict, List, Optional, Sequence

import numpy as np

from ..core import PixelBuffer

ProgressCallback = Callable[[int], None]
CancelCheck = Callable[[], bool]
ColumnFunction = Callable[[int], np.ndarray]


class ParameterType(Enum):
    """Type of filter parameter."""
    FLOAT = auto()
    INT = auto()
    CHOICE = auto()
    STRING = auto()
    BOOL = auto()


@dataclass
class FilterParameter:
    """A single parameter for a filter."""
    name: str
    param_type: ParameterType
    value: Any
    min_val: Optional[float] = None
    max_val: Optional[float] = None
    options: Optional[List[str]] = None
    odd_only: bool = False
    description: str = ""

    def validate(self) -> tuple[bool, str]:
        """Validate parameter value. Returns (is_valid, error_message)."""

        if self.param_type == ParameterType.FLOAT:
            if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
                return False, f"{self.name} must be a number"
            if self.min_val is not None and self.value < self.min_val:
                return False, f"{self.name} must be >= {self.min_val}"
            if self.max_val is not None and self.value > self.max_val:
                return False, f"{self.name} must be <= {self.max_val}"

        elif self.param_type == ParameterType.INT:
            if isinstance(self.value, bool) or not isinstance(self.value, int):
                return False, f"{self.name} must be an integer"
            if self.min_val is not None and self.value < self.min_val:
                return False, f"{self.name} must be >= {int(self.min_val)}"
            if self.max_val is not None and self.value > self.max_val:
                return False, f"{self.name} must be <= {int(self.max_val)}"
            if self.odd_only and self.value % 2 == 0:
                return False, f"{self.name} must be odd"

        elif self.param_type == ParameterType.CHOICE:
            if self.options and self.value not in self.options:
                return False, f"{self.name} must be one of: {', '.join(self.options)}"

        elif self.param_type == ParameterType.STRING:
            if not isinstance(self.value, str):
                return False, f"{self.name} must be a string"

        elif self.param_type == ParameterType.BOOL:
            if not isinstance(self.value, bool):
                return False, f"{self.name} must be a boolean"

        return True, ""


def drive_columns(
    width: int,
    height: int,
    channels: int,
    column_fn: ColumnFunction,
    on_progress: Optional[ProgressCallback] = None,
    is_cancelled: Optional[CancelCheck] = None,
) -> Optional[np.ndarray]:
    """
    Fill a fresh ``(height, width, channels)`` buffer one column at a time.

    ``column_fn(x)`` returns the ``(height, n)`` values of column x, where n is
    3 (RGB, written opaque) or ``channels``. Before column x the progress
    callback receives ``x * 100 // width``; cancellation is checked right
    after. Returns None when cancelled.
    """
    result = np.zeros((height, width, channels), dtype=np.uint8)

    for x in range(width):
        if on_progress is not None:
            on_progress(x * 100 // width)
        if is_cancelled is not None and is_cancelled():
            return None

        column = column_fn(x)
        if column.shape[1] < channels:
            result[:, x, :3] = column
            result[:, x, 3] = 255
        else:
            result[:, x, :] = column[:, :channels]

    return result


@dataclass
class ProcessingFilter(ABC):
    """Base class for all processing filters."""
    filter_id: str
    name: str
    category: str
    enabled: bool = True
    order: int = 0
    parameters: Dict[str, FilterParameter] = field(default_factory=dict)

    # True when column_colors is a numpy implementation rather than a pixel loop
    vectorized: ClassVar[bool] = False

    def validate_parameters(self) -> tuple[bool, List[str]]:
        """Validate all parameters. Returns (is_valid, list_of_errors)."""
        errors = []
        for param in self.parameters.values():
            is_valid, error_msg = param.validate()
            if not is_valid:
                errors.append(error_msg)
        return len(errors) == 0, errors

    def get_parameter(self, name: str) -> Optional[FilterParameter]:
        """Get a parameter by name."""
        return self.parameters.get(name)

    def param_value(self, name: str) -> Any:
        """Current value of a parameter (KeyError if the filter has none)."""
        return self.parameters[name].value

    def set_parameter(self, name: str, value: Any) -> bool:
        """Set a parameter value. Returns success."""
        if name not in self.parameters:
            return False
        self.parameters[name].value = value
        is_valid, _ = self.parameters[name].validate()
        if is_valid:
            self._parameters_changed()
        return is_valid

    def clone(self) -> "ProcessingFilter":
        """Create a deep copy of this filter with same parameters."""
        from copy import deepcopy
        return deepcopy(self)

    def _parameters_changed(self) -> None:
        """Hook for filters that derive state (kernels, rng) from parameters."""

    @abstractmethod
    def pixel_color(self, source: PixelBuffer, x: int, y: int) -> Sequence[int]:
        """Compute the output pixel at (x, y)."""

    def column_colors(self, source: PixelBuffer, x: int) -> np.ndarray:
        """Compute every output pixel of column x as a ``(height, n)`` array."""
        return np.array(
            [self.pixel_color(source, x, y) for y in range(source.height)],
            dtype=np.int64,
        )

    def process(
        self,
        source: PixelBuffer,
        on_progress: Optional[ProgressCallback] = None,
        is_cancelled: Optional[CancelCheck] = None,
    ) -> Optional[PixelBuffer]:
        """
        Apply the filter to a whole image.

        Args:
            source: Input image (never modified)
            on_progress: Receives the integer percentage before each column
            is_cancelled: Polled once per column

        Returns:
            New image of identical size, or None if the run was cancelled
        """
        result = drive_columns(
            source.width,
            source.height,
            source.channels,
            lambda x: self.column_colors(source, x),
            on_progress,
            is_cancelled,
        )
        if result is None:
            return None
        return PixelBuffer.adopt(result)
