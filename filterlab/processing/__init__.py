"""
Processing system for filterlab.

Provides the filter engine: a shared column-by-column driver, the convolution,
pointwise, displacement and median filter families, a registry of selectable
filters and a pipeline/executor for applying them.
"""

from .pipeline import ProcessingPipeline
from .filters import (
    ProcessingFilter,
    FilterParameter,
    ParameterType,
    drive_columns,
)
from .convolution import (
    MatrixFilter,
    BlurFilter,
    GaussianFilter,
    SobelFilter,
    SharpenFilter,
    EmbossFilter,
    MotionBlurFilter,
    BorderSelectFilter,
)
from .pointwise import (
    InvertFilter,
    GrayscaleFilter,
    SepiaFilter,
    BrightnessFilter,
    WavesHorizontalFilter,
    WavesVerticalFilter,
    GlassFilter,
)
from .median import MedianFilter
from .executor import ProcessingExecutor, apply_filter
from .registry import (
    create_filter,
    FILTER_REGISTRY,
)

__all__ = [
    "ProcessingPipeline",
    "ProcessingFilter",
    "FilterParameter",
    "ParameterType",
    "ProcessingExecutor",
    "drive_columns",
    "apply_filter",
    # Helpers
    "create_filter",
    "FILTER_REGISTRY",
    # Filters
    "MatrixFilter",
    "BlurFilter",
    "GaussianFilter",
    "SobelFilter",
    "SharpenFilter",
    "EmbossFilter",
    "MotionBlurFilter",
    "BorderSelectFilter",
    "InvertFilter",
    "GrayscaleFilter",
    "SepiaFilter",
    "BrightnessFilter",
    "WavesHorizontalFilter",
    "WavesVerticalFilter",
    "GlassFilter",
    "MedianFilter",
]
