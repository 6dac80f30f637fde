"""
filterlab: raster image filter engine.

The engine lives in ``filterlab.core`` and ``filterlab.processing``; the
Qt-based background runner and settings live in ``filterlab.services``.
"""

from .core import (
    FilterError,
    FilterKind,
    InvalidDimensions,
    PixelBuffer,
    UnknownFilterError,
)
from .processing import ProcessingPipeline, apply_filter, create_filter

__version__ = "0.1.0"

__all__ = [
    "FilterError",
    "FilterKind",
    "InvalidDimensions",
    "PixelBuffer",
    "UnknownFilterError",
    "ProcessingPipeline",
    "apply_filter",
    "create_filter",
]
