"""Core data types, errors and validation."""
from .errors import (
    FilterError,
    InvalidDimensions,
    UnknownFilterError,
    InvalidParameterError,
)
from .types import (
    FilterKind,
    PixelBuffer,
    ValidationIssue,
    ValidationSeverity,
    clamp,
)
from .validation import ValidationEngine

__all__ = [
    "FilterError",
    "InvalidDimensions",
    "UnknownFilterError",
    "InvalidParameterError",
    "FilterKind",
    "PixelBuffer",
    "ValidationIssue",
    "ValidationSeverity",
    "clamp",
    "ValidationEngine",
]
