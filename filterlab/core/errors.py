"""
Exceptions raised by the filter engine.

Cancellation is not represented here: a cancelled run returns ``None``.
"""


class FilterError(Exception):
    """Base class for all filter engine errors."""


class InvalidDimensions(FilterError, ValueError):
    """Image has a non-positive width/height or an unsupported layout."""

    def __init__(self, width: int, height: int, message: str = ""):
        self.width = width
        self.height = height
        super().__init__(message or f"Invalid image dimensions: {width}x{height}")


class UnknownFilterError(FilterError, KeyError):
    """No filter is registered under the requested id."""

    def __init__(self, filter_id: str):
        self.filter_id = filter_id
        super().__init__(filter_id)

    def __str__(self) -> str:
        return f"Unknown filter: {self.filter_id!r}"


class InvalidParameterError(FilterError, ValueError):
    """Filter parameters failed validation."""

    def __init__(self, filter_name: str, errors: list[str]):
        self.filter_name = filter_name
        self.errors = errors
        super().__init__(f"Invalid parameters for {filter_name}: {'; '.join(errors)}")
