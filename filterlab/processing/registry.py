"""
Registry of all available filters, keyed by filter id.

The ids are the values of FilterKind, so the selectable set is fixed.
"""

from typing import Optional, Type, Union

from ..core import FilterKind
from .filters import ProcessingFilter
from .convolution import (
    BlurFilter,
    BorderSelectFilter,
    EmbossFilter,
    GaussianFilter,
    MotionBlurFilter,
    SharpenFilter,
    SobelFilter,
)
from .median import MedianFilter
from .pointwise import (
    BrightnessFilter,
    GlassFilter,
    GrayscaleFilter,
    InvertFilter,
    SepiaFilter,
    WavesHorizontalFilter,
    WavesVerticalFilter,
)


FILTER_REGISTRY: dict[str, Type[ProcessingFilter]] = {
    FilterKind.INVERT.value: InvertFilter,
    FilterKind.BLUR.value: BlurFilter,
    FilterKind.GAUSSIAN.value: GaussianFilter,
    FilterKind.GRAYSCALE.value: GrayscaleFilter,
    FilterKind.SEPIA.value: SepiaFilter,
    FilterKind.BRIGHTNESS.value: BrightnessFilter,
    FilterKind.SOBEL.value: SobelFilter,
    FilterKind.SHARPEN.value: SharpenFilter,
    FilterKind.EMBOSS.value: EmbossFilter,
    FilterKind.MOTION_BLUR.value: MotionBlurFilter,
    FilterKind.MEDIAN.value: MedianFilter,
    FilterKind.BORDER_SELECT.value: BorderSelectFilter,
    FilterKind.WAVES_HORIZONTAL.value: WavesHorizontalFilter,
    FilterKind.WAVES_VERTICAL.value: WavesVerticalFilter,
    FilterKind.GLASS.value: GlassFilter,
}


def create_filter(filter_id: Union[str, FilterKind]) -> Optional[ProcessingFilter]:
    """Create a filter instance by ID. Returns None if filter not found."""
    if isinstance(filter_id, FilterKind):
        filter_id = filter_id.value
    if filter_id not in FILTER_REGISTRY:
        return None
    return FILTER_REGISTRY[filter_id]()
