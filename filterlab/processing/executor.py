"""
Processing executor - applies filters to pixel buffers.

Bridges the processing pipeline to the per-filter drivers, handling parameter
validation, progress scaling across several filters and cancellation.
"""

from typing import Optional, Union

from ..core import FilterKind, InvalidParameterError, PixelBuffer, UnknownFilterError
from ..logger import get_logger
from .filters import CancelCheck, ProcessingFilter, ProgressCallback
from .pipeline import ProcessingPipeline
from .registry import create_filter

logger = get_logger("executor")


class ProcessingExecutor:
    """Executes filters and pipelines on PixelBuffer objects."""

    def apply(
        self,
        image: PixelBuffer,
        filter: ProcessingFilter,
        on_progress: Optional[ProgressCallback] = None,
        is_cancelled: Optional[CancelCheck] = None,
    ) -> Optional[PixelBuffer]:
        """
        Apply a single filter.

        Returns:
            Filtered image, or None if the run was cancelled

        Raises:
            InvalidParameterError: if the filter's parameters do not validate
        """
        is_valid, errors = filter.validate_parameters()
        if not is_valid:
            raise InvalidParameterError(filter.name, errors)

        logger.debug("Applying %s to %dx%d image", filter.name, image.width, image.height)
        try:
            result = filter.process(image, on_progress, is_cancelled)
        except Exception:
            logger.exception("Failed to apply filter %s", filter.name)
            raise

        if result is None:
            logger.info("%s cancelled", filter.name)
        return result

    def execute(
        self,
        image: PixelBuffer,
        pipeline: ProcessingPipeline,
        on_progress: Optional[ProgressCallback] = None,
        is_cancelled: Optional[CancelCheck] = None,
    ) -> Optional[PixelBuffer]:
        """
        Apply all enabled filters in pipeline to image sequentially.

        Progress of each filter is mapped onto one 0-100 scale for the whole
        pipeline. A disabled or empty pipeline returns the image unchanged.

        Returns:
            Processed image, or None if the run was cancelled
        """
        filters = pipeline.get_enabled_filters()
        if not filters:
            return image

        result = image
        count = len(filters)
        for index, filter in enumerate(filters):
            step_progress = None
            if on_progress is not None:
                step_progress = self._scaled_progress(on_progress, index, count)

            result = self.apply(result, filter, step_progress, is_cancelled)
            if result is None:
                return None

        return result

    @staticmethod
    def _scaled_progress(on_progress: ProgressCallback, index: int, count: int) -> ProgressCallback:
        def report(percent: int) -> None:
            on_progress((index * 100 + percent) // count)
        return report


def apply_filter(
    filter: Union[str, FilterKind, ProcessingFilter],
    image: PixelBuffer,
    on_progress: Optional[ProgressCallback] = None,
    is_cancelled: Optional[CancelCheck] = None,
) -> Optional[PixelBuffer]:
    """
    Apply a filter given by id, FilterKind or instance.

    Raises:
        UnknownFilterError: if no filter is registered under the id
    """
    if not isinstance(filter, ProcessingFilter):
        filter_obj = create_filter(filter)
        if filter_obj is None:
            raise UnknownFilterError(filter.value if isinstance(filter, FilterKind) else filter)
        filter = filter_obj
    return ProcessingExecutor().apply(image, filter, on_progress, is_cancelled)
