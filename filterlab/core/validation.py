"""
Validation engine for filter runs.

Structured validation rules that must pass before a filter is started.
Returns ValidationIssue list; ERROR severity blocks the run.
"""

from typing import List, Optional, TYPE_CHECKING

from .types import PixelBuffer, ValidationIssue, ValidationSeverity

if TYPE_CHECKING:
    from ..processing import ProcessingFilter, ProcessingPipeline


# Above this many pixels the per-pixel Python path gets noticeably slow
LARGE_IMAGE_PIXELS = 1_000_000


class ValidationEngine:
    """Validates filter run configurations."""

    @staticmethod
    def validate_run(
        image: Optional[PixelBuffer],
        target: "ProcessingFilter | ProcessingPipeline",
    ) -> List[ValidationIssue]:
        """
        Validate an image and a filter (or pipeline of filters).

        Returns list of ValidationIssue; the run is blocked if any ERROR present.
        """
        issues = []

        # 1. Image
        issues.extend(ValidationEngine._validate_image(image))

        # 2. Filters
        if hasattr(target, "get_enabled_filters"):
            issues.extend(ValidationEngine._validate_pipeline(target))
            filters = target.get_enabled_filters()
        else:
            filters = [target]

        for f in filters:
            issues.extend(ValidationEngine._validate_filter(f))

        # 3. Performance hints
        if isinstance(image, PixelBuffer):
            issues.extend(ValidationEngine._validate_workload(image, filters))

        return issues

    @staticmethod
    def _validate_image(image: Optional[PixelBuffer]) -> List[ValidationIssue]:
        """Validate the source image."""
        issues = []

        if image is None:
            issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="NO_IMAGE",
                    message="No source image loaded.",
                    context={},
                )
            )
        elif not isinstance(image, PixelBuffer):
            issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="NOT_A_PIXEL_BUFFER",
                    message=f"Source image must be a PixelBuffer, got {type(image).__name__}.",
                    context={"type": type(image).__name__},
                )
            )

        return issues

    @staticmethod
    def _validate_pipeline(pipeline: "ProcessingPipeline") -> List[ValidationIssue]:
        """Validate pipeline configuration."""
        issues = []

        if pipeline.is_empty():
            issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="EMPTY_PIPELINE",
                    message="Pipeline has no filters.",
                    context={},
                )
            )
        elif not pipeline.get_enabled_filters():
            issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="NO_ENABLED_FILTERS",
                    message="All filters in the pipeline are disabled.",
                    context={"filter_count": len(pipeline)},
                )
            )

        return issues

    @staticmethod
    def _validate_filter(f: "ProcessingFilter") -> List[ValidationIssue]:
        """Validate a single filter's parameters."""
        issues = []

        is_valid, errors = f.validate_parameters()
        if not is_valid:
            for error in errors:
                issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.ERROR,
                        code="INVALID_PARAMETER",
                        message=f"{f.name}: {error}",
                        context={"filter_id": f.filter_id},
                    )
                )

        if f.filter_id == "glass":
            seed = f.get_parameter("seed")
            if seed is not None and seed.value == -1:
                issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.WARNING,
                        code="NON_DETERMINISTIC",
                        message="Glass filter is unseeded; output differs on every run.",
                        context={"filter_id": f.filter_id},
                    )
                )

        return issues

    @staticmethod
    def _validate_workload(
        image: PixelBuffer,
        filters: List["ProcessingFilter"],
    ) -> List[ValidationIssue]:
        """Warn about large images on the per-pixel path."""
        issues = []

        pixel_count = image.width * image.height
        if pixel_count <= LARGE_IMAGE_PIXELS:
            return issues

        for f in filters:
            if not f.vectorized:
                issues.append(
                    ValidationIssue(
                        severity=ValidationSeverity.WARNING,
                        code="SLOW_PIXEL_PATH",
                        message=(
                            f"{f.name} computes {pixel_count} pixels one at a time; "
                            "expect a long run."
                        ),
                        context={"filter_id": f.filter_id, "pixels": pixel_count},
                    )
                )

        return issues
