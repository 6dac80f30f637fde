import pytest

from filterlab.core import (
    FilterError,
    FilterKind,
    InvalidParameterError,
    PixelBuffer,
    UnknownFilterError,
)
from filterlab.processing import (
    BrightnessFilter,
    GaussianFilter,
    InvertFilter,
    ProcessingExecutor,
    ProcessingPipeline,
    apply_filter,
)


def make_pipeline(*filters) -> ProcessingPipeline:
    pipeline = ProcessingPipeline()
    for f in filters:
        pipeline.add_filter(f)
    return pipeline


def test_apply_filter_accepts_id_kind_and_instance(random_image):
    expected = InvertFilter().process(random_image)
    assert apply_filter("invert", random_image) == expected
    assert apply_filter(FilterKind.INVERT, random_image) == expected
    assert apply_filter(InvertFilter(), random_image) == expected


def test_apply_filter_unknown_id(random_image):
    with pytest.raises(UnknownFilterError) as excinfo:
        apply_filter("posterize", random_image)
    assert excinfo.value.filter_id == "posterize"
    assert "posterize" in str(excinfo.value)
    assert isinstance(excinfo.value, FilterError)


def test_invalid_parameters_rejected_before_processing(random_image):
    gaussian = GaussianFilter()
    gaussian.set_parameter("sigma", 0.0)
    progress = []

    with pytest.raises(InvalidParameterError) as excinfo:
        ProcessingExecutor().apply(random_image, gaussian, on_progress=progress.append)

    assert excinfo.value.filter_name == "Gaussian Blur"
    assert progress == []


def test_apply_reraises_filter_failures(random_image):
    class BrokenFilter(InvertFilter):
        def column_colors(self, source, x):
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        ProcessingExecutor().apply(random_image, BrokenFilter())


def test_pipeline_applies_filters_in_order():
    image = PixelBuffer.solid(3, 3, (200, 100, 50))
    executor = ProcessingExecutor()

    # brightness then invert differs from invert then brightness
    first = executor.execute(image, make_pipeline(BrightnessFilter(), InvertFilter()))
    second = executor.execute(image, make_pipeline(InvertFilter(), BrightnessFilter()))

    assert first.get_pixel(0, 0) == (0, 55, 105)
    assert second.get_pixel(0, 0) == (155, 255, 255)


def test_invert_pipeline_twice_is_identity(random_image):
    result = ProcessingExecutor().execute(
        random_image, make_pipeline(InvertFilter(), InvertFilter())
    )
    assert result == random_image


def test_pipeline_progress_spans_all_filters():
    image = PixelBuffer.solid(4, 2, (1, 2, 3))
    progress = []
    ProcessingExecutor().execute(
        image,
        make_pipeline(InvertFilter(), InvertFilter()),
        on_progress=progress.append,
    )
    assert progress == [0, 12, 25, 37, 50, 62, 75, 87]


def test_pipeline_cancel_returns_none(random_image):
    progress = []
    result = ProcessingExecutor().execute(
        random_image,
        make_pipeline(InvertFilter(), InvertFilter()),
        on_progress=progress.append,
        is_cancelled=lambda: len(progress) > 8,
    )
    assert result is None
    # second filter started before the stop request was seen
    assert progress[-1] >= 50


def test_disabled_or_empty_pipeline_returns_image(random_image):
    executor = ProcessingExecutor()
    assert executor.execute(random_image, ProcessingPipeline()) is random_image

    pipeline = make_pipeline(InvertFilter())
    pipeline.enabled = False
    assert executor.execute(random_image, pipeline) is random_image
