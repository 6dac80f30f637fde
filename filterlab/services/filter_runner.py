"""
Threaded filter runner.

Runs one filter (or pipeline) in a QRunnable, emits progress/log signals and
hands the result back to the caller's thread. Progress and cancellation are
two independent thread-safe primitives polled by the engine.
"""

import threading
from typing import Optional, Union

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal

from ..core import (
    FilterKind,
    PixelBuffer,
    UnknownFilterError,
    ValidationEngine,
    ValidationSeverity,
)
from ..logger import get_logger, setup_logger
from ..processing import (
    ProcessingExecutor,
    ProcessingFilter,
    ProcessingPipeline,
    create_filter,
)
from .settings import Settings

logger = get_logger("runner")


class FilterSignals(QObject):
    """Signals emitted by FilterRunner."""
    progress = Signal(int)  # percent
    log = Signal(str)  # log message
    result = Signal(object)  # PixelBuffer
    cancelled = Signal()
    finished = Signal(bool, str)  # (success, final_message)


class ProgressCounter:
    """Thread-safe percentage written by the worker and read by the caller."""

    def __init__(self):
        self.lock = threading.Lock()
        self.percent = 0

    def set(self, percent: int) -> None:
        with self.lock:
            self.percent = percent

    def get_percent(self) -> int:
        with self.lock:
            return self.percent

    def reset(self) -> None:
        self.set(0)


class CancellationFlag:
    """Thread-safe cancellation request, polled once per column."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def is_cancelled(self) -> bool:
        return self._event.is_set()


class FilterRunner(QRunnable):
    """Runnable for a single filter or pipeline run."""

    def __init__(
        self,
        image: PixelBuffer,
        target: Union[ProcessingFilter, ProcessingPipeline],
        progress: Optional[ProgressCounter] = None,
        cancel: Optional[CancellationFlag] = None,
    ):
        super().__init__()
        self.image = image
        self.target = target
        self.progress = progress or ProgressCounter()
        self.cancel = cancel or CancellationFlag()
        self.signals = FilterSignals()
        self.executor = ProcessingExecutor()

    def request_stop(self) -> None:
        """Request the run to stop at the next column."""
        self.cancel.cancel()

    def run(self) -> None:
        """Validate, run the filter and report the outcome."""
        label = self._label()
        try:
            issues = ValidationEngine.validate_run(self.image, self.target)
            errors = [i for i in issues if i.severity == ValidationSeverity.ERROR]
            warnings = [i for i in issues if i.severity == ValidationSeverity.WARNING]

            if errors:
                for issue in errors:
                    self._log(f"  ERROR: {issue}")
                self.signals.finished.emit(False, f"{label} blocked: {len(errors)} validation errors")
                return

            for issue in warnings:
                self._log(f"  WARNING: {issue}")

            self._log(f"Starting {label} on {self.image.width}x{self.image.height} image")

            if isinstance(self.target, ProcessingPipeline):
                result = self.executor.execute(
                    self.image, self.target, self._report_progress, self.cancel.is_cancelled
                )
            else:
                result = self.executor.apply(
                    self.image, self.target, self._report_progress, self.cancel.is_cancelled
                )

            if result is None:
                self._log(f"{label} stopped by user")
                self.signals.cancelled.emit()
                self.signals.finished.emit(False, f"{label} stopped by user")
                return

            self._log(f"✓ {label} completed")
            self.signals.result.emit(result)
            self.signals.finished.emit(True, f"{label} completed")

        except Exception as e:
            logger.exception("%s failed", label)
            self._log(f"FATAL: {e}")
            self.signals.finished.emit(False, f"{label} failed: {e}")

    def _label(self) -> str:
        if isinstance(self.target, ProcessingPipeline):
            return f"Pipeline ({len(self.target)} filters)"
        return self.target.name

    def _report_progress(self, percent: int) -> None:
        self.progress.set(percent)
        self.signals.progress.emit(percent)

    def _log(self, message: str) -> None:
        """Emit a log message."""
        logger.info(message)
        self.signals.log.emit(message)


class FilterManager(QObject):
    """Manages the filter thread pool; at most one run at a time."""

    finished = Signal(bool, str)  # (success, message)
    log = Signal(str)
    progress = Signal(int)  # percent
    image_ready = Signal(object)  # PixelBuffer of a completed, non-cancelled run

    def __init__(self, settings: Optional[Settings] = None):
        super().__init__()
        self.settings = settings or Settings()
        setup_logger(self.settings.get_log_level())
        self.thread_pool = QThreadPool()
        self.current_runner: Optional[FilterRunner] = None

    @property
    def is_running(self) -> bool:
        return self.current_runner is not None

    def build_filter(self, filter_id: Union[str, FilterKind]) -> ProcessingFilter:
        """Create a registered filter configured from settings."""
        if isinstance(filter_id, FilterKind):
            filter_id = filter_id.value
        filter_obj = create_filter(filter_id)
        if filter_obj is None:
            raise UnknownFilterError(filter_id)
        for name, value in self.settings.filter_overrides(filter_id).items():
            filter_obj.set_parameter(name, value)
        return filter_obj

    def start_filter(
        self,
        target: Union[str, FilterKind, ProcessingFilter, ProcessingPipeline],
        image: PixelBuffer,
    ) -> bool:
        """Start a filter run in a worker thread. Returns False if one is already running."""
        if self.current_runner:
            self.log.emit("Filter already in progress")
            return False

        if isinstance(target, (str, FilterKind)):
            target = self.build_filter(target)
        if isinstance(target, ProcessingFilter):
            self.settings.set_last_filter(target.filter_id)
        else:
            self.settings.set_last_pipeline(target)

        self.current_runner = FilterRunner(image, target)
        self.current_runner.signals.finished.connect(self._on_finished)
        self.current_runner.signals.result.connect(self.image_ready.emit)
        self.current_runner.signals.log.connect(self.log.emit)
        self.current_runner.signals.progress.connect(self.progress.emit)

        self.thread_pool.start(self.current_runner)
        return True

    def start_last_pipeline(self, image: PixelBuffer) -> bool:
        """Re-run the pipeline stored by the previous pipeline run. Returns False if none."""
        pipeline = self.settings.get_last_pipeline()
        if pipeline is None:
            self.log.emit("No stored pipeline to run")
            return False
        return self.start_filter(pipeline, image)

    def stop_filter(self) -> None:
        """Request the current run to stop."""
        if self.current_runner:
            self.current_runner.request_stop()

    def wait_for_done(self, msecs: int = -1) -> bool:
        """Block until the pool is idle. Returns False on timeout."""
        return self.thread_pool.waitForDone(msecs)

    def _on_finished(self, success: bool, message: str) -> None:
        """Handle run completion."""
        self.current_runner = None
        self.finished.emit(success, message)
