"""Services module initialization."""
from .settings import Settings
from .filter_runner import (
    CancellationFlag,
    FilterManager,
    FilterRunner,
    FilterSignals,
    ProgressCounter,
)

__all__ = [
    "Settings",
    "CancellationFlag",
    "FilterManager",
    "FilterRunner",
    "FilterSignals",
    "ProgressCounter",
]
