"""Refreshable UI state driven by cancellable async producers."""

from .core import (
    Failure,
    MergePolicy,
    ObservableCell,
    ProducerResult,
    ProducerScope,
    RefreshableProducerCell,
    Success,
    UiState,
    blocking_fetch,
    launch_ui_state_producer,
)

__version__ = "1.0.0"

__all__ = [
    "Failure",
    "MergePolicy",
    "ObservableCell",
    "ProducerResult",
    "ProducerScope",
    "RefreshableProducerCell",
    "Success",
    "UiState",
    "blocking_fetch",
    "launch_ui_state_producer",
    "__version__",
]
